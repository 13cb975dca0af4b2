"""Version range parsing and evaluation for notice components."""

import operator
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Tuple, Union

from semver import Version

from ..utils.logging import get_logger


logger = get_logger("VersionRange")

_OPERATORS: Dict[str, Callable[[Version, Version], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "=": operator.eq,
}

# Longest operators first so "<=" is never read as "<" followed by "=1.0.0"
_CLAUSE_PATTERN = re.compile(r"\s*(<=|>=|<|>|=)\s*([^\s<>=]+)")


class MalformedRangeError(ValueError):
    """Raised when a version range expression cannot be parsed."""


def _to_version(text: str) -> Version:
    # Precedence follows semver: pre-releases sort below the release, build metadata is ignored
    return Version.parse(text, optional_minor_and_patch=True)


def _parse_version(text: str) -> Version:
    try:
        return _to_version(text)
    except (TypeError, ValueError) as e:
        raise MalformedRangeError(f"Invalid version '{text}'") from e


@dataclass(frozen=True)
class VersionClause:
    """A single `OPERATOR VERSION` constraint."""

    op: str
    version: Version

    def holds(self, candidate: Version) -> bool:
        return _OPERATORS[self.op](candidate, self.version)

    def __str__(self) -> str:
        return f"{self.op}{self.version}"


@dataclass(frozen=True)
class VersionRange:
    """Conjunction of version clauses; the empty range accepts every version."""

    clauses: Tuple[VersionClause, ...] = field(default_factory=tuple)

    def satisfied_by(self, candidate: Union[str, Version]) -> bool:
        """Check whether a version satisfies every clause of the range.

        Args:
            candidate: Version string or parsed version

        Returns:
            True if all clauses hold
        """
        if not self.clauses:
            return True

        if not isinstance(candidate, Version):
            try:
                candidate = _to_version(candidate)
            except (TypeError, ValueError):
                logger.debug(f"Unparsable candidate version '{candidate}', treating as no match")
                return False

        return all(clause.holds(candidate) for clause in self.clauses)

    def __str__(self) -> str:
        return " ".join(str(clause) for clause in self.clauses)


def parse(text: str) -> VersionRange:
    """Parse a whitespace separated list of clauses such as `<1.130.0 >=1.126.0`.

    An operator may be separated from its version by whitespace (`<= 2.1.0`).

    Args:
        text: Range expression

    Returns:
        Parsed VersionRange

    Raises:
        MalformedRangeError: If a token lacks an operator or has a bad version
    """
    if text is None:
        raise MalformedRangeError("Version range cannot be None")

    clauses = []
    position = 0
    stripped = text.rstrip()

    while position < len(stripped):
        match = _CLAUSE_PATTERN.match(stripped, position)
        if not match:
            remainder = stripped[position:].strip()
            raise MalformedRangeError(f"Expected an operator before '{remainder}' in range '{text}'")

        op, raw_version = match.groups()
        clauses.append(VersionClause(op=op, version=_parse_version(raw_version)))
        position = match.end()

        # Clauses must be separated by whitespace: reject "<2.0.0>1.0.0"
        if position < len(stripped) and not stripped[position].isspace():
            raise MalformedRangeError(f"Missing whitespace after '{match.group(0).strip()}' in range '{text}'")

    return VersionRange(clauses=tuple(clauses))


def satisfies(version_range: Union[str, VersionRange], candidate: Union[str, Version]) -> bool:
    """Evaluate a range (text or parsed) against a concrete version.

    Raises:
        MalformedRangeError: If the range text cannot be parsed
    """
    if isinstance(version_range, str):
        version_range = parse(version_range)
    return version_range.satisfied_by(candidate)
