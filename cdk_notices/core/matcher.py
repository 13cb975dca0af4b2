"""Notice models and the logic deciding which notices apply to a run."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from ..utils.logging import get_logger
from .inventory import InventoryFact, ModuleFact, ToolVersionFact
from .ranges import MalformedRangeError, VersionRange, parse


CLI_COMPONENT = "cli"
FRAMEWORK_COMPONENT = "framework"

# Modules that make up the core construct library, v2 and v1
CORE_LIBRARIES = ("aws-cdk-lib", "@aws-cdk/core")


@dataclass(frozen=True)
class AffectedComponent:
    """A (name, version range) pair describing what a notice applies to."""

    name: str
    version: str

    def __post_init__(self) -> None:
        """Validate component data."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Component name cannot be empty")
        if not isinstance(self.version, str):
            raise ValueError(f"Component version must be a string, got {type(self.version).__name__}")

    @property
    def version_range(self) -> VersionRange:
        """Parsed version range.

        Raises:
            MalformedRangeError: If the range text is invalid
        """
        return parse(self.version)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AffectedComponent":
        if not isinstance(data, dict):
            raise ValueError("Component must be an object")
        return cls(name=data.get("name"), version=data.get("version"))

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True)
class Notice:
    """An advisory about a known issue in specific tool or library versions."""

    issue_number: int
    title: str
    overview: str
    components: Tuple[AffectedComponent, ...] = field(default_factory=tuple)
    schema_version: str = "1"

    def __post_init__(self) -> None:
        """Validate notice data."""
        if isinstance(self.issue_number, bool) or not isinstance(self.issue_number, int) or self.issue_number <= 0:
            raise ValueError(f"Issue number must be a positive integer, got {self.issue_number!r}")
        if not isinstance(self.title, str) or not isinstance(self.overview, str):
            raise ValueError(f"Notice {self.issue_number} must have a text title and overview")
        if not self.components:
            raise ValueError(f"Notice {self.issue_number} must list at least one affected component")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Notice":
        """Build a notice from its JSON representation.

        Raises:
            ValueError: If the data does not describe a valid notice
        """
        if not isinstance(data, dict):
            raise ValueError("Notice must be an object")

        components = data.get("components")
        if not isinstance(components, list):
            raise ValueError(f"Notice {data.get('issueNumber', 'unknown')} has no component list")

        return cls(
            issue_number=data.get("issueNumber"),
            title=data.get("title"),
            overview=data.get("overview"),
            components=tuple(AffectedComponent.from_dict(c) for c in components),
            schema_version=str(data.get("schemaVersion", "1")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "issueNumber": self.issue_number,
            "overview": self.overview,
            "components": [c.to_dict() for c in self.components],
            "schemaVersion": self.schema_version,
        }


def _names_match(component_name: str, fact: ModuleFact) -> bool:
    fqn = fact.construct_type_fqn

    if component_name.endswith("."):
        # Trailing dot: the module itself or anything nested under it
        return (
            fact.module_name == component_name[:-1]
            or fact.module_name.startswith(component_name)
            or (fqn is not None and fqn.startswith(component_name))
        )

    return fact.module_name == component_name or fqn == component_name


def matches(component: AffectedComponent, fact: InventoryFact) -> bool:
    """Check whether an affected component matches one inventory fact.

    Raises:
        MalformedRangeError: If the component's version range is invalid
    """
    version_range = component.version_range

    if component.name == CLI_COMPONENT:
        return isinstance(fact, ToolVersionFact) and version_range.satisfied_by(fact.version)

    if not isinstance(fact, ModuleFact):
        return False

    if component.name == FRAMEWORK_COMPONENT:
        named = fact.module_name in CORE_LIBRARIES
    else:
        named = _names_match(component.name, fact)

    return named and version_range.satisfied_by(fact.module_version)


def is_applicable(notice: Notice, facts: Iterable[InventoryFact]) -> bool:
    """A notice applies when any of its components matches any fact.

    Every range of the notice is validated first, so a malformed range is
    reported even when another component would have matched.

    Raises:
        MalformedRangeError: If any component's version range is invalid
    """
    for component in notice.components:
        parse(component.version)

    facts = list(facts)
    return any(matches(component, fact) for component in notice.components for fact in facts)


class NoticeMatcher:
    """Filters a notice catalog against the facts of the current run."""

    def __init__(self) -> None:
        self.logger = get_logger("NoticeMatcher")

    def filter_notices(
        self,
        notices: Iterable[Notice],
        facts: Iterable[InventoryFact],
        acknowledged_issue_numbers: Iterable[int] = ()
    ) -> List[Notice]:
        """Keep applicable, unacknowledged notices in catalog order.

        Notices with malformed version ranges are skipped with a warning.

        Args:
            notices: Fetched catalog
            facts: Inventory facts for the run
            acknowledged_issue_numbers: Issue numbers the operator has dismissed

        Returns:
            Applicable notices
        """
        facts = list(facts)
        acknowledged = set(acknowledged_issue_numbers)
        applicable = []

        for notice in notices:
            if notice.issue_number in acknowledged:
                self.logger.debug(f"Notice {notice.issue_number} is acknowledged")
                continue

            try:
                if is_applicable(notice, facts):
                    applicable.append(notice)
            except MalformedRangeError as e:
                self.logger.warning(f"Skipping notice {notice.issue_number}: {e}")

        return applicable
