"""Output formatters for cdk-notices."""

import textwrap
from typing import Iterable, List, Optional

from rich.console import Console

from ..core.matcher import AffectedComponent, Notice
from ..utils.logging import get_logger


OVERVIEW_WIDTH = 60
OVERVIEW_HEADING = "Overview: "
ISSUE_URL = "https://github.com/aws/aws-cdk/issues/{issue_number}"
HEADER = "\nNOTICES"
ACKNOWLEDGE_INSTRUCTIONS = (
    'If you don’t want to see a notice anymore, use "cdk acknowledge <id>". '
    'For example, "cdk acknowledge {issue_number}".'
)


def format_overview(text: str, width: int = OVERVIEW_WIDTH) -> str:
    """Greedily wrap the overview, aligning continuation lines under the label."""
    lines = []
    # Line breaks already present in the overview are kept
    for paragraph in text.split("\n"):
        lines.extend(textwrap.wrap(
            paragraph,
            width=width,
            break_long_words=False,
            break_on_hyphens=False,
        ) or [""])
    separator = "\n\t" + " " * len(OVERVIEW_HEADING)
    return "\t" + OVERVIEW_HEADING + separator.join(lines)


def format_affected_versions(components: Iterable[AffectedComponent]) -> str:
    return ", ".join(f"{c.name}: {c.version}" for c in components)


def format_notice(notice: Notice) -> str:
    return (
        f"{notice.issue_number}\t{notice.title}\n\n"
        f"{format_overview(notice.overview)}\n\n"
        f"\tAffected versions: {format_affected_versions(notice.components)}\n\n"
        f"\tMore information at: {ISSUE_URL.format(issue_number=notice.issue_number)}\n"
    )


def format_notices(notices: Iterable[Notice]) -> List[str]:
    """Render one text block per notice.

    Args:
        notices: Notices to render

    Returns:
        List of formatted blocks, in input order
    """
    return [format_notice(notice) for notice in notices]


def final_message(blocks: List[str], example_issue_number: int) -> str:
    """Join the header, the notice blocks and the acknowledgement hint."""
    return "\n\n".join([
        HEADER,
        *blocks,
        ACKNOWLEDGE_INSTRUCTIONS.format(issue_number=example_issue_number),
    ])


class ConsoleFormatter:
    """Prints notice messages through a rich console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance (stderr by default)
        """
        self.console = console or Console(stderr=True)
        self.logger = get_logger("ConsoleFormatter")

    def print_message(self, message: str) -> None:
        """Print a generated message verbatim; empty messages print nothing."""
        if not message:
            return
        self.console.print(message, markup=False, highlight=False, soft_wrap=True)

    def print_info(self, message: str) -> None:
        self.console.print(message, style="cyan", markup=False, highlight=False)
