"""Deciding which notices to show and rendering them."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .core.inventory import scan_inventory
from .core.matcher import Notice, NoticeMatcher
from .output.formatters import ConsoleFormatter, final_message, format_notices
from .sources.base import NoticeDataSource
from .utils.logging import get_logger
from .version import version_number


logger = get_logger("Notices")


@dataclass
class NoticesContext:
    """Inputs describing the current invocation."""

    outdir: Optional[Union[str, Path]] = None
    acknowledged_issue_numbers: List[int] = field(default_factory=list)
    cli_version: str = field(default_factory=version_number)


async def get_applicable_notices(context: NoticesContext, data_source: NoticeDataSource) -> List[Notice]:
    """Fetch the catalog and keep the notices that apply to this run.

    The catalog fetch and the assembly scan run concurrently.

    Args:
        context: Invocation context
        data_source: Source of the notice catalog

    Returns:
        Applicable, unacknowledged notices in catalog order
    """
    notices, facts = await asyncio.gather(
        data_source.fetch(),
        asyncio.to_thread(scan_inventory, context.outdir, context.cli_version),
    )
    logger.debug(f"Checking {len(notices)} notices against {len(facts)} inventory facts")

    return NoticeMatcher().filter_notices(notices, facts, context.acknowledged_issue_numbers)


async def generate_message(data_source: NoticeDataSource, context: NoticesContext) -> str:
    """Build the notices report, or the empty string when nothing applies."""
    notices = await get_applicable_notices(context, data_source)
    if not notices:
        return ""
    return final_message(format_notices(notices), notices[0].issue_number)


async def display_notices(
    context: NoticesContext,
    data_source: NoticeDataSource,
    formatter: Optional[ConsoleFormatter] = None
) -> str:
    """Generate the report and print it if there is anything to show.

    Returns:
        The generated message
    """
    message = await generate_message(data_source, context)
    (formatter or ConsoleFormatter()).print_message(message)
    return message


async def refresh_notices(data_source: NoticeDataSource) -> List[Notice]:
    """Fetch through the data source chain to populate the cache."""
    notices = await data_source.fetch()
    logger.debug(f"Refreshed {len(notices)} notices")
    return notices
