"""cdk-notices - shows known issues affecting the tool and the libraries an app uses."""

__version__ = "0.1.0"

from .core.matcher import AffectedComponent, Notice
from .core.ranges import MalformedRangeError
from .notices import NoticesContext, display_notices, generate_message, get_applicable_notices, refresh_notices
from .output.formatters import format_notices
from .sources import CachedDataSource, WebsiteNoticeDataSource

__all__ = [
    "AffectedComponent",
    "CachedDataSource",
    "MalformedRangeError",
    "Notice",
    "NoticesContext",
    "WebsiteNoticeDataSource",
    "display_notices",
    "format_notices",
    "generate_message",
    "get_applicable_notices",
    "refresh_notices",
]
