"""Notice catalog sources for cdk-notices."""

from .base import NoticeDataSource
from .cached import CacheEnvelope, CachedDataSource
from .website import WebsiteNoticeDataSource

__all__ = [
    "CacheEnvelope",
    "CachedDataSource",
    "NoticeDataSource",
    "WebsiteNoticeDataSource",
]
