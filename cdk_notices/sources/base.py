"""Common interface of notice data sources."""

from typing import List, Protocol

from ..core.matcher import Notice


class NoticeDataSource(Protocol):
    """Anything that can produce the current notice catalog."""

    async def fetch(self) -> List[Notice]: ...
