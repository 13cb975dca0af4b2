"""Version of the running tool."""

from . import __version__


def version_number() -> str:
    """Return the version this tool reports for `cli` notice components."""
    return __version__
