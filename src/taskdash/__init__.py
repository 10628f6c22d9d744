"""taskdash: local task-tracking dashboard core."""

from taskdash.config import VERSION as __version__

__all__ = ["__version__"]
