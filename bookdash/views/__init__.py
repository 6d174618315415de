"""Package des vues Qt de l'application BookDash."""

from .__version__ import (
    __app_name__,
    __author__,
    __copyright__,
    __description__,
    __license__,
    __version__,
)

__all__ = [
    "__version__",
    "__app_name__",
    "__author__",
    "__license__",
    "__copyright__",
    "__description__",
]
