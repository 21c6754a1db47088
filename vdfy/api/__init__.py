"""HTTP layer."""

from vdfy import __version__

__all__ = ["__version__"]
