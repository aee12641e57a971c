"""txxt: structure tools for RFC-style plain-text documents."""

from txxt._version import __version__

__all__ = ["__version__"]
