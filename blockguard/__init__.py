"""BlockGuard: group-based item and block blacklist for game servers."""

__version__ = "0.1.0"
