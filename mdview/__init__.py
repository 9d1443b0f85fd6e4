"""mdview: live-updating Markdown viewer."""

__version__ = "0.1.0"
