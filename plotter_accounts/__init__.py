"""Account and tag-permission administration for a stream plotter's config store."""

__version__ = "0.1.0"
