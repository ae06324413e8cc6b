"""MouseCheck: a timed allow/prohibit click monitor."""

__version__ = "0.1.0"
