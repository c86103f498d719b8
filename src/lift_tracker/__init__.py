"""Personal workout tracker: plan import, set tracking and progress statistics."""

__version__ = "0.1.0"
