"""fieldguard — declarative, rule-driven record validation."""

__version__ = "1.0.0"
