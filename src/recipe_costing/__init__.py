"""Recipe costing: per-recipe-unit costs from bulk purchase pricing."""

__version__ = "0.1.0"
