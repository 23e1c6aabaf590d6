"""Interactive geometry demos: a ball walking a Klein bottle and recursive string systems."""

__version__ = "0.1.0"
