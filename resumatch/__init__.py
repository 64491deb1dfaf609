"""Resume-to-job relevance scoring and batch analytics."""

__version__ = "0.3.0"
