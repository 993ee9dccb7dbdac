"""zensearch — embedded, offline full-text search for journaling apps."""

__version__ = "0.1.0"
