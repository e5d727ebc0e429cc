"""Close and lock new and existing issues and pull requests."""

__version__ = "1.0.0"
