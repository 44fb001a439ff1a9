"""Command-line tools for the Bgee web application."""

__all__ = ["__version__"]

__version__ = "0.1.0"
