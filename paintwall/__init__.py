"""Back office API for a painting and drywall contractor."""

__version__ = "0.1.0"
