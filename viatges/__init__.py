"""Trip reconstruction from transit-card validation exports."""

__version__ = "0.1.0"
