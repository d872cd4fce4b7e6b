"""Loaders for validation exports."""

from .validations import LoadError, read_validation_csv

__all__ = ["LoadError", "read_validation_csv"]
