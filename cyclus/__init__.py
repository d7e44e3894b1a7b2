"""Cyclus: cycle season classification and prediction service."""

__version__ = "0.1.0"
