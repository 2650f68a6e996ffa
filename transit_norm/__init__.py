"""Canonical normalization of agency-specific public transit feed fields."""

__version__ = "0.1.0"
