"""Exact outcome odds for two-sided attrition battles."""

__version__ = "0.3.0"
