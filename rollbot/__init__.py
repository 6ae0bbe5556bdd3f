"""Automated roll buyer for Massa-style nodes."""

__version__ = "0.1.0"
