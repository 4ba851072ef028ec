"""Barrel Coach backend: swing uploads, 4B analysis, messaging and drill content."""

__version__ = "0.1.0"
