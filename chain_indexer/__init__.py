"""Durable, gap-free indexing of contract events by category."""

__version__ = "1.0.0"
