"""Chainview: projects forum and content chain events into a relational snapshot."""

__version__ = "0.1.0"
