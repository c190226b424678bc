"""Metadata payload schemas and decoding."""
