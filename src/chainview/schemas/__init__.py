"""Pydantic schemas for chain input and API output."""
