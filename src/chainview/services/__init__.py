"""Projection services: lookups, lifecycle, assets and the block projector."""
