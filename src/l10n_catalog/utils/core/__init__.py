"""Core utilities shared across the catalog packages."""
