"""Utility modules shared across features."""
