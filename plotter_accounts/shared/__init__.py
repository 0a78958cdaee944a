"""Shared helpers used across layers (set utilities, logging)."""
