"""Persistence: record models and repositories over the config store."""
