"""Application layer: account and tag services, permission resolution."""
