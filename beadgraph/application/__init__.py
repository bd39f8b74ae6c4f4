"""Application layer: dependency wiring and use-case services."""
