"""Application wiring."""
