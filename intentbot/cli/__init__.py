"""CLI module for intentbot."""
