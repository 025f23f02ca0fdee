"""Platform and subprocess helpers."""
