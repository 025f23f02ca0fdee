"""CI and release packaging pipeline for the zr binary."""

__version__ = "0.1.0"
