"""Shape completion from partial occupancy-grid observations."""

__version__ = "0.1.0"
