"""Film availability service for the HFF library WebOPAC."""

__version__ = "1.0.0"
