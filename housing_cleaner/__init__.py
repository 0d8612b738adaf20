"""Housing Cleaner - deterministic cleaning pipeline for real-estate sales records."""

__version__ = "0.1.0"
