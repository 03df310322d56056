"""locatedb - fast path lookups against a prebuilt filesystem index."""

__version__ = "0.1.0"
