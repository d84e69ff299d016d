"""Building blocks for a search indexer: hashing, synced files, a byte limiter, values, datetime parsing, casting, transform pipelines and key building."""

__version__ = "0.1.0"