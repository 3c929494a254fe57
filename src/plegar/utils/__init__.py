"""Utility modules for Plegar.

Provides:
- hashing: hash_str, fingerprint for cache keys
- logger: get_logger for logging
"""

from plegar.utils.hashing import fingerprint, hash_str
from plegar.utils.logger import get_logger

__all__ = [
    "fingerprint",
    "get_logger",
    "hash_str",
]
