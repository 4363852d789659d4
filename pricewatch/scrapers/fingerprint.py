# pricewatch/scrapers/fingerprint.py

"""Content fingerprint used to skip reparsing an unchanged document."""

import hashlib


def fingerprint(content: bytes) -> str:
    """Return the SHA-256 hex digest of the raw document bytes."""
    return hashlib.sha256(content).hexdigest()
