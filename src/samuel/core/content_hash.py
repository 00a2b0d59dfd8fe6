"""Content hash utilities for drift and conflict detection."""

import hashlib


def compute_content_hash(content: bytes) -> str:
    """Compute SHA-256 hash of raw bytes.

    Args:
        content: File content

    Returns:
        Hash string in format "sha256:<hex_digest>"
    """
    digest = hashlib.sha256(content).hexdigest()
    return f"sha256:{digest}"


def same_content(left: bytes, right: bytes) -> bool:
    """Check whether two byte strings hash identically."""
    return compute_content_hash(left) == compute_content_hash(right)
