"""Viewer fingerprint - stable hash of a viewer identifier (IP, user id) so raw identifiers are never stored."""
import hashlib
import re


def normalize_viewer_id(viewer_id: str) -> str:
    """Lowercase, strip, collapse whitespace."""
    text = (viewer_id or "").lower().strip()
    return re.sub(r"\s+", " ", text)


def compute_viewer_fingerprint(job_id: int, viewer_id: str) -> str:
    """
    SHA-256 of "<job_id>:<normalized viewer id>".
    Salting by job keeps the same viewer unlinkable across postings.
    """
    payload = f"{job_id}:{normalize_viewer_id(viewer_id)}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
