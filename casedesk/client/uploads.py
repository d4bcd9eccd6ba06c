"""
Upload and download helpers shared by the portals.

Size limits are checked here, before a request is ever made.
"""

import re
from urllib.parse import unquote

MB = 1024 * 1024

DOCUMENT_MAX_SIZE_MB = 25
PAYMENT_PROOF_MAX_SIZE_MB = 10

_FILENAME_STAR = re.compile(r"filename\*\s*=\s*([^']*)'[^']*'([^;]+)", re.IGNORECASE)
_FILENAME = re.compile(r'filename\s*=\s*(?:"([^"]*)"|([^;]+))', re.IGNORECASE)


def validate_upload(size_bytes: int, max_size_mb: int = DOCUMENT_MAX_SIZE_MB) -> str | None:
    """Return the user-facing error for an oversized file, or None."""
    if size_bytes > max_size_mb * MB:
        return f"File size must be under {max_size_mb}MB"
    return None


def filename_from_content_disposition(header: str | None, fallback: str) -> str:
    """
    Extract the download name from a ``Content-Disposition`` header.

    ``filename*`` (RFC 5987) wins over ``filename``; without either the
    stored file name passed as ``fallback`` is used.
    """
    if not header:
        return fallback

    match = _FILENAME_STAR.search(header)
    if match:
        charset = match.group(1) or "utf-8"
        try:
            return unquote(match.group(2).strip(), encoding=charset)
        except LookupError:
            return unquote(match.group(2).strip())

    match = _FILENAME.search(header)
    if match:
        name = (match.group(1) if match.group(1) is not None else match.group(2)).strip()
        if name:
            return name

    return fallback


def preview_mode(mime_type: str | None) -> str:
    """
    How a portal shows a document: ``image`` inline, ``pdf`` in a viewer,
    anything else as a ``metadata`` card.
    """
    if not mime_type:
        return "metadata"
    mime_type = mime_type.lower()
    if mime_type.startswith("image/"):
        return "image"
    if mime_type == "application/pdf":
        return "pdf"
    return "metadata"
