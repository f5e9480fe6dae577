"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Two jobs:

1. CHARSET NEGOTIATION: decide whether a Content-Type gets a
   "; charset=..." suffix when the response header is synthesized.

2. SNIFFING: guess the type of a file being downloaded, from its first
   bytes and then its extension.

=============================================================================
CHARSET ALLOW-LIST
=============================================================================

A charset only means something for text. Appending one to a binary type
is at best noise and at worst confuses clients:

    text/html            → text/html; charset=UTF-8
    application/json     → application/json; charset=UTF-8
    application/xml      → application/xml; charset=UTF-8
    application/javascript → application/javascript; charset=UTF-8
    image/png            → image/png                 (never a charset)
    application/pdf      → application/pdf

Matching is by prefix, so "text/" covers every text subtype.

=============================================================================
SNIFFING ORDER
=============================================================================

    ┌───────────────────────────────────────────────────────────────────┐
    │  1. Magic bytes     89 50 4E 47 ...  → image/png                  │
    │  2. Extension       report.csv       → text/csv                   │
    │  3. Looks textual?  UTF-8, no NULs   → text/plain                 │
    │  4. Give up                          → application/octet-stream   │
    └───────────────────────────────────────────────────────────────────┘

Magic bytes win over the extension: a PNG renamed to .txt is still a PNG.

=============================================================================
INTERVIEW INSIGHT
=============================================================================

Q: "What's the default MIME type?"
A: "application/octet-stream - meaning 'unknown binary data'.
   Browsers typically download these files rather than display them."

=============================================================================
"""

from pathlib import Path
from typing import Optional


MIME_TYPES = {
    # Text
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",

    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".bmp": "image/bmp",

    # Fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",

    # Audio / video
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".mp4": "video/mp4",
    ".webm": "video/webm",

    # Documents
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",

    # Archives
    ".zip": "application/zip",
    ".tar": "application/x-tar",
    ".gz": "application/gzip",
    ".7z": "application/x-7z-compressed",

    ".wasm": "application/wasm",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# Content types that carry a charset suffix (prefix match)
CHARSET_TYPES = (
    "text/",
    "application/json",
    "application/xml",
    "application/javascript",
)

# (signature, mime type). Checked in order against the start of the file.
MAGIC_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"%PDF-", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b", "application/gzip"),
    (b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (b"\x00asm", "application/wasm"),
    (b"wOFF", "font/woff"),
    (b"wOF2", "font/woff2"),
)

# Bytes read from the head of a file for sniffing
SNIFF_LENGTH = 512


def should_include_charset(content_type: str) -> bool:
    """
    Check if a charset suffix is meaningful for ``content_type``.

    Examples:
        >>> should_include_charset("text/csv")
        True
        >>> should_include_charset("application/json")
        True
        >>> should_include_charset("image/png")
        False
    """
    return content_type.startswith(CHARSET_TYPES)


def get_mime_type(path: str | Path, default: Optional[str] = None) -> str:
    """
    Get the MIME type for a file name from its extension.

    Examples:
        >>> get_mime_type("style.css")
        'text/css'
        >>> get_mime_type("unknown.xyz")
        'application/octet-stream'
    """
    if isinstance(path, str):
        path = Path(path)

    extension = path.suffix.lower()
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)


def sniff_bytes(head: bytes) -> Optional[str]:
    """Match ``head`` against known file signatures."""
    for signature, mime_type in MAGIC_SIGNATURES:
        if head.startswith(signature):
            return mime_type
    return None


def looks_like_text(head: bytes) -> bool:
    """
    Heuristic text check: non-empty, no NUL bytes, decodes as UTF-8.

    A multi-byte character cut off at the end of ``head`` is tolerated.
    """
    if not head or b"\x00" in head:
        return False
    try:
        head.decode("utf-8")
    except UnicodeDecodeError as e:
        # Truncated sequence at the very end is fine
        return e.start >= len(head) - 3 and e.reason == "unexpected end of data"
    return True


def sniff_mime_type(path: str | Path) -> str:
    """
    Detect the MIME type of a file on disk.

    Reads at most SNIFF_LENGTH bytes. If the file cannot be read, the
    extension alone decides; errors are left to the caller's own open().

    Args:
        path: File to inspect.

    Returns:
        MIME type, application/octet-stream when nothing matches.
    """
    path = Path(path)

    try:
        with path.open("rb") as handle:
            head = handle.read(SNIFF_LENGTH)
    except OSError:
        return get_mime_type(path)

    sniffed = sniff_bytes(head)
    if sniffed:
        return sniffed

    by_extension = MIME_TYPES.get(path.suffix.lower())
    if by_extension:
        return by_extension

    if looks_like_text(head):
        return "text/plain"

    return DEFAULT_MIME_TYPE
