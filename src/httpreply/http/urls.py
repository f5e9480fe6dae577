"""
=============================================================================
REDIRECT URL HELPERS
=============================================================================

Validation, protocol upgrade, and sanitizing of redirect targets.

=============================================================================
ACCEPTED TARGETS
=============================================================================

    ┌───────────────────────────────┬──────────┬──────────────────────────┐
    │  Target                       │  Valid?  │  Why                     │
    ├───────────────────────────────┼──────────┼──────────────────────────┤
    │  https://example.com/x        │  yes     │  absolute URL with host  │
    │  /dashboard?tab=1             │  yes     │  path                    │
    │  mailto:admin@example.com     │  yes     │  scheme without host     │
    │  example.com/x                │  no      │  no scheme, not a path   │
    │  http://                      │  no      │  scheme but no host      │
    │  not a url                    │  no      │  whitespace, no scheme   │
    └───────────────────────────────┴──────────┴──────────────────────────┘

=============================================================================
PROTOCOL UPGRADE
=============================================================================

If the current request arrived over TLS, redirecting to an http:// URL
would downgrade the connection. upgrade_scheme() rewrites the scheme only
and leaves the rest untouched:

    http://example.com/x?y=1  →  https://example.com/x?y=1

=============================================================================
SANITIZING
=============================================================================

The Location header must not carry characters that could end the header
line early (CR, LF) or that are illegal in a URL. sanitize_url() keeps
only letters, digits and the URL punctuation set below, dropping
everything else:

    $-_.+!*'(),{}|\\^~[]`<>#%";/?:@&=

=============================================================================
"""

import re
from urllib.parse import urlsplit


# Schemes that are complete without a host part
_HOSTLESS_SCHEMES = {"mailto", "news", "file", "urn", "tel"}

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

_UNSAFE_URL_CHARS = re.compile(r"[^A-Za-z0-9$\-_.+!*'(),{}|\\^~\[\]`<>#%\";/?:@&=]")


def is_absolute_url(url: str) -> bool:
    """
    Check that ``url`` is a well-formed absolute URL.

    Requires a scheme, and a host for every scheme except the few that
    have none (mailto:, file:, ...). Whitespace, control characters and
    non-ASCII characters make a URL invalid.
    """
    if not url or not url.isascii():
        return False

    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in url):
        return False

    try:
        parts = urlsplit(url)
    except ValueError:
        # e.g. unbalanced IPv6 brackets
        return False

    if not parts.scheme or not _SCHEME_PATTERN.match(parts.scheme):
        return False

    if parts.scheme.lower() in _HOSTLESS_SCHEMES:
        return bool(parts.netloc or parts.path)

    return bool(parts.hostname)


def is_valid_redirect_target(url: object) -> bool:
    """A redirect target is an absolute URL or a path starting with "/"."""
    if not isinstance(url, str):
        return False
    return is_absolute_url(url) or url.startswith("/")


def upgrade_scheme(url: str) -> str:
    """Rewrite an ``http://`` URL to ``https://``; anything else is returned as is."""
    if url[:7].lower() == "http://":
        return "https://" + url[7:]
    return url


def sanitize_url(url: str) -> str:
    """Drop every character that is not allowed in a URL."""
    return _UNSAFE_URL_CHARS.sub("", url)
