"""
=============================================================================
RESPONSE HEADER STORE
=============================================================================

Ordered, case-insensitive, case-preserving mapping of header name to value.

=============================================================================
WHY NOT A PLAIN DICT?
=============================================================================

Header names are case-insensitive (RFC 7230 §3.2), but a plain dict is not:

    headers["Content-Type"] = "text/html"
    headers["content-type"] = "application/json"
    → two entries, both emitted, client sees conflicting types

The store keys entries by the lower-cased name and remembers the first
spelling it saw, so the second write above overwrites the first in place:

    ┌──────────────┬────────────────┬────────────────────┐
    │  key         │  name (kept)   │  value (latest)    │
    ├──────────────┼────────────────┼────────────────────┤
    │ content-type │ Content-Type   │ application/json   │
    │ x-test       │ X-Test         │ b                  │
    └──────────────┴────────────────┴────────────────────┘

Emission order is insertion order. Overwriting does not move an entry.

Limitation: one value per name. Set-Cookie style repeated headers are not
supported.

=============================================================================
"""

from typing import Dict, Iterator, Optional, Tuple


class HeaderStore:
    """
    Insertion-ordered header mapping with last-write-wins per name.

    There is no delete operation: a response's header set only grows.
    """

    def __init__(self) -> None:
        # lower-cased name → (original name, value)
        self._entries: Dict[str, Tuple[str, str]] = {}

    def set(self, name: str, value: str) -> None:
        """
        Set a header, overwriting any earlier value for the same name.

        An existing entry keeps its slot and its original spelling.
        """
        key = name.lower()
        existing = self._entries.get(key)
        if existing is not None:
            name = existing[0]
        self._entries[key] = (name, value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        entry = self._entries.get(name.lower())
        return entry[1] if entry is not None else default

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        for name, _ in self._entries.values():
            yield name

    def items(self) -> Iterator[Tuple[str, str]]:
        """Yield (name, value) pairs in emission order."""
        return iter(self._entries.values())

    def get_all(self) -> Dict[str, str]:
        """Return the headers as an ordered ``{name: value}`` dict."""
        return dict(self._entries.values())

    def __repr__(self) -> str:
        return f"HeaderStore({self.get_all()!r})"
