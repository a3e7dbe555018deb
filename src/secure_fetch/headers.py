"""Case-insensitive header access across header representations.

Callers may hand the client headers as a dict, a list of (name, value)
pairs, or a native ``httpx.Headers`` object. Internally every request
works on a ``HeaderSet``; the free functions ``get_header`` and
``set_header`` operate on any of the accepted representations.
"""

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from typing import Any

import httpx

from src.secure_fetch.constants import REDACTED_VALUE, SENSITIVE_HEADERS


class HeaderSet(MutableMapping[str, str]):
    """Case-insensitive, insertion-ordered header mapping.

    Holds one value per header name. Iteration yields names in the
    spelling they were first written with.
    """

    __slots__ = ("_items",)

    def __init__(
        self,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._items: dict[str, tuple[str, str]] = {}
        if headers is None:
            return
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in pairs:
            self[name] = value

    @classmethod
    def from_any(cls, headers: Any) -> "HeaderSet":
        """Build a new HeaderSet from any supported representation.

        Args:
            headers: A HeaderSet, httpx.Headers, mapping, list of pairs, or None.

        Returns:
            A fresh HeaderSet; the input is not modified.

        Raises:
            TypeError: If the representation is not supported.
        """
        if headers is None:
            return cls()
        if isinstance(headers, httpx.Headers):
            return cls(headers.items())
        if isinstance(headers, Mapping):
            return cls(headers)
        if isinstance(headers, list | tuple):
            return cls((str(pair[0]), str(pair[1])) for pair in headers)
        msg = f"Unsupported headers type: {type(headers).__name__}"
        raise TypeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._items[key.lower()][1]

    def __setitem__(self, key: str, value: str) -> None:
        lowered = key.lower()
        existing = self._items.get(lowered)
        name = existing[0] if existing else key
        self._items[lowered] = (name, value)

    def __delitem__(self, key: str) -> None:
        del self._items[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"HeaderSet({self.redacted()!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HeaderSet):
            return {k: v for k, (_, v) in self._items.items()} == {
                k: v for k, (_, v) in other._items.items()
            }
        if isinstance(other, Mapping):
            return self == HeaderSet(other)
        return NotImplemented

    def copy(self) -> "HeaderSet":
        """Return a shallow copy."""
        return HeaderSet(self.items())

    def setdefault_header(self, key: str, value: str) -> str:
        """Set a header only if it is absent; return the effective value."""
        if key not in self:
            self[key] = value
        return self[key]

    def to_dict(self) -> dict[str, str]:
        """Return a plain dict using the original header spellings."""
        return dict(self._items.values())

    def redacted(self) -> dict[str, str]:
        """Return a plain dict with sensitive header values redacted.

        Safe for logging: Authorization, Cookie, API keys and similar
        values are replaced with a placeholder.
        """
        return {
            name: REDACTED_VALUE if is_sensitive_header(name) else value
            for name, value in self._items.values()
        }


def is_sensitive_header(header_name: str) -> bool:
    """Check if a header name carries credentials.

    Args:
        header_name: The header name to check.

    Returns:
        True if the header value must be redacted in logs.
    """
    return header_name.lower() in SENSITIVE_HEADERS


def get_header(headers: Any, key: str) -> str | None:
    """Get a header value from any supported representation.

    Args:
        headers: HeaderSet, httpx.Headers, mapping, or list of pairs.
        key: Header name, matched case-insensitively.

    Returns:
        The header value, or None if absent.
    """
    if headers is None:
        return None
    if isinstance(headers, HeaderSet | httpx.Headers):
        return headers.get(key)
    lowered = key.lower()
    if isinstance(headers, Mapping):
        for name, value in headers.items():
            if name.lower() == lowered:
                return value
        return None
    if isinstance(headers, list | tuple):
        for pair in headers:
            if pair[0].lower() == lowered:
                return pair[1]
        return None
    return None


def set_header(headers: Any, key: str, value: str) -> Any:
    """Set a header value in place on any supported representation.

    An existing header with the same case-insensitive name is replaced
    rather than duplicated.

    Args:
        headers: HeaderSet, httpx.Headers, mutable mapping, or list of pairs.
        key: Header name.
        value: Header value.

    Returns:
        The same headers object, for chaining.

    Raises:
        TypeError: If the representation cannot be mutated.
    """
    if isinstance(headers, HeaderSet | httpx.Headers):
        headers[key] = value
        return headers

    lowered = key.lower()
    if isinstance(headers, MutableMapping):
        for name in headers:
            if name.lower() == lowered:
                headers[name] = value
                return headers
        headers[key] = value
        return headers

    if isinstance(headers, list):
        for index, pair in enumerate(headers):
            if pair[0].lower() == lowered:
                if isinstance(pair, list):
                    pair[1] = value
                else:
                    headers[index] = (pair[0], value)
                return headers
        headers.append((key, value))
        return headers

    msg = f"Cannot set header on {type(headers).__name__}"
    raise TypeError(msg)
