# src/cache/keys.py — v1
"""Cache key derivation: every identifier sharing a host maps to one key.

A bookmark URL such as ``https://Example.com:8443/page?q=1`` and a bare host
such as ``example.com`` both normalize to ``example.com``. Scheme, port, path,
query and credentials never take part in the key. Internationalized hosts are
kept in their ASCII (punycode) form, so every key is plain ASCII.
"""

from __future__ import annotations

from urllib.parse import urlsplit

_DEFAULT_SCHEME = "https"


class InvalidIdentifier(ValueError):
    """Raised when an identifier has no parseable host."""

    def __init__(self, identifier: str, reason: str = "no host") -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Invalid identifier {identifier!r}: {reason}")


def split_identifier(identifier: str) -> tuple[str, str]:
    """Split an identifier into ``(host, scheme)``.

    Identifiers without ``://`` are treated as bare hosts with an https scheme.

    Raises:
        InvalidIdentifier: If no non-empty host can be extracted.
    """
    if not isinstance(identifier, str):
        raise InvalidIdentifier(repr(identifier), "not a string")

    text = identifier.strip()
    if not text:
        raise InvalidIdentifier(identifier, "empty")

    if "://" not in text:
        text = f"{_DEFAULT_SCHEME}://{text}"

    try:
        parts = urlsplit(text)
        host = parts.hostname
    except ValueError as e:
        raise InvalidIdentifier(identifier, str(e)) from e

    if not host:
        raise InvalidIdentifier(identifier)

    host = host.rstrip(".")
    if not host or any(ch.isspace() for ch in host):
        raise InvalidIdentifier(identifier, "malformed host")

    scheme = (parts.scheme or _DEFAULT_SCHEME).lower()
    return to_ascii_host(host, identifier), scheme


def to_ascii_host(host: str, identifier: str | None = None) -> str:
    """Return the lowercase ASCII (IDNA) form of host.

    ``bücher.de`` becomes ``xn--bcher-kva.de``; ASCII hosts are only
    lowercased.

    Raises:
        InvalidIdentifier: If a non-ASCII host cannot be IDNA-encoded.
    """
    host = host.lower()
    if host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError as e:
        raise InvalidIdentifier(identifier or host, f"invalid IDN host: {e}") from e


def normalize_key(identifier: str) -> str:
    """Derive the cache key (lowercase host) for an identifier.

    Raises:
        InvalidIdentifier: If no non-empty host can be extracted.
    """
    host, _ = split_identifier(identifier)
    return host
