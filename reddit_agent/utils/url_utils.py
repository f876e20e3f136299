"""
URL helpers shared by every surface that accepts a user-supplied URL.
"""

import ipaddress
from urllib.parse import urlsplit, urlunsplit

ALLOWED_SCHEMES = ("http", "https")


def normalize_url(value: str) -> str:
    """
    Normalize a user-supplied URL.

    Trims whitespace, keeps anything that already has a scheme, turns
    protocol-relative ``//host`` into ``https://host`` and prepends
    ``https://`` to everything else. An empty value stays empty.
    """
    url = value.strip()
    if not url:
        return ""
    if url.find("://") > 0:
        return url
    if url.startswith("//"):
        return f"https:{url}"
    return f"https://{url}"


def _is_valid_host(hostname: str) -> bool:
    # A fully-qualified name may end with the root label
    if hostname.endswith("."):
        hostname = hostname[:-1]
    if hostname == "localhost":
        return True
    try:
        ipaddress.ip_address(hostname)
        return True
    except ValueError:
        pass
    labels = hostname.split(".")
    if len(labels) < 2 or not all(labels):
        return False
    # Letters, digits, hyphens and underscores
    return all(
        label.replace("-", "").replace("_", "").isalnum() and not label.startswith("-")
        for label in labels
    )


def hostname_of(url: str) -> str:
    """Return the host of an absolute URL, or an empty string."""
    return urlsplit(url).hostname or ""


def parse_absolute_url(url: str) -> str:
    """
    Parse ``url`` as an absolute http(s) URL and return its canonical form.

    The scheme and host are lowercased and an empty path becomes ``/``.

    Raises:
        ValueError: If the URL has no usable scheme or host
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Unsupported scheme: {parts.scheme!r}")

    hostname = parts.hostname
    if not hostname:
        raise ValueError("URL has no host")
    if not _is_valid_host(hostname):
        raise ValueError(f"Invalid host: {hostname!r}")
    # Accessing .port validates it
    port = parts.port

    netloc = hostname if ":" not in hostname else f"[{hostname}]"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"
    if port is not None:
        netloc = f"{netloc}:{port}"

    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, parts.fragment))
