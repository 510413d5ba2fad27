"""URL normalization helpers shared by the inspector, adapters and batch entry point."""

from urllib.parse import urlparse, urlunparse

from ..exceptions import InvalidURLError


def normalize_url(raw: str) -> str:
    """
    Normalize a caller-supplied URL.

    Trims whitespace, defaults the scheme to https, lowercases the host and
    requires a dotted hostname.

    Raises:
        InvalidURLError: if the input cannot be turned into an http(s) URL
    """
    if not isinstance(raw, str):
        raise InvalidURLError(str(raw), "not a string")

    candidate = raw.strip()
    if not candidate:
        raise InvalidURLError(raw, "empty URL")

    if "://" not in candidate:
        candidate = f"https://{candidate}"

    parsed = urlparse(candidate)
    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(raw, "unsupported scheme")

    host = (parsed.hostname or "").lower()
    if not host or "." not in host or host.startswith(".") or host.endswith("."):
        raise InvalidURLError(raw, "missing or invalid host")
    if any(ch.isspace() for ch in candidate):
        raise InvalidURLError(raw, "whitespace in URL")

    try:
        port = parsed.port
    except ValueError:
        raise InvalidURLError(raw, "invalid port")

    netloc = host if port is None else f"{host}:{port}"
    path = parsed.path or "/"
    return urlunparse((parsed.scheme, netloc, path, "", parsed.query, ""))


def extract_domain(url: str) -> str:
    """Registrable-ish host for provider lookups (www. stripped)."""
    host = (urlparse(url if "://" in url else f"https://{url}").hostname or "").lower()
    return host[4:] if host.startswith("www.") else host


def site_root(url: str) -> str:
    """scheme://host of a URL, used for llms.txt and sitemap probes."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"
