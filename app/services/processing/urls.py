"""URL normalization used as the identity key for deduplication."""
from urllib.parse import urlsplit


def _strip_suffixes(url: str) -> str:
    """Best-effort cleanup for strings the URL parser cannot handle."""
    cut = len(url)
    for marker in ("?", "#"):
        idx = url.find(marker)
        if idx != -1:
            cut = min(cut, idx)
    return url[:cut].rstrip("/")


def normalize_url(url: str) -> str:
    """
    Reduce a URL to scheme://host[:port]/path without query, fragment or trailing slash.

    Never raises. Inputs the parser rejects (or that lack a scheme/host) fall
    back to stripping the query, fragment and trailing slash from the raw
    string. Scheme and host casing are whatever urlsplit gives natively; path
    case is preserved so distinct paths never merge.
    """
    raw = (url or "").strip()
    try:
        parts = urlsplit(raw)
        host = parts.hostname
        if not parts.scheme or not host:
            return _strip_suffixes(raw)
        port = parts.port
    except ValueError:
        return _strip_suffixes(raw)

    if ":" in host:
        host = f"[{host}]"  # IPv6 literal
    netloc = f"{host}:{port}" if port is not None else host
    return f"{parts.scheme}://{netloc}{parts.path.rstrip('/')}"
