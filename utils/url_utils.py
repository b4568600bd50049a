"""
Utilities for URL validation, construction and access.

Provides functions for validating URLs, building remote listing/asset URLs
under a browse root, wrapping targets in the gateway proxy URL, and checking
availability.
"""

from typing import Dict, Optional, Tuple
from urllib.parse import quote, urlencode, urlparse, urlunparse, parse_qsl

import requests

# Headers sent on server-side fetches. Some directory-listing hosts refuse the
# default python-requests User-Agent.
BROWSER_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
}

DATA_IMAGE_PREFIX = "data:image"


def is_valid_url(url: Optional[str]) -> bool:
    """
    Return True for absolute http(s) URLs with a host.

    Example:
        >>> is_valid_url("https://example.com/512/webp/")
        True
        >>> is_valid_url("file:///etc/passwd")
        False
    """
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_data_image_uri(value: Optional[str]) -> bool:
    """Return True if value is an inline image data URI (data:image/...)."""
    return bool(value) and value.startswith(DATA_IMAGE_PREFIX)


def ensure_trailing_slash(url: str) -> str:
    """Return url with exactly one trailing slash on its path."""
    parsed = urlparse(url)
    path = parsed.path.rstrip("/") + "/"
    return urlunparse(parsed._replace(path=path))


def join_listing_url(browse_root: str, folder: str) -> str:
    """
    Return the directory listing URL of a folder under the browse root.

    Example:
        >>> join_listing_url("https://example.com/512/webp", "red")
        'https://example.com/512/webp/red/'
    """
    root = ensure_trailing_slash(browse_root)
    return root + quote(folder.strip("/"), safe="-_.~%") + "/"


def join_asset_url(browse_root: str, folder: str, file_name: str) -> str:
    """
    Return the absolute URL of a leaf asset in a folder under the browse root.

    Example:
        >>> join_asset_url("https://example.com/512/webp/", "red", "01.webp")
        'https://example.com/512/webp/red/01.webp'
    """
    return join_listing_url(browse_root, folder) + quote(file_name, safe="-_.~%")


def with_token(url: str, token: Optional[str]) -> str:
    """Append ?token=<token> (or &token=) to url when a token is configured."""
    if not token:
        return url
    parsed = urlparse(url)
    query = parse_qsl(parsed.query, keep_blank_values=True)
    query.append(("token", token))
    return urlunparse(parsed._replace(query=urlencode(query)))


def build_proxy_url(gateway_base: str, target_url: str) -> str:
    """
    Return the gateway proxy URL that relays target_url.

    The target is fully percent-encoded so its own query string survives.

    Example:
        >>> build_proxy_url("http://127.0.0.1:8081", "https://example.com/a b.png")
        'http://127.0.0.1:8081/proxy?url=https%3A%2F%2Fexample.com%2Fa%20b.png'
    """
    return f"{gateway_base.rstrip('/')}/proxy?url={quote(target_url, safe='')}"


def access_url(url: str, timeout: int = 30) -> Tuple[bool, str]:
    """
    GET url and report whether it answered 200.

    Returns:
        (True, "Success") or (False, reason), e.g. (False, "HTTP 404") or
        (False, "Connection Error").
    """
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True, headers=BROWSER_HEADERS)
    except requests.exceptions.Timeout:
        return False, "Timeout"
    except requests.exceptions.ConnectionError:
        return False, "Connection Error"
    except requests.exceptions.RequestException as e:
        return False, f"Error: {e}"
    if response.status_code != 200:
        return False, f"HTTP {response.status_code}"
    return True, "Success"
