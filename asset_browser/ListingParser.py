"""
Listing Parser for directory-listing HTML pages.

Turns the HTML index page that a plain file server (Apache/nginx autoindex,
PHP directory listers) generates for a folder into the ordered list of entries
it links to. The filtering rules are a fixed contract with those servers,
whose output format we do not control:

- hrefs starting with "?" are sort/filter controls (e.g. "?C=N;O=D") and are skipped
- hrefs containing ";" are session or sort parameters and are skipped
- "index.php" / "index.html" link back to the lister itself and are skipped
- an href without "." is a folder (trailing "/" stripped)
- an href ending with a known image suffix is a leaf asset
"""

from typing import Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup

from utils.Logger import Logger

IMAGE_SUFFIXES = (".jpg", ".png", ".webp")

_EXCLUDED_NAMES = frozenset({"index.php", "index.html"})


def is_excluded_href(href: str) -> bool:
    """Return True for hrefs that are listing controls rather than entries."""
    return href.startswith("?") or ";" in href or href in _EXCLUDED_NAMES


def is_folder_href(href: str) -> bool:
    """Return True if href names a folder: not excluded and contains no dot."""
    return bool(href) and not is_excluded_href(href) and "." not in href


def parse_listing(html: str, suffixes: Optional[Sequence[str]] = None) -> List[str]:
    """
    Return href values of anchor elements, in document order.

    Never raises: malformed or non-HTML input yields whatever anchors could be
    recovered, and an unexpected parser failure yields an empty list.

    Args:
        html: Listing page HTML.
        suffixes: If given, keep only hrefs ending with one of these (case-sensitive).

    Returns:
        List of href strings.

    Example:
        >>> parse_listing('<a href="01.png">1</a><a href="readme.txt">r</a>', IMAGE_SUFFIXES)
        ['01.png']
    """
    if not html:
        return []
    try:
        soup = BeautifulSoup(html, "html.parser")
        anchors = soup.find_all("a", href=True)
    except Exception as exc:
        Logger.warning(f"Could not parse directory listing: {exc}")
        return []

    hrefs: List[str] = []
    for anchor in anchors:
        href = str(anchor.get("href") or "").strip()
        if not href or is_excluded_href(href):
            continue
        if suffixes and not href.endswith(tuple(suffixes)):
            continue
        hrefs.append(href)
    return hrefs


def folder_names(hrefs: Iterable[str]) -> List[str]:
    """
    Return folder names from listing hrefs: no dot, trailing slash stripped, first occurrence kept.

    Example:
        >>> folder_names(["red/", "index.php", "blue", "../", "01.png", "red/"])
        ['red', 'blue']
    """
    names: List[str] = []
    seen = set()
    for href in hrefs:
        if not is_folder_href(href):
            continue
        name = href.rstrip("/")
        if not name or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


def leaf_names(html: str) -> List[str]:
    """Return image file hrefs (.jpg/.png/.webp) from a folder listing page."""
    return parse_listing(html, IMAGE_SUFFIXES)
