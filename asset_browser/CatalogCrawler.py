"""
Catalog Crawler for remote directory-listing asset stores.

Discovers a two-level catalog (folder -> image files) under a browse root:
- Fetches the root listing through the gateway proxy
- Treats dot-less hrefs as folders
- Fetches each folder's listing, one folder at a time, and keeps image hrefs

Crawl depth is fixed at root -> folder -> files; nested folders are never
followed, so a crawl issues exactly 1 + (number of folders) fetches.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from asset_browser.GatewayClient import GatewayClient
from asset_browser.ListingParser import folder_names, leaf_names, parse_listing
from utils.Errors import GatewayError, record_warning
from utils.Logger import Logger
from utils.url_utils import ensure_trailing_slash, join_asset_url, join_listing_url


@dataclass
class Catalog:
    """Folder name -> ordered leaf file names, in the order the remote server listed them."""

    browse_root: str
    folders: Dict[str, List[str]] = field(default_factory=dict)

    def asset_url(self, folder: str, file_name: str) -> str:
        """Absolute remote URL of file_name in folder."""
        return join_asset_url(self.browse_root, folder, file_name)

    def non_empty_folders(self) -> Dict[str, List[str]]:
        """Folders with at least one leaf (for UIs that hide empty folders)."""
        return {name: files for name, files in self.folders.items() if files}

    def to_dict(self) -> Dict[str, List[str]]:
        """Plain folder -> files mapping (copy)."""
        return {name: list(files) for name, files in self.folders.items()}


class CatalogCrawler:
    """Builds a Catalog by crawling listing pages through a GatewayClient."""

    def __init__(self, client: GatewayClient) -> None:
        self._client = client

    def crawl(self, browse_root: str) -> Catalog:
        """
        Crawl browse_root and return its catalog.

        A folder whose listing cannot be fetched is logged and left out; a folder
        whose listing has no images is kept with an empty list.

        Args:
            browse_root: URL of the remote directory listing to start from.

        Returns:
            Catalog for browse_root.

        Raises:
            GatewayError: If the root listing cannot be fetched.
        """
        root = ensure_trailing_slash(browse_root)
        Logger.info(f"Crawling {root}")
        root_html = self._client.fetch_text(root)
        folders = folder_names(parse_listing(root_html))
        Logger.debug(f"Found {len(folders)} folder(s) under {root}")

        catalog = Catalog(browse_root=root)
        for folder in folders:
            listing_url = join_listing_url(root, folder)
            try:
                html = self._client.fetch_text(listing_url)
            except GatewayError as exc:
                record_warning(f"Skipping folder {folder}", str(exc))
                continue
            catalog.folders[folder] = leaf_names(html)

        total = sum(len(files) for files in catalog.folders.values())
        Logger.info(f"Catalog for {root}: {len(catalog.folders)} folder(s), {total} file(s)")
        return catalog
