"""
Browse session: one catalog, one material, one asset kind.

A session is an explicit handle owned by the caller (usually the UI panel for
one material). open() crawls the remote store from zero and publishes the
catalog; select() is the UI's "asset selected" event; save_current() persists
the texture currently on the material through the gateway; dispose() releases
the catalog. Work that completes after dispose() (a crawl or load running in
another thread) is dropped instead of being applied.
"""

import base64
import time
from io import BytesIO
from typing import Any, Callable, Dict, Mapping, Optional

from asset_browser.AssetKinds import AssetKind, AssetKindSpec, resolve_spec
from asset_browser.AssetLoader import AssetLoader
from asset_browser.CatalogCrawler import Catalog, CatalogCrawler
from asset_browser.GatewayClient import GatewayClient
from asset_browser.RenderingProtocol import MaterialSlotAssigner, RenderingCollaborator, Texture
from utils.Errors import GatewayError, record_error
from utils.Logger import Logger

CatalogListener = Callable[[Catalog], None]


def texture_to_data_uri(texture: Texture) -> str:
    """Encode the texture image as a data:image/png;base64 URI."""
    buffer = BytesIO()
    texture.image.save(buffer, format="PNG")
    payload = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{payload}"


class BrowseSession:
    """Catalog + selection + save for one material slot."""

    def __init__(
        self,
        client: GatewayClient,
        material: Any,
        kind: str = AssetKind.MATCAP.value,
        *,
        rendering: Optional[RenderingCollaborator] = None,
        uniform: Optional[str] = None,
        texture_base_url: Optional[str] = None,
        browse_root: Optional[str] = None,
        specs: Optional[Mapping[AssetKind, AssetKindSpec]] = None,
        on_catalog_ready: Optional[CatalogListener] = None,
        is_production: bool = False,
    ) -> None:
        """
        Args:
            client: Gateway client used for every remote request.
            material: Opaque material that receives loaded textures.
            kind: Asset kind name (matcap, map, normalMap).
            rendering: Rendering collaborator; MaterialSlotAssigner if None.
            uniform: Route textures to this shader uniform instead of the kind's slot.
            texture_base_url: Remote store root; the kind's browse path is appended.
            browse_root: Explicit listing URL; takes precedence over texture_base_url.
            specs: Asset kind specs (from Args.asset_kind_specs); defaults if None.
            on_catalog_ready: Called with the catalog after each successful open().
            is_production: When True the session never crawls.

        Raises:
            ValueError: If kind is not supported.
        """
        self._client = client
        self._material = material
        self._spec = resolve_spec(kind, uniform, specs)
        self._texture_base_url = texture_base_url
        self._browse_root = browse_root
        self._on_catalog_ready = on_catalog_ready
        self._is_production = is_production
        self._crawler = CatalogCrawler(client)
        self._loader = AssetLoader(client, rendering or MaterialSlotAssigner(), self._spec)
        self._catalog: Optional[Catalog] = None
        self._current: Optional[Texture] = None
        self._disposed = False

    @classmethod
    def from_args(
        cls,
        material: Any,
        *,
        rendering: Optional[RenderingCollaborator] = None,
        on_catalog_ready: Optional[CatalogListener] = None,
    ) -> "BrowseSession":
        """Build a session from the initialized Args."""
        from utils.Args import Args

        return cls(
            GatewayClient.from_args(),
            material,
            Args.asset_kind,
            rendering=rendering,
            uniform=Args.uniform,
            texture_base_url=Args.texture_base_url,
            browse_root=Args.browse_root,
            specs=Args.asset_kind_specs,
            on_catalog_ready=on_catalog_ready,
            is_production=bool(Args.is_production),
        )

    @property
    def kind(self) -> AssetKind:
        return self._spec.kind

    @property
    def spec(self) -> AssetKindSpec:
        return self._spec

    @property
    def catalog(self) -> Optional[Catalog]:
        return self._catalog

    @property
    def current_texture(self) -> Optional[Texture]:
        return self._current

    @property
    def disposed(self) -> bool:
        return self._disposed

    def resolve_browse_root(self, browse_root: Optional[str] = None) -> str:
        """
        Return the listing URL to crawl.

        Raises:
            ValueError: If neither a browse root nor a texture base URL is configured.
        """
        root = browse_root or self._browse_root
        if root:
            return root
        if self._texture_base_url:
            return self._spec.browse_root(self._texture_base_url)
        raise ValueError("No browse root: set browse_root or texture_base_url")

    def open(self, browse_root: Optional[str] = None) -> Optional[Catalog]:
        """
        Crawl the browse root from zero and publish the catalog.

        Returns:
            The new catalog, or None in production mode or if the session was
            disposed while crawling.

        Raises:
            RuntimeError: If the session is already disposed.
            GatewayError: If the root listing cannot be fetched.
        """
        if self._disposed:
            raise RuntimeError("Browse session has been disposed")
        if self._is_production:
            Logger.debug("Texture browser disabled in production")
            return None

        root = self.resolve_browse_root(browse_root)
        self._browse_root = root
        self._catalog = None
        with Logger.scope(self._spec.kind.value):
            catalog = self._crawler.crawl(root)

        if self._disposed:
            Logger.debug(f"Dropping catalog for {root}: session disposed")
            return None
        self._catalog = catalog
        if self._on_catalog_ready is not None:
            self._on_catalog_ready(catalog)
        return catalog

    def select(self, folder: str, file_name: str) -> Optional[Texture]:
        """
        Load folder/file_name from the current catalog onto the material.

        Returns:
            The applied texture, or None if nothing was applied.
        """
        if self._catalog is None:
            record_error("select", "No catalog loaded; call open() first")
            return None
        texture = self._loader.try_fetch(self._catalog, folder, file_name)
        if texture is None:
            return None
        if self._disposed:
            Logger.debug(f"Dropping {folder}/{file_name}: session disposed")
            return None
        if not self._loader.apply(self._material, texture):
            return None
        self._current = texture
        return texture

    def save_current(self, file_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Persist the texture currently on the material through the gateway.

        The file lands in "downloaded-<kind>" under the server's target folder.
        Textures that came from the remote store are sent by URL (the server
        refetches them); others are sent inline as a PNG data URI.

        Args:
            file_name: File name without extension; "<kind>-<epoch ms>" if empty.

        Returns:
            The server's payload, or {"success": False, "error": ...} on failure.
        """
        texture = self._current
        if texture is None:
            record_error("save", "No texture found on the material")
            return {"success": False, "error": "No texture loaded"}

        kind = self._spec.kind.value
        name = file_name or f"{kind}-{int(time.time() * 1000)}"
        image_url = texture.source_url or texture_to_data_uri(texture)
        try:
            result = self._client.save_asset(f"downloaded-{kind}", name, image_url)
        except GatewayError as exc:
            record_error("save", str(exc))
            return {"success": False, "error": str(exc)}

        if result.get("success"):
            Logger.info(f"Texture saved as {name}")
        else:
            record_error("save", f"Error saving image: {result.get('error')}")
        return result

    def dispose(self) -> None:
        """Release the catalog; later results from in-flight work are dropped."""
        self._disposed = True
        self._catalog = None
        self._current = None

    def __enter__(self) -> "BrowseSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
