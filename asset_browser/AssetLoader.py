"""
Selection/Load bridge: folder + file choice -> texture on the material.

Builds the remote asset URL, fetches the bytes through the gateway proxy,
decodes them with Pillow and hands the result to the rendering collaborator
with repeat wrapping on both axes and the kind's color space.
"""

from io import BytesIO
from typing import Any, Optional

from PIL import Image, UnidentifiedImageError

from asset_browser.AssetKinds import AssetKindSpec, MaterialSlot
from asset_browser.CatalogCrawler import Catalog
from asset_browser.GatewayClient import GatewayClient
from asset_browser.RenderingProtocol import (
    REPEAT_WRAPPING,
    RenderingCollaborator,
    SamplingOptions,
    Texture,
)
from utils.Errors import GatewayError, record_error
from utils.Logger import Logger


def decode_image(data: bytes) -> Image.Image:
    """
    Decode image bytes into a fully loaded Pillow image.

    Raises:
        ValueError: If data is not a decodable image.
    """
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ValueError(f"Not a decodable image: {exc}") from exc
    return image


class AssetLoader:
    """Loads selected catalog entries into one material slot."""

    def __init__(
        self,
        client: GatewayClient,
        rendering: RenderingCollaborator,
        spec: AssetKindSpec,
    ) -> None:
        self._client = client
        self._rendering = rendering
        self._spec = spec

    @property
    def slot(self) -> MaterialSlot:
        return self._spec.slot

    def sampling_options(self) -> SamplingOptions:
        """Fixed sampling directives for this kind."""
        return SamplingOptions(
            wrap_s=REPEAT_WRAPPING,
            wrap_t=REPEAT_WRAPPING,
            color_space=self._spec.color_space,
            flip_y=True,
        )

    def fetch_texture(self, catalog: Catalog, folder: str, file_name: str) -> Texture:
        """
        Fetch and decode one asset without applying it.

        Raises:
            GatewayError: If the bytes cannot be fetched.
            ValueError: If the bytes are not an image.
        """
        url = catalog.asset_url(folder, file_name)
        data = self._client.fetch_bytes(url)
        image = decode_image(data)
        return Texture(
            image=image,
            name=file_name,
            options=self.sampling_options(),
            source_url=url,
        )

    def try_fetch(self, catalog: Catalog, folder: str, file_name: str) -> Optional[Texture]:
        """Like fetch_texture, but fetch and decode failures are logged and return None."""
        try:
            return self.fetch_texture(catalog, folder, file_name)
        except (GatewayError, ValueError) as exc:
            record_error(f"Loading {folder}/{file_name}", str(exc))
            return None

    def load(self, catalog: Catalog, folder: str, file_name: str, material: Any) -> Optional[Texture]:
        """
        Fetch folder/file_name and apply it to material.

        Failures are logged and return None so one bad file does not end the session.
        """
        texture = self.try_fetch(catalog, folder, file_name)
        if texture is None or not self.apply(material, texture):
            return None
        return texture

    def apply(self, material: Any, texture: Texture) -> bool:
        """
        Hand texture to the rendering collaborator for this kind's slot.

        Returns:
            False if the material has no such slot or uniform; the error is logged.
        """
        try:
            self._rendering.apply_asset(material, self._spec.slot, texture, texture.options)
        except (KeyError, AttributeError, TypeError) as exc:
            record_error(f"Applying {texture.name} to {self._spec.slot}", str(exc))
            return False
        Logger.info(f"Applied {texture.name} to {self._spec.slot}")
        return True
