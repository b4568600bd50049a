"""
Rendering collaborator interface.

The browser hands decoded textures to whatever renders them through
apply_asset(); it never reaches further into the material than assigning a
texture to one slot. MaterialSlotAssigner is the default implementation for
material objects that expose slots as attributes (or mapping keys) and shader
uniforms as material.uniforms[name].value.
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from PIL import Image

from asset_browser.AssetKinds import DirectSlot, MaterialSlot, NamedUniform

REPEAT_WRAPPING = "repeat"


@dataclass(frozen=True)
class SamplingOptions:
    """Wrap and color-space directives that travel with a texture."""

    wrap_s: str = REPEAT_WRAPPING
    wrap_t: str = REPEAT_WRAPPING
    color_space: Optional[str] = None
    flip_y: bool = True


@dataclass
class Texture:
    """A decoded image plus the sampling options it should be rendered with."""

    image: Image.Image
    name: str
    options: SamplingOptions
    source_url: Optional[str] = None

    @property
    def wrap_s(self) -> str:
        return self.options.wrap_s

    @property
    def wrap_t(self) -> str:
        return self.options.wrap_t

    @property
    def color_space(self) -> Optional[str]:
        return self.options.color_space


class RenderingCollaborator(Protocol):
    """
    Protocol for the system that consumes loaded textures.

    Any class implementing this protocol must provide apply_asset().
    """

    def apply_asset(
        self,
        material: Any,
        slot: MaterialSlot,
        texture: Texture,
        options: SamplingOptions,
    ) -> None:
        """
        Assign texture to slot on material.

        Args:
            material: Opaque material object owned by the renderer.
            slot: DirectSlot (material property) or NamedUniform (shader uniform).
            texture: Decoded texture.
            options: Wrap/color-space directives to apply.
        """
        ...


class MaterialSlotAssigner:
    """Default RenderingCollaborator: plain assignment onto the material."""

    def apply_asset(
        self,
        material: Any,
        slot: MaterialSlot,
        texture: Texture,
        options: SamplingOptions,
    ) -> None:
        texture.options = options
        if isinstance(slot, NamedUniform):
            self._assign_uniform(material, slot.name, texture)
        elif isinstance(slot, DirectSlot):
            if isinstance(material, dict):
                material[slot.name] = texture
            else:
                setattr(material, slot.name, texture)
        else:
            raise TypeError(f"Unsupported material slot: {slot!r}")

    @staticmethod
    def _assign_uniform(material: Any, name: str, texture: Texture) -> None:
        uniforms = material["uniforms"] if isinstance(material, dict) else getattr(material, "uniforms")
        if name not in uniforms:
            raise KeyError(f"Material has no uniform {name!r}")
        uniform = uniforms[name]
        if isinstance(uniform, dict):
            uniform["value"] = texture
        else:
            uniform.value = texture
