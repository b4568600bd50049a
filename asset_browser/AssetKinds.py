"""
Supported asset kinds and the material slot each one feeds.

Each kind is a closed enum member with a fixed spec (browse path under the
remote store, target material slot, color space). A slot is either a direct
material property (material.matcap = texture) or a named shader uniform
(material.uniforms["uMatcapMap"].value = texture); the choice is made once
when the kind spec is resolved, not per load.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

SRGB_COLOR_SPACE = "srgb"


@dataclass(frozen=True)
class DirectSlot:
    """Texture is assigned to a material property, e.g. material.matcap."""

    name: str


@dataclass(frozen=True)
class NamedUniform:
    """Texture is assigned to material.uniforms[name].value."""

    name: str


MaterialSlot = Union[DirectSlot, NamedUniform]


class AssetKind(str, Enum):
    """Asset kinds the browser can load; the value is the material property name."""

    MATCAP = "matcap"
    MAP = "map"
    NORMAL_MAP = "normalMap"

    @classmethod
    def parse(cls, value: Union[str, "AssetKind"]) -> "AssetKind":
        """
        Return the kind named by value.

        Raises:
            ValueError: If value is not a supported kind.
        """
        if isinstance(value, AssetKind):
            return value
        for kind in cls:
            if kind.value == value:
                return kind
        valid = ", ".join(kind.value for kind in cls)
        raise ValueError(f"Invalid asset kind {value!r}. Valid: {valid}")


@dataclass(frozen=True)
class AssetKindSpec:
    """Fixed attributes of an asset kind."""

    kind: AssetKind
    browse_path: str
    slot: MaterialSlot
    color_space: Optional[str] = None

    def with_uniform(self, uniform: Optional[str]) -> "AssetKindSpec":
        """Return a copy whose slot is the named uniform (unchanged when uniform is empty)."""
        if not uniform:
            return self
        return replace(self, slot=NamedUniform(uniform))

    def browse_root(self, texture_base_url: str) -> str:
        """Return the remote listing URL for this kind under texture_base_url."""
        path = self.browse_path.strip("/")
        base = texture_base_url.rstrip("/")
        return f"{base}/{path}/" if path else f"{base}/"


DEFAULT_SPECS: Dict[AssetKind, AssetKindSpec] = {
    AssetKind.MATCAP: AssetKindSpec(
        kind=AssetKind.MATCAP,
        browse_path="/512/webp/",
        slot=DirectSlot("matcap"),
        color_space=SRGB_COLOR_SPACE,
    ),
    AssetKind.MAP: AssetKindSpec(
        kind=AssetKind.MAP,
        browse_path="/",
        slot=DirectSlot("map"),
        color_space=SRGB_COLOR_SPACE,
    ),
    # Normal maps hold vectors, not colors: no color-space tag.
    AssetKind.NORMAL_MAP: AssetKindSpec(
        kind=AssetKind.NORMAL_MAP,
        browse_path="/",
        slot=DirectSlot("normalMap"),
        color_space=None,
    ),
}

_OVERRIDE_FIELDS = frozenset({"browse_path", "uniform", "color_space"})


def load_asset_kind_specs(overrides: Mapping[str, Mapping[str, Any]]) -> Dict[AssetKind, AssetKindSpec]:
    """
    Merge config-file overrides into the default specs.

    Args:
        overrides: {kind name: {"browse_path"?, "uniform"?, "color_space"?}}

    Returns:
        Spec for every kind.

    Raises:
        ValueError: On an unknown kind, an unknown field, or a non-string value.
    """
    if not isinstance(overrides, Mapping):
        raise ValueError("asset_kinds must be a JSON object keyed by asset kind")
    specs = dict(DEFAULT_SPECS)
    for name, fields in overrides.items():
        kind = AssetKind.parse(name)
        if not isinstance(fields, Mapping):
            raise ValueError(f"asset_kinds.{name} must be a JSON object")
        unknown = set(fields) - _OVERRIDE_FIELDS
        if unknown:
            raise ValueError(f"asset_kinds.{name}: unknown field(s) {', '.join(sorted(unknown))}")
        for key, value in fields.items():
            if value is not None and not isinstance(value, str):
                raise ValueError(f"asset_kinds.{name}.{key} must be a string")
        spec = specs[kind]
        if fields.get("browse_path"):
            spec = replace(spec, browse_path=fields["browse_path"])
        if "color_space" in fields:
            spec = replace(spec, color_space=fields["color_space"] or None)
        spec = spec.with_uniform(fields.get("uniform"))
        specs[kind] = spec
    return specs


def resolve_spec(
    kind: Union[str, AssetKind],
    uniform: Optional[str] = None,
    specs: Optional[Mapping[AssetKind, AssetKindSpec]] = None,
) -> AssetKindSpec:
    """
    Return the kind spec for kind, routed to uniform when one is given.

    Raises:
        ValueError: If kind is not supported.
    """
    asset_kind = AssetKind.parse(kind)
    table = specs if specs is not None else DEFAULT_SPECS
    return table[asset_kind].with_uniform(uniform)
