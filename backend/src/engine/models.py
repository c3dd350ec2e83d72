"""Pattern data model — identities, config, and the generated artifact.

Everything here is frozen. A WavePattern held by the cache is shared with
every caller that hits it, so its collections are tuples.
"""

import json
from dataclasses import asdict, dataclass

from engine.determinism import identity_key

DEFAULT_MAX_ELEMENTS = 60

_CONFIG_ALIASES = {
    "maxElements": "max_elements",
    "enableGradients": "enable_gradients",
    "simplifyPaths": "simplify_paths",
}


@dataclass(frozen=True)
class Identity:
    creator_name: str
    item_title: str
    year: str | None = None

    @property
    def key(self) -> str:
        return identity_key(self.creator_name, self.item_title, self.year)


@dataclass(frozen=True)
class PatternConfig:
    """Caller-supplied generation knobs. Part of the cache key."""

    max_elements: int = DEFAULT_MAX_ELEMENTS
    enable_gradients: bool = False
    simplify_paths: bool = True

    @classmethod
    def from_dict(cls, data: dict | None) -> "PatternConfig":
        """Build from snake_case or camelCase keys; unknown keys are ignored."""
        if not data:
            return cls()
        kwargs = {}
        for key, value in data.items():
            name = _CONFIG_ALIASES.get(key, key)
            if name in cls.__dataclass_fields__:
                kwargs[name] = value
        if "max_elements" in kwargs:
            kwargs["max_elements"] = int(kwargs["max_elements"])
        for flag in ("enable_gradients", "simplify_paths"):
            if flag in kwargs:
                kwargs[flag] = bool(kwargs[flag])
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return asdict(self)

    def cache_token(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


@dataclass(frozen=True)
class ColorScheme:
    name: str
    background_color: str
    accent_color: str
    base_opacity: float = 1.0


@dataclass(frozen=True)
class GradientStop:
    offset: str
    color: str
    opacity: float


@dataclass(frozen=True)
class GradientDef:
    id: str
    x1: str
    y1: str
    x2: str
    y2: str
    stops: tuple[GradientStop, ...]
    kind: str = "linear"

    @property
    def url(self) -> str:
        return f"url(#{self.id})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
            "stops": [asdict(s) for s in self.stops],
        }


@dataclass(frozen=True)
class PatternElement:
    path_data: str
    stroke: str
    stroke_width: float
    fill: str = "none"
    opacity: float = 1.0

    def to_dict(self) -> dict:
        return {
            "d": self.path_data,
            "stroke": self.stroke,
            "strokeWidth": self.stroke_width,
            "fill": self.fill,
            "opacity": self.opacity,
        }


@dataclass(frozen=True)
class WavePattern:
    background_color: str
    elements: tuple[PatternElement, ...] = ()
    gradients: tuple[GradientDef, ...] = ()

    def to_dict(self) -> dict:
        return {
            "gradients": [g.to_dict() for g in self.gradients],
            "elements": [e.to_dict() for e in self.elements],
            "backgroundColor": self.background_color,
        }

    def to_json(self) -> str:
        """Canonical serialization; byte-identical for identical patterns."""
        return json.dumps(self.to_dict(), separators=(",", ":"))


@dataclass(frozen=True)
class PatternMeta:
    algorithm_id: str
    algorithm_name: str
    algorithm_index: int
    palette_name: str
    element_count: int
    seed: int

    def to_dict(self) -> dict:
        return {
            "algorithm_id": self.algorithm_id,
            "algorithm_name": self.algorithm_name,
            "algorithm_index": self.algorithm_index,
            "palette_name": self.palette_name,
            "element_count": self.element_count,
            "seed": self.seed,
        }
