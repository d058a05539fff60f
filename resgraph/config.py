"""
Layout and propagation settings.

The demo pages this project grew out of were near copies of each other that
differed only in a handful of knobs: directed or not, whether edge distances
are rescaled, whether small distance errors are ignored, the step size, and
whether nodes are clamped to the canvas. Those knobs live here.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

# ------------------------------
# Defaults
# ------------------------------
DEFAULT_WEIGHT = 1.0
DEFAULT_DISTANCE = 30.0
DEFAULT_STEP_SIZE = 0.001
CANVAS_WIDTH = 800.0
CANVAS_HEIGHT = 600.0
NODE_RADIUS = 8.0

DEGENERATE_RAISE = "raise"
DEGENERATE_NAN = "nan"
DEGENERATE_POLICIES = (DEGENERATE_RAISE, DEGENERATE_NAN)


@dataclass(frozen=True)
class Bounds:
    """Visible area nodes are clamped into, inset by the node radius."""
    width: float = CANVAS_WIDTH
    height: float = CANVAS_HEIGHT
    radius: float = NODE_RADIUS

    def __post_init__(self):
        if self.width <= 2 * self.radius or self.height <= 2 * self.radius:
            raise ValueError(
                f"bounds {self.width}x{self.height} leave no room for radius {self.radius}"
            )

    def clamp(self, x: float, y: float):
        x = max(self.radius, min(self.width - self.radius, x))
        y = max(self.radius, min(self.height - self.radius, y))
        return x, y


@dataclass(frozen=True)
class LayoutConfig:
    directed: bool = False
    distance_scale_target: Optional[float] = None
    dead_band: Optional[float] = None
    step_size: float = DEFAULT_STEP_SIZE
    bounds: Optional[Bounds] = None
    canvas_width: float = CANVAS_WIDTH
    canvas_height: float = CANVAS_HEIGHT
    degenerate_policy: str = DEGENERATE_RAISE

    def __post_init__(self):
        if self.step_size <= 0:
            raise ValueError(f"step_size must be positive, got {self.step_size}")
        if self.dead_band is not None and self.dead_band < 0:
            raise ValueError(f"dead_band must be non-negative, got {self.dead_band}")
        if self.distance_scale_target is not None and self.distance_scale_target <= 0:
            raise ValueError(
                f"distance_scale_target must be positive, got {self.distance_scale_target}"
            )
        if self.degenerate_policy not in DEGENERATE_POLICIES:
            raise ValueError(
                f"degenerate_policy must be one of {DEGENERATE_POLICIES}, "
                f"got {self.degenerate_policy!r}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LayoutConfig":
        """
        Build a config from plain JSON-like data.

        `bounds` may be a mapping with width/height/radius. Unknown keys are
        logged and ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("ignoring unknown layout setting %r", key)
                continue
            kwargs[key] = value
        bounds = kwargs.get("bounds")
        if isinstance(bounds, Mapping):
            kwargs["bounds"] = Bounds(**bounds)
        return cls(**kwargs)


# ----------- Demo variants -----------
PRESETS: Dict[str, LayoutConfig] = {
    # free layout, nodes may drift off screen
    "basic": LayoutConfig(),
    # nodes kept inside the canvas, small errors ignored
    "clamped": LayoutConfig(bounds=Bounds(), dead_band=0.1),
    # distances rescaled to a mean of 60 units
    "scaled": LayoutConfig(bounds=Bounds(), distance_scale_target=60.0, dead_band=0.1),
    # unbounded, for renderers with their own zoom/pan transform
    "camera": LayoutConfig(distance_scale_target=50.0, dead_band=0.1),
}


def get_preset(name: str) -> LayoutConfig:
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"unknown preset {name!r}; choose from {', '.join(sorted(PRESETS))}"
        ) from None
