"""
Quality Preset Manager - named simulation/rendering cost bundles.

Exactly one preset is active at a time. Switching presets reheats the
layout simulation but never touches an in-flight camera animation.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from ..domain.enums import QualityMode
from ..ports.layout_port import LayoutPort, SimulationParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QualityPreset:
    """Immutable quality configuration."""
    mode: QualityMode
    dpr: Tuple[float, float]          # Device pixel ratio range
    antialias: bool
    node_resolution: int              # Sphere segments
    link_resolution: int              # Cylinder segments
    cooldown_ticks: int
    cooldown_time: int                # ms
    charge_strength: float
    charge_distance_max: float
    link_distance_base: float
    link_distance_scale: float
    directional_particles_idle: int
    directional_particles_highlight: int
    sparkles_count: int
    sparkles_size: float
    hide_inactive: bool               # Visibility culling of unfocused nodes

    def simulation_params(self) -> SimulationParams:
        """Parameters handed to the layout service on reheat."""
        return SimulationParams(
            charge_strength=self.charge_strength,
            charge_distance_max=self.charge_distance_max,
            link_distance_base=self.link_distance_base,
            link_distance_scale=self.link_distance_scale,
            cooldown_ticks=self.cooldown_ticks,
            cooldown_time=self.cooldown_time,
        )


QUALITY_PRESETS: Dict[QualityMode, QualityPreset] = {
    QualityMode.HIGH: QualityPreset(
        mode=QualityMode.HIGH,
        dpr=(1.0, 2.0),
        antialias=True,
        node_resolution=16,
        link_resolution=8,
        cooldown_ticks=220,
        cooldown_time=15000,
        charge_strength=-95.0,
        charge_distance_max=520.0,
        link_distance_base=24.0,
        link_distance_scale=10.0,
        directional_particles_idle=2,
        directional_particles_highlight=6,
        sparkles_count=120,
        sparkles_size=2.4,
        hide_inactive=False,
    ),
    QualityMode.BALANCED: QualityPreset(
        mode=QualityMode.BALANCED,
        dpr=(1.0, 1.5),
        antialias=True,
        node_resolution=10,
        link_resolution=6,
        cooldown_ticks=160,
        cooldown_time=10000,
        charge_strength=-80.0,
        charge_distance_max=420.0,
        link_distance_base=26.0,
        link_distance_scale=9.0,
        directional_particles_idle=1,
        directional_particles_highlight=4,
        sparkles_count=60,
        sparkles_size=2.0,
        hide_inactive=False,
    ),
    QualityMode.PERFORMANCE: QualityPreset(
        mode=QualityMode.PERFORMANCE,
        dpr=(1.0, 1.0),
        antialias=False,
        node_resolution=6,
        link_resolution=3,
        cooldown_ticks=90,
        cooldown_time=6000,
        charge_strength=-60.0,
        charge_distance_max=320.0,
        link_distance_base=28.0,
        link_distance_scale=8.0,
        directional_particles_idle=0,
        directional_particles_highlight=2,
        sparkles_count=0,
        sparkles_size=0.0,
        hide_inactive=True,
    ),
}

DEFAULT_QUALITY_MODE = QualityMode.BALANCED


@dataclass(frozen=True)
class DensePolicy:
    """
    Ceilings applied to the active preset once the graph is dense.

    Values only ever lower the preset's cost; a preset already cheaper than
    a ceiling keeps its own value.
    """
    node_threshold: int = 600
    max_cooldown_ticks: int = 80
    max_cooldown_time: int = 5000
    max_particles_idle: int = 0
    max_particles_highlight: int = 2

    def is_dense(self, node_count: int) -> bool:
        return node_count > self.node_threshold

    def apply(self, preset: QualityPreset) -> QualityPreset:
        return replace(
            preset,
            cooldown_ticks=min(preset.cooldown_ticks, self.max_cooldown_ticks),
            cooldown_time=min(preset.cooldown_time, self.max_cooldown_time),
            directional_particles_idle=min(
                preset.directional_particles_idle, self.max_particles_idle
            ),
            directional_particles_highlight=min(
                preset.directional_particles_highlight, self.max_particles_highlight
            ),
        )


def resolve_mode(name) -> Optional[QualityMode]:
    """Map a preset name to a registered mode, or None."""
    try:
        mode = QualityMode(name)
    except ValueError:
        return None
    return mode if mode in QUALITY_PRESETS else None


class QualityManager:
    """
    Holds the active preset and applies the dense-graph override.

    Args:
        layout: Layout service to reheat on preset changes (optional)
        mode: Initial preset name
        dense_policy: Override applied when node_count exceeds its threshold
    """

    def __init__(
        self,
        layout: Optional[LayoutPort] = None,
        mode: str = DEFAULT_QUALITY_MODE.value,
        dense_policy: Optional[DensePolicy] = None,
    ):
        self._layout = layout
        self._mode = resolve_mode(mode) or DEFAULT_QUALITY_MODE
        self._dense_policy = dense_policy or DensePolicy()
        self.node_count = 0

    @property
    def mode(self) -> QualityMode:
        return self._mode

    @property
    def preset(self) -> QualityPreset:
        """The registered preset, without the dense override."""
        return QUALITY_PRESETS[self._mode]

    @property
    def dense_policy(self) -> DensePolicy:
        return self._dense_policy

    @property
    def is_dense(self) -> bool:
        return self._dense_policy.is_dense(self.node_count)

    def effective_preset(self) -> QualityPreset:
        """The active preset after the dense-graph override."""
        if self.is_dense:
            return self._dense_policy.apply(self.preset)
        return self.preset

    def set_quality(self, name) -> bool:
        """
        Switch the active preset.

        Returns:
            True if `name` is registered; False leaves the preset unchanged
        """
        mode = resolve_mode(name)
        if mode is None:
            logger.warning("Unknown quality preset %r; keeping %s", name, self._mode.value)
            return False

        self._mode = mode
        logger.info("Quality preset set to %s", mode.value)
        if self._layout is not None:
            self._layout.reheat(self.effective_preset().simulation_params())
        return True
