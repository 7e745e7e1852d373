from __future__ import annotations

from random import Random
from typing import Any, Mapping

from lagom import Container, Singleton

from canopy.animation.animator import GrowthAnimator
from canopy.animation.settings import AnimationSettings, ParticleSettings
from canopy.generation.geometry import SurfaceSize
from canopy.generation.pipeline import default_surface
from canopy.runtime.frame_source import FrameSource
from canopy.utilities.frame_logging import FrameLogSampler
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

GrowthContainer = Container


def _build_frame_source(_: GrowthContainer) -> FrameSource:
    return FrameSource()


def _build_animation_settings(_: GrowthContainer) -> AnimationSettings:
    return AnimationSettings.from_env()


def _build_particle_settings(_: GrowthContainer) -> ParticleSettings:
    return ParticleSettings.from_env()


def _build_surface(_: GrowthContainer) -> SurfaceSize:
    return default_surface()


def _build_log_sampler(_: GrowthContainer) -> FrameLogSampler:
    return FrameLogSampler.from_env()


def _build_growth_animator(resolver: GrowthContainer) -> GrowthAnimator:
    return GrowthAnimator(
        frame_source=resolver[FrameSource],
        settings=resolver[AnimationSettings],
        particle_settings=resolver[ParticleSettings],
        surface=resolver[SurfaceSize],
        rng=resolver[Random],
        log_sampler=resolver[FrameLogSampler],
    )


def _bind(
    container: GrowthContainer,
    overrides: Mapping[type[Any], object] | None,
    key: type[Any],
    value: object,
) -> None:
    if overrides and key in overrides:
        container[key] = overrides[key]
        logger.debug("Applied Lagom override for %s.", key)
        return
    container[key] = value


def build_growth_container(
    overrides: Mapping[type[Any], object] | None = None,
) -> GrowthContainer:
    """Wire the frame source, settings and animator as shared singletons."""

    container = GrowthContainer()
    _bind(container, overrides, Random, Singleton(lambda: Random()))
    _bind(container, overrides, SurfaceSize, Singleton(_build_surface))
    _bind(container, overrides, FrameSource, Singleton(_build_frame_source))
    _bind(container, overrides, FrameLogSampler, Singleton(_build_log_sampler))
    _bind(
        container, overrides, AnimationSettings, Singleton(_build_animation_settings)
    )
    _bind(
        container, overrides, ParticleSettings, Singleton(_build_particle_settings)
    )
    _bind(container, overrides, GrowthAnimator, Singleton(_build_growth_animator))
    logger.debug(
        "Built growth container with overrides=%s.",
        set(overrides.keys()) if overrides else set(),
    )
    return container
