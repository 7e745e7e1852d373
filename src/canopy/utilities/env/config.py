from canopy.utilities.env.diagnostics import DiagnosticsConfiguration
from canopy.utilities.env.growth import GrowthConfiguration
from canopy.utilities.env.particles import ParticleConfiguration
from canopy.utilities.env.surface import SurfaceConfiguration


class Configuration(
    SurfaceConfiguration,
    GrowthConfiguration,
    ParticleConfiguration,
    DiagnosticsConfiguration,
):
    """Aggregate environment configuration helpers."""
