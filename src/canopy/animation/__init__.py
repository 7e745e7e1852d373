from canopy.animation.animator import GrowthAnimator  # noqa: F401
from canopy.animation.particles import Particle, ParticleSystem  # noqa: F401
from canopy.animation.settings import (AnimationSettings,  # noqa: F401
                                       ParticleSettings)
from canopy.animation.state import GrowthPhase, SceneSnapshot  # noqa: F401
