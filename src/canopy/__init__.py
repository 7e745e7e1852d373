from canopy.animation import GrowthAnimator, GrowthPhase, SceneSnapshot  # noqa: F401
from canopy.generation import GeneratedTree, generate, map_score  # noqa: F401
