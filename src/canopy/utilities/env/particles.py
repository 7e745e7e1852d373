from canopy.utilities.env.parsing import _env_float, _env_int

DEFAULT_SPAWN_PROBABILITY = 0.03
DEFAULT_SCORE_THRESHOLD = 100.0
DEFAULT_PARTICLE_LIMIT = 200


class ParticleConfiguration:
    @classmethod
    def particle_spawn_probability(cls) -> float:
        return _env_float(
            "CANOPY_PARTICLE_SPAWN_PROBABILITY",
            default=DEFAULT_SPAWN_PROBABILITY,
            minimum=0.0,
            maximum=1.0,
        )

    @classmethod
    def particle_score_threshold(cls) -> float:
        return _env_float(
            "CANOPY_PARTICLE_SCORE_THRESHOLD",
            default=DEFAULT_SCORE_THRESHOLD,
            minimum=0.0,
        )

    @classmethod
    def particle_limit(cls) -> int:
        return _env_int(
            "CANOPY_PARTICLE_LIMIT", default=DEFAULT_PARTICLE_LIMIT, minimum=0
        )
