from canopy.utilities.env.parsing import _env_int

DEFAULT_SURFACE_SIZE = 600


class SurfaceConfiguration:
    @classmethod
    def surface_width(cls) -> int:
        return _env_int(
            "CANOPY_SURFACE_WIDTH", default=DEFAULT_SURFACE_SIZE, minimum=1
        )

    @classmethod
    def surface_height(cls) -> int:
        return _env_int(
            "CANOPY_SURFACE_HEIGHT", default=DEFAULT_SURFACE_SIZE, minimum=1
        )
