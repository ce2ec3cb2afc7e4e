from typing import Iterable, Optional


class NoiseGenError(Exception):
    """Base class for every error raised by noisegen."""


class InvalidParameter(NoiseGenError, ValueError):
    """A noise model parameter is outside its documented domain."""

    def __init__(self, parameter: str, value, reason: str):
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{parameter}' ({value!r}): {reason}")


class UnknownModel(NoiseGenError, ValueError):
    """The requested noise model name does not match any known variant."""

    def __init__(self, name: str, known: Optional[Iterable[str]] = None):
        self.name = name
        self.known = sorted(known) if known is not None else []
        message = f"Unknown noise type: '{name}'"
        if self.known:
            message += f" (expected one of: {', '.join(self.known)})"
        super().__init__(message)


class InvalidGrid(NoiseGenError, ValueError):
    """The array handed to the applicator is not a 3D uint8 grid."""


class ImageIOError(NoiseGenError, OSError):
    """Reading or writing an image failed."""


class ImageReadError(ImageIOError):
    pass


class ImageWriteError(ImageIOError):
    pass
