import enum
from functools import partial
from typing import Callable, NamedTuple, Optional, Tuple, Union

import cv2 as cv
import numpy as np

from colortransfer.errors import UnknownColorspaceError
from colortransfer.image_io import validate_color_image


Conversion = Callable[[np.ndarray], np.ndarray]

# Z of the D65 white point under OpenCV's BGR -> XYZ matrix
XYZ_WHITE_Z = 1.088754


class Colorspace(enum.Enum):
    NONE = "none"
    LAB = "lab"
    RGB = "rgb"
    HSV = "hsv"
    XYZ = "xyz"

    @classmethod
    def parse(cls, name: str) -> "Colorspace":
        if isinstance(name, cls):
            return name
        try:
            return cls(name.strip().lower())
        except (AttributeError, ValueError):
            raise UnknownColorspaceError(f"Unknown colorspace: {name!r}") from None


DEFAULT_COLORSPACE = Colorspace.LAB


class _Codec(NamedTuple):
    forward_code: int
    inverse_code: int
    # Float results are stored as (value + offset) * scale * peak, so every
    # channel spans the full range of the sample type.
    offset: Tuple[float, float, float]
    scale: Tuple[float, float, float]


class ColorspaceEntry(NamedTuple):
    colorspace: Colorspace
    forward: Conversion
    inverse: Conversion
    labels: Tuple[str, str, str]


def to_samples(values: np.ndarray, dtype) -> np.ndarray:
    """Round ``values`` into ``dtype``, saturating instead of wrapping."""
    peak = float(np.iinfo(dtype).max)
    values = np.asarray(values, dtype=np.float64)
    values = np.nan_to_num(values, nan=0.0, posinf=peak, neginf=0.0)
    return np.clip(np.rint(values), 0.0, peak).astype(dtype)


def _forward(codec: _Codec, image: np.ndarray) -> np.ndarray:
    image = validate_color_image(image)

    # 8-bit images use OpenCV's own 8-bit encodings
    if image.dtype == np.uint8:
        return cv.cvtColor(image, codec.forward_code)

    peak = float(np.iinfo(image.dtype).max)
    unit = (image / peak).astype(np.float32)
    working = cv.cvtColor(unit, codec.forward_code)

    offset = np.asarray(codec.offset, dtype=np.float64)
    scale = np.asarray(codec.scale, dtype=np.float64)
    return to_samples((working + offset) * scale * peak, image.dtype)


def _inverse(codec: _Codec, image: np.ndarray) -> np.ndarray:
    image = validate_color_image(image)

    if image.dtype == np.uint8:
        return cv.cvtColor(image, codec.inverse_code)

    peak = float(np.iinfo(image.dtype).max)
    offset = np.asarray(codec.offset, dtype=np.float64)
    scale = np.asarray(codec.scale, dtype=np.float64)
    working = (image / (scale * peak) - offset).astype(np.float32)

    unit = cv.cvtColor(working, codec.inverse_code)
    return to_samples(np.clip(unit, 0.0, 1.0) * peak, image.dtype)


def _entry(colorspace, forward_code, inverse_code, labels, offset=(0.0, 0.0, 0.0), scale=(1.0, 1.0, 1.0)):
    codec = _Codec(forward_code, inverse_code, offset, scale)
    return ColorspaceEntry(
        colorspace=colorspace,
        forward=partial(_forward, codec),
        inverse=partial(_inverse, codec),
        labels=labels,
    )


CATALOG = {
    Colorspace.LAB: _entry(
        Colorspace.LAB,
        cv.COLOR_BGR2Lab,
        cv.COLOR_Lab2BGR,
        ("Luminance", "Alpha", "Beta"),
        # float Lab: L in [0, 100], a and b in [-127, 127]
        offset=(0.0, 128.0, 128.0),
        scale=(1.0 / 100.0, 1.0 / 255.0, 1.0 / 255.0),
    ),
    Colorspace.RGB: _entry(
        Colorspace.RGB,
        cv.COLOR_BGR2RGB,
        cv.COLOR_RGB2BGR,
        ("Red", "Green", "Blue"),
    ),
    Colorspace.HSV: _entry(
        Colorspace.HSV,
        cv.COLOR_BGR2HSV,
        cv.COLOR_HSV2BGR,
        ("Hue", "Saturation", "Value"),
        # float hue is in degrees
        scale=(1.0 / 360.0, 1.0, 1.0),
    ),
    Colorspace.XYZ: _entry(
        Colorspace.XYZ,
        cv.COLOR_BGR2XYZ,
        cv.COLOR_XYZ2BGR,
        ("X", "Y", "Z"),
        scale=(1.0 / XYZ_WHITE_Z,) * 3,
    ),
}


def supported_colorspaces() -> Tuple[Colorspace, ...]:
    return tuple(CATALOG)


def resolve(colorspace: Optional[Union[Colorspace, str]] = None) -> ColorspaceEntry:
    """Look up the conversion pair and channel labels for ``colorspace``.

    ``None`` and ``Colorspace.NONE`` fall back to LAB. Strings are matched
    case-insensitively against the colorspace names.
    """
    if isinstance(colorspace, str):
        colorspace = Colorspace.parse(colorspace)

    if colorspace is None or colorspace is Colorspace.NONE:
        colorspace = DEFAULT_COLORSPACE

    try:
        return CATALOG[colorspace]
    except (KeyError, TypeError):
        raise UnknownColorspaceError(f"Unknown colorspace: {colorspace!r}") from None
