import os

import cv2 as cv
import numpy as np

from colortransfer.errors import (
    ChannelCountError,
    ImageReadError,
    ImageWriteError,
    InvalidInputError,
    SampleDepthError,
)


def validate_color_image(image: np.ndarray, name: str = "image") -> np.ndarray:
    """Check that ``image`` is a colour image the transfer can work on.

    Returns the first three channels as a contiguous array. Extra channels
    (alpha and the like) are dropped here and never reach the conversions.
    """
    if not isinstance(image, np.ndarray):
        raise TypeError(f"{name} must be a NumPy array")

    channels = image.shape[2] if image.ndim == 3 else 1
    if image.ndim not in (2, 3) or channels < 3:
        raise ChannelCountError(
            f"{name} must have at least 3 channels, got {channels} (shape {image.shape})"
        )

    if not np.issubdtype(image.dtype, np.unsignedinteger):
        raise SampleDepthError(
            f"{name} must have an unsigned integer dtype, got {image.dtype}"
        )

    # 64-bit peaks are not representable as float64, so saturation would wrap
    if image.dtype.itemsize > 4:
        raise SampleDepthError(
            f"{name} samples must be at most 32 bits wide, got {image.dtype}"
        )

    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidInputError(f"{name} is empty (shape {image.shape})")

    return np.ascontiguousarray(image[:, :, :3])


def load_image(path: str, name: str = "image") -> np.ndarray:
    # IMREAD_UNCHANGED keeps 16-bit samples and extra channels
    img = cv.imread(str(path), cv.IMREAD_UNCHANGED)
    if img is None:
        raise ImageReadError(f"Could not load {name}: {path}")

    if img.ndim != 3 or img.shape[2] < 3:
        channels = img.shape[2] if img.ndim == 3 else 1
        raise ChannelCountError(
            f"{name} may not be a color image ({channels} channel(s)): {path}"
        )
    return img


def save_image(path: str, img: np.ndarray):
    directory = os.path.dirname(str(path))
    if directory:
        os.makedirs(directory, exist_ok=True)
    try:
        written = cv.imwrite(str(path), img)
    except cv.error as exc:
        raise ImageWriteError(f"Could not write image: {path} ({exc})") from exc
    if not written:
        raise ImageWriteError(f"Could not write image: {path}")
