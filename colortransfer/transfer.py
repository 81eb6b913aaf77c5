"""
Statistical colour transfer in log space.

The target image is converted into a working colorspace, moved into log
space and, channel by channel, rescaled so that its mean and standard
deviation match the reference image. Each channel is then blended with the
untouched target channel by its own ratio before the result is brought back
to device BGR.

Statistical transfer follows Reinhard et al., "Color Transfer between
Images" (2001).
"""

import threading
from typing import NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from colortransfer.colorspace import Colorspace, resolve, to_samples
from colortransfer.errors import InvalidInputError
from colortransfer.image_io import validate_color_image


# Working-space samples are clamped to a quarter of one sample step before
# the log. exp(log(0.25)) rounds back to 0, so zeros survive a ratio of 0.
LOG_EPSILON = 0.25

# Target channels whose log-space spread is at or below this are flat.
FLAT_CHANNEL_TOLERANCE = 1e-6

DEFAULT_RATIOS = (1.0, 1.0, 1.0)

ColorspaceLike = Optional[Union[Colorspace, str]]


class ChannelStatistics(NamedTuple):
    mean: np.ndarray
    std: np.ndarray


def to_log_space(image: np.ndarray, colorspace: ColorspaceLike = Colorspace.NONE) -> np.ndarray:
    working = resolve(colorspace).forward(image).astype(np.float32)
    return np.log(np.maximum(working, np.float32(LOG_EPSILON)))


def channel_statistics(log_image: np.ndarray) -> ChannelStatistics:
    samples = log_image.reshape(-1, log_image.shape[-1]).astype(np.float64)
    return ChannelStatistics(mean=samples.mean(axis=0), std=samples.std(axis=0))


def clamp_ratios(ratios: Sequence[float]) -> Tuple[float, float, float]:
    """Clamp three blend ratios into [0, 1].

    Out-of-range values are clamped rather than rejected; a wrong number of
    ratios or a NaN is an input error.
    """
    values = [float(r) for r in ratios]

    if len(values) != 3:
        raise InvalidInputError(f"Expected 3 blend ratios, got {len(values)}")

    if any(np.isnan(v) for v in values):
        raise InvalidInputError(f"Blend ratios must be numbers, got {values}")

    return tuple(min(max(v, 0.0), 1.0) for v in values)


def blend_log_space(
    target_log: np.ndarray,
    target_stats: ChannelStatistics,
    reference_stats: ChannelStatistics,
    ratios: Sequence[float] = DEFAULT_RATIOS,
) -> np.ndarray:
    ratios = clamp_ratios(ratios)
    blended = np.empty_like(target_log)

    for channel in range(3):
        plane = target_log[:, :, channel]
        src_avg = reference_stats.mean[channel]
        src_dev = reference_stats.std[channel]
        dst_avg = target_stats.mean[channel]
        dst_dev = target_stats.std[channel]

        if dst_dev <= FLAT_CHANNEL_TOLERANCE:
            # Nothing to rescale: the channel moves onto the reference mean
            modified = np.full(plane.shape, src_avg)
        else:
            modified = (src_dev / dst_dev) * (plane - dst_avg) + src_avg

        rate = ratios[channel]
        blended[:, :, channel] = plane * (1.0 - rate) + modified * rate

    return blended


def from_log_space(
    log_image: np.ndarray,
    colorspace: ColorspaceLike = Colorspace.NONE,
    dtype=np.uint8,
) -> np.ndarray:
    with np.errstate(over="ignore"):
        linear = np.exp(log_image.astype(np.float64))

    # Saturate into the sample range before going back to device BGR
    return resolve(colorspace).inverse(to_samples(linear, dtype))


def match_depth(image: np.ndarray, dtype) -> np.ndarray:
    """Rescale ``image`` to another unsigned integer sample type."""
    if image.dtype == dtype:
        return image
    ratio = np.iinfo(dtype).max / np.iinfo(image.dtype).max
    return to_samples(image * ratio, dtype)


def _prepare(reference: np.ndarray, target: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    reference = validate_color_image(reference, "reference")
    target = validate_color_image(target, "target")
    # Statistics are only comparable in the same sample depth
    return match_depth(reference, target.dtype), target


def transfer(
    reference: np.ndarray,
    target: np.ndarray,
    colorspace: ColorspaceLike = Colorspace.NONE,
    ratios: Sequence[float] = DEFAULT_RATIOS,
) -> np.ndarray:
    """Restyle ``target`` with the colour statistics of ``reference``.

    Args:
        reference: BGR image providing the statistics, any size.
        target: BGR image to restyle. The result has its shape and dtype.
        colorspace: working colorspace; unset means LAB.
        ratios: per-channel blend, 0 keeps the target, 1 fully transfers.

    Returns:
        A new BGR image. The inputs are never modified.
    """
    reference, target = _prepare(reference, target)
    colorspace = resolve(colorspace).colorspace
    ratios = clamp_ratios(ratios)

    reference_log = to_log_space(reference, colorspace)
    target_log = to_log_space(target, colorspace)

    blended = blend_log_space(
        target_log,
        channel_statistics(target_log),
        channel_statistics(reference_log),
        ratios,
    )
    return from_log_space(blended, colorspace, target.dtype)


def _frozen(image: np.ndarray) -> np.ndarray:
    image = np.array(image, copy=True)
    image.setflags(write=False)
    return image


class TransferEngine:
    """Transfer between a fixed reference and target.

    Interactive use re-runs the transfer with the same images and colorspace
    while only the ratios change, so the target's log image and both images'
    statistics are kept for the active colorspace. Selecting another
    colorspace replaces them.
    """

    def __init__(self, reference: np.ndarray, target: np.ndarray):
        reference, target = _prepare(reference, target)
        self.reference = _frozen(reference)
        self.target = _frozen(target)

        self._lock = threading.Lock()
        self._cache = None

    def _log_space(self, colorspace: Colorspace):
        with self._lock:
            if self._cache is None or self._cache[0] is not colorspace:
                target_log = to_log_space(self.target, colorspace)
                target_log.setflags(write=False)
                self._cache = (
                    colorspace,
                    target_log,
                    channel_statistics(target_log),
                    channel_statistics(to_log_space(self.reference, colorspace)),
                )
            return self._cache[1:]

    def statistics(self, colorspace: ColorspaceLike = Colorspace.NONE) -> Tuple[ChannelStatistics, ChannelStatistics]:
        """Return ``(reference_stats, target_stats)`` in ``colorspace``."""
        _, target_stats, reference_stats = self._log_space(resolve(colorspace).colorspace)
        return reference_stats, target_stats

    def transfer(
        self,
        colorspace: ColorspaceLike = Colorspace.NONE,
        ratios: Sequence[float] = DEFAULT_RATIOS,
    ) -> np.ndarray:
        colorspace = resolve(colorspace).colorspace
        ratios = clamp_ratios(ratios)

        target_log, target_stats, reference_stats = self._log_space(colorspace)
        blended = blend_log_space(target_log, target_stats, reference_stats, ratios)
        return from_log_space(blended, colorspace, self.target.dtype)
