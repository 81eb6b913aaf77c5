# evaluation/metrics.py

from typing import NamedTuple

import numpy as np
from skimage.metrics import peak_signal_noise_ratio, structural_similarity

from colortransfer.colorspace import Colorspace
from colortransfer.transfer import channel_statistics, match_depth, to_log_space


class StatisticsDistance(NamedTuple):
    mean: np.ndarray
    std: np.ndarray


def _check_pair(reference: np.ndarray, test: np.ndarray) -> float:
    if reference.shape != test.shape:
        raise ValueError("Images must have the same shape")

    if reference.dtype != test.dtype:
        raise ValueError("Images must have the same dtype")

    if not np.issubdtype(reference.dtype, np.unsignedinteger):
        raise ValueError("Images must have an unsigned integer dtype")

    return float(np.iinfo(reference.dtype).max)


def compute_psnr(
    reference: np.ndarray,
    test: np.ndarray
) -> float:
    data_range = _check_pair(reference, test)

    if np.array_equal(reference, test):
        return float("inf")

    return peak_signal_noise_ratio(
        reference,
        test,
        data_range=data_range
    )


def compute_ssim(
    reference: np.ndarray,
    test: np.ndarray
) -> float:
    data_range = _check_pair(reference, test)

    # SSIM needs a 7x7 window; smaller images use the largest odd one that fits
    win_size = min(7, *reference.shape[:2])
    if win_size % 2 == 0:
        win_size -= 1
    if win_size < 3:
        raise ValueError("Images must be at least 3x3 for SSIM")

    return structural_similarity(
        reference,
        test,
        channel_axis=2,
        data_range=data_range,
        win_size=win_size
    )


def statistics_distance(
    image: np.ndarray,
    reference: np.ndarray,
    colorspace=Colorspace.NONE
) -> StatisticsDistance:
    """Per-channel distance between the log-space statistics of two images.

    A fully transferred result sits close to zero on every channel.
    """
    reference = match_depth(reference, image.dtype)

    image_stats = channel_statistics(to_log_space(image, colorspace))
    reference_stats = channel_statistics(to_log_space(reference, colorspace))

    return StatisticsDistance(
        mean=np.abs(image_stats.mean - reference_stats.mean),
        std=np.abs(image_stats.std - reference_stats.std),
    )
