import numpy as np
import pytest


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def reference_image(rng: np.random.Generator) -> np.ndarray:
    return rng.integers(60, 180, size=(32, 40, 3), dtype=np.uint8)


@pytest.fixture
def target_image(rng: np.random.Generator) -> np.ndarray:
    return rng.integers(20, 120, size=(24, 30, 3), dtype=np.uint8)


@pytest.fixture
def target_with_extremes(rng: np.random.Generator) -> np.ndarray:
    img = rng.integers(0, 256, size=(16, 16, 3), dtype=np.uint8)
    img[0, 0] = (0, 0, 0)
    img[0, 1] = (255, 255, 255)
    img[0, 2] = (0, 0, 255)
    return img


@pytest.fixture
def sample_colors() -> np.ndarray:
    """Every combination of five levels per channel as a 1x125 BGR image."""
    levels = np.array([0, 64, 128, 192, 255], dtype=np.uint8)
    grid = np.stack(np.meshgrid(levels, levels, levels, indexing="ij"), axis=-1)
    return grid.reshape(1, -1, 3)


@pytest.fixture
def uniform_image():
    def make(bgr, shape=(2, 2), dtype=np.uint8) -> np.ndarray:
        img = np.empty(shape + (3,), dtype=dtype)
        img[:, :] = bgr
        return img
    return make
