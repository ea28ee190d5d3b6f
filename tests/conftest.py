import numpy as np
import pytest
from PIL import Image


def save_noise(path, seed, size=(64, 48)):
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(size[1], size[0], 3), dtype=np.uint8)
    Image.fromarray(arr).save(path)
    return str(path)


@pytest.fixture
def noise_image():
    return save_noise
