import numpy as np
from PIL import Image

from chartmatch.features.ahash import (
    EMPTY_FINGERPRINT,
    Fingerprint,
    average_hash,
    fingerprint_bytes,
    fingerprint_file,
    try_fingerprint_file,
)


def _gray(values):
    arr = np.array(values, dtype=np.uint8).reshape(8, 8)
    return Image.fromarray(arr)


def test_average_hash_has_64_bits(noise_image, tmp_path):
    path = noise_image(tmp_path / "a.png", seed=1)
    with Image.open(path) as img:
        fp = average_hash(img)
    assert len(fp) == 64
    assert set(fp.bits) <= {"0", "1"}


def test_average_hash_row_major_threshold():
    img = _gray([i * 4 for i in range(64)])
    fp = average_hash(img)
    assert fp.bits == "0" * 32 + "1" * 32
    assert fp.to_hex() == "00000000ffffffff"


def test_average_hash_ties_resolve_to_one():
    img = Image.new("RGB", (40, 30), (90, 120, 200))
    assert average_hash(img).bits == "1" * 64


def test_average_hash_left_dark_right_light():
    arr = np.zeros((64, 64, 3), dtype=np.uint8)
    arr[:, 32:] = 255
    fp = average_hash(Image.fromarray(arr))
    assert fp.bits == "00001111" * 8


def test_fingerprint_is_deterministic(noise_image, tmp_path):
    path = noise_image(tmp_path / "a.jpg", seed=7)
    assert fingerprint_file(path) == fingerprint_file(path)


def test_fingerprint_bytes_matches_file(noise_image, tmp_path):
    path = noise_image(tmp_path / "a.png", seed=3)
    with open(path, "rb") as handle:
        data = handle.read()
    assert fingerprint_bytes(data) == fingerprint_file(path)


def test_undecodable_input_gives_empty_fingerprint(tmp_path):
    bad = tmp_path / "bad.jpg"
    bad.write_bytes(b"definitely not a jpeg")

    assert fingerprint_bytes(b"garbage") == EMPTY_FINGERPRINT
    assert fingerprint_file(bad) == EMPTY_FINGERPRINT
    fp, reason = try_fingerprint_file(bad)
    assert not fp
    assert reason.startswith("undecodable image")


def test_custom_hash_size():
    img = Image.new("RGB", (20, 20), (10, 10, 10))
    assert len(average_hash(img, hash_size=16)) == 256


def test_fingerprint_int_value():
    assert Fingerprint("0101").to_int() == 5
    assert Fingerprint("0101").to_hex() == "5"


def test_sixteen_bit_image_is_not_clipped(tmp_path):
    arr = np.full((64, 64), 20000, dtype=np.uint16)
    arr[:, 32:] = 60000
    path = tmp_path / "deep.png"
    Image.fromarray(arr).save(path)
    with Image.open(path) as img:
        assert img.mode.startswith("I")

    assert fingerprint_file(path).bits == "00001111" * 8


def test_float_image_hashes_in_native_range():
    arr = np.full((16, 16), 0.25, dtype=np.float32)
    arr[8:, :] = 3.5
    fp = average_hash(Image.fromarray(arr))
    assert fp.bits == "0" * 32 + "1" * 32
