import pytest

from chartmatch.errors import DecodeError
from chartmatch.io import decode_image, iter_image_paths


def test_iter_image_paths_filters_extensions(tmp_path):
    (tmp_path / "a" / "b").mkdir(parents=True)
    keep = [
        tmp_path / "one.jpg",
        tmp_path / "two.JPEG",
        tmp_path / "a" / "three.png",
        tmp_path / "a" / "b" / "four.WebP",
    ]
    drop = [tmp_path / "five.gif", tmp_path / "six.txt", tmp_path / "a" / "seven.bmp"]
    for path in keep + drop:
        path.write_bytes(b"")
    (tmp_path / "dir.jpg").mkdir()

    assert sorted(iter_image_paths(tmp_path)) == sorted(str(p) for p in keep)


def test_iter_image_paths_empty_folder(tmp_path):
    assert list(iter_image_paths(tmp_path)) == []


def test_decode_image_rejects_garbage():
    with pytest.raises(DecodeError):
        decode_image(b"\x00\x01\x02")


def test_decode_image_rejects_truncated_png(noise_image, tmp_path):
    path = noise_image(tmp_path / "a.png", seed=2)
    data = (tmp_path / "a.png").read_bytes()
    with pytest.raises(DecodeError):
        decode_image(data[: len(data) // 2])
