import pstats

from chartmatch.config import Config
from chartmatch.profile import profile_scan


def test_profile_scan_writes_stats(noise_image, tmp_path):
    ref = noise_image(tmp_path / "ref.png", seed=1)
    out = profile_scan(Config(), ref, str(tmp_path), str(tmp_path / "scan.prof"))
    assert out == str(tmp_path / "scan.prof")
    assert pstats.Stats(out).total_calls > 0
