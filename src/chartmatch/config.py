"""Configuration loader and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from PIL import Image

RESAMPLE_FILTERS = {
    "nearest": Image.Resampling.NEAREST,
    "box": Image.Resampling.BOX,
    "bilinear": Image.Resampling.BILINEAR,
    "hamming": Image.Resampling.HAMMING,
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
}


@dataclass
class Config:
    top_k: int = 20
    hash_size: int = 8
    resample: str = "bilinear"
    num_workers: int = 0
    progress: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def resample_filter(self) -> Image.Resampling:
        return resolve_resample(self.resample)


def resolve_resample(name: str) -> Image.Resampling:
    try:
        return RESAMPLE_FILTERS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown resample filter: {name!r}") from None


def load_config(path: Optional[str]) -> Config:
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    return _from_dict(data)


def _from_dict(data: Dict[str, Any]) -> Config:
    log_file = data.get("log_file")
    cfg = Config(
        top_k=int(data.get("top_k", 20)),
        hash_size=int(data.get("hash_size", 8)),
        resample=str(data.get("resample", "bilinear")),
        num_workers=int(data.get("num_workers", 0)),
        progress=bool(data.get("progress", False)),
        log_level=str(data.get("log_level", "INFO")),
        log_file=str(log_file) if log_file else None,
    )
    # fail early on a typo rather than mid-scan
    resolve_resample(cfg.resample)
    return cfg


def override_config(cfg: Config, overrides: Dict[str, Any]) -> Config:
    for key, value in overrides.items():
        if value is None:
            continue
        if not hasattr(cfg, key):
            raise KeyError(f"Unknown config key: {key}")
        setattr(cfg, key, value)
    return cfg
