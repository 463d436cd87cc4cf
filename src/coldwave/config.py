"""Load coldwave configuration from a TOML file.

The file is only read at start-up; coldwave never writes it.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "coldwave.toml"


@dataclass
class Config:
    """Coldwave configuration."""

    music_dir: Path = field(default_factory=lambda: Path.home() / "Music")
    progress_interval: float = 0.5
    skip_unreadable: bool = False
    log_level: str = "INFO"


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> Config:
    """Load configuration from a TOML file.

    Returns a :class:`Config` with defaults for any missing keys.
    If the file does not exist, returns a default :class:`Config`.
    """
    path = Path(path)
    defaults = Config()
    if not path.is_file():
        return defaults

    with open(path, "rb") as f:
        data = tomllib.load(f)

    music_dir = data.get("music-dir")
    return Config(
        music_dir=Path(music_dir).expanduser() if music_dir else defaults.music_dir,
        progress_interval=float(
            data.get("progress-interval", defaults.progress_interval)
        ),
        skip_unreadable=data.get("skip-unreadable", defaults.skip_unreadable),
        log_level=data.get("log-level", defaults.log_level),
    )
