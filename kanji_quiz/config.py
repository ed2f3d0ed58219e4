from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "data_origin": "",  # empty: same origin the app is served from
    "level_path": "/kanji/level-{level}",
    "mappings_file": "mappings.csv",
    "data_dir": "data/kanji",
    "levels": [4, 5, 6, 7, 8],
    "ready_levels": [7, 8],
    "default_level": 7,
    "quiz_format": "input",
    "fetch_timeout": 30.0,
}


@dataclass
class Settings:
    data_origin: str = DEFAULTS["data_origin"]
    level_path: str = DEFAULTS["level_path"]
    mappings_file: str = DEFAULTS["mappings_file"]
    data_dir: str = DEFAULTS["data_dir"]
    levels: list[int] = field(default_factory=lambda: list(DEFAULTS["levels"]))
    ready_levels: list[int] = field(default_factory=lambda: list(DEFAULTS["ready_levels"]))
    default_level: int = DEFAULTS["default_level"]
    quiz_format: str = DEFAULTS["quiz_format"]
    fetch_timeout: float = DEFAULTS["fetch_timeout"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def data_full_path(self) -> Path:
        return self.project_root / self.data_dir

    def is_ready(self, level: int) -> bool:
        return level in self.ready_levels

    def level_base(self, level: int) -> str:
        """Site-relative location of a level's files, e.g. /kanji/level-7."""
        return self.level_path.format(level=level)

    def mappings_url(self, level: int, origin: str = "") -> str:
        """Absolute URL of a level's mappings file.

        A configured data_origin wins; otherwise `origin` (the address the
        app itself answers on) is used.
        """
        base = self.data_origin or origin
        return f"{base.rstrip('/')}{self.level_base(level)}/{self.mappings_file}"

    def local_mappings_path(self, level: int) -> Path:
        """Mappings file under data_dir, mirroring the /kanji/level-N layout."""
        return self.data_full_path / f"level-{level}" / self.mappings_file

    def to_dict(self) -> dict:
        return {
            "data_origin": self.data_origin,
            "level_path": self.level_path,
            "mappings_file": self.mappings_file,
            "data_dir": self.data_dir,
            "levels": self.levels,
            "ready_levels": self.ready_levels,
            "default_level": self.default_level,
            "quiz_format": self.quiz_format,
            "fetch_timeout": self.fetch_timeout,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
