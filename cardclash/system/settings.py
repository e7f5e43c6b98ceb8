from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List
from cardclash.core.logging import logger
from cardclash.battle.models import TURN_TIME_LIMIT

SETTINGS_FILENAME = ".cardclash_settings.json"

@dataclass
class SettingsData:
    log_level: str = "INFO"                 # DEBUG / INFO / WARN / ERROR
    turn_time_limit: int = TURN_TIME_LIMIT  # seconds before a turn is force-ended; 0 disables
    debug: bool = False                     # Echo the battle log while auto-playing
    auto_opponent: bool = True              # Opponent turns are played by the AI

    def normalize(self):
        if self.log_level not in {"DEBUG","INFO","WARN","ERROR"}:
            self.log_level = "INFO"
        try:
            self.turn_time_limit = max(0, int(self.turn_time_limit))
        except (TypeError, ValueError):
            self.turn_time_limit = TURN_TIME_LIMIT

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls) -> "Settings":
        path = cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                # Backfill missing fields (migration safe)
                field_names = {f.name for f in fields(SettingsData)}
                data_kwargs = {name: raw[name] for name in field_names if name in raw}
                data = SettingsData(**data_kwargs)
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except Exception as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2))
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def apply(self):
        """Push the configured log level to the project logger."""
        logger.set_level(self.data.log_level)  # type: ignore[arg-type]

    def update(self, **changes):
        for k, v in changes.items():
            if not hasattr(self.data, k):
                raise AttributeError(f"Unknown setting '{k}'")
            setattr(self.data, k, v)
        self.data.normalize()
        self.apply()
        self.save()
        self._notify()

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)
