from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional, Union
from tallgrass.core.logging import logger

SETTINGS_FILENAME = ".tallgrass_settings.json"

_LOG_LEVELS = {"DEBUG","INFO","WARN","ERROR"}
_DIFFICULTIES = {"random","novice","intermediate","advanced","champion"}
_PERSONALITIES = {"aggressive","defensive","calculating","balanced"}

@dataclass
class SettingsData:
    log_level: str = "INFO"                 # DEBUG / INFO / WARN / ERROR
    debug: bool = False                     # Verbose per-turn output in the CLI
    apply_type_effectiveness: bool = True   # Type chart multiplier applies to resolved damage
    recent_log_limit: int = 5               # Log entries returned by a status query
    novice_flee_chance: float = 0.3
    intermediate_flee_chance: float = 0.4
    default_difficulty: str = "intermediate"
    default_personality: str = "balanced"
    max_auto_turns: int = 200               # Auto battles forfeit after this many turns

    def normalize(self):
        if self.log_level not in _LOG_LEVELS:
            self.log_level = "INFO"
        if not isinstance(self.recent_log_limit, int) or self.recent_log_limit < 1:
            self.recent_log_limit = 5
        for name, default in (("novice_flee_chance", 0.3), ("intermediate_flee_chance", 0.4)):
            val = getattr(self, name)
            if not isinstance(val, (int, float)) or not 0.0 <= val <= 1.0:
                setattr(self, name, default)
        if self.default_difficulty not in _DIFFICULTIES:
            self.default_difficulty = "intermediate"
        if self.default_personality not in _PERSONALITIES:
            self.default_personality = "balanced"
        if not isinstance(self.max_auto_turns, int) or self.max_auto_turns < 1:
            self.max_auto_turns = 200
        self.debug = bool(self.debug)
        self.apply_type_effectiveness = bool(self.apply_type_effectiveness)

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
    def defaults(cls) -> "Settings":
        """In-memory settings that never touch disk unless saved."""
        data = SettingsData()
        data.normalize()
        return cls(data, cls._resolve_path())

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "Settings":
        path = Path(path) if path is not None else cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                if not isinstance(raw, dict):
                    raise ValueError("settings root must be an object")
                # Backfill missing fields, ignore unknown ones
                field_names = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in field_names})
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError) as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def apply_logging(self):
        logger.set_level(self.data.log_level)

    def update(self, **changes):
        for name, value in changes.items():
            if not hasattr(self.data, name):
                raise KeyError(name)
            setattr(self.data, name, value)
        self.data.normalize()
        self.apply_logging()
        self._notify()

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)

__all__ = ["Settings", "SettingsData", "SETTINGS_FILENAME"]
