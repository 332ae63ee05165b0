#!/usr/bin/env python3
# mercator_image/config.py
"""
Config loader/saver and defaults for mercator-image.

Goals:
- Single JSON file per user.
- Safe atomic writes.
- Deep-merge of user config over defaults.
- Basic validation with sane fallbacks.
- No external deps.

Usage:
    from mercator_image.config import Config, DEFAULT_CONFIG
    cfg = Config.load()                 # ~/.config/mercator_image/mercator_image.json or OS-specific
    tile_w = cfg["tile"]["width"]
    cfg["viewport"]["width"] = 1024
    cfg.save()
"""

from __future__ import annotations

import copy
import json
import logging
import os
import platform
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

log = logging.getLogger(__name__)

# ----------------------------
# Defaults
# ----------------------------

DEFAULT_CONFIG: Dict[str, Any] = {
    "tile": {
        "width": 256,                    # pixels per tile, x
        "height": 256,                   # pixels per tile, y
        "max_zoom": 22,                  # upper bound accepted by the CLI
    },
    "viewport": {
        "width": 800,                    # default image size for `fit`
        "height": 600,
    },
    "output": {
        "precision": 6,                  # decimals printed by the CLI
    },
    "logging": {
        "level": "WARNING",
        "file": None,                    # path or None
        "rotate_bytes": 5 * 1024 * 1024,
        "rotate_keep": 3,
    },
}

# ----------------------------
# Helpers
# ----------------------------

def _os_config_home() -> str:
    """Return per-OS config base directory."""
    if platform.system() == "Windows":
        base = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return os.path.join(base, "MercatorImage")
    if platform.system() == "Darwin":
        return os.path.join(os.path.expanduser("~/Library/Application Support"), "MercatorImage")
    return os.path.join(os.path.expanduser("~/.config"), "mercator_image")

def _default_config_path() -> str:
    """Resolve default config path, honoring MERCATOR_IMAGE_CONFIG env override."""
    env = os.environ.get("MERCATOR_IMAGE_CONFIG")
    if env:
        return os.path.expanduser(env)
    return os.path.join(_os_config_home(), "mercator_image.json")

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Return deep-merged copy of dicts: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    folder = os.path.dirname(path) or "."
    os.makedirs(folder, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_cfg_", dir=folder)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
        os.replace(tmp, path)
    except Exception:
        try:
            os.remove(tmp)
        except OSError:
            pass
        raise

def _coerce_int(v: Any, default: int, minmax: Optional[Tuple[int, int]] = None) -> int:
    try:
        x = int(v)
    except (TypeError, ValueError):
        return int(default)
    if minmax:
        lo, hi = minmax
        if x < lo: x = lo
        if x > hi: x = hi
    return x

# ----------------------------
# Validation
# ----------------------------

def _validate(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Return validated copy with fallbacks applied."""
    c = copy.deepcopy(_deep_merge(DEFAULT_CONFIG, cfg or {}))
    for section, defaults in DEFAULT_CONFIG.items():
        if not isinstance(c.get(section), dict):
            c[section] = copy.deepcopy(defaults)

    # tile
    t = c["tile"]
    t["width"]    = _coerce_int(t.get("width"), DEFAULT_CONFIG["tile"]["width"], (1, 8192))
    t["height"]   = _coerce_int(t.get("height"), DEFAULT_CONFIG["tile"]["height"], (1, 8192))
    t["max_zoom"] = _coerce_int(t.get("max_zoom"), DEFAULT_CONFIG["tile"]["max_zoom"], (0, 30))

    # viewport
    vp = c["viewport"]
    vp["width"]  = _coerce_int(vp.get("width"), DEFAULT_CONFIG["viewport"]["width"], (1, 65536))
    vp["height"] = _coerce_int(vp.get("height"), DEFAULT_CONFIG["viewport"]["height"], (1, 65536))

    # output
    out = c["output"]
    out["precision"] = _coerce_int(out.get("precision"), DEFAULT_CONFIG["output"]["precision"], (0, 15))

    # logging
    lg = c["logging"]
    level = str(lg.get("level") or "").upper()
    lg["level"] = level if level in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET") \
        else DEFAULT_CONFIG["logging"]["level"]
    lf = lg.get("file")
    lg["file"] = str(lf) if lf else None
    lg["rotate_bytes"] = _coerce_int(lg.get("rotate_bytes"), DEFAULT_CONFIG["logging"]["rotate_bytes"], (256 * 1024, 50 * 1024 * 1024))
    lg["rotate_keep"]  = _coerce_int(lg.get("rotate_keep"), DEFAULT_CONFIG["logging"]["rotate_keep"], (0, 50))

    return c

# ----------------------------
# Public API
# ----------------------------

@dataclass
class Config:
    """Thin wrapper around a nested dict with load/save/merge."""
    data: Dict[str, Any] = field(default_factory=lambda: _validate(DEFAULT_CONFIG))
    path: str = field(default_factory=_default_config_path)

    # --- Mapping-style access
    def __getitem__(self, k: str) -> Any:
        return self.data[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self.data[k] = v

    def get(self, k: str, default: Any = None) -> Any:
        return self.data.get(k, default)

    # --- Ops
    @classmethod
    def load(cls, path: Optional[str] = None, create_if_missing: bool = False) -> "Config":
        cfg_path = os.path.expanduser(path) if path else _default_config_path()
        if not os.path.exists(cfg_path):
            cfg = _validate(DEFAULT_CONFIG)
            if create_if_missing:
                _atomic_write_json(cfg_path, cfg)
            return cls(cfg, cfg_path)

        try:
            with open(cfg_path, "r", encoding="utf-8") as f:
                user_cfg = json.load(f)
            if not isinstance(user_cfg, dict):
                raise ValueError("top-level JSON value is not an object")
        except (OSError, ValueError) as exc:
            # Corrupt file. Backup and fall back to defaults.
            backup = cfg_path + ".corrupt.bak"
            log.warning("Unreadable config %s (%s); backing up to %s", cfg_path, exc, backup)
            try:
                shutil.copyfile(cfg_path, backup)
            except OSError:
                pass
            user_cfg = {}

        return cls(_validate(user_cfg), cfg_path)

    def save(self) -> None:
        """Persist to JSON atomically."""
        full = _validate(self.data)
        _atomic_write_json(self.path, full)
        self.data = full  # sync in-memory with normalized values

    def update(self, partial: Dict[str, Any]) -> None:
        """Deep-merge a partial config then validate."""
        merged = _deep_merge(self.data, partial)
        self.data = _validate(merged)

    # Convenience getters
    @property
    def tile_size(self) -> Tuple[int, int]:
        return self.data["tile"]["width"], self.data["tile"]["height"]

    @property
    def viewport_size(self) -> Tuple[int, int]:
        return self.data["viewport"]["width"], self.data["viewport"]["height"]


__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "_default_config_path",
]
