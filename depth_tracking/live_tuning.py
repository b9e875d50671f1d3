# live_tuning.py
"""Hot-reloaded ``runtime_params.json`` for the blob threshold and tilt step."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Tuple

from depth_tracking.config import BlobConfig, TiltConfig

# JSON key -> (config attribute, type)
_BLOB_KEYS = {
    "blob_threshold": ("threshold", int),
    "blob_min_x": ("min_x", float),
}
_TILT_KEYS = {
    "tilt_step_deg": ("step_deg", float),
}


class RuntimeParamWatcher:
    """Watch a JSON file and reload it when its mtime or size changes."""

    def __init__(self, path: str | Path = "runtime_params.json") -> None:
        self.path = Path(path).expanduser().resolve()
        self._stamp: Tuple[float, int] = (0.0, -1)  # (mtime, size)
        self.params: Dict[str, Any] = {}
        self._load(initial=True)

    def _load(self, *, initial: bool = False) -> None:
        try:
            with self.path.open("r", encoding="utf-8") as fp:
                params = json.load(fp)
            stat = self.path.stat()
        except FileNotFoundError:
            if initial:
                print(f"[Runtime] {self.path} not found – live-tuning idle.")
            return
        except (OSError, json.JSONDecodeError) as exc:
            print(f"[Runtime] Could not read {self.path}: {exc}")
            return

        self._stamp = (stat.st_mtime, stat.st_size)
        if not isinstance(params, dict):
            print(f"[Runtime] {self.path} must hold a JSON object – ignored.")
            return
        self.params = params
        print(f"[Runtime] Loaded {len(params)} parameter(s) from {self.path}")

    def maybe_reload(self) -> bool:
        """Reload and return True if the file changed since the last load."""
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return False
        if (stat.st_mtime, stat.st_size) == self._stamp:
            return False
        self._load()
        return True

    def apply(self, blob_cfg: BlobConfig, tilt_cfg: TiltConfig) -> None:
        """Copy known keys onto the config blobs; bad values are skipped."""
        for table, cfg in ((_BLOB_KEYS, blob_cfg), (_TILT_KEYS, tilt_cfg)):
            for key, (attr, cast) in table.items():
                if key not in self.params:
                    continue
                try:
                    setattr(cfg, attr, cast(self.params[key]))
                except (TypeError, ValueError):
                    print(f"[Runtime] Bad value for {key!r}: {self.params[key]!r}")
