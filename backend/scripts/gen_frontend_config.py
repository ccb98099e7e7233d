#!/usr/bin/env python3
"""Generate frontend runtime config (map key and viewport) from the backend .env file."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict

ROOT_DIR = Path(__file__).resolve().parents[1]
ENV_FILE = ROOT_DIR / ".env"
FRONTEND_CONFIG = ROOT_DIR / "frontend" / "config.js"


def parse_env(path: Path) -> Dict[str, str]:
    """Parse a minimal subset of .env files (KEY=VALUE lines)."""
    if not path.exists():
        raise FileNotFoundError(f".env file not found at {path}")

    values: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip()
    return values


def render_frontend_config(values: Dict[str, str]) -> str:
    """Build the config.js body; the map key is mandatory, the viewport falls back to Monaco."""
    map_key = values.get("GOOGLE_MAPS_API_KEY") or os.getenv("GOOGLE_MAPS_API_KEY")
    if not map_key:
        raise RuntimeError("GOOGLE_MAPS_API_KEY is missing in environment or .env")

    config = {
        "GOOGLE_MAPS_API_KEY": map_key,
        "MAP_CENTER": [
            float(values.get("MAP_CENTER_LAT") or os.getenv("MAP_CENTER_LAT", "43.7328")),
            float(values.get("MAP_CENTER_LON") or os.getenv("MAP_CENTER_LON", "7.4197")),
        ],
        "MAP_ZOOM": int(values.get("MAP_ZOOM") or os.getenv("MAP_ZOOM", "15")),
    }
    return f"window.__CONFIG__ = {json.dumps(config)};\n"


def write_frontend_config(values: Dict[str, str], target: Path = FRONTEND_CONFIG) -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_frontend_config(values), encoding="utf-8")
    return target


def main() -> None:
    values = parse_env(ENV_FILE)
    path = write_frontend_config(values)
    print(f"Generated {path}")


if __name__ == "__main__":
    main()
