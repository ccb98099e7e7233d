"""Load the registry of places to visit into memory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Tuple

SEED_PATH = Path(__file__).parent / "data" / "places_to_visit.json"


def normalize_names(raw_names: List[str]) -> Tuple[str, ...]:
    """Strip names, drop blanks and duplicates while keeping the first occurrence."""
    seen: set[str] = set()
    result: List[str] = []
    for name in raw_names:
        value = (name or "").strip()
        if not value or value in seen:
            continue
        seen.add(value)
        result.append(value)
    return tuple(result)


def load_seed(path: str | Path | None = None) -> Tuple[str, ...]:
    """Return the ordered, immutable list of place names shipped with the repository."""
    seed_path = Path(path) if path else SEED_PATH
    with seed_path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    if not isinstance(data, list):
        raise ValueError(f"{seed_path} must contain a JSON list of place names")

    return normalize_names([str(item) for item in data])
