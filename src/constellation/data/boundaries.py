"""Queensland LGA boundary polygons, read from a GeoJSON FeatureCollection file."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from src.constellation.schemas.records import BoundaryFeature


class BoundaryFileError(ValueError):
    """The boundary file is not a GeoJSON FeatureCollection."""


def _read_features(path: Path) -> list[BoundaryFeature]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise BoundaryFileError(f"{path} is not a GeoJSON FeatureCollection")

    return [BoundaryFeature.model_validate(feature) for feature in data.get("features", [])]


class BoundarySource:
    """Loads boundary features from disk on every call.

    The file is read in a worker thread so the event loop is not blocked
    while sibling loaders are running.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def load_qld_lga_boundaries(self) -> list[BoundaryFeature]:
        return await asyncio.to_thread(_read_features, self._path)
