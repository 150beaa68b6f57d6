"""
Catalog of known grids.

The catalog starts from a fixed list of well-known grids and is extended or
trimmed by the user. Every mutation rewrites the catalog file. Loading merges
the saved grids with the defaults, deduplicated by login URI; defaults the
user removed are remembered so they do not come back on the next load.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

import orjson

from .exceptions import GridCatalogError
from .grid_types import GridInfo

logger = logging.getLogger(__name__)

CATALOG_VERSION = 1

DEFAULT_GRIDS: Tuple[GridInfo, ...] = (
    GridInfo(name="OSGrid", login_uri="http://login.osgrid.org", grid_nick="OSGrid"),
    GridInfo(name="Metropolis", login_uri="http://hypergrid.org:8002", grid_nick="Metropolis"),
    GridInfo(name="Local OpenSim", login_uri="http://localhost:9000", grid_nick="Local"),
    GridInfo(name="Kitely", login_uri="https://grid.kitely.com:8002", grid_nick="Kitely"),
    GridInfo(name="InWorldz", login_uri="https://inworldz.com:8003", grid_nick="InWorldz"),
)


class GridDirectory:
    """Ordered, login-URI-unique list of grids with optional file persistence."""

    def __init__(
        self,
        catalog_path: Optional[Path] = None,
        defaults: Iterable[GridInfo] = DEFAULT_GRIDS,
    ):
        self.catalog_path = Path(catalog_path) if catalog_path is not None else None
        self._defaults: Tuple[GridInfo, ...] = tuple(defaults)
        self._grids: Optional[List[GridInfo]] = None
        self._removed_defaults: Set[str] = set()

    def _ensure_loaded(self) -> List[GridInfo]:
        if self._grids is None:
            saved, removed = self._read_catalog()
            self._removed_defaults = removed
            self._grids = _merge(saved, self._defaults, removed)
        return self._grids

    def list_grids(self) -> List[GridInfo]:
        return list(self._ensure_loaded())

    def find_grid(self, login_uri: str) -> Optional[GridInfo]:
        for grid in self._ensure_loaded():
            if grid.login_uri == login_uri:
                return grid
        return None

    def find_by_nick(self, grid_nick: str) -> Optional[GridInfo]:
        for grid in self._ensure_loaded():
            if grid.grid_nick == grid_nick:
                return grid
        return None

    def add_grid(self, grid: GridInfo) -> bool:
        """
        Append ``grid`` unless a grid with the same login URI exists.

        Returns:
            True when the catalog changed

        Raises:
            GridCatalogError: The catalog file could not be written; the catalog is unchanged
        """
        grids = self._ensure_loaded()
        if grid in grids:
            logger.debug("Grid %s already listed", grid.login_uri)
            return False
        self._commit([*grids, grid], self._removed_defaults - {grid.login_uri})
        logger.info("Added grid %s (%s)", grid.name, grid.login_uri)
        return True

    def remove_grid(self, grid: GridInfo) -> bool:
        """
        Remove the grid whose login URI matches ``grid``.

        Returns:
            True when the catalog changed

        Raises:
            GridCatalogError: The catalog file could not be written; the catalog is unchanged
        """
        grids = self._ensure_loaded()
        if grid not in grids:
            return False
        removed = set(self._removed_defaults)
        if grid in self._defaults:
            removed.add(grid.login_uri)
        self._commit([existing for existing in grids if existing != grid], removed)
        logger.info("Removed grid %s", grid.login_uri)
        return True

    def _commit(self, grids: List[GridInfo], removed_defaults: Set[str]) -> None:
        self._save(grids, removed_defaults)
        self._grids = grids
        self._removed_defaults = removed_defaults

    # Persistence

    def _read_catalog(self) -> Tuple[List[GridInfo], Set[str]]:
        if self.catalog_path is None or not self.catalog_path.exists():
            return [], set()

        try:
            payload = orjson.loads(self.catalog_path.read_bytes())
        except OSError as exc:
            raise GridCatalogError(f"Cannot read grid catalog {self.catalog_path}") from exc
        except orjson.JSONDecodeError as exc:
            raise GridCatalogError(f"Grid catalog {self.catalog_path} is not valid JSON") from exc

        try:
            grids = [GridInfo.from_dict(item) for item in payload["grids"]]
            removed = {str(uri) for uri in payload.get("removedDefaults", [])}
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise GridCatalogError(f"Grid catalog {self.catalog_path} is malformed") from exc
        return grids, removed

    def _save(self, grids: List[GridInfo], removed_defaults: Set[str]) -> None:
        if self.catalog_path is None:
            return

        payload = {
            "version": CATALOG_VERSION,
            "grids": [grid.to_dict() for grid in grids],
            "removedDefaults": sorted(removed_defaults),
        }
        data = orjson.dumps(payload, option=orjson.OPT_INDENT_2)
        try:
            self.catalog_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.catalog_path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, self.catalog_path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise GridCatalogError(f"Cannot write grid catalog {self.catalog_path}") from exc


def _merge(saved: Iterable[GridInfo], defaults: Iterable[GridInfo], removed: Set[str]) -> List[GridInfo]:
    merged: List[GridInfo] = []
    seen: Set[str] = set()
    for grid in saved:
        if grid.login_uri not in seen:
            merged.append(grid)
            seen.add(grid.login_uri)
    for grid in defaults:
        if grid.login_uri in removed or grid.login_uri in seen:
            continue
        merged.append(grid)
        seen.add(grid.login_uri)
    return merged


__all__ = ["DEFAULT_GRIDS", "GridDirectory"]
