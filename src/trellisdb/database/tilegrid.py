"""
Tilegrid Cache

Loads per-device tilegrid.json documents on first use and keeps the parsed
documents for the lifetime of the cache. TileInfo values are derived from
the cached document on every request, stamped with the caller's ChipInfo.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

from .documents import get_int, get_list, get_str, load_document
from .errors import SchemaError
from .schema import ChipInfo, DeviceLocator, SiteInfo, TileInfo

logger = logging.getLogger(__name__)

# Loads a JSON document from a path
DocumentLoader = Callable[[Path], Dict[str, Any]]

TILEGRID_FILENAME = "tilegrid.json"


def decode_tilegrid(tilegrid: Dict[str, Any], chip: ChipInfo, source: str = TILEGRID_FILENAME) -> List[TileInfo]:
    """
    Build one TileInfo per tile, in document order.

    Args:
        tilegrid: Parsed tilegrid.json
        chip: Chip geometry to copy onto every tile
        source: Document name for error messages

    Raises:
        SchemaError: If a tile or site is missing a required field
    """
    tiles = []
    for name, tile in tilegrid.items():
        where = f"tile '{name}' of {source}"
        if not isinstance(tile, dict):
            raise SchemaError(f"{where} is not an object")
        sites = []
        for i, site in enumerate(get_list(tile, "sites", where)):
            site_where = f"site {i} of {where}"
            sites.append(SiteInfo(
                type=get_str(site, "name", site_where),
                col=get_int(site, "pos_col", site_where),
                row=get_int(site, "pos_row", site_where),
            ))
        tiles.append(TileInfo(
            family=chip.family,
            device=chip.name,
            max_col=chip.max_col,
            max_row=chip.max_row,
            col_bias=chip.col_bias,
            name=name,
            num_frames=get_int(tile, "cols", where),
            bits_per_frame=get_int(tile, "rows", where),
            bit_offset=get_int(tile, "start_bit", where),
            frame_offset=get_int(tile, "start_frame", where),
            type=get_str(tile, "type", where),
            sites=sites,
        ))
    return tiles


class TilegridCache:
    """
    Thread-safe cache of raw tilegrid documents, keyed by DeviceLocator.

    The existence check, the load and the insert happen under one lock, so
    each document is loaded at most once even under concurrent first access.
    A failed load caches nothing.
    """

    def __init__(self, db_root: Union[str, Path], loader: DocumentLoader = load_document):
        """
        Args:
            db_root: Database root directory
            loader: Function used to read tilegrid documents
        """
        self.db_root = Path(db_root)
        self._loader = loader
        self._cache: Dict[DeviceLocator, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def tilegrid_path(self, locator: DeviceLocator) -> Path:
        return self.db_root / locator.family / locator.device / TILEGRID_FILENAME

    def get_document(self, locator: DeviceLocator) -> Dict[str, Any]:
        """Return the raw tilegrid document, loading it on first access."""
        with self._lock:
            doc = self._cache.get(locator)
            if doc is None:
                path = self.tilegrid_path(locator)
                logger.debug("Tilegrid cache miss for %s/%s", locator.family, locator.device)
                doc = self._loader(path)
                self._cache[locator] = doc
            return doc

    def get_tiles(self, chip: ChipInfo) -> List[TileInfo]:
        """Return the tiles of `chip`'s device, stamped with its geometry."""
        locator = chip.locator
        return decode_tilegrid(
            self.get_document(locator), chip, str(self.tilegrid_path(locator))
        )

    def cached_devices(self) -> List[DeviceLocator]:
        with self._lock:
            return list(self._cache.keys())

    def __contains__(self, locator: object) -> bool:
        with self._lock:
            return locator in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
