"""
Device Database Manager

Provides the read-only query interface to a Project Trellis style device
database. The database is file-based (JSON documents plus bit databases)
organized by family and device:

    database/
    ├── devices.json
    ├── ECP5/
    │   ├── LFE5U-45F/
    │   │   ├── globals.json
    │   │   └── tilegrid.json
    │   └── tiledata/
    │       └── PLC2/
    │           └── bits.db
    └── MachXO2/
        └── ...

Tilegrids and bit databases are expensive to load and are cached for the
lifetime of the TrellisDatabase. Everything else is read on each request.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Union

from .bitdb import BitDatabaseOpener, BitDatabaseStore, TileBitDatabase
from .catalog import DeviceCatalog, DevicePredicate
from .config import DatabaseConfig, get_config
from .documents import load_document
from .errors import DatabaseNotLoadedError
from .globals import (
    GlobalsInfo,
    decode_ecp5_globals,
    decode_globals,
    decode_machxo2_globals,
)
from .schema import (
    ChipInfo,
    DeviceLocator,
    Ecp5GlobalsInfo,
    MachXO2GlobalsInfo,
    TileInfo,
    TileLocator,
)
from .tilegrid import DocumentLoader, TilegridCache

logger = logging.getLogger(__name__)

GLOBALS_FILENAME = "globals.json"


class TrellisDatabase:
    """
    Query a device database.

    Usage:
        db = TrellisDatabase()
        db.load("path/to/database")

        dev = db.find_device_by_name("LFE5U-45F")
        chip = db.get_chip_info(dev)
        for tile in db.get_device_tilegrid(dev):
            bits = db.get_tile_bitdata(tile.locator)

    load() must complete before any query is made; it is not safe to call
    it concurrently with queries. All queries are safe to call from
    multiple threads.
    """

    def __init__(
        self,
        loader: DocumentLoader = load_document,
        opener: BitDatabaseOpener = TileBitDatabase,
    ):
        """
        Args:
            loader: Function used to read tilegrid documents
            opener: Function used to open bit databases
        """
        self._loader = loader
        self._opener = opener
        self.db_root: Optional[Path] = None
        self._catalog: Optional[DeviceCatalog] = None
        self._tilegrids: Optional[TilegridCache] = None
        self._bitdbs: Optional[BitDatabaseStore] = None

    @classmethod
    def from_config(cls, config: Optional[DatabaseConfig] = None) -> 'TrellisDatabase':
        """Create and load a database from configuration (default: get_config())."""
        config = config or get_config()
        db = cls()
        db.load(config.db_root)
        return db

    def load(self, db_root: Union[str, Path]) -> None:
        """
        Load the root devices document and reset the caches.

        Raises:
            NotFoundError: If devices.json does not exist
            SchemaError: If devices.json is malformed
        """
        db_root = Path(db_root)
        catalog = DeviceCatalog.load(db_root)
        self.db_root = db_root
        self._catalog = catalog
        self._tilegrids = TilegridCache(db_root, self._loader)
        self._bitdbs = BitDatabaseStore(db_root, self._opener)

    @property
    def is_loaded(self) -> bool:
        return self._catalog is not None

    @property
    def catalog(self) -> DeviceCatalog:
        if self._catalog is None:
            raise DatabaseNotLoadedError("device database not loaded, call load() first")
        return self._catalog

    @property
    def tilegrids(self) -> TilegridCache:
        if self._tilegrids is None:
            raise DatabaseNotLoadedError("device database not loaded, call load() first")
        return self._tilegrids

    @property
    def bitdbs(self) -> BitDatabaseStore:
        if self._bitdbs is None:
            raise DatabaseNotLoadedError("device database not loaded, call load() first")
        return self._bitdbs

    # -------------------------------------------------------------------------
    # Devices
    # -------------------------------------------------------------------------

    def find_device(self, predicate: DevicePredicate) -> Optional[DeviceLocator]:
        return self.catalog.find_device(predicate)

    def find_device_by_name(self, name: str) -> DeviceLocator:
        return self.catalog.find_device_by_name(name)

    def find_device_by_idcode(self, idcode: int) -> DeviceLocator:
        return self.catalog.find_device_by_idcode(idcode)

    def get_chip_info(self, locator: DeviceLocator) -> ChipInfo:
        return self.catalog.get_chip_info(locator)

    def list_devices(self, family: Optional[str] = None) -> List[DeviceLocator]:
        return self.catalog.devices(family)

    def list_families(self) -> List[str]:
        return self.catalog.families()

    # -------------------------------------------------------------------------
    # Globals
    # -------------------------------------------------------------------------

    def _globals_path(self, locator: DeviceLocator) -> Path:
        if self.db_root is None:
            raise DatabaseNotLoadedError("device database not loaded, call load() first")
        return self.db_root / locator.family / locator.device / GLOBALS_FILENAME

    def get_global_info_ecp5(self, locator: DeviceLocator) -> Ecp5GlobalsInfo:
        """Read and decode an ECP5 style globals.json. Not cached."""
        path = self._globals_path(locator)
        return decode_ecp5_globals(load_document(path), str(path))

    def get_global_info_machxo2(self, locator: DeviceLocator) -> MachXO2GlobalsInfo:
        """Read and decode a MachXO2 style globals.json. Not cached."""
        path = self._globals_path(locator)
        return decode_machxo2_globals(load_document(path), str(path))

    def get_global_info(self, locator: DeviceLocator) -> GlobalsInfo:
        """
        Read and decode globals.json with the decoder for the device's family.

        Raises:
            UnsupportedFamilyError: If the family has no known globals schema
        """
        path = self._globals_path(locator)
        return decode_globals(locator.family, load_document(path), str(path))

    # -------------------------------------------------------------------------
    # Tiles
    # -------------------------------------------------------------------------

    def get_device_tilegrid(self, locator: DeviceLocator) -> List[TileInfo]:
        """
        Get all tiles of a device, in tilegrid document order.

        The tilegrid document is read once per device; the TileInfo list is
        rebuilt from the cached document on every call.
        """
        chip = self.get_chip_info(locator)
        return self.tilegrids.get_tiles(chip)

    def get_tile_bitdata(self, tile: TileLocator) -> TileBitDatabase:
        """Get the shared bit database handle for a tile type."""
        return self.bitdbs.get_tile_bitdata(tile)


# =============================================================================
# Process-wide database
# =============================================================================

_database: Optional[TrellisDatabase] = None
_database_lock = threading.Lock()


def get_database() -> TrellisDatabase:
    """
    Get the process-wide database instance.

    The instance is created unloaded; call load_database() before querying.
    """
    global _database
    if _database is None:
        with _database_lock:
            if _database is None:
                _database = TrellisDatabase()
    return _database


def reset_database():
    """Drop the process-wide database instance and its caches (mainly for testing)."""
    global _database
    with _database_lock:
        _database = None


def load_database(db_root: Union[str, Path, None] = None) -> TrellisDatabase:
    """
    Load the process-wide database.

    Args:
        db_root: Database root (default: from get_config())
    """
    if db_root is None:
        db_root = get_config().db_root
    db = get_database()
    db.load(db_root)
    return db


def find_device_by_name(name: str) -> DeviceLocator:
    return get_database().find_device_by_name(name)


def find_device_by_idcode(idcode: int) -> DeviceLocator:
    return get_database().find_device_by_idcode(idcode)


def get_chip_info(locator: DeviceLocator) -> ChipInfo:
    return get_database().get_chip_info(locator)


def get_global_info_ecp5(locator: DeviceLocator) -> Ecp5GlobalsInfo:
    return get_database().get_global_info_ecp5(locator)


def get_global_info_machxo2(locator: DeviceLocator) -> MachXO2GlobalsInfo:
    return get_database().get_global_info_machxo2(locator)


def get_global_info(locator: DeviceLocator) -> GlobalsInfo:
    return get_database().get_global_info(locator)


def get_device_tilegrid(locator: DeviceLocator) -> List[TileInfo]:
    return get_database().get_device_tilegrid(locator)


def get_tile_bitdata(tile: TileLocator) -> TileBitDatabase:
    return get_database().get_tile_bitdata(tile)
