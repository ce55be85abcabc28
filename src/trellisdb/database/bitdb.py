"""
Bit Database Store

Opens per-tile-type bit databases ({root}/{family}/tiledata/{tiletype}/bits.db)
on first use and hands the same handle to every caller afterwards.

The bits.db format and the matching of bit patterns to settings belong to
the bitstream tooling; a TileBitDatabase here is only the opened file.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Tuple, Union

from .errors import DatabaseIOError, NotFoundError
from .schema import TileLocator

logger = logging.getLogger(__name__)

BITDB_FILENAME = "bits.db"


class TileBitDatabase:
    """
    Handle to an opened tile bit database.

    The file is read once when the handle is created. The handle is never
    modified afterwards, so concurrent readers can share it.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            with open(self.path) as f:
                self._lines = tuple(line.rstrip("\n") for line in f)
        except FileNotFoundError as e:
            raise NotFoundError(f"bit database not found: {self.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise DatabaseIOError(f"cannot read bit database {self.path}: {e}") from e

    @property
    def lines(self) -> Tuple[str, ...]:
        return self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        return f"TileBitDatabase({str(self.path)!r})"


# Opens a bit database from its path
BitDatabaseOpener = Callable[[Path], TileBitDatabase]


class BitDatabaseStore:
    """
    Thread-safe store of TileBitDatabase handles, keyed by TileLocator.

    Check, open and insert share one critical section, so each database is
    opened at most once. Handles are never evicted or refreshed.
    """

    def __init__(self, db_root: Union[str, Path], opener: BitDatabaseOpener = TileBitDatabase):
        """
        Args:
            db_root: Database root directory
            opener: Function used to open a bit database file
        """
        self.db_root = Path(db_root)
        self._opener = opener
        self._store: Dict[TileLocator, TileBitDatabase] = {}
        self._lock = threading.Lock()

    def bitdb_path(self, tile: TileLocator) -> Path:
        return self.db_root / tile.family / "tiledata" / tile.tiletype / BITDB_FILENAME

    def get_tile_bitdata(self, tile: TileLocator) -> TileBitDatabase:
        """Return the shared bit database handle for a tile type."""
        with self._lock:
            bitdb = self._store.get(tile)
            if bitdb is None:
                path = self.bitdb_path(tile)
                logger.debug("Opening bit database %s", path)
                bitdb = self._opener(path)
                self._store[tile] = bitdb
            return bitdb

    def __contains__(self, tile: object) -> bool:
        with self._lock:
            return tile in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
