"""
Device Database Module

Read-only access to device geometry, global routing, tile layout and tile
bit databases.

Usage:
    from trellisdb.database import load_database, find_device_by_name

    db = load_database("path/to/database")
    dev = find_device_by_name("LFE5U-45F")
    tiles = db.get_device_tilegrid(dev)
"""

from .errors import (
    TrellisDatabaseError,
    NotFoundError,
    DeviceNotFoundError,
    SchemaError,
    UnsupportedFamilyError,
    DatabaseIOError,
    DatabaseNotLoadedError,
)
from .schema import (
    DeviceLocator,
    TileLocator,
    ChipInfo,
    GlobalRegion,
    TapSegment,
    SpineSegment,
    Ecp5GlobalsInfo,
    LeftRightConn,
    MissingDccs,
    MachXO2GlobalsInfo,
    SiteInfo,
    TileInfo,
)
from .catalog import DeviceCatalog, parse_uint32
from .globals import (
    GlobalsInfo,
    decode_ecp5_globals,
    decode_machxo2_globals,
    decode_globals,
)
from .tilegrid import TilegridCache, decode_tilegrid
from .bitdb import BitDatabaseStore, TileBitDatabase
from .config import DatabaseConfig, get_config, save_config
from .manager import (
    TrellisDatabase,
    get_database,
    reset_database,
    load_database,
    find_device_by_name,
    find_device_by_idcode,
    get_chip_info,
    get_global_info_ecp5,
    get_global_info_machxo2,
    get_global_info,
    get_device_tilegrid,
    get_tile_bitdata,
)

__all__ = [
    # Errors
    'TrellisDatabaseError',
    'NotFoundError',
    'DeviceNotFoundError',
    'SchemaError',
    'UnsupportedFamilyError',
    'DatabaseIOError',
    'DatabaseNotLoadedError',
    # Core types
    'DeviceLocator',
    'TileLocator',
    'ChipInfo',
    'GlobalRegion',
    'TapSegment',
    'SpineSegment',
    'Ecp5GlobalsInfo',
    'LeftRightConn',
    'MissingDccs',
    'MachXO2GlobalsInfo',
    'GlobalsInfo',
    'SiteInfo',
    'TileInfo',
    # Components
    'DeviceCatalog',
    'TilegridCache',
    'BitDatabaseStore',
    'TileBitDatabase',
    'parse_uint32',
    'decode_ecp5_globals',
    'decode_machxo2_globals',
    'decode_globals',
    'decode_tilegrid',
    # Configuration
    'DatabaseConfig',
    'get_config',
    'save_config',
    # Database management
    'TrellisDatabase',
    'get_database',
    'reset_database',
    'load_database',
    'find_device_by_name',
    'find_device_by_idcode',
    'get_chip_info',
    'get_global_info_ecp5',
    'get_global_info_machxo2',
    'get_global_info',
    'get_device_tilegrid',
    'get_tile_bitdata',
]
