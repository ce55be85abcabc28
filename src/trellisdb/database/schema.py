"""
Device Database Schema

Value types produced by the device database: device and tile locators, chip
geometry, tile layout and the two family-specific global routing models.

All types are plain dataclasses built fresh on each request. They hold no
external resources and are never mutated by the database after being
returned, so they can be shared freely between threads.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


# =============================================================================
# Locators
# =============================================================================

@dataclass(frozen=True)
class DeviceLocator:
    """Identifies exactly one device in the root devices document."""

    family: str
    """Device family (e.g., 'ECP5', 'MachXO2')."""

    device: str
    """Device name within the family (e.g., 'LFE5U-45F')."""


@dataclass(frozen=True)
class TileLocator:
    """Key for looking up the bit database of a tile type."""

    family: str
    tiletype: str


# =============================================================================
# Chip geometry
# =============================================================================

@dataclass(frozen=True)
class ChipInfo:
    """
    Static configuration geometry of a device.

    Frames are the unit of configuration memory addressing; each frame holds
    `bits_per_frame` bits, surrounded by padding bits when read out of a
    bitstream.
    """

    family: str
    name: str
    num_frames: int
    bits_per_frame: int
    pad_bits_before_frame: int
    pad_bits_after_frame: int

    idcode: int
    """32-bit silicon ID code read back over JTAG."""

    max_row: int
    max_col: int

    col_bias: int
    """Offset between tile column names and grid column numbers."""

    @property
    def locator(self) -> DeviceLocator:
        return DeviceLocator(self.family, self.name)

    @property
    def frame_length(self) -> int:
        """Frame length in bits, including padding."""
        return self.pad_bits_before_frame + self.bits_per_frame + self.pad_bits_after_frame

    @property
    def idcode_hex(self) -> str:
        return f"0x{self.idcode:08x}"


# =============================================================================
# ECP5 style globals (quadrants, taps and spines)
# =============================================================================

@dataclass
class GlobalRegion:
    """A clock quadrant, spanning columns x0..x1 and rows y0..y1."""

    name: str
    x0: int
    x1: int
    y0: int
    y1: int


@dataclass
class TapSegment:
    """Columns driven to the left and right of a tap column."""

    tap_col: int
    lx0: int
    lx1: int
    rx0: int
    rx1: int


@dataclass
class SpineSegment:
    """Location of the spine tile feeding a tap column within a quadrant."""

    quadrant: str
    """Two character quadrant name (e.g., 'UL', 'LR')."""

    tap_col: int
    spine_row: int
    spine_col: int


@dataclass
class Ecp5GlobalsInfo:
    """Global routing topology of an ECP5 style device."""

    quadrants: List[GlobalRegion] = field(default_factory=list)
    tapsegs: List[TapSegment] = field(default_factory=list)
    spinesegs: List[SpineSegment] = field(default_factory=list)


# =============================================================================
# MachXO2 style globals (row/column connections)
# =============================================================================

@dataclass
class LeftRightConn:
    """A left/right global connection on `row`, spanning `row_span` rows."""

    name: str
    row: int
    row_span: Tuple[int, int]


@dataclass
class MissingDccs:
    """DCC indices absent on a row."""

    row: int
    missing: List[int] = field(default_factory=list)


@dataclass
class MachXO2GlobalsInfo:
    """
    Global routing topology of a MachXO2 style device.

    `ud_conns` and `branch_spans` are indexed by column. For every column,
    `branch_spans[col][i]` is the span of global `ud_conns[col][i]`.
    """

    lr_conns: List[LeftRightConn] = field(default_factory=list)
    ud_conns: List[List[int]] = field(default_factory=list)
    branch_spans: List[List[Tuple[int, int]]] = field(default_factory=list)
    missing_dccs: List[MissingDccs] = field(default_factory=list)


# =============================================================================
# Tile layout
# =============================================================================

@dataclass
class SiteInfo:
    """A site (BEL group) inside a tile."""

    type: str
    col: int
    row: int


@dataclass
class TileInfo:
    """
    Placement of one tile in the configuration grid.

    The max_col/max_row/col_bias fields are copied from the device ChipInfo
    so that tile names can be converted to grid locations without a second
    lookup.
    """

    family: str
    device: str
    max_col: int
    max_row: int
    col_bias: int

    name: str
    num_frames: int
    bits_per_frame: int
    bit_offset: int
    frame_offset: int
    type: str
    sites: List[SiteInfo] = field(default_factory=list)

    @property
    def locator(self) -> TileLocator:
        """Key of this tile's bit database."""
        return TileLocator(self.family, self.type)
