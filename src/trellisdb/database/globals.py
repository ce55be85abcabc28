"""
Globals Decoders

Decode the per-device globals.json document into a typed routing model.
The two supported families use unrelated schemas, so each has its own
decoder and its own result type:

    ECP5 style:
        {"quadrants": {"UL": {"x0": 0, "x1": 35, "y0": 0, "y1": 24}, ...},
         "taps":      {"C6": {"lx0": 0, "lx1": 3, "rx0": 3, "rx1": 10}, ...},
         "spines":    {"UL7": {"x": 7, "y": 11}, ...}}

    MachXO2 style:
        {"lr-conns":     {"LEFT": {"row": 6, "row-span": [0, 13]}, ...},
         "ud-conns":     {"0": [1, 2], "1": [5], ...},
         "branch-spans": {"0": {"1": [0, 2], "2": [0, 3]}, "1": {"5": [1, 1]}, ...},
         "missing-dccs": {"3": [0, 4], ...}}

Column-indexed MachXO2 sections must list their columns as "0", "1", "2", ...
in that order.
"""

from typing import Any, Dict, List, Tuple, Union

from .documents import as_int, get_child, get_int, get_list, parse_int_key
from .errors import SchemaError, UnsupportedFamilyError
from .schema import (
    Ecp5GlobalsInfo,
    GlobalRegion,
    LeftRightConn,
    MachXO2GlobalsInfo,
    MissingDccs,
    SpineSegment,
    TapSegment,
)

GlobalsInfo = Union[Ecp5GlobalsInfo, MachXO2GlobalsInfo]

ECP5_FAMILIES = ("ECP5",)
MACHXO2_FAMILIES = ("MachXO", "MachXO2", "MachXO3", "MachXO3D")


def _pair(value: Any, what: str) -> Tuple[int, int]:
    # Only the first two entries are significant
    if not isinstance(value, list) or len(value) < 2:
        raise SchemaError(f"{what} must be an array of at least two integers")
    return as_int(value[0], what), as_int(value[1], what)


def _int_list(value: Any, what: str) -> List[int]:
    if not isinstance(value, list):
        raise SchemaError(f"{what} is not an array")
    return [as_int(v, what) for v in value]


# =============================================================================
# ECP5
# =============================================================================

def _parse_tap_key(key: str, where: str) -> int:
    if not key.startswith("C"):
        raise SchemaError(f"{where}: key does not start with 'C'")
    return parse_int_key(key[1:], where)


def _parse_spine_key(key: str, where: str) -> Tuple[str, int]:
    if len(key) < 3:
        raise SchemaError(f"{where}: key is too short")
    return key[:2], parse_int_key(key[2:], where)


def decode_ecp5_globals(doc: Dict[str, Any], source: str = "globals.json") -> Ecp5GlobalsInfo:
    """
    Decode an ECP5 style globals document.

    Args:
        doc: Parsed globals.json
        source: Document name for error messages

    Returns:
        Ecp5GlobalsInfo with quadrants, taps and spines in document order

    Raises:
        SchemaError: If a section is missing or a key is malformed
    """
    glbs = Ecp5GlobalsInfo()

    for name, quad in get_child(doc, "quadrants", source).items():
        where = f"quadrant '{name}' of {source}"
        glbs.quadrants.append(GlobalRegion(
            name=name,
            x0=get_int(quad, "x0", where),
            x1=get_int(quad, "x1", where),
            y0=get_int(quad, "y0", where),
            y1=get_int(quad, "y1", where),
        ))

    for key, tap in get_child(doc, "taps", source).items():
        where = f"tap '{key}' of {source}"
        glbs.tapsegs.append(TapSegment(
            tap_col=_parse_tap_key(key, where),
            lx0=get_int(tap, "lx0", where),
            lx1=get_int(tap, "lx1", where),
            rx0=get_int(tap, "rx0", where),
            rx1=get_int(tap, "rx1", where),
        ))

    for key, spine in get_child(doc, "spines", source).items():
        where = f"spine '{key}' of {source}"
        quadrant, tap_col = _parse_spine_key(key, where)
        glbs.spinesegs.append(SpineSegment(
            quadrant=quadrant,
            tap_col=tap_col,
            spine_row=get_int(spine, "y", where),
            spine_col=get_int(spine, "x", where),
        ))

    return glbs


# =============================================================================
# MachXO2
# =============================================================================

def _check_column(key: str, expected: int, section: str, source: str) -> None:
    col = parse_int_key(key, f"'{section}' of {source}")
    if col != expected:
        raise SchemaError(
            f"'{section}' of {source}: expected column {expected}, found {key!r}"
        )


def decode_machxo2_globals(doc: Dict[str, Any], source: str = "globals.json") -> MachXO2GlobalsInfo:
    """
    Decode a MachXO2 style globals document.

    Branch spans are looked up per column by global id, in the order the ids
    appear in that column's ud-conns entry, so branch_spans[col][i] always
    belongs to ud_conns[col][i].

    Args:
        doc: Parsed globals.json
        source: Document name for error messages

    Raises:
        SchemaError: If a section is missing, a column is out of order or
            a branch span is missing for a connected global
    """
    glbs = MachXO2GlobalsInfo()

    for name, lr in get_child(doc, "lr-conns", source).items():
        where = f"lr-conn '{name}' of {source}"
        glbs.lr_conns.append(LeftRightConn(
            name=name,
            row=get_int(lr, "row", where),
            row_span=_pair(get_list(lr, "row-span", where), f"'row-span' in {where}"),
        ))

    for col_no, (key, globals_in_col) in enumerate(get_child(doc, "ud-conns", source).items()):
        _check_column(key, col_no, "ud-conns", source)
        glbs.ud_conns.append(_int_list(globals_in_col, f"ud-conns column {key} of {source}"))

    for col_no, (key, spans) in enumerate(get_child(doc, "branch-spans", source).items()):
        _check_column(key, col_no, "branch-spans", source)
        if col_no >= len(glbs.ud_conns):
            raise SchemaError(
                f"'branch-spans' of {source}: column {key} has no 'ud-conns' entry"
            )
        where = f"branch-spans column {key} of {source}"
        if not isinstance(spans, dict):
            raise SchemaError(f"{where} is not an object")
        col_spans = []
        for global_no in glbs.ud_conns[col_no]:
            global_key = str(global_no)
            if global_key not in spans:
                raise SchemaError(f"missing span for global {global_no} in {where}")
            col_spans.append(_pair(spans[global_key], f"global {global_no} in {where}"))
        glbs.branch_spans.append(col_spans)
    if len(glbs.branch_spans) != len(glbs.ud_conns):
        raise SchemaError(
            f"'branch-spans' of {source} has {len(glbs.branch_spans)} columns, "
            f"'ud-conns' has {len(glbs.ud_conns)}"
        )

    for key, missing in get_child(doc, "missing-dccs", source).items():
        glbs.missing_dccs.append(MissingDccs(
            row=parse_int_key(key, f"'missing-dccs' of {source}"),
            missing=_int_list(missing, f"missing-dccs row {key} of {source}"),
        ))

    return glbs


def decode_globals(family: str, doc: Dict[str, Any], source: str = "globals.json") -> GlobalsInfo:
    """Decode a globals document with the decoder for `family`."""
    if family in ECP5_FAMILIES:
        return decode_ecp5_globals(doc, source)
    if family in MACHXO2_FAMILIES:
        return decode_machxo2_globals(doc, source)
    raise UnsupportedFamilyError(f"no globals schema for family {family}")
