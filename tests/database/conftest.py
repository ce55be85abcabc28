"""
Shared fixtures for device database tests.

Builds a miniature database in a temporary directory:
    devices.json        ECP5 (2 devices) + MachXO2 (2 devices)
    ECP5/LFE5U-25F/     globals.json, tilegrid.json
    MachXO2/LCMXO2-1200HC/globals.json
    ECP5/tiledata/PLC2/bits.db
"""

import copy
import json
from pathlib import Path

import pytest

from trellisdb.database import reset_database


DEVICES = {
    "families": {
        "ECP5": {
            "devices": {
                "LFE5U-25F": {
                    "idcode": "0x41111043",
                    "frames": 7562,
                    "bits_per_frame": 592,
                    "pad_bits_after_frame": 0,
                    "pad_bits_before_frame": 0,
                    "max_row": 50,
                    "max_col": 72,
                    "col_bias": 0,
                },
                "LFE5U-45F": {
                    "idcode": "0x41112043",
                    "frames": 9470,
                    "bits_per_frame": 846,
                    "pad_bits_after_frame": 0,
                    "pad_bits_before_frame": 0,
                    "max_row": 71,
                    "max_col": 90,
                    "col_bias": 0,
                },
            }
        },
        "MachXO2": {
            "devices": {
                "LCMXO2-1200HC": {
                    "idcode": "0x012BA043",
                    "frames": 333,
                    "bits_per_frame": 304,
                    "pad_bits_after_frame": 8,
                    "pad_bits_before_frame": 0,
                    "max_row": 13,
                    "max_col": 22,
                    "col_bias": 1,
                },
                "LCMXO2-TEST": {
                    "idcode": "4660",
                    "frames": 10,
                    "bits_per_frame": 16,
                    "pad_bits_after_frame": 8,
                    "pad_bits_before_frame": 4,
                    "max_row": 3,
                    "max_col": 4,
                    "col_bias": 1,
                },
            }
        },
    }
}

ECP5_GLOBALS = {
    "quadrants": {
        "UL": {"x0": 0, "x1": 35, "y0": 0, "y1": 24},
        "LL": {"x0": 0, "x1": 35, "y0": 25, "y1": 50},
    },
    "taps": {
        "C6": {"lx0": 0, "lx1": 3, "rx0": 3, "rx1": 10},
        "C14": {"lx0": 10, "lx1": 11, "rx0": 11, "rx1": 18},
    },
    "spines": {
        "UL6": {"x": 6, "y": 11},
        "LL14": {"x": 14, "y": 35},
    },
}

MACHXO2_GLOBALS = {
    "lr-conns": {
        "LEFT": {"row": 6, "row-span": [0, 13]},
    },
    "ud-conns": {
        "0": [1, 2],
        "1": [5],
    },
    "branch-spans": {
        "0": {"1": [10, 20], "2": [30, 40]},
        "1": {"5": [1, 1]},
    },
    "missing-dccs": {
        "3": [0, 4],
    },
}

TILEGRID = {
    "R2C2:PLC2": {
        "cols": 48,
        "rows": 64,
        "start_bit": 0,
        "start_frame": 16,
        "type": "PLC2",
        "sites": [
            {"name": "SLICEA", "pos_col": 2, "pos_row": 2},
            {"name": "SLICEB", "pos_col": 2, "pos_row": 2},
        ],
    },
    "R2C3:PLC2": {
        "cols": 48,
        "rows": 64,
        "start_bit": 0,
        "start_frame": 64,
        "type": "PLC2",
        "sites": [],
    },
    "R1C1:EBR": {
        "cols": 24,
        "rows": 32,
        "start_bit": 64,
        "start_frame": 0,
        "type": "EBR",
        "sites": [{"name": "EBR", "pos_col": 1, "pos_row": 1}],
    },
}

BITS_DB = """\
.mux R0C0_A0
R0C0_H02W0701 F0 F1

.config LUT0.INIT
F2B0
"""


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    return path


@pytest.fixture
def db_root(tmp_path):
    """Miniature device database on disk."""
    root = tmp_path / "database"
    write_json(root / "devices.json", DEVICES)
    write_json(root / "ECP5" / "LFE5U-25F" / "globals.json", ECP5_GLOBALS)
    write_json(root / "ECP5" / "LFE5U-25F" / "tilegrid.json", TILEGRID)
    write_json(root / "MachXO2" / "LCMXO2-1200HC" / "globals.json", MACHXO2_GLOBALS)
    bits = root / "ECP5" / "tiledata" / "PLC2" / "bits.db"
    bits.parent.mkdir(parents=True)
    bits.write_text(BITS_DB)
    return root


@pytest.fixture(autouse=True)
def fresh_database():
    """Isolate tests from the process-wide database instance."""
    reset_database()
    yield
    reset_database()


@pytest.fixture
def devices_doc():
    return copy.deepcopy(DEVICES)


@pytest.fixture
def ecp5_globals_doc():
    return copy.deepcopy(ECP5_GLOBALS)


@pytest.fixture
def machxo2_globals_doc():
    return copy.deepcopy(MACHXO2_GLOBALS)


@pytest.fixture
def tilegrid_doc():
    return copy.deepcopy(TILEGRID)
