"""
Device Catalog

Resolves device identities against the root devices document and extracts
per-device chip geometry.

The root document is laid out as:
    devices.json
    {
        "families": {
            "ECP5": {
                "devices": {
                    "LFE5U-45F": {"idcode": "0x41112043", "frames": 9470, ...}
                }
            }
        }
    }

ID codes are stored as strings because JSON has no hex literals.
"""

import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .documents import get_child, get_int, get_str, load_document
from .errors import DeviceNotFoundError, SchemaError
from .schema import ChipInfo, DeviceLocator

logger = logging.getLogger(__name__)

# Predicate over (device name, device node)
DevicePredicate = Callable[[str, Dict[str, Any]], bool]

DEVICES_FILENAME = "devices.json"


_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_OCT_DIGITS = re.compile(r"[0-7]+")
_DEC_DIGITS = re.compile(r"[0-9]+")


def parse_uint32(text: str) -> int:
    """
    Parse an unsigned 32-bit integer using C numeric literal prefixes.

    '0x'/'0X' selects hex, a leading '0' selects octal, anything else is
    decimal. Only plain ASCII digits are accepted: no sign, no underscores.
    The result is truncated to 32 bits.

    Examples:
        parse_uint32("0x1234") -> 4660
        parse_uint32("4660")   -> 4660
    """
    s = text.strip()
    if s[:2] in ("0x", "0X"):
        digits, pattern, base = s[2:], _HEX_DIGITS, 16
    elif len(s) > 1 and s[0] == "0":
        digits, pattern, base = s[1:], _OCT_DIGITS, 8
    else:
        digits, pattern, base = s, _DEC_DIGITS, 10
    if not pattern.fullmatch(digits):
        raise SchemaError(f"invalid ID code {text!r}")
    return int(digits, base) & 0xFFFFFFFF


class DeviceCatalog:
    """
    Lookup of devices in the root devices document.

    Both lookups share one traversal (families, then devices, in document
    order) so the first match always wins in the same way.
    """

    def __init__(self, devices: Dict[str, Any], source: Union[str, Path] = DEVICES_FILENAME):
        """
        Args:
            devices: Parsed root devices document
            source: Where the document came from, used in error messages
        """
        self._source = str(source)
        self._families = get_child(devices, "families", self._source)

    @classmethod
    def load(cls, db_root: Union[str, Path]) -> 'DeviceCatalog':
        """Parse {db_root}/devices.json."""
        path = Path(db_root) / DEVICES_FILENAME
        catalog = cls(load_document(path), path)
        logger.info(
            "Loaded %d devices in %d families from %s",
            len(catalog.devices()), len(catalog.families()), path,
        )
        return catalog

    def _iter_devices(self) -> Iterator[Tuple[str, str, Dict[str, Any]]]:
        for family, family_node in self._families.items():
            where = f"family '{family}' of {self._source}"
            for name, node in get_child(family_node, "devices", where).items():
                yield family, name, node

    def find_device(self, predicate: DevicePredicate) -> Optional[DeviceLocator]:
        """
        Return the first device for which predicate(name, node) is true.

        Args:
            predicate: Called with the device name and its document node

        Returns:
            DeviceLocator of the first match, or None
        """
        for family, name, node in self._iter_devices():
            if predicate(name, node):
                return DeviceLocator(family, name)
        return None

    def find_device_by_name(self, name: str) -> DeviceLocator:
        found = self.find_device(lambda n, node: n == name)
        if found is None:
            raise DeviceNotFoundError(f"no device in database with name {name}")
        return found

    def find_device_by_idcode(self, idcode: int) -> DeviceLocator:
        def matches(name: str, node: Dict[str, Any]) -> bool:
            where = f"device '{name}' of {self._source}"
            return parse_uint32(get_str(node, "idcode", where)) == idcode

        found = self.find_device(matches)
        if found is None:
            raise DeviceNotFoundError(
                f"no device in database with IDCODE 0x{idcode:08x}"
            )
        return found

    def _device_node(self, locator: DeviceLocator) -> Dict[str, Any]:
        family_node = self._families.get(locator.family)
        if family_node is None:
            raise DeviceNotFoundError(f"no family in database with name {locator.family}")
        devices = get_child(family_node, "devices", f"family '{locator.family}' of {self._source}")
        node = devices.get(locator.device)
        if node is None:
            raise DeviceNotFoundError(
                f"no device in database with name {locator.device} in family {locator.family}"
            )
        return node

    def get_chip_info(self, locator: DeviceLocator) -> ChipInfo:
        """
        Extract chip geometry for a device.

        Raises:
            DeviceNotFoundError: If the family or device is not in the database
            SchemaError: If a required field is missing or malformed
        """
        node = self._device_node(locator)
        where = f"device '{locator.device}' of {self._source}"
        return ChipInfo(
            family=locator.family,
            name=locator.device,
            num_frames=get_int(node, "frames", where),
            bits_per_frame=get_int(node, "bits_per_frame", where),
            pad_bits_before_frame=get_int(node, "pad_bits_before_frame", where),
            pad_bits_after_frame=get_int(node, "pad_bits_after_frame", where),
            idcode=parse_uint32(get_str(node, "idcode", where)),
            max_row=get_int(node, "max_row", where),
            max_col=get_int(node, "max_col", where),
            col_bias=get_int(node, "col_bias", where),
        )

    def families(self) -> List[str]:
        """List family names in document order."""
        return list(self._families.keys())

    def devices(self, family: Optional[str] = None) -> List[DeviceLocator]:
        """
        List devices in document order.

        Args:
            family: Restrict to one family (default: all families)
        """
        if family is not None and family not in self._families:
            raise DeviceNotFoundError(f"no family in database with name {family}")
        return [
            DeviceLocator(fam, name)
            for fam, name, _ in self._iter_devices()
            if family is None or fam == family
        ]

    def __contains__(self, locator: object) -> bool:
        if not isinstance(locator, DeviceLocator):
            return False
        family_node = self._families.get(locator.family)
        if not isinstance(family_node, dict):
            return False
        devices = family_node.get("devices")
        return isinstance(devices, dict) and locator.device in devices
