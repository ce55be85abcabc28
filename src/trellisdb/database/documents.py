"""
Document Store

Loads JSON documents from the database tree and provides typed field access
on the parsed nodes. Key order of every JSON object is preserved, so
iteration follows document order.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from .errors import DatabaseIOError, NotFoundError, SchemaError

logger = logging.getLogger(__name__)


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a JSON document.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed top-level object

    Raises:
        NotFoundError: If the file does not exist
        DatabaseIOError: If the file cannot be read
        SchemaError: If the file is not valid JSON or its top level is not an object
    """
    path = Path(path)
    logger.debug("Loading document %s", path)
    try:
        with open(path) as f:
            doc = json.load(f)
    except FileNotFoundError as e:
        raise NotFoundError(f"database file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise SchemaError(f"invalid JSON in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DatabaseIOError(f"cannot read database file {path}: {e}") from e

    if not isinstance(doc, dict):
        raise SchemaError(f"expected a JSON object at the top level of {path}")
    return doc


def get_child(node: Dict[str, Any], key: str, where: str) -> Dict[str, Any]:
    """Return the object stored under `key`, raising SchemaError if absent."""
    if not isinstance(node, dict) or key not in node:
        raise SchemaError(f"missing '{key}' in {where}")
    child = node[key]
    if not isinstance(child, dict):
        raise SchemaError(f"'{key}' in {where} is not an object")
    return child


def get_list(node: Dict[str, Any], key: str, where: str) -> List[Any]:
    """Return the array stored under `key`, raising SchemaError if absent."""
    if not isinstance(node, dict) or key not in node:
        raise SchemaError(f"missing '{key}' in {where}")
    value = node[key]
    if not isinstance(value, list):
        raise SchemaError(f"'{key}' in {where} is not an array")
    return value


def get_int(node: Dict[str, Any], key: str, where: str) -> int:
    """Return the integer stored under `key`, raising SchemaError if absent."""
    if not isinstance(node, dict) or key not in node:
        raise SchemaError(f"missing '{key}' in {where}")
    return as_int(node[key], f"'{key}' in {where}")


def get_str(node: Dict[str, Any], key: str, where: str) -> str:
    """Return the string stored under `key`, raising SchemaError if absent."""
    if not isinstance(node, dict) or key not in node:
        raise SchemaError(f"missing '{key}' in {where}")
    value = node[key]
    if not isinstance(value, str):
        raise SchemaError(f"'{key}' in {where} is not a string")
    return value


def as_int(value: Any, what: str) -> int:
    """Coerce a JSON value to int. Booleans and floats are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaError(f"{what} is not an integer: {value!r}")
    return value


def parse_int_key(key: str, what: str) -> int:
    """Parse a decimal integer stored as an object key (JSON keys are strings)."""
    try:
        return int(key, 10)
    except ValueError:
        raise SchemaError(f"{what}: key {key!r} is not a decimal integer") from None
