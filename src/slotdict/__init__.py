"""slotdict: a string-keyed map with slot reuse, default values and change hooks."""

from importlib.metadata import version as _version

__version__ = _version("slotdict")

from slotdict._keys import InvalidKeyType, normalize_key, restore_key
from slotdict.changes import (
    MISSING,
    MapChanges,
    add_before_map_change_listener,
    add_map_change_listener,
)
from slotdict.generic import GenericCollection, GenericMap
from slotdict.dict import Dict
# textual NOT auto-imported, opt-in only

__all__ = [
    "Dict",
    "GenericCollection",
    "GenericMap",
    "MapChanges",
    "MISSING",
    "add_map_change_listener",
    "add_before_map_change_listener",
    "InvalidKeyType",
    "normalize_key",
    "restore_key",
]
