"""Field projection for fetched values."""
from typing import Any, Mapping, Optional, Sequence


def _pluck(entry: Any, fields: Sequence[str]) -> Any:
    if not isinstance(entry, Mapping):
        return entry
    return {field: entry[field] for field in fields if field in entry}


def pluck_fields(result_set: Any, fields: Optional[Sequence[str]]) -> Any:
    """Keep only `fields` on each entry of a list or keyed mapping.

    Mappings are projected one level down: keys are kept and each child entry
    is reduced. Fields missing on an entry are left out, not set to None.
    Anything else is returned unchanged.
    """
    if result_set is None or not isinstance(fields, (list, tuple)):
        return result_set

    if isinstance(result_set, list):
        return [_pluck(entry, fields) for entry in result_set]

    if isinstance(result_set, Mapping):
        return {key: _pluck(entry, fields) for key, entry in result_set.items()}

    return result_set


def project_entry(value: Any, entry_key: Any, fields: Optional[Sequence[str]]) -> Any:
    """Project a value read from a single entry (or a whole collection)."""
    if entry_key is None or entry_key == "":
        return pluck_fields(value, fields)
    if value is None:
        return None
    return pluck_fields({entry_key: value}, fields)[entry_key]
