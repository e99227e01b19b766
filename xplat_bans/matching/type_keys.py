"""
Canonical lookup keys for resolved types.
"""

from typing import Optional

NULL_TYPE_KEY = "nullType"
GENERIC_DELIMITER = "<"


def normalize_type(type_ref: Optional[str]) -> str:
    """
    Convert a resolved type into the key used for registry lookups.

    Generic parameters are dropped so ``java.util.List<org.joda.time.DateTime>``
    and ``java.util.List`` share the key ``java.util.List``. An absent type
    maps to ``NULL_TYPE_KEY``.

    Args:
        type_ref: Fully qualified textual form of the type, or None

    Returns:
        Raw type key
    """
    if not type_ref:
        return NULL_TYPE_KEY

    index = type_ref.find(GENERIC_DELIMITER)
    if index != -1:
        return type_ref[:index]
    return type_ref
