"""Ordering and filtering applied to store references.

Every builder call returns a new reference handle; the reference passed in is
never modified.
"""
from typing import Any, Mapping, Optional

from flamelink.errors import InvalidOrderByChildError

QueryOptions = Mapping[str, Any]

ORDER_BY_OPTIONS = ("order_by_child", "order_by_value", "order_by_key")

# Application order for filters
FILTER_OPTIONS = ("limit_to_first", "limit_to_last", "start_at", "end_at", "equal_to")


def apply_order_by(ref, options: Optional[QueryOptions] = None):
    """Apply at most one ordering; precedence is child > value > key."""
    options = options or {}
    child = options.get("order_by_child")

    if child is not None:
        if not isinstance(child, str) or child == "":
            raise InvalidOrderByChildError(
                '"order_by_child" should specify the child key to order by'
            )
        return ref.order_by_child(child)

    if options.get("order_by_value"):
        return ref.order_by_value()

    if options.get("order_by_key"):
        return ref.order_by_key()

    return ref


def apply_filters(ref, options: Optional[QueryOptions] = None):
    """Apply every present filter option in FILTER_OPTIONS order.

    A filter is present when its value is not None, so falsy bounds such as
    `0`, `False` or `""` are applied rather than skipped.
    """
    if not options:
        return ref

    for name in FILTER_OPTIONS:
        value = options.get(name)
        if value is None:
            continue
        ref = getattr(ref, name)(value)
    return ref


def apply_query(ref, options: Optional[QueryOptions] = None):
    """Ordering first, then filters."""
    return apply_filters(apply_order_by(ref, options), options)
