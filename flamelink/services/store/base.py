"""Store capability consumed by the SDK.

A Store hands out References for paths. References are immutable query
builders: every ordering/filter call returns a new Reference. Reads return
Snapshots; subscriptions return a registration with `close()`.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, List, Mapping, Optional, Protocol


class EventType(str, Enum):
    """Subscription event kinds."""
    VALUE = "value"
    CHILD_ADDED = "child_added"
    CHILD_REMOVED = "child_removed"
    CHILD_CHANGED = "child_changed"
    CHILD_MOVED = "child_moved"


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time value at a store location."""
    key: Optional[str]
    value: Any = None

    def val(self) -> Any:
        return self.value

    @property
    def exists(self) -> bool:
        return self.value is not None


class ListenerRegistration(Protocol):
    def close(self) -> None: ...


SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[Exception], None]


class Reference(Protocol):
    """Handle at a store path, composable via ordering/filter builders."""

    key: Optional[str]
    path: str

    def child(self, path: str) -> "Reference": ...
    def order_by_child(self, field: str) -> "Reference": ...
    def order_by_value(self) -> "Reference": ...
    def order_by_key(self) -> "Reference": ...
    def limit_to_first(self, limit: int) -> "Reference": ...
    def limit_to_last(self, limit: int) -> "Reference": ...
    def start_at(self, value: Any) -> "Reference": ...
    def end_at(self, value: Any) -> "Reference": ...
    def equal_to(self, value: Any) -> "Reference": ...

    def once(self) -> Snapshot: ...
    def on(
        self,
        event: EventType,
        callback: SnapshotCallback,
        error_callback: Optional[ErrorCallback] = None,
    ) -> ListenerRegistration: ...

    def set(self, value: Any) -> None: ...
    def update(self, value: Mapping[str, Any]) -> None: ...
    def remove(self) -> None: ...
    def transaction(self, update_fn: Callable[[Any], Any]) -> Any: ...


class Store(Protocol):
    def reference(self, path: str) -> Reference: ...


def _children(value: Any) -> "dict":
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, list):
        return {str(index): item for index, item in enumerate(value) if item is not None}
    return {}


def child_events(previous: Any, current: Any, event: EventType) -> Iterator[Snapshot]:
    """Derive child_* snapshots by diffing two values of the same location.

    `previous` is None before the first delivery, so every existing child is
    reported as added at subscription time.
    """
    before = _children(previous)
    after = _children(current)

    if event is EventType.CHILD_ADDED:
        for key, value in after.items():
            if key not in before:
                yield Snapshot(key, value)

    elif event is EventType.CHILD_REMOVED:
        for key, value in before.items():
            if key not in after:
                yield Snapshot(key, value)

    elif event is EventType.CHILD_CHANGED:
        for key, value in after.items():
            if key in before and before[key] != value:
                yield Snapshot(key, value)

    elif event is EventType.CHILD_MOVED:
        old_order: List[str] = [key for key in before if key in after]
        new_order: List[str] = [key for key in after if key in before]
        for index, key in enumerate(new_order):
            if old_order[index] != key:
                yield Snapshot(key, after[key])
