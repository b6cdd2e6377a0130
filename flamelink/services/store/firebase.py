"""Firebase Realtime Database implementation of the store capability.

firebase_admin queries mutate themselves as they are built, so
FirebaseReference records builder calls and only materializes a Query when
it reads.
"""
from typing import Any, Callable, Mapping, Optional, Tuple

import firebase_admin
from firebase_admin import db

from .base import (
    ErrorCallback,
    EventType,
    Snapshot,
    SnapshotCallback,
    child_events,
)

ORDERINGS = ("order_by_child", "order_by_value", "order_by_key")

Operation = Tuple[str, Tuple[Any, ...]]


class FirebaseReference:
    """Immutable query builder over a firebase_admin Reference."""

    def __init__(self, reference: db.Reference, operations: Tuple[Operation, ...] = ()):
        self._reference = reference
        self._operations = operations

    @property
    def key(self) -> Optional[str]:
        return self._reference.key

    @property
    def path(self) -> str:
        return self._reference.path

    @property
    def operations(self) -> Tuple[Operation, ...]:
        return self._operations

    def _with(self, name: str, *args) -> "FirebaseReference":
        return FirebaseReference(self._reference, self._operations + ((name, args),))

    def child(self, path: str) -> "FirebaseReference":
        return FirebaseReference(self._reference.child(str(path)), self._operations)

    def order_by_child(self, field: str) -> "FirebaseReference":
        return self._with("order_by_child", field)

    def order_by_value(self) -> "FirebaseReference":
        return self._with("order_by_value")

    def order_by_key(self) -> "FirebaseReference":
        return self._with("order_by_key")

    def limit_to_first(self, limit: int) -> "FirebaseReference":
        return self._with("limit_to_first", limit)

    def limit_to_last(self, limit: int) -> "FirebaseReference":
        return self._with("limit_to_last", limit)

    def start_at(self, value: Any) -> "FirebaseReference":
        return self._with("start_at", value)

    def end_at(self, value: Any) -> "FirebaseReference":
        return self._with("end_at", value)

    def equal_to(self, value: Any) -> "FirebaseReference":
        return self._with("equal_to", value)

    def _query(self):
        if not self._operations:
            return self._reference

        orderings = [op for op in self._operations if op[0] in ORDERINGS]
        filters = [op for op in self._operations if op[0] not in ORDERINGS]
        if len(orderings) > 1:
            raise ValueError("Only one ordering can be applied to a query")
        # The database rejects filters without an explicit ordering
        if not orderings:
            orderings = [("order_by_key", ())]

        name, args = orderings[0]
        query = getattr(self._reference, name)(*args)
        for name, args in filters:
            query = getattr(query, name)(*args)
        return query

    def once(self) -> Snapshot:
        return Snapshot(self.key, self._query().get())

    def on(
        self,
        event: EventType,
        callback: SnapshotCallback,
        error_callback: Optional[ErrorCallback] = None,
    ) -> db.ListenerRegistration:
        """Listen on the underlying location, re-reading the query per change."""
        event = EventType(event)
        state = {"value": None}

        def handle(_stream_event: db.Event) -> None:
            try:
                snapshot = self.once()
            except Exception as e:
                if error_callback is None:
                    raise
                error_callback(e)
                return

            previous, state["value"] = state["value"], snapshot.val()
            if event is EventType.VALUE:
                callback(snapshot)
                return
            for child in child_events(previous, snapshot.val(), event):
                callback(child)

        return self._reference.listen(handle)

    def set(self, value: Any) -> None:
        self._reference.set(value)

    def update(self, value: Mapping[str, Any]) -> None:
        self._reference.update(dict(value))

    def remove(self) -> None:
        self._reference.delete()

    def transaction(self, update_fn: Callable[[Any], Any]) -> Any:
        return self._reference.transaction(update_fn)


class FirebaseStore:
    """Store backed by a firebase_admin app's Realtime Database."""

    def __init__(self, app: Optional[firebase_admin.App] = None):
        self.app = app

    def reference(self, path: str) -> FirebaseReference:
        return FirebaseReference(db.reference(path, app=self.app))
