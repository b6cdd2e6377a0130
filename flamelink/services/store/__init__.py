"""Realtime store capability and its Firebase implementation.

Tree layout used by Flamelink:
- environments/{env}/content/{contentType}/{locale}/{entryKey}: content entries
- environments/{env}/navigation/{navKey}/{locale}: navigation menus
- schemas/{schemaKey}: content type schemas
- settings/{key}: locales, environments, globals and general settings
"""
from ._client import init_app
from .base import (
    EventType,
    ListenerRegistration,
    Reference,
    Snapshot,
    Store,
    child_events,
)
from .firebase import FirebaseReference, FirebaseStore

__all__ = [
    "init_app",
    "EventType",
    "ListenerRegistration",
    "Reference",
    "Snapshot",
    "Store",
    "child_events",
    "FirebaseReference",
    "FirebaseStore",
]
