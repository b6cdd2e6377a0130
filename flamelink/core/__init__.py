"""Query construction and result shaping."""
from .compose import compose
from .paths import (
    build_content_path,
    build_navigation_path,
    build_schema_path,
    build_settings_path,
    join_path,
)
from .projection import pluck_fields, project_entry
from .query import FILTER_OPTIONS, ORDER_BY_OPTIONS, apply_filters, apply_order_by, apply_query

__all__ = [
    "compose",
    "build_content_path",
    "build_navigation_path",
    "build_schema_path",
    "build_settings_path",
    "join_path",
    "pluck_fields",
    "project_entry",
    "FILTER_OPTIONS",
    "ORDER_BY_OPTIONS",
    "apply_filters",
    "apply_order_by",
    "apply_query",
]
