"""Content type schemas: /schemas/{schemaKey}."""
from typing import Any

from flamelink.core.compose import compose
from flamelink.core.paths import build_schema_path
from flamelink.core.projection import pluck_fields
from flamelink.services.store.base import Snapshot

from .base import ResourceAPI, is_missing

FIELDS_KEY = "fields"


class Schemas(ResourceAPI):
    kind = "schemas"

    def _path(self, key) -> str:
        return build_schema_path(key)

    def _entry_key(self, key, entry_key):
        return key if is_missing(entry_key) else entry_key

    async def get_fields_raw(self, schema_key, **options) -> Snapshot:
        """Raw snapshot of a schema's field definitions."""
        return await self.get_raw(schema_key, FIELDS_KEY, **options)

    async def get_fields(self, schema_key, **options) -> Any:
        """A schema's field definitions, each projected to `fields` if given."""
        pipeline = compose(
            lambda snapshot: pluck_fields(snapshot.val(), options.get("fields")),
            lambda key: self.get_fields_raw(key, **options),
        )
        return await pipeline(schema_key)
