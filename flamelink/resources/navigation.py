"""Navigation menus: /environments/{env}/navigation/{navKey}/{locale}."""
from typing import Any

from flamelink.core.compose import compose
from flamelink.core.paths import build_navigation_path
from flamelink.core.projection import pluck_fields
from flamelink.services.store.base import Snapshot

from .base import ResourceAPI, is_missing

ITEMS_KEY = "items"


class Navigation(ResourceAPI):
    kind = "navigation"

    def _path(self, key) -> str:
        context = self._client.context
        return build_navigation_path(key, context.env, context.locale)

    def _entry_key(self, key, entry_key):
        # A navigation key addresses one menu
        return key if is_missing(entry_key) else entry_key

    async def get_items_raw(self, nav_key, **options) -> Snapshot:
        """Raw snapshot of a menu's items."""
        return await self.get_raw(nav_key, ITEMS_KEY, **options)

    async def get_items(self, nav_key, **options) -> Any:
        """A menu's items, each projected to `fields` if given."""
        pipeline = compose(
            lambda snapshot: pluck_fields(snapshot.val(), options.get("fields")),
            lambda key: self.get_items_raw(key, **options),
        )
        return await pipeline(nav_key)
