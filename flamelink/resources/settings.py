"""Project settings: /settings/{key}.

Locales and environments are keyed maps; their keys are the supported
values used to validate `Flamelink.set_locale` and `Flamelink.set_env`.
"""
from typing import Any, List

from flamelink.core.paths import build_settings_path

from .base import ReadableResource, is_missing


class Settings(ReadableResource):
    kind = "settings"

    LOCALES = "locales"
    ENVIRONMENTS = "environments"
    GLOBALS = "globals"
    IMAGE_SIZES = "general/imageSizes"
    DEFAULT_PERMISSIONS_GROUP = "general/defaultPermissionsGroup"

    def _path(self, key) -> str:
        return build_settings_path(key)

    def _entry_key(self, key, entry_key):
        return key if is_missing(entry_key) else entry_key

    async def _keys(self, key: str) -> List[str]:
        value = await self.get(key)
        if isinstance(value, dict):
            return list(value.keys())
        if isinstance(value, list):
            return [str(item) for item in value if item is not None]
        return []

    async def get_locales(self) -> List[str]:
        return await self._keys(self.LOCALES)

    async def get_environments(self) -> List[str]:
        return await self._keys(self.ENVIRONMENTS)

    async def get_globals(self, **options) -> Any:
        return await self.get(self.GLOBALS, **options)

    async def get_image_sizes(self, **options) -> Any:
        return await self.get(self.IMAGE_SIZES, **options)

    async def get_default_permissions_group(self, **options) -> Any:
        return await self.get(self.DEFAULT_PERMISSIONS_GROUP, **options)
