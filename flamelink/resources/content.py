"""Content entries: /environments/{env}/content/{contentType}/{locale}/{entryKey}."""
from flamelink.core.paths import build_content_path

from .base import ResourceAPI


class Content(ResourceAPI):
    """Content entries of the client's current environment and locale.

    Usage:
        products = await app.content.get("products", order_by_child="price", limit_to_first=10)
        product = await app.content.get("products", 1491827711368, fields=["titleA", "price"])
    """

    kind = "content"

    def _path(self, key) -> str:
        context = self._client.context
        return build_content_path(key, context.env, context.locale)
