"""Resource APIs exposed on a Flamelink client."""
from .base import ReadableResource, ResourceAPI
from .content import Content
from .navigation import Navigation
from .schemas import Schemas
from .settings import Settings

__all__ = ["ReadableResource", "ResourceAPI", "Content", "Navigation", "Schemas", "Settings"]
