"""Shared read, subscribe and write operations for Flamelink resources.

Every read is one pipeline: build path -> reference -> ordering/filters ->
store read -> field projection. Paths and options are validated before the
store is touched.
"""
import asyncio
import inspect
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Set

from flamelink.core.compose import compose
from flamelink.core.paths import join_path
from flamelink.core.projection import project_entry
from flamelink.core.query import apply_query
from flamelink.core.subscriptions import Subscription, subscription_key
from flamelink.errors import MissingArgumentError
from flamelink.services.store.base import EventType, Reference, Snapshot
from flamelink.utils.deprecate import deprecate
from flamelink.utils.logging import get_logger

if TYPE_CHECKING:
    from flamelink.client import Flamelink


def is_missing(value) -> bool:
    return value is None or value == ""


class ReadableResource:
    """Read-only access to one kind of resource."""

    kind: str = ""

    def __init__(self, client: "Flamelink"):
        self._client = client
        self.logger = get_logger(self.kind)

    def _path(self, key) -> str:
        raise NotImplementedError

    def _entry_key(self, key, entry_key):
        """Key of the single entry a read addresses, None for collections."""
        return entry_key

    def ref(self, key=None, entry_key=None) -> Reference:
        """Reference to a resource, or to one entry below it."""
        if not is_missing(entry_key) and is_missing(key):
            raise MissingArgumentError(f"A {self.kind} key is required to address an entry")
        path = join_path(self._path(key), entry_key)
        return self._client.store.reference(path)

    async def _read(self, ref: Reference) -> Snapshot:
        return await self._client.call(ref.once, action="database_read", path=ref.path)

    async def get_raw(self, key=None, entry_key=None, **options) -> Snapshot:
        """Read once and return the raw snapshot."""
        pipeline = compose(
            self._read,
            lambda ref: apply_query(ref, options),
            lambda keys: self.ref(*keys),
        )
        return await pipeline((key, entry_key))

    async def get(self, key=None, entry_key=None, **options) -> Any:
        """Read once and return the value, projected to `fields` if given."""
        pipeline = compose(
            lambda snapshot: project_entry(
                snapshot.val(), self._entry_key(key, entry_key), options.get("fields")
            ),
            lambda keys: self.get_raw(*keys, **options),
        )
        return await pipeline((key, entry_key))

    async def get_by_field_raw(self, key, field: str, value: Any, **options) -> Snapshot:
        """Entries whose child `field` equals `value`, as a raw snapshot."""
        return await self.get_raw(key, **{**options, "order_by_child": field, "equal_to": value})

    async def get_by_field(self, key, field: str, value: Any, **options) -> Any:
        return await self.get(key, **{**options, "order_by_child": field, "equal_to": value})


class ResourceAPI(ReadableResource):
    """Full read, subscribe and write access to one kind of resource."""

    # ==================== Subscriptions ====================

    async def subscribe_raw(
        self,
        key,
        callback: Callable[[Snapshot], Any],
        entry_key=None,
        *,
        event: EventType = EventType.VALUE,
        on_error: Optional[Callable[[Exception], Any]] = None,
        **options
    ) -> Subscription:
        """Listen for changes, delivering raw snapshots to `callback`.

        Callbacks run on the event loop that created the subscription.
        Coroutine callbacks are scheduled as tasks owned by the subscription.
        Exceptions raised by `callback` go to `on_error`, or are logged.
        A store error goes to `on_error`; without one it is logged and the
        subscription is closed.
        """
        event = EventType(event)
        ref = apply_query(self.ref(key, entry_key), options)
        registry = self._client.subscriptions
        loop = asyncio.get_running_loop()
        tasks: Set[asyncio.Future] = set()
        state = {"subscription": None, "failed": False}
        context = {"key": str(key), "entry_key": entry_key, "event_type": event.value}

        def log_callback_error(error: Exception):
            self.logger.error(
                "subscription_callback_failed",
                error=str(error)[:100],
                error_type=type(error).__name__,
                **context,
            )

        def callback_failed(error: Exception):
            if on_error is None:
                log_callback_error(error)
            else:
                run(on_error, error, log_callback_error)

        def settle(task: asyncio.Future, on_failure: Callable[[Exception], Any]):
            tasks.discard(task)
            if task.cancelled():
                return
            error = task.exception()
            if error is not None:
                on_failure(error)

        def run(func, argument, on_failure: Callable[[Exception], Any]):
            subscription = state["subscription"]
            if subscription is not None and subscription.closed:
                return
            try:
                result = func(argument)
            except Exception as e:
                on_failure(e)
                return
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                tasks.add(task)
                task.add_done_callback(lambda done: settle(done, on_failure))

        def close_later(subscription: Subscription):
            task = asyncio.ensure_future(asyncio.to_thread(subscription.close))
            tasks.add(task)
            task.add_done_callback(lambda done: settle(done, log_callback_error))

        def stream_failed(error: Exception):
            if on_error is not None:
                run(on_error, error, log_callback_error)
                return
            self.logger.error(
                "subscription_failed",
                error=str(error)[:100],
                error_type=type(error).__name__,
                **context,
            )
            subscription = state["subscription"]
            if subscription is None:
                # Failed while the listener was still being attached
                state["failed"] = True
            elif not subscription.closed:
                close_later(subscription)

        # Listener setup is not timed: a late registration would never be closed
        registration = await self._client.call(
            ref.on,
            event,
            lambda snapshot: loop.call_soon_threadsafe(run, callback, snapshot, callback_failed),
            lambda error: loop.call_soon_threadsafe(stream_failed, error),
            action="database_subscribe",
            timed=False,
            path=ref.path,
        )
        subscription = Subscription(
            subscription_key(self.kind, key, entry_key, event), registration, registry, tasks
        )
        state["subscription"] = subscription
        try:
            registry.add(subscription)
            self.logger.info("subscription_opened", **context)
        except Exception:
            await asyncio.to_thread(subscription.close)
            raise

        if state["failed"]:
            await asyncio.to_thread(subscription.close)
        return subscription

    async def subscribe(
        self,
        key,
        callback: Callable[[Any], Any],
        entry_key=None,
        *,
        event: EventType = EventType.VALUE,
        on_error: Optional[Callable[[Exception], Any]] = None,
        **options
    ) -> Subscription:
        """Listen for changes, delivering projected values to `callback`.

        For child events each delivered value is the changed child entry.
        """
        event = EventType(event)
        fields = options.get("fields")

        def deliver(snapshot: Snapshot):
            if event is EventType.VALUE:
                value = project_entry(snapshot.val(), self._entry_key(key, entry_key), fields)
                return callback(value)
            return callback(project_entry(snapshot.val(), snapshot.key, fields))

        return await self.subscribe_raw(
            key, deliver, entry_key, event=event, on_error=on_error, **options
        )

    async def unsubscribe(self, key=None, entry_key=None, event: Optional[EventType] = None) -> int:
        """Close this client's subscriptions on exactly (key, entry_key).

        Returns:
            Number of subscriptions closed
        """
        closed = await asyncio.to_thread(
            self._client.subscriptions.close, self.kind, key, entry_key, event
        )
        self.logger.info("unsubscribed", key=str(key), entry_key=entry_key, count=closed)
        return closed

    async def on(self, *args, **kwargs) -> Subscription:
        deprecate("on", 'Rather use "subscribe()"')
        return await self.subscribe(*args, **kwargs)

    async def off(self, *args, **kwargs) -> int:
        deprecate("off", 'Rather use "unsubscribe()"')
        return await self.unsubscribe(*args, **kwargs)

    # ==================== Writes ====================

    async def set(self, key, payload: Any, entry_key=None) -> None:
        """Overwrite the data at a location, including any children."""
        ref = self.ref(key, entry_key)
        await self._client.call(ref.set, payload, action="database_set", path=ref.path)

    async def update(self, key, payload: Mapping[str, Any], entry_key=None) -> None:
        """Write the given children without touching the others."""
        ref = self.ref(key, entry_key)
        await self._client.call(ref.update, payload, action="database_update", path=ref.path)

    async def remove(self, key, entry_key=None) -> None:
        ref = self.ref(key, entry_key)
        await self._client.call(ref.remove, action="database_remove", path=ref.path)

    async def transaction(self, key, update_fn: Callable[[Any], Any], entry_key=None) -> Any:
        """Atomically update a location; returns the committed value."""
        ref = self.ref(key, entry_key)
        return await self._client.call(
            ref.transaction, update_fn, action="database_transaction", path=ref.path
        )
