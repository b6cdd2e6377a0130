"""Live subscription tests against the in-memory store."""
import asyncio
from unittest.mock import patch

import pytest

from flamelink.services.store.base import EventType, Snapshot

from tests.conftest import PRODUCT_ID
from tests.helpers import drain_callbacks, wait_until


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_subscribe_delivers_initial_and_updated_values(self, app):
        received = []
        subscription = await app.content.subscribe(
            "products", received.append, PRODUCT_ID, fields=["price"]
        )
        await drain_callbacks()

        await app.content.update("products", {"price": "99.00"}, entry_key=PRODUCT_ID)
        await drain_callbacks()

        assert received == [{"price": "123.00"}, {"price": "99.00"}]
        assert subscription.key == ("content", "products", PRODUCT_ID, "value")

    @pytest.mark.asyncio
    async def test_subscribe_raw_delivers_snapshots(self, app):
        received = []
        await app.schemas.subscribe_raw("products", received.append)
        await drain_callbacks()

        assert isinstance(received[0], Snapshot)
        assert received[0].key == "products"

    @pytest.mark.asyncio
    async def test_child_added_events(self, app):
        received = []
        await app.content.subscribe(
            "products", received.append, event=EventType.CHILD_ADDED, fields=["titleA"]
        )
        await drain_callbacks()
        assert len(received) == 3

        await app.content.set("products", {"titleA": "Axor Basin Mixer", "price": "10"}, entry_key="9")
        await drain_callbacks()
        assert received[-1] == {"titleA": "Axor Basin Mixer"}

    @pytest.mark.asyncio
    async def test_coroutine_callbacks_are_scheduled(self, app):
        received = asyncio.Event()

        async def on_value(value):
            received.set()

        await app.nav.subscribe("main", on_value)
        await asyncio.wait_for(received.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_stream_errors_go_to_on_error(self, app, store):
        errors = []
        await app.content.subscribe("products", lambda value: None, on_error=errors.append)
        await drain_callbacks()

        store.fail_with = PermissionError("Permission denied")
        store.notify("/environments/production/content/products/en-US")
        await drain_callbacks()

        assert len(errors) == 1
        assert isinstance(errors[0], PermissionError)


class TestStreamErrors:
    PATH = "/environments/production/content/products/en-US"

    @pytest.mark.asyncio
    async def test_failure_while_attaching_closes_subscription(self, app, store):
        received = []
        store.fail_with = PermissionError("Permission denied")

        subscription = await app.content.subscribe("products", received.append)

        assert subscription.closed
        assert received == []
        assert len(app.subscriptions) == 0
        assert store.listeners == []

    @pytest.mark.asyncio
    async def test_later_failure_closes_subscription(self, app, store):
        received = []
        subscription = await app.content.subscribe("products", received.append)
        await drain_callbacks()

        store.fail_with = PermissionError("Permission denied")
        store.notify(self.PATH)
        await wait_until(lambda: subscription.closed and not store.listeners)

        assert len(received) == 1
        assert len(app.subscriptions) == 0

    @pytest.mark.asyncio
    async def test_failure_without_handler_is_logged(self, app, store):
        store.fail_with = PermissionError("Permission denied")

        with patch.object(app.content, "logger") as logger:
            await app.content.subscribe("products", lambda value: None)

        logged = logger.error.call_args
        assert logged.args[0] == "subscription_failed"
        assert logged.kwargs["error_type"] == "PermissionError"
        assert logged.kwargs["event_type"] == "value"


class TestCallbackErrors:
    @pytest.mark.asyncio
    async def test_coroutine_callback_errors_go_to_on_error(self, app):
        errors = []

        async def broken(value):
            raise ValueError("bad entry")

        subscription = await app.content.subscribe(
            "products", broken, PRODUCT_ID, on_error=errors.append
        )
        await wait_until(lambda: errors)

        assert isinstance(errors[0], ValueError)
        assert subscription.tasks == set()
        assert not subscription.closed

    @pytest.mark.asyncio
    async def test_callback_errors_without_handler_are_logged(self, app):
        def broken(value):
            raise KeyError("price")

        with patch.object(app.content, "logger") as logger:
            subscription = await app.content.subscribe("products", broken, PRODUCT_ID)
            await drain_callbacks()

        assert logger.error.call_args.args[0] == "subscription_callback_failed"
        assert logger.error.call_args.kwargs["error_type"] == "KeyError"
        assert not subscription.closed

    @pytest.mark.asyncio
    async def test_opened_log_uses_event_type(self, app):
        with patch.object(app.content, "logger") as logger:
            await app.content.subscribe("products", lambda value: None, event=EventType.CHILD_ADDED)

        logger.info.assert_called_once_with(
            "subscription_opened", key="products", entry_key=None, event_type="child_added"
        )

    @pytest.mark.asyncio
    async def test_listener_released_when_registration_fails(self, app, store):
        with patch.object(app.content, "logger") as logger:
            logger.info.side_effect = RuntimeError("log sink down")
            with pytest.raises(RuntimeError):
                await app.content.subscribe("products", lambda value: None)

        assert store.listeners == []
        assert len(app.subscriptions) == 0


class TestUnsubscribe:
    @pytest.mark.asyncio
    async def test_closing_one_handle_keeps_the_other(self, app, store):
        first, second = [], []
        first_sub = await app.content.subscribe("products", first.append, PRODUCT_ID)
        await app.content.subscribe("products", second.append, PRODUCT_ID)
        await drain_callbacks()

        await asyncio.to_thread(first_sub.close)
        await app.content.update("products", {"price": "1.00"}, entry_key=PRODUCT_ID)
        await drain_callbacks()

        assert len(first) == 1
        assert len(second) == 2

    @pytest.mark.asyncio
    async def test_unsubscribe_by_key_and_event(self, app, store):
        await app.content.subscribe("products", lambda value: None)
        await app.content.subscribe("products", lambda value: None, event=EventType.CHILD_REMOVED)
        await app.schemas.subscribe("products", lambda value: None)

        assert await app.content.unsubscribe("products", event=EventType.CHILD_REMOVED) == 1
        assert await app.content.unsubscribe("products") == 1
        assert len(app.subscriptions) == 1
        assert len(store.listeners) == 1

    @pytest.mark.asyncio
    async def test_no_callbacks_after_close(self, app):
        received = []
        subscription = await app.content.subscribe("products", received.append, PRODUCT_ID)
        await drain_callbacks()
        await asyncio.to_thread(subscription.close)

        await app.content.remove("products", PRODUCT_ID)
        await drain_callbacks()

        assert len(received) == 1
        assert subscription.closed

    @pytest.mark.asyncio
    async def test_client_close_tears_down_everything(self, app, store):
        await app.content.subscribe("products", lambda value: None)
        await app.nav.subscribe("main", lambda value: None)

        assert await app.close() == 2
        assert store.listeners == []


class TestDeprecatedAliases:
    @pytest.mark.asyncio
    async def test_on_and_off_warn_and_delegate(self, app):
        with patch("flamelink.utils.deprecate.logger") as logger:
            await app.content.on("products", lambda value: None)
            assert await app.content.off("products") == 1

        methods = [call.kwargs["method"] for call in logger.warning.call_args_list]
        assert methods == ["on", "off"]
