"""
Unit Tests for the Service Bus Initializer

Tests for reconciliation order, idempotent re-runs, failure propagation and
initializer wiring.

Author: sbinit Contributors
Date: 2026-01-16
"""

from types import SimpleNamespace

import pytest

from sbinit import ServiceBusContext
from sbinit.clients.azure_client import AzureAdministrationClient
from sbinit.clients.inmemory import InMemoryAdministrationClient
from sbinit.entities import ServiceBusResource
from sbinit.exceptions import (
    ConfigurationError,
    EntityAlreadyExistsError,
    ServiceBusAdministrationClientNotRegisteredError,
    ServiceBusContextNotRegisteredError,
)
from sbinit.initializer import (
    ServiceBusInitializer,
    build_resource,
    create_service_bus_resource,
    reconcile,
)

from conftest import VALID_CONNECTION_STRING


class ShopContext(ServiceBusContext):
    name = "Shop"

    def build_service_bus_resource(self, service_bus_resource):
        service_bus_resource.add_queue("Orders")
        service_bus_resource.add_topic("Events").add_subscription("Handler", "Created")


class TestBuildResource:
    """Tests for building a resource from a context."""

    def test_resource_named_after_context(self):
        resource = build_resource(ShopContext())

        assert resource.name == "sb-shop"
        assert [q.name for q in resource.queues] == ["sbq-orders"]
        assert [t.name for t in resource.topics] == ["sbt-events"]

    def test_empty_context(self):
        class EmptyContext(ServiceBusContext):
            name = "Empty"

            def build_service_bus_resource(self, service_bus_resource):
                pass

        resource = build_resource(EmptyContext())
        assert resource.topics == []
        assert resource.queues == []


class TestReconcile:
    """Tests for reconcile."""

    @pytest.mark.asyncio
    async def test_shop_first_run(self, admin_client, shop_resource):
        """Test a clean namespace gets every entity in declaration order."""
        result = await reconcile(admin_client, shop_resource)

        assert result is shop_resource
        assert admin_client.operations == [
            "topic_exists",
            "create_topic",
            "subscription_exists",
            "create_subscription",
            "delete_rule",
            "create_rule",
            "queue_exists",
            "create_queue",
        ]
        rules = admin_client.list_rules("sbt-events", "sbs-handler")
        assert [(r.name, r.sql_expression) for r in rules] == [("sbsr-created", "sys.Label='Created'")]

    @pytest.mark.asyncio
    async def test_shop_second_run_only_checks(self, admin_client, shop_resource):
        """Test a converged namespace sees no mutating calls."""
        await reconcile(admin_client, shop_resource)
        admin_client.clear_calls()

        await reconcile(admin_client, shop_resource)

        assert admin_client.operations == [
            "topic_exists",
            "get_topic",
            "subscription_exists",
            "get_subscription",
            "rule_exists",
            "queue_exists",
            "get_queue",
        ]

    @pytest.mark.asyncio
    async def test_topics_before_queues(self, admin_client):
        resource = ServiceBusResource(name="Ordering")
        resource.add_queue("First")
        resource.add_topic("Second").add_subscription("A").add_subscription("B")
        resource.add_topic("Third")

        await reconcile(admin_client, resource)

        created = [call[1:] for call in admin_client.calls if call[0].startswith("create_")]
        assert created == [
            ("sbt-second",),
            ("sbt-second", "sbs-a"),
            ("sbt-second", "sbs-b"),
            ("sbt-third",),
            ("sbq-first",),
        ]

    @pytest.mark.asyncio
    async def test_empty_resource_issues_no_calls(self, admin_client):
        await reconcile(admin_client, ServiceBusResource(name="Empty"))
        assert admin_client.calls == []

    @pytest.mark.asyncio
    async def test_failure_aborts_remaining_work(self, admin_client, shop_resource):
        """Test the first error propagates and later entities are not touched."""
        async def fail_create_subscription(topic_name, subscription_name, **properties):
            admin_client.calls.append(("create_subscription", topic_name, subscription_name))
            raise EntityAlreadyExistsError("subscription", subscription_name)

        admin_client.create_subscription = fail_create_subscription

        with pytest.raises(EntityAlreadyExistsError):
            await reconcile(admin_client, shop_resource)

        assert await admin_client.topic_exists("sbt-events")
        assert not await admin_client.queue_exists("sbq-orders")
        assert "create_queue" not in admin_client.operations

    @pytest.mark.asyncio
    async def test_rerun_after_failure_converges(self, admin_client, shop_resource):
        original = admin_client.create_queue

        async def flaky_create_queue(queue_name, **properties):
            raise ConnectionError("broker unavailable")

        admin_client.create_queue = flaky_create_queue
        with pytest.raises(ConnectionError):
            await reconcile(admin_client, shop_resource)

        admin_client.create_queue = original
        await reconcile(admin_client, shop_resource)

        assert await admin_client.queue_exists("sbq-orders")


class TestServiceBusInitializer:
    """Tests for initializer wiring."""

    @pytest.mark.asyncio
    async def test_create_with_registered_context(self, admin_client):
        initializer = ServiceBusInitializer(admin_client=admin_client, context=ShopContext())

        resource = await initializer.create_service_bus_resource()

        assert resource.name == "sb-shop"
        assert await admin_client.queue_exists("sbq-orders")

    @pytest.mark.asyncio
    async def test_missing_client(self):
        initializer = ServiceBusInitializer(context=ShopContext())

        with pytest.raises(ServiceBusAdministrationClientNotRegisteredError) as exc_info:
            await initializer.create_service_bus_resource()

        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.error_code == "AdministrationClientNotRegistered"

    @pytest.mark.asyncio
    async def test_missing_context(self, admin_client):
        initializer = ServiceBusInitializer(admin_client=admin_client)

        with pytest.raises(ServiceBusContextNotRegisteredError):
            await initializer.create_service_bus_resource()

        assert admin_client.calls == []

    @pytest.mark.asyncio
    async def test_missing_client_reported_first(self):
        with pytest.raises(ServiceBusAdministrationClientNotRegisteredError):
            await ServiceBusInitializer().create_service_bus_resource()

    @pytest.mark.asyncio
    async def test_add_service_bus_context_with_class(self):
        initializer = ServiceBusInitializer()

        result = initializer.add_service_bus_context(ShopContext, VALID_CONNECTION_STRING)

        assert result is initializer
        assert isinstance(initializer.context, ShopContext)
        assert isinstance(initializer.admin_client, AzureAdministrationClient)
        await initializer.close()

    @pytest.mark.asyncio
    async def test_add_service_bus_context_with_instance(self):
        context = ShopContext()
        async with ServiceBusInitializer().add_service_bus_context(context, VALID_CONNECTION_STRING) as initializer:
            assert initializer.context is context

    @pytest.mark.parametrize("connection_string", ["", "not-a-connection-string"])
    def test_add_service_bus_context_malformed(self, connection_string):
        initializer = ServiceBusInitializer()

        with pytest.raises(ValueError):
            initializer.add_service_bus_context(ShopContext, connection_string)

        assert initializer.context is None
        assert initializer.admin_client is None

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self, admin_client):
        async with ServiceBusInitializer(admin_client=admin_client, context=ShopContext()):
            pass

        assert admin_client.closed is False

    @pytest.mark.asyncio
    async def test_create_service_bus_resource_malformed(self, shop_resource):
        with pytest.raises(ValueError):
            await create_service_bus_resource("not-a-connection-string", shop_resource)

    @pytest.mark.asyncio
    async def test_reregistration_closes_replaced_client(self, monkeypatch):
        """Test a client replaced by a second registration is closed with the initializer."""
        first, second = InMemoryAdministrationClient(), InMemoryAdministrationClient()
        clients = iter([first, second])
        monkeypatch.setattr(
            "sbinit.initializer.AzureAdministrationClient",
            SimpleNamespace(from_connection_string=lambda connection_string: next(clients)),
        )

        initializer = ServiceBusInitializer()
        initializer.add_service_bus_context(ShopContext, VALID_CONNECTION_STRING)
        initializer.add_service_bus_context(ShopContext, VALID_CONNECTION_STRING)

        assert initializer.admin_client is second
        assert first.closed is False

        await initializer.close()

        assert first.closed is True
        assert second.closed is True

    @pytest.mark.asyncio
    async def test_registration_over_injected_client_keeps_it_open(self, admin_client, monkeypatch):
        replacement = InMemoryAdministrationClient()
        monkeypatch.setattr(
            "sbinit.initializer.AzureAdministrationClient",
            SimpleNamespace(from_connection_string=lambda connection_string: replacement),
        )

        async with ServiceBusInitializer(admin_client=admin_client).add_service_bus_context(
            ShopContext, VALID_CONNECTION_STRING
        ):
            pass

        assert admin_client.closed is False
        assert replacement.closed is True
