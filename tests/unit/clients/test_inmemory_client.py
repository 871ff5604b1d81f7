"""
Unit Tests for the In-Memory Administration Client

Tests for entity lifecycle, default rules, cascading deletes and the call
journal.
"""

from datetime import timedelta

import pytest

from sbinit.clients.inmemory import InMemoryAdministrationClient
from sbinit.constants import MAX_DURATION
from sbinit.exceptions import EntityAlreadyExistsError, EntityNotFoundError


class TestQueues:
    """Tests for queue operations."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, admin_client):
        created = await admin_client.create_queue("q1", auto_delete_on_idle=None, enable_partitioning=True)

        fetched = await admin_client.get_queue("q1")
        assert fetched == created
        assert fetched.enable_partitioning is True
        assert fetched.auto_delete_on_idle == MAX_DURATION

    @pytest.mark.asyncio
    async def test_get_returns_copy(self, admin_client):
        await admin_client.create_queue("q1")

        fetched = await admin_client.get_queue("q1")
        fetched.enable_partitioning = True

        assert (await admin_client.get_queue("q1")).enable_partitioning is False

    @pytest.mark.asyncio
    async def test_update_persists(self, admin_client):
        await admin_client.create_queue("q1")
        fetched = await admin_client.get_queue("q1")
        fetched.default_message_time_to_live = timedelta(hours=2)

        await admin_client.update_queue(fetched)

        assert (await admin_client.get_queue("q1")).default_message_time_to_live == timedelta(hours=2)

    @pytest.mark.asyncio
    async def test_create_duplicate(self, admin_client):
        await admin_client.create_queue("q1")

        with pytest.raises(EntityAlreadyExistsError):
            await admin_client.create_queue("q1")

    @pytest.mark.asyncio
    async def test_missing_queue(self, admin_client):
        assert await admin_client.queue_exists("q1") is False

        with pytest.raises(EntityNotFoundError) as exc_info:
            await admin_client.get_queue("q1")
        assert exc_info.value.details == {"entity_type": "queue", "entity_name": "q1"}

        with pytest.raises(EntityNotFoundError):
            await admin_client.delete_queue("q1")


class TestTopicsAndSubscriptions:
    """Tests for topic, subscription and rule operations."""

    @pytest.mark.asyncio
    async def test_subscription_requires_topic(self, admin_client):
        with pytest.raises(EntityNotFoundError):
            await admin_client.create_subscription("t1", "s1")

    @pytest.mark.asyncio
    async def test_new_subscription_has_default_rule(self, admin_client):
        await admin_client.create_topic("t1")
        await admin_client.create_subscription("t1", "s1")

        rules = admin_client.list_rules("t1", "s1")
        assert [(r.name, r.sql_expression) for r in rules] == [("$Default", "1=1")]
        assert await admin_client.rule_exists("t1", "s1", "$Default")

    @pytest.mark.asyncio
    async def test_duplicate_rule(self, admin_client):
        await admin_client.create_topic("t1")
        await admin_client.create_subscription("t1", "s1")

        with pytest.raises(EntityAlreadyExistsError):
            await admin_client.create_rule("t1", "s1", "$Default", "1=1")

    @pytest.mark.asyncio
    async def test_delete_missing_rule(self, admin_client):
        await admin_client.create_topic("t1")
        await admin_client.create_subscription("t1", "s1")

        with pytest.raises(EntityNotFoundError):
            await admin_client.delete_rule("t1", "s1", "absent")

    @pytest.mark.asyncio
    async def test_update_subscription(self, admin_client):
        await admin_client.create_topic("t1")
        subscription = await admin_client.create_subscription("t1", "s1")
        subscription.requires_session = True

        await admin_client.update_subscription("t1", subscription)

        assert (await admin_client.get_subscription("t1", "s1")).requires_session is True

    @pytest.mark.asyncio
    async def test_delete_topic_cascades(self, admin_client):
        await admin_client.create_topic("t1")
        await admin_client.create_subscription("t1", "s1")

        await admin_client.delete_topic("t1")

        assert not await admin_client.subscription_exists("t1", "s1")
        assert admin_client.list_rules("t1", "s1") == []

    @pytest.mark.asyncio
    async def test_delete_subscription_drops_rules(self, admin_client):
        await admin_client.create_topic("t1")
        await admin_client.create_subscription("t1", "s1")

        await admin_client.delete_subscription("t1", "s1")

        assert admin_client.list_rules("t1", "s1") == []


class TestJournal:
    """Tests for the call journal."""

    @pytest.mark.asyncio
    async def test_calls_recorded_with_arguments(self, admin_client):
        await admin_client.topic_exists("t1")
        await admin_client.create_topic("t1")
        admin_client.list_rules("t1", "s1")

        assert admin_client.calls == [("topic_exists", "t1"), ("create_topic", "t1")]
        assert admin_client.operations == ["topic_exists", "create_topic"]

    @pytest.mark.asyncio
    async def test_failed_calls_are_recorded(self, admin_client):
        with pytest.raises(EntityNotFoundError):
            await admin_client.get_topic("t1")

        assert admin_client.operations == ["get_topic"]

    @pytest.mark.asyncio
    async def test_reset(self, admin_client):
        await admin_client.create_queue("q1")

        await admin_client.reset()

        assert admin_client.calls == []
        assert await admin_client.queue_exists("q1") is False

    @pytest.mark.asyncio
    async def test_async_context_manager_closes(self):
        async with InMemoryAdministrationClient() as client:
            assert client.closed is False

        assert client.closed is True
