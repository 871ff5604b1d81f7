"""
Service Bus Provisioner.

Converges a namespace towards declared queues, topics, subscriptions and filter
rules. Every operation is idempotent: missing entities are created, drifted
options are updated, and nothing is touched when the live state already
matches.

Unset optional durations are replaced by sentinel values only when talking to
the broker (see ``sbinit.constants``).

Author: sbinit Contributors
Date: 2026-01-13
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from .clients.interface import AdministrationClient
from .constants import (
    DEFAULT_DUPLICATE_DETECTION_WINDOW,
    DEFAULT_LOCK_DURATION,
    DEFAULT_RULE_NAME,
    MAX_DURATION,
)
from .core.logging_config import get_logger, log_with_context
from .entities import Filter, MessagingEntityOptions, Queue, Subscription, SubscriptionOptions, Topic

logger = get_logger(__name__)


def _or_default(value: Optional[timedelta], default: timedelta) -> timedelta:
    return value if value is not None else default


def entity_properties(options: MessagingEntityOptions) -> Dict[str, Any]:
    """
    Broker-side properties for queue or topic options.

    Returns:
        Property name to value, with sentinels in place of unset durations
    """
    return {
        "default_message_time_to_live": options.default_time_to_live,
        "requires_duplicate_detection": options.duplicate_detection_window is not None,
        "duplicate_detection_history_time_window": _or_default(
            options.duplicate_detection_window, DEFAULT_DUPLICATE_DETECTION_WINDOW
        ),
        "enable_batched_operations": options.enable_batched_operations,
        "enable_partitioning": options.enable_partitioning,
        "auto_delete_on_idle": _or_default(options.auto_delete_on_idle, MAX_DURATION),
    }


def subscription_properties(options: SubscriptionOptions) -> Dict[str, Any]:
    """
    Broker-side properties for subscription options.

    Returns:
        Property name to value, with sentinels in place of unset durations
    """
    return {
        "default_message_time_to_live": options.default_time_to_live,
        "dead_lettering_on_message_expiration": options.dead_lettering_on_message_expiration,
        "lock_duration": _or_default(options.lock_duration, DEFAULT_LOCK_DURATION),
        "auto_delete_on_idle": _or_default(options.auto_delete_on_idle, MAX_DURATION),
        "requires_session": options.requires_session,
        "forward_dead_lettered_messages_to": options.forward_dead_letter_to,
    }


def _update_required(live: Any, desired: Dict[str, Any]) -> bool:
    return any(getattr(live, field) != value for field, value in desired.items())


def _apply(live: Any, desired: Dict[str, Any]) -> None:
    for field, value in desired.items():
        setattr(live, field, value)


class ServiceBusProvisioner:
    """
    Ensures declared entities exist on the namespace with the declared options.

    The provisioner issues administrative calls strictly one after another and
    lets any client error propagate unchanged; re-running is the recovery path.

    Attributes:
        admin_client: Administrative client for the target namespace
    """

    def __init__(self, admin_client: AdministrationClient):
        self.admin_client = admin_client

    # ========== Ensure Operations ==========

    async def ensure_topic(self, topic: Topic) -> None:
        """
        Create the topic or bring its options in line with the declaration.

        Args:
            topic: Declared topic
        """
        desired = entity_properties(topic.options)

        if not await self.admin_client.topic_exists(topic.name):
            await self.admin_client.create_topic(topic.name, **desired)
            self._log("topic_created", "topic", topic.name)
            return

        properties = await self.admin_client.get_topic(topic.name)
        if _update_required(properties, desired):
            _apply(properties, desired)
            await self.admin_client.update_topic(properties)
            self._log("topic_updated", "topic", topic.name)
        else:
            self._log("topic_unchanged", "topic", topic.name, level=logging.DEBUG)

    async def ensure_queue(self, queue: Queue) -> None:
        """
        Create the queue or bring its options in line with the declaration.

        Args:
            queue: Declared queue
        """
        desired = entity_properties(queue.options)

        if not await self.admin_client.queue_exists(queue.name):
            await self.admin_client.create_queue(queue.name, **desired)
            self._log("queue_created", "queue", queue.name)
            return

        properties = await self.admin_client.get_queue(queue.name)
        if _update_required(properties, desired):
            _apply(properties, desired)
            await self.admin_client.update_queue(properties)
            self._log("queue_updated", "queue", queue.name)
        else:
            self._log("queue_unchanged", "queue", queue.name, level=logging.DEBUG)

    async def ensure_subscription(self, subscription: Subscription, topic: Topic) -> None:
        """
        Create the subscription with its filters, or converge an existing one.

        A new subscription loses the broker's ``$Default`` rule so that only the
        declared filters apply. On an existing subscription, declared filters
        missing on the broker are added; rules that are not declared are kept.

        Args:
            subscription: Declared subscription
            topic: Topic owning the subscription
        """
        desired = subscription_properties(subscription.options)

        if not await self.admin_client.subscription_exists(topic.name, subscription.name):
            await self.admin_client.create_subscription(topic.name, subscription.name, **desired)
            await self.admin_client.delete_rule(topic.name, subscription.name, DEFAULT_RULE_NAME)
            self._log("subscription_created", "subscription", subscription.name, topic_name=topic.name)

            for filter in subscription.filters:
                await self._create_filter(topic, subscription, filter)
            return

        properties = await self.admin_client.get_subscription(topic.name, subscription.name)
        if _update_required(properties, desired):
            _apply(properties, desired)
            await self.admin_client.update_subscription(topic.name, properties)
            self._log("subscription_updated", "subscription", subscription.name, topic_name=topic.name)
        else:
            self._log(
                "subscription_unchanged", "subscription", subscription.name,
                level=logging.DEBUG, topic_name=topic.name
            )

        for filter in subscription.filters:
            if not await self.admin_client.rule_exists(topic.name, subscription.name, filter.name):
                await self._create_filter(topic, subscription, filter)

    async def _create_filter(self, topic: Topic, subscription: Subscription, filter: Filter) -> None:
        await self.admin_client.create_rule(
            topic.name,
            subscription.name,
            filter.name,
            filter.sql_expression,
        )
        self._log(
            "filter_created", "rule", filter.name,
            topic_name=topic.name,
            subscription_name=subscription.name,
            sql_expression=filter.sql_expression,
        )

    # ========== Delete Operations ==========

    async def delete_topic(self, *topic_names: str) -> None:
        """Delete topics (with their subscriptions); absent topics are skipped."""
        for topic_name in topic_names:
            if await self.admin_client.topic_exists(topic_name):
                await self.admin_client.delete_topic(topic_name)
                self._log("topic_deleted", "topic", topic_name)
            else:
                self._log("topic_absent", "topic", topic_name, level=logging.DEBUG)

    async def delete_queue(self, *queue_names: str) -> None:
        """Delete queues; absent queues are skipped."""
        for queue_name in queue_names:
            if await self.admin_client.queue_exists(queue_name):
                await self.admin_client.delete_queue(queue_name)
                self._log("queue_deleted", "queue", queue_name)
            else:
                self._log("queue_absent", "queue", queue_name, level=logging.DEBUG)

    async def delete_subscription(self, topic_name: str, *subscription_names: str) -> None:
        """Delete subscriptions (with their rules) of a topic; absent ones are skipped."""
        for subscription_name in subscription_names:
            if await self.admin_client.subscription_exists(topic_name, subscription_name):
                await self.admin_client.delete_subscription(topic_name, subscription_name)
                self._log("subscription_deleted", "subscription", subscription_name, topic_name=topic_name)
            else:
                self._log(
                    "subscription_absent", "subscription", subscription_name,
                    level=logging.DEBUG, topic_name=topic_name
                )

    async def delete_filter(self, topic_name: str, subscription_name: str, *filter_names: str) -> None:
        """Delete filter rules of a subscription; absent rules are skipped."""
        for filter_name in filter_names:
            if await self.admin_client.rule_exists(topic_name, subscription_name, filter_name):
                await self.admin_client.delete_rule(topic_name, subscription_name, filter_name)
                self._log(
                    "filter_deleted", "rule", filter_name,
                    topic_name=topic_name, subscription_name=subscription_name
                )
            else:
                self._log(
                    "filter_absent", "rule", filter_name,
                    level=logging.DEBUG, topic_name=topic_name, subscription_name=subscription_name
                )

    @staticmethod
    def _log(operation: str, entity_type: str, entity_name: str, level: int = logging.INFO, **context: Any) -> None:
        log_with_context(
            logger,
            level,
            f"{operation}: {entity_type}/{entity_name}",
            operation=operation,
            entity_type=entity_type,
            entity_name=entity_name,
            **context
        )
