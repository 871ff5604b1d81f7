"""
Desired-state entities.

Pydantic models describing the Service Bus topology an application declares.
"""

from .filter import Filter
from .naming import EntityWithPrefix, normalize_name
from .options import MessagingEntityOptions, QueueOptions, SubscriptionOptions, TopicOptions
from .queue import Queue
from .resource import ServiceBusResource
from .subscription import Subscription
from .topic import Topic

__all__ = [
    "EntityWithPrefix",
    "normalize_name",
    "Filter",
    "MessagingEntityOptions",
    "QueueOptions",
    "TopicOptions",
    "SubscriptionOptions",
    "Queue",
    "Topic",
    "Subscription",
    "ServiceBusResource",
]
