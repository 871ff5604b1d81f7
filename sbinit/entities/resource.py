"""
Service Bus resource declaration.

Root of the desired-state tree: a namespace-level resource that owns its topics
and queues.
"""

from typing import ClassVar, List, Optional

from pydantic import Field

from ..constants import RESOURCE_PREFIX
from .naming import EntityWithPrefix
from .options import QueueOptions, TopicOptions
from .queue import Queue
from .topic import Topic


class ServiceBusResource(EntityWithPrefix):
    """Desired Service Bus topology built by a context."""

    prefix: ClassVar[str] = RESOURCE_PREFIX

    topics: List[Topic] = Field(default_factory=list)
    queues: List[Queue] = Field(default_factory=list)

    def add_topic(self, name: str, options: Optional[TopicOptions] = None) -> Topic:
        """Declare a topic and return it so subscriptions can be chained on."""
        topic = Topic(name=name, options=options or TopicOptions.create_default())
        self.topics.append(topic)
        return topic

    def add_queue(self, name: str, options: Optional[QueueOptions] = None) -> Queue:
        """Declare a queue and return it."""
        queue = Queue(name=name, options=options or QueueOptions.create_default())
        self.queues.append(queue)
        return queue
