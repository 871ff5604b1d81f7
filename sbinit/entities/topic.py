"""Topic declaration."""

from typing import ClassVar, List, Optional, Union

from pydantic import Field

from ..constants import TOPIC_PREFIX
from .filter import Filter
from .naming import EntityWithPrefix
from .options import SubscriptionOptions, TopicOptions
from .subscription import Subscription


class Topic(EntityWithPrefix):
    """Publish/subscribe topic with its subscriptions, in declaration order."""

    prefix: ClassVar[str] = TOPIC_PREFIX

    options: TopicOptions = Field(default_factory=TopicOptions.create_default)
    subscriptions: List[Subscription] = Field(default_factory=list)

    def add_subscription(
        self,
        name: str,
        *filters: Union[SubscriptionOptions, str, Filter],
        options: Optional[SubscriptionOptions] = None,
    ) -> "Topic":
        """
        Declare a subscription on this topic.

        Options may be given either as the first positional argument after the
        name or with the ``options`` keyword, not both:

            topic.add_subscription("Handler", SubscriptionOptions(requires_session=True), "Created")
            topic.add_subscription("Handler", "Created", options=SubscriptionOptions(requires_session=True))

        Args:
            name: Subscription name
            *filters: Optional leading ``SubscriptionOptions``, then label
                strings and/or ``Filter`` objects
            options: Options for this subscription (defaults when omitted)

        Returns:
            This topic, for chaining further ``add_subscription`` calls

        Raises:
            TypeError: Options given twice
        """
        if filters and isinstance(filters[0], SubscriptionOptions):
            if options is not None:
                raise TypeError("add_subscription() got options both positionally and by keyword")
            options, filters = filters[0], filters[1:]

        subscription = Subscription(
            name=name,
            options=options or SubscriptionOptions.create_default(),
            filters=list(filters),
        )
        self.subscriptions.append(subscription)
        return self
