"""
Subscription declaration.

A subscription owns an ordered list of filters. Filters may be given as
pre-built ``Filter`` objects or as plain label strings, which are turned into
label filters.
"""

from typing import Any, ClassVar, List

from pydantic import Field, field_validator

from ..constants import SUBSCRIPTION_PREFIX
from .filter import Filter
from .naming import EntityWithPrefix
from .options import SubscriptionOptions


class Subscription(EntityWithPrefix):
    """Topic subscription to be provisioned, gated by its filters."""

    prefix: ClassVar[str] = SUBSCRIPTION_PREFIX

    options: SubscriptionOptions = Field(default_factory=SubscriptionOptions.create_default)
    filters: List[Filter] = Field(default_factory=list)

    @field_validator('filters', mode='before')
    @classmethod
    def label_filters(cls, v: Any) -> Any:
        """Wrap plain label strings with ``Filter.create_label``."""
        if isinstance(v, (list, tuple)):
            return [Filter.create_label(f) if isinstance(f, str) else f for f in v]
        return v

    def add_label_filter(self, label: str) -> "Subscription":
        """Append a label filter; returns this subscription for chaining."""
        self.filters.append(Filter.create_label(label))
        return self

    def add_filter(self, filter: Filter) -> "Subscription":
        """Append a pre-built filter; returns this subscription for chaining."""
        self.filters.append(filter)
        return self
