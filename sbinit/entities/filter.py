"""
Subscription filter rules.

A filter is a named SQL rule expression evaluated by the broker against message
metadata.
"""

from typing import ClassVar, Union

from ..constants import FILTER_PREFIX, LABEL_FILTER_TEMPLATE
from .naming import EntityWithPrefix


class Filter(EntityWithPrefix):
    """Named SQL filter expression attached to a subscription."""

    prefix: ClassVar[str] = FILTER_PREFIX

    sql_expression: str

    @classmethod
    def create_label(cls, label: str) -> "Filter":
        """Build a filter matching messages whose label (subject) equals ``label``."""
        return cls(name=label, sql_expression=LABEL_FILTER_TEMPLATE.format(label=label))

    @classmethod
    def create(cls, name: str, key: str, value: Union[str, bool, int]) -> "Filter":
        """
        Build an equality filter on an arbitrary message property.

        String values are single-quoted, booleans become SQL ``TRUE``/``FALSE`` and
        numbers are embedded as-is:

            Filter.create("HighPriority", "Priority", 5)   -> Priority=5
            Filter.create("Active", "Status", "Active")     -> Status='Active'
            Filter.create("Vip", "IsVip", True)            -> IsVip=TRUE
        """
        if isinstance(value, bool):
            expression = f"{key}={str(value).upper()}"
        elif isinstance(value, str):
            expression = f"{key}='{value}'"
        else:
            expression = f"{key}={value}"
        return cls(name=name, sql_expression=expression)
