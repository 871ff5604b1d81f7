"""
Entity option records.

Plain immutable values describing how a queue, topic or subscription should be
configured. Unset durations stay ``None`` here; the provisioner decides what to
send to the broker for them.
"""

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..constants import DEFAULT_LOCK_DURATION, DEFAULT_MESSAGE_TTL


class MessagingEntityOptions(BaseModel):
    """Options shared by queues and topics."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    default_time_to_live: timedelta = DEFAULT_MESSAGE_TTL
    # Duplicate detection is enabled whenever a window is set
    duplicate_detection_window: Optional[timedelta] = None
    enable_batched_operations: bool = True
    enable_partitioning: bool = False
    auto_delete_on_idle: Optional[timedelta] = None

    @classmethod
    def create_default(cls):
        return cls(
            default_time_to_live=DEFAULT_MESSAGE_TTL,
            duplicate_detection_window=None,
            enable_batched_operations=True,
            enable_partitioning=False,
            auto_delete_on_idle=None,
        )


class QueueOptions(MessagingEntityOptions):
    """Queue options."""


class TopicOptions(MessagingEntityOptions):
    """Topic options."""


class SubscriptionOptions(BaseModel):
    """Subscription options."""
    model_config = ConfigDict(extra='forbid', frozen=True)

    default_time_to_live: timedelta = DEFAULT_MESSAGE_TTL
    dead_lettering_on_message_expiration: bool = True
    lock_duration: Optional[timedelta] = DEFAULT_LOCK_DURATION
    auto_delete_on_idle: Optional[timedelta] = None
    requires_session: bool = False
    forward_dead_letter_to: Optional[str] = None

    @classmethod
    def create_default(cls) -> "SubscriptionOptions":
        return cls(
            default_time_to_live=DEFAULT_MESSAGE_TTL,
            dead_lettering_on_message_expiration=True,
            lock_duration=DEFAULT_LOCK_DURATION,
            auto_delete_on_idle=None,
            requires_session=False,
            forward_dead_letter_to=None,
        )
