"""Queue declaration."""

from typing import ClassVar

from pydantic import Field

from ..constants import QUEUE_PREFIX
from .naming import EntityWithPrefix
from .options import QueueOptions


class Queue(EntityWithPrefix):
    """Point-to-point queue to be provisioned."""

    prefix: ClassVar[str] = QUEUE_PREFIX

    options: QueueOptions = Field(default_factory=QueueOptions.create_default)
