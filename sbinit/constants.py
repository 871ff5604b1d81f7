"""
Service Bus Initializer Constants

Centralized entity prefixes, option defaults and the sentinel values sent to the
broker for options the desired state leaves unset.

Author: sbinit Contributors
Date: 2026-01-12
"""

from datetime import timedelta

# Entity name prefixes
RESOURCE_PREFIX = "sb-"
TOPIC_PREFIX = "sbt-"
QUEUE_PREFIX = "sbq-"
SUBSCRIPTION_PREFIX = "sbs-"
FILTER_PREFIX = "sbsr-"

# Option defaults
DEFAULT_MESSAGE_TTL = timedelta(days=14)
DEFAULT_LOCK_DURATION = timedelta(minutes=1)

# Sentinels substituted for unset optional durations
DEFAULT_DUPLICATE_DETECTION_WINDOW = timedelta(minutes=10)
# TimeSpan.MaxValue as reported by the management API, at microsecond precision
MAX_DURATION = timedelta(days=10675199, hours=2, minutes=48, seconds=5, microseconds=477581)

# Rules
DEFAULT_RULE_NAME = "$Default"
DEFAULT_RULE_EXPRESSION = "1=1"
LABEL_FILTER_TEMPLATE = "sys.Label='{label}'"

# Error message templates
ERROR_QUEUE_ALREADY_EXISTS = "Queue '{name}' already exists"
ERROR_TOPIC_ALREADY_EXISTS = "Topic '{name}' already exists"
ERROR_SUBSCRIPTION_NOT_FOUND = "Subscription '{name}' not found on topic '{topic}'"
ERROR_SUBSCRIPTION_ALREADY_EXISTS = "Subscription '{name}' already exists on topic '{topic}'"
ERROR_RULE_NOT_FOUND = "Rule '{name}' not found on subscription '{subscription}'"
ERROR_RULE_ALREADY_EXISTS = "Rule '{name}' already exists on subscription '{subscription}'"
