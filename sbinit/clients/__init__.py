"""
Administration Clients

Implementations of the Service Bus administrative operations used by the
provisioner.
"""

from .interface import AdministrationClient
from .inmemory import InMemoryAdministrationClient
from .azure_client import AzureAdministrationClient

__all__ = [
    "AdministrationClient",
    "InMemoryAdministrationClient",
    "AzureAdministrationClient",
]
