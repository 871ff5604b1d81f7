"""
Shared fixtures for sbinit tests.
"""

import textwrap

import pytest

from sbinit.clients.inmemory import InMemoryAdministrationClient
from sbinit.entities import ServiceBusResource
from sbinit.provisioner import ServiceBusProvisioner


VALID_CONNECTION_STRING = (
    "Endpoint=sb://test.servicebus.windows.net/;SharedAccessKeyName=test;SharedAccessKey=dGVzdA=="
)


@pytest.fixture
async def admin_client():
    """Fresh in-memory namespace for each test."""
    client = InMemoryAdministrationClient()
    await client.reset()
    return client


@pytest.fixture
def provisioner(admin_client):
    return ServiceBusProvisioner(admin_client)


@pytest.fixture
def shop_resource():
    """Resource 'Shop' with one queue and one topic holding one label subscription."""
    resource = ServiceBusResource(name="Shop")
    resource.add_queue("Orders")
    resource.add_topic("Events").add_subscription("Handler", "Created")
    return resource


@pytest.fixture
def context_module(tmp_path, monkeypatch):
    """Importable module 'shop_contexts' declaring ShopContext."""
    source = textwrap.dedent(
        '''
        from sbinit import ServiceBusContext


        class ShopContext(ServiceBusContext):
            name = "Shop"

            def build_service_bus_resource(self, service_bus_resource):
                service_bus_resource.add_queue("Orders")
                service_bus_resource.add_topic("Events").add_subscription("Handler", "Created")


        class NotAContext:
            pass
        '''
    )
    (tmp_path / "shop_contexts.py").write_text(source)
    monkeypatch.syspath_prepend(str(tmp_path))
    return "shop_contexts"
