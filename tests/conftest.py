import pytest
from fastapi.testclient import TestClient

from backend.crypto import generate_rsa_keypair, public_key_to_json
from backend.registry import InMemoryKeyRegistry
from gateway.config import Settings
from gateway.main import create_app


class RecordingRegistry(InMemoryKeyRegistry):
    """In-memory registry that records every collaborator call"""

    def __init__(self):
        super().__init__()
        self.calls = []

    async def is_user_registered(self, user_id):
        self.calls.append(("is_user_registered", user_id))
        return await super().is_user_registered(user_id)

    async def get_public_key(self, user_id):
        self.calls.append(("get_public_key", user_id))
        return await super().get_public_key(user_id)

    async def set_public_key(self, user_id, public_key):
        self.calls.append(("set_public_key", user_id))
        return await super().set_public_key(user_id, public_key)

    async def update_public_key(self, user_id, public_key):
        self.calls.append(("update_public_key", user_id))
        return await super().update_public_key(user_id, public_key)

    async def delete_public_key(self, user_id):
        self.calls.append(("delete_public_key", user_id))
        return await super().delete_public_key(user_id)

    def writes(self):
        return [c for c in self.calls if c[0] in ("set_public_key", "update_public_key", "delete_public_key")]


@pytest.fixture(scope="session")
def rsa_json():
    _, public_pem = generate_rsa_keypair(2048)
    return public_key_to_json(public_pem)


@pytest.fixture(scope="session")
def other_rsa_json():
    _, public_pem = generate_rsa_keypair(2048)
    return public_key_to_json(public_pem)


@pytest.fixture
def settings():
    return Settings(REGISTRY_BACKEND="memory", KEY_ENCODING="spki")


@pytest.fixture
def registry():
    return RecordingRegistry()


@pytest.fixture
def client(settings, registry):
    return TestClient(create_app(settings=settings, registry=registry))
