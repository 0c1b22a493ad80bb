# backend/registry/memory.py
from __future__ import annotations
import hashlib
from typing import Dict

from .base import KeyRegistry, RegistryError, TxConfirmation


class InMemoryKeyRegistry(KeyRegistry):
    """
    In-memory key registry for tests and local development.
    Same guards as the contract: duplicate set and writes to unknown ids fail.
    """

    name = "memory"

    def __init__(self):
        self._keys: Dict[str, bytes] = {}  # user_id -> DER public key
        self._block = 0

    def _confirm(self, action: str, user_id: str) -> TxConfirmation:
        self._block += 1
        digest = hashlib.sha256(f"{self._block}:{action}:{user_id}".encode("utf-8")).hexdigest()
        return TxConfirmation(tx_hash="0x" + digest, block_number=self._block, status=1)

    async def is_user_registered(self, user_id: str) -> bool:
        return user_id in self._keys

    async def get_public_key(self, user_id: str) -> bytes:
        if user_id not in self._keys:
            raise RegistryError(f"User not registered: {user_id}")
        return self._keys[user_id]

    async def set_public_key(self, user_id: str, public_key: bytes) -> TxConfirmation:
        if user_id in self._keys:
            raise RegistryError(f"User already registered: {user_id}")
        self._keys[user_id] = bytes(public_key)
        return self._confirm("set", user_id)

    async def update_public_key(self, user_id: str, public_key: bytes) -> TxConfirmation:
        if user_id not in self._keys:
            raise RegistryError(f"User not registered: {user_id}")
        self._keys[user_id] = bytes(public_key)
        return self._confirm("update", user_id)

    async def delete_public_key(self, user_id: str) -> TxConfirmation:
        if user_id not in self._keys:
            raise RegistryError(f"User not registered: {user_id}")
        del self._keys[user_id]
        return self._confirm("delete", user_id)
