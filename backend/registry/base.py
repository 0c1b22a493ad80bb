# backend/registry/base.py
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class RegistryError(Exception):
    """Base error for key registry collaborator failures."""
    pass


class RegistryConfigError(RegistryError):
    """Registry backend cannot be built from the supplied configuration."""
    pass


@dataclass(frozen=True)
class TxConfirmation:
    """
    Receipt of a mutating registry call.

    Attributes:
        tx_hash: 0x-prefixed transaction hash
        block_number: block the transaction was mined in (if known)
        status: 1 on success
    """
    tx_hash: str
    block_number: Optional[int] = None
    status: int = 1


class KeyRegistry(ABC):
    """
    Capability set of the userId -> DER public key registry.

    Mutating calls return only after the write is confirmed.
    """

    name: str = "abstract"

    @abstractmethod
    async def is_user_registered(self, user_id: str) -> bool: ...

    @abstractmethod
    async def get_public_key(self, user_id: str) -> bytes: ...

    @abstractmethod
    async def set_public_key(self, user_id: str, public_key: bytes) -> TxConfirmation: ...

    @abstractmethod
    async def update_public_key(self, user_id: str, public_key: bytes) -> TxConfirmation: ...

    @abstractmethod
    async def delete_public_key(self, user_id: str) -> TxConfirmation: ...

    async def close(self) -> None:
        return None
