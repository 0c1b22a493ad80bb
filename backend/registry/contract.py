# backend/registry/contract.py
"""
Key registry backed by the on-chain KeyRegistry contract.

Reads go through eth_call; writes are built, signed locally with the configured
account, sent raw, and only reported once the transaction receipt is in.

Usage:
    registry = ContractKeyRegistry(
        contract_address="0x...",
        rpc_url="https://...",
        private_key="0x...",
    )
    if not await registry.is_user_registered("alice"):
        confirmation = await registry.set_public_key("alice", der_bytes)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from eth_account import Account
from web3 import AsyncWeb3
from web3.middleware import ExtraDataToPOAMiddleware

from .base import KeyRegistry, RegistryError, TxConfirmation

logger = logging.getLogger(__name__)

ABI_PATH = Path(__file__).parent / "abi" / "KeyRegistry.json"


def load_abi(path: Path = ABI_PATH) -> List[Dict[str, Any]]:
    """Load contract ABI from a JSON file (bare list or {"abi": [...]})."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return data.get("abi", data) if isinstance(data, dict) else data


def as_key_bytes(raw) -> bytes:
    """Normalise a `bytes` return value (HexBytes, bytes, or 0x hex string)."""
    if isinstance(raw, str):
        text = raw[2:] if raw.startswith(("0x", "0X")) else raw
        try:
            return bytes.fromhex(text)
        except ValueError as exc:
            raise RegistryError(f"registry returned non-hex key data: {exc}") from exc
    return bytes(raw)


class ContractKeyRegistry(KeyRegistry):
    """
    KeyRegistry contract interface over web3.py's AsyncWeb3.

    Args:
        contract_address: Deployed KeyRegistry address
        rpc_url: JSON-RPC endpoint URL
        private_key: Signing key for write operations
        chain_id: Chain ID (read from the node on first write if not provided)
        gas_limit: Gas limit per write (estimated by the node if not provided)
        poa: Inject the extra-data middleware needed by PoA chains (Polygon, BSC, ...)
        w3: Pre-built AsyncWeb3 instance, overrides rpc_url
    """

    name = "contract"

    def __init__(
        self,
        contract_address: str,
        rpc_url: Optional[str] = None,
        private_key: Optional[str] = None,
        chain_id: Optional[int] = None,
        gas_limit: Optional[int] = None,
        poa: bool = False,
        abi: Optional[List[Dict[str, Any]]] = None,
        w3: Optional[AsyncWeb3] = None,
    ):
        if w3 is None:
            if not rpc_url:
                raise RegistryError("rpc_url is required")
            w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
            if poa:
                w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        if not private_key:
            raise RegistryError("Private key required for write operations")

        self._w3 = w3
        self.contract_address = AsyncWeb3.to_checksum_address(contract_address)
        self._contract = self._w3.eth.contract(
            address=self.contract_address,
            abi=abi if abi is not None else load_abi(),
        )
        self._account = Account.from_key(private_key)
        self._chain_id = chain_id
        self._gas_limit = gas_limit

    @property
    def account_address(self) -> str:
        return self._account.address

    # =========================================================================
    # Read Operations
    # =========================================================================

    async def is_user_registered(self, user_id: str) -> bool:
        return bool(await self._contract.functions.isUserRegistered(user_id).call())

    async def get_public_key(self, user_id: str) -> bytes:
        raw = await self._contract.functions.getPublicKey(user_id).call()
        return as_key_bytes(raw)

    # =========================================================================
    # Write Operations
    # =========================================================================

    async def set_public_key(self, user_id: str, public_key: bytes) -> TxConfirmation:
        return await self._transact(self._contract.functions.setPublicKey(user_id, bytes(public_key)))

    async def update_public_key(self, user_id: str, public_key: bytes) -> TxConfirmation:
        return await self._transact(self._contract.functions.updatePublicKey(user_id, bytes(public_key)))

    async def delete_public_key(self, user_id: str) -> TxConfirmation:
        return await self._transact(self._contract.functions.deletePublicKey(user_id))

    async def _transact(self, function_call) -> TxConfirmation:
        if self._chain_id is None:
            self._chain_id = await self._w3.eth.chain_id

        params = {
            'from': self._account.address,
            'chainId': self._chain_id,
            'nonce': await self._w3.eth.get_transaction_count(self._account.address, 'pending'),
        }
        if self._gas_limit:
            params['gas'] = self._gas_limit

        tx = await function_call.build_transaction(params)

        # Sign and send
        signed = self._account.sign_transaction(tx)
        tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hex = AsyncWeb3.to_hex(tx_hash)

        # Wait for receipt
        receipt = await self._w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt['status'] != 1:
            raise RegistryError(f"Transaction failed: {tx_hex}")

        logger.info(f"{function_call.fn_name} confirmed in block {receipt['blockNumber']}: {tx_hex}")
        return TxConfirmation(tx_hash=tx_hex, block_number=receipt['blockNumber'], status=receipt['status'])

    async def close(self) -> None:
        await self._w3.provider.disconnect()
