"""
Key registry collaborators.

`ContractKeyRegistry` talks to the on-chain KeyRegistry contract;
`InMemoryKeyRegistry` keeps the same contract in a dict for tests and local runs.
"""

from .base import KeyRegistry, RegistryError, RegistryConfigError, TxConfirmation
from .memory import InMemoryKeyRegistry

__all__ = [
    "KeyRegistry", "RegistryError", "RegistryConfigError", "TxConfirmation",
    "InMemoryKeyRegistry", "build_registry",
]


def build_registry(settings) -> KeyRegistry:
    """Build the registry backend named by settings.REGISTRY_BACKEND."""
    backend = settings.REGISTRY_BACKEND
    if backend == "memory":
        return InMemoryKeyRegistry()
    if backend != "contract":
        raise RegistryConfigError(f"unknown registry backend: {backend}")

    missing = [
        name for name, value in (
            ("RPC_URL", settings.rpc_url),
            ("CONTRACT_ADDRESS", settings.contract_address),
            ("PRIVATE_KEY", settings.private_key),
        ) if not value
    ]
    if missing:
        raise RegistryConfigError(f"missing configuration: {', '.join(missing)}")

    # web3 is only imported when the contract backend is actually used
    from .contract import ContractKeyRegistry
    return ContractKeyRegistry(
        contract_address=settings.contract_address,
        rpc_url=settings.rpc_url,
        private_key=settings.private_key.get_secret_value(),
        chain_id=settings.CHAIN_ID,
        gas_limit=settings.GAS_LIMIT,
        poa=settings.POA_CHAIN,
    )
