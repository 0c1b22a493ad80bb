from .public_key import (
    PublicKeyJSON, KeyRequest, PublicKeyResponse, TxResponse, MessageResponse, ErrorResponse,
)

__all__ = [
    "PublicKeyJSON", "KeyRequest", "PublicKeyResponse", "TxResponse", "MessageResponse", "ErrorResponse",
]
