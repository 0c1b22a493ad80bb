'''
    Description:
        - This module provides the cryptographic utilities used by the key registry gateway:
          the RSA public key DER codec and RSA key management helpers.
        - It consolidates them for easy import across the backend and the HTTP gateway.
'''

from .rsa_der import (
    KeyCodecError, EncodingError, DecodingError,
    encode_public_key, decode_public_key, FORMATS,
)
from .rsa_key_management import (
    generate_rsa_keypair, load_public_key, public_key_to_json, public_key_from_json,
)

__all__ = [
    "KeyCodecError", "EncodingError", "DecodingError",
    "encode_public_key", "decode_public_key", "FORMATS",
    "generate_rsa_keypair", "load_public_key", "public_key_to_json", "public_key_from_json",
]
