'''
    Description:
        - This module provides RSA key management helpers: key generation, loading public keys
          from PEM, and moving public keys between cryptography key objects and the JSON
          {"n", "e"} form accepted by the gateway.
'''

from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from .rsa_der import EncodingError, int_to_decimal, parse_key_int

def generate_rsa_keypair(bits: int = 2048, public_exponent: int = 65537) -> tuple[bytes, bytes]:
    private_key = rsa.generate_private_key(public_exponent=public_exponent, key_size=bits)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return private_pem, public_pem

def load_public_key(public_pem_or_obj) -> RSAPublicKey:
    if isinstance(public_pem_or_obj, RSAPublicKey):
        return public_pem_or_obj
    if isinstance(public_pem_or_obj, str):
        public_pem_or_obj = public_pem_or_obj.encode("utf-8")
    key = serialization.load_pem_public_key(public_pem_or_obj)
    if not isinstance(key, RSAPublicKey):
        raise TypeError("PEM data is not an RSA public key")
    return key

def public_key_to_json(public_pem_or_obj) -> dict:
    numbers = load_public_key(public_pem_or_obj).public_numbers()
    return {"n": int_to_decimal(numbers.n), "e": numbers.e}

def public_key_from_json(json_key: dict) -> RSAPublicKey:
    n = parse_key_int(json_key.get("n"), "modulus")
    e = parse_key_int(json_key.get("e"), "exponent")
    try:
        return rsa.RSAPublicNumbers(e, n).public_key()
    except ValueError as exc:
        raise EncodingError(f"invalid RSA public key: {exc}") from exc
