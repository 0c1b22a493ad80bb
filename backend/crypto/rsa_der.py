'''
    Description:
        - This module converts an RSA public key between its JSON form {"n": "<decimal>", "e": <int>}
          and the DER bytes stored on-chain by the key registry contract.
        - Encoding defaults to X.509 SubjectPublicKeyInfo; the bare PKCS#1 RSAPublicKey
          (SEQUENCE of modulus and exponent) can be selected instead. Decoding accepts both.
'''

'''
    Tested:
        - Round trip on generated 1024/2048 bit keys and a non-default exponent
        - Modulus given as a JSON number or a decimal string
        - A 14501 bit modulus (past the 4300 digit int/str limit) round trips; over 16384 bits is rejected
        - Non-decimal modulus, negative values, bools and fractional exponents raise EncodingError
        - Empty, truncated, trailing-data, non-DER and EC keys raise DecodingError
'''

# ========== Imports ==========
import re

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

# ========== Errors ==========
class KeyCodecError(ValueError):
    pass


class EncodingError(KeyCodecError):
    pass


class DecodingError(KeyCodecError):
    pass


# ========== Formats ==========
FORMATS = {
    "spki": serialization.PublicFormat.SubjectPublicKeyInfo,
    "pkcs1": serialization.PublicFormat.PKCS1,
}

_DECIMAL = re.compile(r"^[0-9]+$")

# OpenSSL's RSA modulus ceiling
MAX_MODULUS_BITS = 16384
# 16384 bits is 4933 decimal digits
MAX_DECIMAL_DIGITS = 4940
# CPython limits int <-> str conversion to 4300 digits; convert in chunks below it
_CHUNK_DIGITS = 1000
_CHUNK_BASE = 10 ** _CHUNK_DIGITS


def decimal_to_int(text: str) -> int:
    result = 0
    for start in range(0, len(text), _CHUNK_DIGITS):
        chunk = text[start:start + _CHUNK_DIGITS]
        result = result * 10 ** len(chunk) + int(chunk)
    return result


def int_to_decimal(value: int) -> str:
    if value < _CHUNK_BASE:
        return str(value)
    chunks = []
    while value:
        value, chunk = divmod(value, _CHUNK_BASE)
        chunks.append(chunk)
    head = str(chunks.pop())
    return head + "".join(str(chunk).zfill(_CHUNK_DIGITS) for chunk in reversed(chunks))


def parse_key_int(value, field: str) -> int:
    # bool is an int subclass; true/false is never a key component
    if isinstance(value, bool):
        raise EncodingError(f"{field} must be an integer")
    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise EncodingError(f"{field} must be an integer")
        result = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if len(text) > MAX_DECIMAL_DIGITS:
            raise EncodingError(f"{field} exceeds {MAX_MODULUS_BITS} bits")
        if not _DECIMAL.match(text):
            raise EncodingError(f"{field} is not a valid base-10 integer: {value[:40]!r}")
        result = decimal_to_int(text)
    else:
        raise EncodingError(f"{field} must be an integer")
    if result < 0:
        raise EncodingError(f"{field} must be non-negative")
    if result.bit_length() > MAX_MODULUS_BITS:
        raise EncodingError(f"{field} exceeds {MAX_MODULUS_BITS} bits")
    return result


# ========== JSON -> DER ==========
def encode_public_key(modulus, exponent, fmt: str = "spki") -> bytes:
    n = parse_key_int(modulus, "modulus")
    e = parse_key_int(exponent, "exponent")
    if fmt not in FORMATS:
        raise EncodingError(f"unknown key encoding: {fmt}")

    try:
        public_key = rsa.RSAPublicNumbers(e, n).public_key()
    except ValueError as exc:
        raise EncodingError(f"invalid RSA public key: {exc}") from exc

    return public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=FORMATS[fmt],
    )


# ========== DER -> JSON ==========
def decode_public_key(der) -> dict:
    if not isinstance(der, (bytes, bytearray, memoryview)):
        raise DecodingError(f"expected DER bytes, got {type(der).__name__}")

    try:
        public_key = serialization.load_der_public_key(bytes(der))
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise DecodingError(f"invalid DER public key: {exc}") from exc

    if not isinstance(public_key, rsa.RSAPublicKey):
        raise DecodingError("DER data does not describe an RSA public key")

    numbers = public_key.public_numbers()
    if numbers.n.bit_length() > MAX_MODULUS_BITS:
        raise DecodingError(f"modulus exceeds {MAX_MODULUS_BITS} bits")
    return {"n": int_to_decimal(numbers.n), "e": int(numbers.e)}
