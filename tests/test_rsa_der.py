import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from backend.crypto import (
    DecodingError, EncodingError, KeyCodecError,
    decode_public_key, encode_public_key, generate_rsa_keypair, load_public_key, public_key_from_json, public_key_to_json,
)
from backend.crypto.rsa_der import MAX_MODULUS_BITS, decimal_to_int, int_to_decimal


@pytest.fixture(scope="module", params=[(1024, 65537), (2048, 65537), (2048, 3)])
def keypair(request):
    bits, exponent = request.param
    _, public_pem = generate_rsa_keypair(bits, public_exponent=exponent)
    return load_public_key(public_pem)


def test_round_trip(keypair):
    json_key = public_key_to_json(keypair)
    der = encode_public_key(json_key["n"], json_key["e"])
    assert decode_public_key(der) == json_key


def test_round_trip_pkcs1(keypair):
    json_key = public_key_to_json(keypair)
    der = encode_public_key(json_key["n"], json_key["e"], fmt="pkcs1")
    assert decode_public_key(der) == json_key


def test_spki_matches_cryptography_output(keypair):
    json_key = public_key_to_json(keypair)
    expected = keypair.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    assert encode_public_key(json_key["n"], json_key["e"]) == expected


def test_pkcs1_is_bare_sequence(keypair):
    json_key = public_key_to_json(keypair)
    spki = encode_public_key(json_key["n"], json_key["e"])
    pkcs1 = encode_public_key(json_key["n"], json_key["e"], fmt="pkcs1")
    assert pkcs1[0] == 0x30
    assert len(pkcs1) < len(spki)
    assert pkcs1 in spki


def test_modulus_as_int_and_exponent_as_string(rsa_json):
    der = encode_public_key(int(rsa_json["n"]), str(rsa_json["e"]))
    assert decode_public_key(der) == rsa_json


def test_leading_zeros_are_normalised(rsa_json):
    der = encode_public_key("000" + rsa_json["n"], rsa_json["e"])
    assert decode_public_key(der)["n"] == rsa_json["n"]


def test_decoded_types(rsa_json):
    decoded = decode_public_key(encode_public_key(rsa_json["n"], rsa_json["e"]))
    assert isinstance(decoded["n"], str)
    assert isinstance(decoded["e"], int)


@pytest.mark.parametrize("modulus", ["abc", "12.5", "-17", "0x1f", "", " ", None, [1]])
def test_bad_modulus_raises_encoding_error(modulus):
    with pytest.raises(EncodingError):
        encode_public_key(modulus, 65537)


@pytest.mark.parametrize("exponent", [True, 1.5, "e", -3, None, {}])
def test_bad_exponent_raises_encoding_error(rsa_json, exponent):
    with pytest.raises(EncodingError):
        encode_public_key(rsa_json["n"], exponent)


def test_unusable_key_raises_encoding_error(rsa_json):
    even_modulus = str(int(rsa_json["n"]) + 1)
    with pytest.raises(EncodingError):
        encode_public_key(even_modulus, 65537)
    with pytest.raises(EncodingError):
        encode_public_key(rsa_json["n"], 1)


def test_unknown_format(rsa_json):
    with pytest.raises(EncodingError):
        encode_public_key(rsa_json["n"], rsa_json["e"], fmt="pem")


def test_errors_are_value_errors():
    assert issubclass(EncodingError, KeyCodecError)
    assert issubclass(DecodingError, KeyCodecError)
    assert issubclass(KeyCodecError, ValueError)


def test_decode_accepts_bytearray_and_memoryview(rsa_json):
    der = encode_public_key(rsa_json["n"], rsa_json["e"])
    assert decode_public_key(bytearray(der)) == rsa_json
    assert decode_public_key(memoryview(der)) == rsa_json


@pytest.mark.parametrize("data", [b"", b"not der at all", b"\x30\x03\x02\x01", b"\x02\x01\x05"])
def test_invalid_der_raises_decoding_error(data):
    with pytest.raises(DecodingError):
        decode_public_key(data)


def test_truncated_der(rsa_json):
    der = encode_public_key(rsa_json["n"], rsa_json["e"])
    with pytest.raises(DecodingError):
        decode_public_key(der[:-1])


def test_trailing_data(rsa_json):
    der = encode_public_key(rsa_json["n"], rsa_json["e"])
    with pytest.raises(DecodingError):
        decode_public_key(der + b"\x00")


def test_non_rsa_key():
    ec_der = ec.generate_private_key(ec.SECP256R1()).public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    with pytest.raises(DecodingError):
        decode_public_key(ec_der)


@pytest.mark.parametrize("data", ["3082010a", None, 12345])
def test_non_bytes_input(data):
    with pytest.raises(DecodingError):
        decode_public_key(data)


# ---- keys past CPython's 4300-digit int/str conversion limit ----

LARGE_MODULUS = int_to_decimal((1 << 14500) + 1)


@pytest.mark.parametrize("fmt", ["spki", "pkcs1"])
def test_large_modulus_round_trip(fmt):
    der = encode_public_key(LARGE_MODULUS, 65537, fmt=fmt)
    assert decode_public_key(der) == {"n": LARGE_MODULUS, "e": 65537}


def test_large_modulus_as_int():
    der = encode_public_key((1 << 14500) + 1, 65537)
    assert decode_public_key(der)["n"] == LARGE_MODULUS


@pytest.mark.parametrize("modulus", [
    (1 << MAX_MODULUS_BITS) + 1,
    int_to_decimal((1 << 16400) + 1),
    "1" * 5000,
], ids=["int", "decimal-str", "ones-str"])
def test_oversized_modulus_raises_encoding_error(modulus):
    with pytest.raises(EncodingError, match="exceeds"):
        encode_public_key(modulus, 65537)


@pytest.mark.parametrize("value", [0, 7, 10**999, 10**1000, 10**1000 - 1, 10**2000 + 7, 123456789 * 10**1500])
def test_decimal_conversion_matches_builtin(value):
    text = int_to_decimal(value)
    assert text == str(value)
    assert decimal_to_int(text) == value


def test_decimal_to_int_keeps_inner_zeros():
    text = "1" + "0" * 2500 + "3"
    assert int_to_decimal(decimal_to_int(text)) == text


# ---- key object <-> JSON ----

def test_public_key_json_round_trip(keypair):
    json_key = public_key_to_json(keypair)
    assert public_key_from_json(json_key).public_numbers() == keypair.public_numbers()


@pytest.mark.parametrize("json_key", [{}, {"n": "abc", "e": 65537}, {"n": "15", "e": 4}])
def test_public_key_from_json_rejects_bad_keys(json_key):
    with pytest.raises(EncodingError):
        public_key_from_json(json_key)
