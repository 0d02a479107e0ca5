"""
Tests for the secret data codec
"""

# Local
from amp_upgrade.secret_data import b64_secret, b64_secret_decode, decode, encode


def test_b64_secret():
    """Make sure both str and bytes values are encoded"""
    assert b64_secret("hello") == "aGVsbG8="
    assert b64_secret(b"hello") == "aGVsbG8="
    assert b64_secret_decode("aGVsbG8=") == "hello"


def test_encode_decode():
    """Make sure decoding encoded data gives back the plaintext"""
    string_data = {"address": "smtp.example.com", "port": "25", "password": ""}
    data = encode(string_data)
    assert data["address"] == "c210cC5leGFtcGxlLmNvbQ=="
    assert data["password"] == ""
    assert decode(data) == string_data


def test_encode_decode_empty():
    """Make sure missing content is treated as empty"""
    assert encode(None) == {}
    assert decode(None) == {}
    assert decode({}) == {}


def test_decode_unicode():
    """Make sure non-ascii values survive"""
    assert decode(encode({"user": "jürgen"})) == {"user": "jürgen"}
