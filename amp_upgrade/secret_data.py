"""
Stateless conversions between the plaintext form of secret content
(stringData) and the base64 encoded form the cluster stores (data)
"""

# Standard
from typing import Dict, Optional
import base64


def b64_secret(val) -> str:
    if isinstance(val, str):
        val = val.encode("utf-8")
    return base64.b64encode(val).decode("utf-8")


def b64_secret_decode(val) -> str:
    if isinstance(val, str):
        val = val.encode("utf-8")
    return base64.b64decode(val).decode("utf-8")


def encode(string_data: Optional[Dict[str, str]]) -> Dict[str, str]:
    """Convert plaintext key/value pairs into secret data

    Args:
        string_data:  Optional[Dict[str, str]]
            The plaintext entries (e.g. a ConfigMap's data)

    Returns:
        data:  Dict[str, str]
            The same entries with base64 encoded values
    """
    return {key: b64_secret(val) for key, val in (string_data or {}).items()}


def decode(data: Optional[Dict[str, str]]) -> Dict[str, str]:
    """Convert secret data back into comparable plaintext

    Args:
        data:  Optional[Dict[str, str]]
            The base64 encoded entries of a secret

    Returns:
        string_data:  Dict[str, str]
            The decoded entries
    """
    return {key: b64_secret_decode(val) for key, val in (data or {}).items()}
