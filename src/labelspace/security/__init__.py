"""Encryption helpers and security token management."""

from .crypto import (
    decrypt,
    decrypt_object,
    decrypt_options,
    decrypt_project,
    encrypt,
    encrypt_object,
    encrypt_options,
    encrypt_project,
    generate_key,
    is_encrypted,
)
from .tokens import SecurityTokenStore

__all__ = [
    "SecurityTokenStore",
    "decrypt",
    "decrypt_object",
    "decrypt_options",
    "decrypt_project",
    "encrypt",
    "encrypt_object",
    "encrypt_options",
    "encrypt_project",
    "generate_key",
    "is_encrypted",
]
