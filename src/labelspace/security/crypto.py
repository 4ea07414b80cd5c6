"""Symmetric encryption helpers for project connection settings."""

from __future__ import annotations

import json
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

from labelspace.constants import ENCRYPTED_KEY
from labelspace.errors import DecryptionError
from labelspace.models import Project, ProviderOptions, SecurityToken


def generate_key() -> str:
    """Return a new random key suitable for :func:`encrypt`."""
    return Fernet.generate_key().decode("utf-8")


def encrypt(text: str, key: str) -> str:
    """Encrypt ``text`` with ``key`` and return the ciphertext as a string."""
    return Fernet(key.encode("utf-8")).encrypt(text.encode("utf-8")).decode("utf-8")


def decrypt(ciphertext: str, key: str) -> str:
    """Decrypt ``ciphertext`` produced by :func:`encrypt`.

    Raises:
        DecryptionError: If the key is malformed or does not match, or the
            ciphertext is corrupted.
    """
    try:
        value = Fernet(key.encode("utf-8")).decrypt(ciphertext.encode("utf-8"))
    except ValueError as exc:
        raise DecryptionError(f"Security token key is not a valid encryption key: {exc}") from exc
    except InvalidToken as exc:
        raise DecryptionError("Unable to decrypt value (invalid token or key mismatch)") from exc
    return value.decode("utf-8")


def encrypt_object(value: Any, key: str) -> str:
    """Serialize ``value`` as JSON and encrypt it."""
    return encrypt(json.dumps(value), key)


def decrypt_object(ciphertext: str, key: str) -> Any:
    """Decrypt ciphertext produced by :func:`encrypt_object` and parse the JSON."""
    text = decrypt(ciphertext, key)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecryptionError(f"Decrypted value is not valid JSON: {exc}") from exc


def is_encrypted(options: ProviderOptions) -> bool:
    """Return True when ``options`` is an encrypted container."""
    return (
        isinstance(options, dict)
        and set(options) == {ENCRYPTED_KEY}
        and isinstance(options[ENCRYPTED_KEY], str)
    )


def encrypt_options(options: ProviderOptions, key: str) -> dict[str, str]:
    return {ENCRYPTED_KEY: encrypt_object(options, key)}


def decrypt_options(options: ProviderOptions, key: str) -> ProviderOptions:
    if isinstance(options, dict) and is_encrypted(options):
        return decrypt_object(options[ENCRYPTED_KEY], key)
    return options


def encrypt_project(project: Project, token: SecurityToken) -> Project:
    """Return a deep copy of ``project`` with every provider option encrypted.

    The source connection, target connection, and export format are encrypted
    independently, so identical settings still yield distinct ciphertexts.
    The given project is left untouched.

    Args:
        project: Project holding decrypted provider options.
        token: Security token whose key encrypts the options.

    Returns:
        Project: Encrypted copy suitable for persisting.
    """
    encrypted = project.model_copy(deep=True)
    encrypted.source_connection.provider_options = encrypt_options(
        project.source_connection.provider_options, token.key
    )
    encrypted.target_connection.provider_options = encrypt_options(
        project.target_connection.provider_options, token.key
    )
    if encrypted.export_format is not None and project.export_format is not None:
        encrypted.export_format.provider_options = encrypt_options(
            project.export_format.provider_options, token.key
        )
    return encrypted


def decrypt_project(project: Project, token: SecurityToken) -> Project:
    """Return a deep copy of ``project`` with provider options decrypted.

    Args:
        project: Project as read from storage.
        token: Security token used when the project was saved.

    Returns:
        Project: Copy holding the original structured provider options.

    Raises:
        DecryptionError: If any encrypted container cannot be decrypted.
    """
    decrypted = project.model_copy(deep=True)
    decrypted.source_connection.provider_options = decrypt_options(
        project.source_connection.provider_options, token.key
    )
    decrypted.target_connection.provider_options = decrypt_options(
        project.target_connection.provider_options, token.key
    )
    if decrypted.export_format is not None:
        decrypted.export_format.provider_options = decrypt_options(
            decrypted.export_format.provider_options, token.key
        )
    return decrypted


__all__ = [
    "generate_key",
    "encrypt",
    "decrypt",
    "encrypt_object",
    "decrypt_object",
    "is_encrypted",
    "encrypt_options",
    "decrypt_options",
    "encrypt_project",
    "decrypt_project",
]
