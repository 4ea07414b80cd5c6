"""Named security token lookup."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from labelspace.errors import MissingSecurityTokenError
from labelspace.models import SecurityToken

from .crypto import generate_key

LOGGER = logging.getLogger(__name__)


class SecurityTokenStore:
    """Hold security tokens keyed by name."""

    def __init__(self, tokens: Iterable[SecurityToken] = ()) -> None:
        """Initialize the store with an optional set of known tokens.

        Args:
            tokens: Tokens to register; later duplicates replace earlier ones.
        """
        self._tokens: Dict[str, SecurityToken] = {token.name: token for token in tokens}

    def __contains__(self, name: object) -> bool:
        return name in self._tokens

    def get(self, name: str) -> SecurityToken:
        """Return the token registered under ``name``.

        Args:
            name: Token name recorded on a project.

        Returns:
            SecurityToken: Matching token including its key.

        Raises:
            MissingSecurityTokenError: If no token with that name is known.
        """
        try:
            return self._tokens[name]
        except KeyError as exc:
            message = f"No security token named {name!r} is configured"
            raise MissingSecurityTokenError(message) from exc

    def create(self, name: str) -> SecurityToken:
        """Generate and register a new token.

        Args:
            name: Name for the new token.

        Returns:
            SecurityToken: Newly generated token.

        Raises:
            ValueError: If a token with the same name already exists.
        """
        if name in self._tokens:
            raise ValueError(f"Security token {name!r} already exists")
        token = SecurityToken(name=name, key=generate_key())
        self._tokens[name] = token
        LOGGER.info("Generated security token %s", name)
        return token

    def tokens(self) -> List[SecurityToken]:
        return list(self._tokens.values())


__all__ = ["SecurityTokenStore"]
