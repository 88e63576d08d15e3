"""Local OpenSSH public keys and upload labels.

A public key file holds one line: ``<type> <base64 material> [comment]``.
Two keys are the same key when their material is equal; type and comment
play no part in the comparison.
"""

from __future__ import annotations

import base64
import binascii
import secrets
import socket
import string
from pathlib import Path

from pydantic import BaseModel

from shiftdeploy.domain.errors import InvalidKeyError

_KEY_TYPE_PREFIXES = ("ssh-", "ecdsa-", "sk-")
FALLBACK_TOKEN_LENGTH = 16


class PublicKey(BaseModel):
    """A parsed OpenSSH public key."""

    model_config = {"frozen": True}

    type: str
    content: str
    comment: str | None = None

    @classmethod
    def parse(cls, text: str) -> PublicKey:
        """Parse a single public key line.

        Raises:
            InvalidKeyError: if the text is not an OpenSSH public key.
        """
        parts = text.strip().split(None, 2)
        if len(parts) < 2:
            raise InvalidKeyError("Public key must have the form '<type> <key> [comment]'")
        key_type, material = parts[0], parts[1]
        if not key_type.startswith(_KEY_TYPE_PREFIXES):
            raise InvalidKeyError(f"Unsupported public key type: {key_type!r}")
        try:
            base64.b64decode(material, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidKeyError("Public key material is not valid base64") from exc
        comment = parts[2].strip() if len(parts) == 3 else None
        return cls(type=key_type, content=material, comment=comment or None)

    @classmethod
    def from_file(cls, path: Path) -> PublicKey:
        """Read and parse *path*. ``OSError`` propagates when unreadable.

        Raises:
            InvalidKeyError: if the file is not UTF-8 text or not a public key.
        """
        try:
            text = Path(path).expanduser().read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidKeyError(f"Public key file {path} is not text") from exc
        return cls.parse(text)

    def matches(self, content: str) -> bool:
        """Whether *content* is the same key material."""
        return self.content == content.strip()


def random_token(length: int = FALLBACK_TOKEN_LENGTH) -> str:
    """Random alphabetic token, e.g. ``'qZkTrmWbYxOaLcNe'``."""
    return "".join(secrets.choice(string.ascii_letters) for _ in range(length))


def host_token() -> str:
    """Local hostname, or a random token when it does not resolve to an address."""
    try:
        hostname = socket.gethostname()
        socket.gethostbyname(hostname)
    except OSError:
        return random_token()
    return hostname or random_token()


def key_label(prefix: str) -> str:
    """Label for an uploaded key: ``<prefix>-<hostname>``.

    Examples:
        >>> key_label("jenkins-ci").startswith("jenkins-ci-")
        True
    """
    return f"{prefix}-{host_token()}"
