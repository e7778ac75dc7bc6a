"""Signature verification for inbound GitHub and Discord webhooks."""

import hashlib
import hmac
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

GITHUB_SIGNATURE_PREFIX = "sha256="


def github_signature(body: bytes, secret: str) -> str:
    """Compute the ``X-Hub-Signature-256`` value for a payload."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return GITHUB_SIGNATURE_PREFIX + digest


def verify_github_signature(
    body: bytes,
    signature_header: Optional[str],
    secret: str,
) -> bool:
    """
    Verify a GitHub webhook HMAC-SHA256 signature.

    Fails closed when no secret is configured or the header is missing.
    """
    if not secret or not signature_header or not body:
        return False
    if not signature_header.startswith(GITHUB_SIGNATURE_PREFIX):
        return False
    return hmac.compare_digest(github_signature(body, secret), signature_header)


def verify_discord_signature(
    body: bytes,
    signature_hex: str,
    timestamp: str,
    public_key_hex: str,
) -> bool:
    """
    Verify a Discord interaction Ed25519 signature over ``timestamp + body``.

    Malformed hex in either the key or the signature counts as a failed check.
    """
    try:
        public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(public_key_hex))
        public_key.verify(bytes.fromhex(signature_hex), timestamp.encode("utf-8") + body)
    except (InvalidSignature, ValueError):
        return False
    return True
