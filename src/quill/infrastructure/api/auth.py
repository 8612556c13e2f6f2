"""Request signing with RSA PKCS#1 v1.5 over SHA-256

The canonical message is the replay token, the URI exactly as sent and the
raw body bytes, concatenated in that order with no separators.
"""

import base64
import binascii

from Crypto.Hash import SHA256
from Crypto.PublicKey import RSA
from Crypto.Signature import PKCS1_v1_5 as PKCS1_v1_5_Signature
from loguru import logger

from quill.shared.exceptions import ConfigurationError, SigningError


def b64url_encode(data: bytes) -> str:
    """Unpadded URL-safe base64"""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(data: str) -> bytes:
    """Decode unpadded URL-safe base64"""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def canonical_message(token: str, uri: str, body: bytes = b"") -> bytes:
    """Build the byte sequence that is hashed and signed"""
    return token.encode("utf-8") + uri.encode("utf-8") + body


def load_private_key(pem_data: bytes) -> RSA.RsaKey:
    """Parse a PEM-encoded RSA private key

    Raises:
        ConfigurationError: If the PEM cannot be parsed or holds a public key
    """
    try:
        key = RSA.import_key(pem_data)
    except (ValueError, IndexError, TypeError) as e:
        raise ConfigurationError(f"Invalid private key: {e}") from e

    if not key.has_private():
        raise ConfigurationError("Invalid private key: PEM holds a public key")
    return key


class RequestSigner:
    """Signs canonical request messages with one RSA private key

    The key is held for the lifetime of the signer and never mutated.
    PKCS#1 v1.5 has no randomized salt, so equal inputs give equal signatures.
    """

    def __init__(self, private_key: RSA.RsaKey) -> None:
        self._key = private_key

    @classmethod
    def from_pem(cls, pem_data: bytes) -> "RequestSigner":
        """Create a signer from PEM-encoded key bytes"""
        return cls(load_private_key(pem_data))

    @property
    def public_key(self) -> RSA.RsaKey:
        """Public half of the signing key"""
        return self._key.public_key()

    def digest(self, token: str, uri: str, body: bytes = b"") -> bytes:
        """SHA-256 digest of the canonical message"""
        return SHA256.new(data=canonical_message(token, uri, body)).digest()

    def sign(self, token: str, uri: str, body: bytes = b"") -> str:
        """Sign token + uri + body

        Args:
            token: Replay token, fixed before signing
            uri: URI exactly as it will be sent
            body: Raw body bytes (empty for verbs without a payload)

        Returns:
            Unpadded URL-safe base64 signature

        Raises:
            SigningError: If the signing primitive rejects the key or digest
        """
        sha256_hash = SHA256.new(data=canonical_message(token, uri, body))
        logger.debug(f"Canonical digest: {sha256_hash.hexdigest()}")

        try:
            signature = PKCS1_v1_5_Signature.new(rsa_key=self._key).sign(
                msg_hash=sha256_hash
            )
        except (ValueError, TypeError) as e:
            raise SigningError(f"Signing failed: {e}") from e

        return b64url_encode(signature)

    def verify(
        self, token: str, uri: str, body: bytes, signature: str
    ) -> bool:
        """Check a signature against the public half of the key

        Returns:
            True if signature matches token + uri + body, False otherwise
        """
        try:
            raw_signature = b64url_decode(signature)
        except (ValueError, binascii.Error):
            return False

        sha256_hash = SHA256.new(data=canonical_message(token, uri, body))
        return PKCS1_v1_5_Signature.new(rsa_key=self.public_key).verify(
            sha256_hash, raw_signature
        )
