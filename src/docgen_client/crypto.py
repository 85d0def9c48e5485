"""
Document Generator Client - Message Encryption

AES-256-CTR encryption of outbound messages using `cryptography`.
The IV is generated per message and sent in front of the ciphertext.
"""

from __future__ import annotations

import os
from typing import Callable, Optional, Union

import structlog
from cryptography.hazmat.backends.openssl import backend as openssl_backend
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .exceptions import ConfigurationError, CryptoUnavailableError, SerializationError
from .models import EncryptedEnvelope

logger = structlog.get_logger(__name__)

KEY_SIZE = 32
IV_SIZE = algorithms.AES.block_size // 8

# OpenSSL releases up to 1.0.2d carry heartbleed-era and IV disclosure flaws
MIN_OPENSSL_VERSION_NUMBER = 0x1000204F

KeyType = Union[str, bytes]


def openssl_version_number() -> int:
    return openssl_backend.openssl_version_number()


def derive_key(key: KeyType) -> bytes:
    """Zero-pad or truncate the key to the AES-256 key size."""
    raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    return raw[:KEY_SIZE].ljust(KEY_SIZE, b"\0")


class MessageCipher:
    """
    Encrypts request messages for the `/encrypted` endpoint.

    The key and the provider are checked on every call, not at
    construction.
    """

    def __init__(
        self,
        key: Optional[KeyType] = None,
        version_provider: Callable[[], int] = openssl_version_number,
    ):
        self._key = key
        self._version_provider = version_provider

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key_configured={self.has_key})"

    @property
    def has_key(self) -> bool:
        return bool(self._key)

    def check_provider(self) -> None:
        """Refuse to encrypt with an outdated or unidentifiable OpenSSL."""
        try:
            version = self._version_provider()
        except (AttributeError, TypeError, ValueError) as e:
            raise CryptoUnavailableError("Can not verify OpenSSL version.") from e

        if not isinstance(version, int):
            raise CryptoUnavailableError("Can not verify OpenSSL version.")
        if version <= MIN_OPENSSL_VERSION_NUMBER:
            raise CryptoUnavailableError("OpenSSL version too old.")

    def _require_key(self) -> bytes:
        if not self._key:
            raise ConfigurationError("Encryption key must be defined to encrypt data.")
        return derive_key(self._key)

    def _generate_iv(self) -> bytes:
        try:
            return os.urandom(IV_SIZE)
        except (OSError, NotImplementedError) as e:
            raise CryptoUnavailableError("Can not generate IV.") from e

    def encrypt(self, message: bytes) -> EncryptedEnvelope:
        """
        Encrypt a message with a fresh random IV.

        Args:
            message: Plaintext message bytes

        Returns:
            Envelope holding the IV and the raw ciphertext

        Raises:
            ConfigurationError: If no key is configured
            CryptoUnavailableError: If the provider is unsafe or the IV
                can not be generated
        """
        key = self._require_key()
        self.check_provider()
        iv = self._generate_iv()

        encryptor = Cipher(algorithms.AES(key), modes.CTR(iv)).encryptor()
        ciphertext = encryptor.update(message) + encryptor.finalize()

        logger.debug("Message encrypted", plaintext_size=len(message))
        return EncryptedEnvelope(iv=iv, ciphertext=ciphertext)

    def encrypt_to_string(self, message: bytes) -> str:
        """Encrypt and serialize as `ivHex:ciphertextHex`."""
        return self.encrypt(message).serialize()

    def decrypt(self, envelope: Union[EncryptedEnvelope, str]) -> bytes:
        """
        Recover the plaintext of an envelope produced by `encrypt`.

        This is the service side of the exchange; it is used by tooling and
        tests that need to inspect what was sent.
        """
        if isinstance(envelope, str):
            envelope = EncryptedEnvelope.parse(envelope)

        key = self._require_key()
        if len(envelope.iv) != IV_SIZE:
            raise SerializationError(
                f"Malformed envelope: IV must be {IV_SIZE} bytes, got {len(envelope.iv)}"
            )

        decryptor = Cipher(algorithms.AES(key), modes.CTR(envelope.iv)).decryptor()
        return decryptor.update(envelope.ciphertext) + decryptor.finalize()
