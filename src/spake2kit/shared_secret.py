from __future__ import annotations

import logging
from typing import Any, ClassVar

from spake2kit import codec
from spake2kit.errors import AuthenticationFailure
from spake2kit.rfc_steps.hashing import constant_time_equal
from spake2kit.suites import CipherSuite, get_cipher_suite
from spake2kit.types import ProtocolOptions, Role

logger = logging.getLogger(__name__)

CONFIRMATION_KEYS_INFO = b"ConfirmationKeys"
SHARED_KEY_INFO = b"SharedKey"


class SharedSecret:
    """
    Keys derived from a finished exchange, for one side of it.

    SPAKE2 (RFC 9382 Section 4): Hash(TT) splits into Ke || Ka, and
    KcA || KcB = KDF(nil, Ka, "ConfirmationKeys" || AAD). Both sides MAC the
    transcript.

    SPAKE2+ (RFC 9383 Section 3.4): K_confirmP || K_confirmV and K_shared are
    expanded from Hash(TT). Each side MACs the share it received from its peer.
    """

    role: ClassVar[Role]

    def __init__(
        self,
        options: ProtocolOptions,
        suite: CipherSuite,
        transcript: bytes,
        client_message: bytes | None = None,
        server_message: bytes | None = None,
    ):
        if options.plus and (not client_message or not server_message):
            raise ValueError("client and server messages are required for SPAKE2+ shared secrets")

        self.options = options
        self.suite = suite
        self.transcript = transcript
        self.client_message = client_message
        self.server_message = server_message
        self.hash_transcript = suite.hash(transcript)

        salt = b""
        aad = options.kdf.aad
        hash_length = suite.hash_length

        if options.plus:
            confirmation_keys = suite.kdf(
                salt, self.hash_transcript, CONFIRMATION_KEYS_INFO + aad, 2 * hash_length
            )
            self.k_confirm_p = confirmation_keys[:hash_length]
            self.k_confirm_v = confirmation_keys[hash_length:]
            self._shared_key = suite.kdf(salt, self.hash_transcript, SHARED_KEY_INFO + aad, hash_length)
            return

        half = len(self.hash_transcript) // 2
        self.ke = self.hash_transcript[:half]
        self.ka = self.hash_transcript[half:]
        confirmation_keys = suite.kdf(salt, self.ka, CONFIRMATION_KEYS_INFO + aad, hash_length)
        half = len(confirmation_keys) // 2
        self.kc_a = confirmation_keys[:half]
        self.kc_b = confirmation_keys[half:]
        self._shared_key = self.ke

    @property
    def shared_key(self) -> bytes:
        """Ke for SPAKE2, K_shared for SPAKE2+."""
        return self._shared_key

    def get_transcript_hash(self) -> bytes:
        return self.hash_transcript

    def _confirmation_for(self, role: Role) -> bytes:
        mac = self.suite.mac
        if self.options.plus:
            if role is Role.CLIENT:
                return mac(self.server_message, self.k_confirm_p)  # type: ignore
            return mac(self.client_message, self.k_confirm_v)  # type: ignore
        key = self.kc_a if role is Role.CLIENT else self.kc_b
        return mac(self.transcript, key)

    def get_confirmation(self) -> bytes:
        return self._confirmation_for(self.role)

    def verify(self, confirmation: bytes) -> None:
        peer = Role.SERVER if self.role is Role.CLIENT else Role.CLIENT
        expected = self._confirmation_for(peer)
        if not constant_time_equal(expected, confirmation):
            logger.warning("%s rejected key confirmation from %s", self.role.value, peer.value)
            raise AuthenticationFailure(f"invalid confirmation from {peer.value}")

    def save(self) -> dict[str, Any]:
        return codec.SharedSecretRecord.from_secret(self).model_dump()

    @classmethod
    def load(cls, data: dict[str, Any]) -> SharedSecret:
        """
        Restore a saved secret. Called on SharedSecret itself, the saved role
        picks ClientSharedSecret or ServerSharedSecret.
        """
        record = codec.SharedSecretRecord.model_validate(data)
        target = _for_role(record.role) if cls is SharedSecret else cls
        if record.role is not None and record.role is not target.role:
            raise ValueError(f"saved {record.role.value} secret cannot be loaded as {target.role.value}")
        suite = get_cipher_suite(record.options.suite)
        return target(
            options=record.options.to_options(),
            suite=suite,
            transcript=record.transcript,
            client_message=record.client_message,
            server_message=record.server_message,
        )


class ClientSharedSecret(SharedSecret):
    role = Role.CLIENT


class ServerSharedSecret(SharedSecret):
    role = Role.SERVER


def _for_role(role: Role | None) -> type[SharedSecret]:
    if role is Role.CLIENT:
        return ClientSharedSecret
    if role is Role.SERVER:
        return ServerSharedSecret
    raise ValueError("saved secret has no role; load it with ClientSharedSecret or ServerSharedSecret")
