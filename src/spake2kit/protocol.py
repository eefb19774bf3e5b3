from __future__ import annotations

import logging
import math
from typing import Any

from spake2kit.rfc_steps.transcript import concat_length_prefixed
from spake2kit.states import ClientPlusState, ClientState, ServerPlusState, ServerState
from spake2kit.suites import CipherSuite, get_cipher_suite
from spake2kit.types import PlusVerifier, ProtocolOptions, as_bytes

logger = logging.getLogger(__name__)

Text = str | bytes


class SPAKE2:
    """
    Entry point for both variants: derives password scalars with the suite's
    memory-hard function and hands out client and server sessions.
    """

    def __init__(self, options: ProtocolOptions, suite: CipherSuite) -> None:
        self.options = options.resolve(suite)
        self.suite = suite

    def _mhf_length(self, multiplier: int = 1) -> int:
        # 64 extra bits before reduction mod p keep the scalar bias negligible
        min_bytes = math.ceil((self.suite.scalar_bit_length + 64) / 8)
        return multiplier * min_bytes

    async def _compute_w(self, password: bytes, salt: bytes) -> int:
        derived = await self.suite.mhf(password, salt, self.options.mhf, self._mhf_length())
        return self.suite.curve.scalar_from_bytes(derived)

    async def _compute_w0_w1(
        self, client_identity: bytes, server_identity: bytes, password: bytes, salt: bytes
    ) -> tuple[int, int]:
        """
        RFC 9383 Section 3.2: w0s || w1s = PBKDF(len(pw) || pw || len(idProver)
        || idProver || len(idVerifier) || idVerifier, salt)
        """
        mhf_input = concat_length_prefixed(password, client_identity, server_identity)
        derived = await self.suite.mhf(mhf_input, salt, self.options.mhf, self._mhf_length(2))
        half = len(derived) // 2
        curve = self.suite.curve
        return curve.scalar_from_bytes(derived[:half]), curve.scalar_from_bytes(derived[half:])

    async def start_client(
        self,
        client_identity: Text | None,
        server_identity: Text | None,
        password: Text,
        salt: Text = b"",
    ) -> ClientState | ClientPlusState:
        idA, idB = as_bytes(client_identity), as_bytes(server_identity)
        pw, salt_bytes = as_bytes(password), as_bytes(salt)
        curve = self.suite.curve
        logger.debug("starting %s client session", self.suite.name)

        if not self.options.plus:
            w = await self._compute_w(pw, salt_bytes)
            return ClientState(self.options, self.suite, idA, idB, w=w, x=curve.random_scalar())

        w0, w1 = await self._compute_w0_w1(idA, idB, pw, salt_bytes)
        return ClientPlusState(self.options, self.suite, idA, idB, w0=w0, w1=w1, x=curve.random_scalar())

    def start_server(
        self,
        client_identity: Text | None,
        server_identity: Text | None,
        verifier: Text | PlusVerifier | dict[str, Any],
    ) -> ServerState | ServerPlusState:
        """
        ``verifier`` is the output of compute_verifier(): the encoded scalar w
        for SPAKE2, or w0 and L for SPAKE2+. Hex text is accepted for either.
        """
        idA, idB = as_bytes(client_identity), as_bytes(server_identity)
        curve = self.suite.curve
        logger.debug("starting %s server session", self.suite.name)

        if not self.options.plus:
            if isinstance(verifier, str):
                verifier = bytes.fromhex(verifier)
            w = curve.scalar_from_bytes(verifier)  # type: ignore
            return ServerState(self.options, self.suite, idA, idB, w=w, y=curve.random_scalar())

        record = PlusVerifier.model_validate(verifier)
        return ServerPlusState(
            self.options,
            self.suite,
            idA,
            idB,
            w0=curve.scalar_from_bytes(record.w0),
            L=curve.decode_point(record.L),
            y=curve.random_scalar(),
        )

    async def compute_verifier(
        self,
        password: Text,
        salt: Text,
        client_identity: Text | None = None,
        server_identity: Text | None = None,
    ) -> bytes | PlusVerifier:
        curve = self.suite.curve
        pw, salt_bytes = as_bytes(password), as_bytes(salt)
        if not self.options.plus:
            w = await self._compute_w(pw, salt_bytes)
            return curve.encode_scalar(w)

        w0, w1 = await self._compute_w0_w1(as_bytes(client_identity), as_bytes(server_identity), pw, salt_bytes)
        return PlusVerifier(w0=curve.encode_scalar(w0), L=curve.encode_point(curve.mul(curve.P, w1)))


def _factory(options: ProtocolOptions | dict[str, Any] | None, plus: bool) -> SPAKE2:
    if options is None:
        options = ProtocolOptions()
    elif not isinstance(options, ProtocolOptions):
        options = ProtocolOptions.model_validate(options)
    options = options.model_copy(update={"plus": plus})
    return SPAKE2(options, get_cipher_suite(options.suite))


def spake2(options: ProtocolOptions | dict[str, Any] | None = None) -> SPAKE2:
    return _factory(options, plus=False)


def spake2_plus(options: ProtocolOptions | dict[str, Any] | None = None) -> SPAKE2:
    return _factory(options, plus=True)
