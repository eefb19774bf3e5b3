"""
Persisted layout of sessions and shared secrets.

Every record dumps to a JSON-compatible dict. Scalars are the big-endian hex
of their integer value, points and byte strings are hex, and options keep
every field so a restored object behaves exactly like the original.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from spake2kit.types import DEFAULT_SUITE, HexBytes, HexScalar, KdfOptions, MhfOptions, ProtocolOptions, Role

if TYPE_CHECKING:
    from spake2kit.shared_secret import SharedSecret


class KdfRecord(BaseModel):  # type: ignore
    aad: HexBytes = b""


class OptionsRecord(BaseModel):  # type: ignore
    plus: bool = False
    suite: str = DEFAULT_SUITE
    context: HexBytes | None = None
    kdf: KdfRecord = KdfRecord()
    mhf: MhfOptions = MhfOptions()

    @classmethod
    def from_options(cls, options: ProtocolOptions) -> OptionsRecord:
        return cls(
            plus=options.plus,
            suite=options.suite,
            context=options.context,
            kdf=KdfRecord(aad=options.kdf.aad),
            mhf=options.mhf,
        )

    def to_options(self) -> ProtocolOptions:
        return ProtocolOptions(
            plus=self.plus,
            suite=self.suite,
            context=self.context,
            kdf=KdfOptions(aad=self.kdf.aad),
            mhf=self.mhf,
        )


class _SessionRecord(BaseModel):  # type: ignore
    model_config = ConfigDict(extra="forbid")

    options: OptionsRecord = OptionsRecord()
    client_identity: HexBytes = b""
    server_identity: HexBytes = b""


class ClientStateRecord(_SessionRecord):
    x: HexScalar
    w: HexScalar


class ServerStateRecord(_SessionRecord):
    y: HexScalar
    w: HexScalar


class ClientPlusStateRecord(_SessionRecord):
    x: HexScalar
    w0: HexScalar
    w1: HexScalar


class ServerPlusStateRecord(_SessionRecord):
    y: HexScalar
    w0: HexScalar
    L: HexBytes


class SharedSecretRecord(BaseModel):  # type: ignore
    role: Role | None = None
    options: OptionsRecord = OptionsRecord()
    transcript: HexBytes
    client_message: HexBytes | None = None
    server_message: HexBytes | None = None

    @classmethod
    def from_secret(cls, secret: SharedSecret) -> SharedSecretRecord:
        plus = secret.options.plus
        return cls(
            role=secret.role,
            options=OptionsRecord.from_options(secret.options),
            transcript=secret.transcript,
            client_message=secret.client_message if plus else None,
            server_message=secret.server_message if plus else None,
        )


def dumps(saved: dict[str, Any]) -> str:
    """Serialize the output of a save() call to JSON text."""
    return json.dumps(saved, sort_keys=True)


def loads(text: str | bytes) -> dict[str, Any]:
    return json.loads(text)  # type: ignore
