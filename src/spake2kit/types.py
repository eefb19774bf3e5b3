from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

if TYPE_CHECKING:
    from spake2kit.suites import CipherSuite

DEFAULT_SUITE = "ED25519-SHA256-HKDF-SHA256-HMAC-SHA256"


def as_bytes(value: str | bytes | None) -> bytes:
    """Identities and passwords may be given as text; text is UTF-8 encoded."""
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _from_hex(value: Any) -> Any:
    if isinstance(value, str):
        return bytes.fromhex(value)
    return value


def _scalar_from_hex(value: Any) -> Any:
    if isinstance(value, str):
        return int(value, 16)
    return value


# Persisted byte strings travel as lowercase hex
HexBytes = Annotated[
    bytes,
    BeforeValidator(_from_hex),
    PlainSerializer(lambda v: v.hex(), return_type=str),
]

# Scalars travel as the big-endian hex of their integer value
HexScalar = Annotated[
    int,
    BeforeValidator(_scalar_from_hex),
    Field(ge=0),
    PlainSerializer(lambda v: format(v, "x"), return_type=str),
]


class Role(str, Enum):
    CLIENT = "client"
    SERVER = "server"


class KdfOptions(BaseModel):  # type: ignore
    model_config = ConfigDict(frozen=True)

    aad: bytes = b""


class MhfOptions(BaseModel):  # type: ignore
    """scrypt cost parameters. The output length is derived from the suite."""

    model_config = ConfigDict(frozen=True)

    n: int = Field(default=16384, gt=1)
    r: int = Field(default=8, gt=0)
    p: int = Field(default=1, gt=0)


class ProtocolOptions(BaseModel):  # type: ignore
    """
    Per-session protocol configuration.

    ``plus`` selects SPAKE2+ (RFC 9383) over SPAKE2 (RFC 9382). ``context`` is
    only used by SPAKE2+ and defaults to the suite's SPAKE2+ identifier.
    """

    model_config = ConfigDict(frozen=True)

    plus: bool = False
    suite: str = DEFAULT_SUITE
    context: bytes | None = None
    kdf: KdfOptions = KdfOptions()
    mhf: MhfOptions = MhfOptions()

    def resolve(self, suite: CipherSuite) -> ProtocolOptions:
        if self.plus and not self.context:
            return self.model_copy(update={"context": suite.spake2_plus_id.encode()})
        return self

    def context_bytes(self) -> bytes:
        if not self.plus or self.context is None:
            return b""
        return self.context


class PlusVerifier(BaseModel):  # type: ignore
    """SPAKE2+ server-side registration record: w0 and L = w1*P."""

    model_config = ConfigDict(frozen=True)

    w0: HexBytes
    L: HexBytes
