import asyncio
import hashlib
import hmac as _hmac

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from nacl import bindings
from nacl.encoding import RawEncoder
from nacl.hash import sha256 as _nacl_sha256
from nacl.hash import sha512 as _nacl_sha512

from spake2kit.errors import MhfUnavailable
from spake2kit.types import MhfOptions

_SCRYPT_DEFAULT_MAXMEM = 32 * 1024 * 1024


def sha256(data: bytes) -> bytes:
    """
    Hash function specified in RFC 9382 Section 6
    """
    return _nacl_sha256(data, encoder=RawEncoder)  # type: ignore


def sha512(data: bytes) -> bytes:
    return _nacl_sha512(data, encoder=RawEncoder)  # type: ignore


def hmac_sha256(message: bytes, key: bytes) -> bytes:
    return _hmac.new(key, message, hashlib.sha256).digest()


def hmac_sha512(message: bytes, key: bytes) -> bytes:
    return _hmac.new(key, message, hashlib.sha512).digest()


def _hkdf(algorithm: hashes.HashAlgorithm, salt: bytes, ikm: bytes, info: bytes, length: int) -> bytes:
    # An empty salt is equivalent to HashLen zero bytes (RFC 5869 Section 2.2)
    kdf = HKDF(algorithm=algorithm, length=length, salt=salt or None, info=info)
    return kdf.derive(ikm)


def hkdf_sha256(salt: bytes, ikm: bytes, info: bytes, length: int = 32) -> bytes:
    """
    HKDF key derivation function as recommended in RFC 9382 Section 6
    """
    return _hkdf(hashes.SHA256(), salt, ikm, info, length)


def hkdf_sha512(salt: bytes, ikm: bytes, info: bytes, length: int = 64) -> bytes:
    return _hkdf(hashes.SHA512(), salt, ikm, info, length)


def constant_time_equal(a: bytes, b: bytes) -> bool:
    return bindings.sodium_memcmp(bytes(a), bytes(b))  # type: ignore


def _scrypt_blocking(password: bytes, salt: bytes, options: MhfOptions, length: int) -> bytes:
    if not bindings.has_crypto_pwhash_scryptsalsa208sha256:
        raise MhfUnavailable("scrypt is not available in this libsodium build")

    n, r, p = options.n, options.r, options.p
    # B and V buffers of scrypt ROMix, doubled for libsodium's occupancy check
    maxmem = max(_SCRYPT_DEFAULT_MAXMEM, 256 * r * (n + p + 2))
    return bindings.crypto_pwhash_scryptsalsa208sha256_ll(  # type: ignore
        password, salt, n, r, p, dklen=length, maxmem=maxmem
    )


async def scrypt(password: bytes, salt: bytes, options: MhfOptions, length: int) -> bytes:
    """
    Memory-hard password stretching (RFC 9382 Section 3.2 recommends scrypt).

    The derivation runs in a worker thread so concurrent sessions do not
    serialize on the event loop. If the awaiting task is cancelled the derived
    bytes are dropped with the thread's result.
    """
    return await asyncio.to_thread(_scrypt_blocking, password, salt, options, length)
