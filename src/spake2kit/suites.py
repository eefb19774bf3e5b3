from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType

from ecdsa.curves import Ed25519, NIST256p, NIST384p, NIST521p
from pydantic import BaseModel, ConfigDict

from spake2kit.errors import UnknownCipherSuite
from spake2kit.rfc_steps import hashing
from spake2kit.rfc_steps.curve import Curve
from spake2kit.types import DEFAULT_SUITE, MhfOptions

HashFn = Callable[[bytes], bytes]
MacFn = Callable[[bytes, bytes], bytes]
KdfFn = Callable[[bytes, bytes, bytes, int], bytes]
MhfFn = Callable[[bytes, bytes, MhfOptions, int], Awaitable[bytes]]

# M and N from RFC 9382 Section 6
ED25519 = Curve(
    "ed25519",
    Ed25519,
    m=bytes.fromhex("d048032c6ea0b6d697ddc2e86bda85a33adac920f1bf18e1b0c6d166a5cecdaf"),
    n=bytes.fromhex("d3bfb518f44f3430f29d0c92af503865a1ed3281dc69b35dd868ba85f886c4ab"),
)
P256 = Curve(
    "p256",
    NIST256p,
    m=bytes.fromhex("02886e2f97ace46e55ba9dd7242579f2993b64e16ef3dcab95afd497333d8fa12f"),
    n=bytes.fromhex("03d8bbd6c639c62937b04d997f38c3770719c629d7014d49a24b4f98baa1292b49"),
)
P384 = Curve(
    "p384",
    NIST384p,
    m=bytes.fromhex(
        "030ff0895ae5ebf6187080a82d82b42e2765e3b2f8749c7e05eba366434b363d3dc36f15314739074d2eb8613fceec2853"
    ),
    n=bytes.fromhex(
        "02c72cf2e390853a1c1c4ad816a62fd15824f56078918f43f922ca21518f9c543bb252c5490214cf9aa3f0baab4b665c10"
    ),
)
P521 = Curve(
    "p521",
    NIST521p,
    m=bytes.fromhex(
        "02003f06f38131b2ba2600791e82488e8d20ab889af753a41806c5db18d37d85608cfae06b82e4a72cd744c719193562a653ea1f119eef9356907edc9b56979962d7aa"
    ),
    n=bytes.fromhex(
        "0200c7924b9ec017f3094562894336a53c50167ba8c5963876880542bc669e494b2532d76c5b53dfb349fdf69154b9e0048c58a42e8ed04cef052a3bc349d95575cd25"
    ),
)


class CipherSuite(BaseModel):  # type: ignore
    """A fully resolved curve + hash + KDF + MAC + MHF combination."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    curve: Curve
    hash: HashFn
    kdf: KdfFn
    mac: MacFn
    mhf: MhfFn
    spake2_id: str
    spake2_plus_id: str
    scalar_length: int
    scalar_bit_length: int
    hash_length: int


def create_suite(name: str, curve: Curve, hash_fn: HashFn, kdf_fn: KdfFn, mac_fn: MacFn) -> CipherSuite:
    return CipherSuite(
        name=name,
        curve=curve,
        hash=hash_fn,
        kdf=kdf_fn,
        mac=mac_fn,
        mhf=hashing.scrypt,
        spake2_id=f"SPAKE2-{name}",
        spake2_plus_id=f"SPAKE2+-{name}",
        scalar_length=curve.scalar_length,
        scalar_bit_length=curve.scalar_bit_length,
        hash_length=len(hash_fn(b"")),
    )


def _sha256_suite(name: str, curve: Curve) -> CipherSuite:
    return create_suite(name, curve, hashing.sha256, hashing.hkdf_sha256, hashing.hmac_sha256)


def _sha512_suite(name: str, curve: Curve) -> CipherSuite:
    return create_suite(name, curve, hashing.sha512, hashing.hkdf_sha512, hashing.hmac_sha512)


_SUITES = {
    suite.name: suite
    for suite in (
        _sha256_suite("ED25519-SHA256-HKDF-SHA256-HMAC-SHA256", ED25519),
        _sha256_suite("P256-SHA256-HKDF-SHA256-HMAC-SHA256", P256),
        _sha512_suite("P256-SHA512-HKDF-SHA512-HMAC-SHA512", P256),
        _sha256_suite("P384-SHA256-HKDF-SHA256-HMAC-SHA256", P384),
        _sha512_suite("P384-SHA512-HKDF-SHA512-HMAC-SHA512", P384),
        _sha512_suite("P521-SHA512-HKDF-SHA512-HMAC-SHA512", P521),
    )
}
# Earlier name of the Ed25519 suite
_SUITES["ED25519-SHA256-HKDF-HMAC-SCRYPT"] = _SUITES[DEFAULT_SUITE]

CIPHER_SUITES: Mapping[str, CipherSuite] = MappingProxyType(_SUITES)


def get_cipher_suite(name: str) -> CipherSuite:
    try:
        return CIPHER_SUITES[name]
    except KeyError:
        raise UnknownCipherSuite(f"undefined cipher suite: {name}") from None
