from spake2kit.rfc_steps.curve import CurvePoint
from spake2kit.suites import CipherSuite


def encode_length(length: int) -> bytes:
    return length.to_bytes(8, byteorder="little")


def concat_length_prefixed(*fields: bytes) -> bytes:
    """
    len(f1) || f1 || len(f2) || f2 || ...

    Lengths are 8-byte little-endian. A zero-length field is left out
    entirely, prefix included, which is what the RFC 9382/9383 test vectors
    expect for absent identities.
    """
    return b"".join(encode_length(len(field)) + field for field in fields if len(field))


def create_transcript(
    suite: CipherSuite,
    idA: bytes,
    idB: bytes,
    pA: bytes,
    pB: bytes,
    K: bytes,
    w: int,
) -> bytes:
    """
    Create the protocol transcript according to RFC 9382 Section 3.3

    TT = len(A)  || A
       || len(B)  || B
       || len(pA) || pA
       || len(pB) || pB
       || len(K)  || K
       || len(w)  || w
    """
    return concat_length_prefixed(idA, idB, pA, pB, K, suite.curve.encode_scalar(w))


def create_plus_transcript(
    suite: CipherSuite,
    context: bytes,
    idProver: bytes,
    idVerifier: bytes,
    shareP: bytes,
    shareV: bytes,
    Z: CurvePoint,
    V: CurvePoint,
    w0: int,
) -> bytes:
    """
    Create the protocol transcript according to RFC 9383 Section 3.3

    TT = Context, idProver, idVerifier, M, N, shareP, shareV, Z, V, w0
    each with its 8-byte length prefix.
    """
    curve = suite.curve
    return concat_length_prefixed(
        context,
        idProver,
        idVerifier,
        curve.encode_point(curve.M),
        curve.encode_point(curve.N),
        shareP,
        shareV,
        curve.encode_point(Z),
        curve.encode_point(V),
        curve.encode_scalar(w0),
    )
