import secrets
from typing import Union

from ecdsa.curves import Curve as _EcdsaCurve
from ecdsa.ellipticcurve import INFINITY, CurveEdTw, Point, PointEdwards, PointJacobi
from ecdsa.errors import MalformedPointError

from spake2kit.errors import InvalidCurvePoint

CurvePoint = Union[PointJacobi, PointEdwards, Point]


class Curve:
    """
    Prime-order group used by a cipher suite, with the fixed SPAKE2 elements.

    ``P`` is the group generator and ``M``/``N`` are the elements of unknown
    discrete logarithm from RFC 9382 Section 6. ``order`` is the modulus for
    scalars and ``h`` the cofactor.
    """

    def __init__(self, name: str, curve: _EcdsaCurve, m: bytes, n: bytes):
        self.name = name
        self._curve = curve.curve
        self._edwards = isinstance(self._curve, CurveEdTw)
        self.P: CurvePoint = curve.generator
        self.order: int = curve.order
        self.h: int = self._curve.cofactor()
        self.scalar_bit_length = self.order.bit_length()
        self.scalar_length = (self.scalar_bit_length + 7) // 8
        self.M = self.decode_point(m)
        self.N = self.decode_point(n)

    def __repr__(self) -> str:
        return f"Curve({self.name})"

    def encode_point(self, point: CurvePoint) -> bytes:
        if self.is_identity(point):
            raise InvalidCurvePoint("the identity element has no encoding")
        if self._edwards:
            return point.to_bytes()  # type: ignore
        return point.to_bytes("uncompressed")  # type: ignore

    def decode_point(self, data: bytes) -> CurvePoint:
        """
        Decode an element received from a peer. Points off the curve raise
        InvalidCurvePoint (RFC 9382 Section 7).
        """
        try:
            if self._edwards:
                return PointEdwards.from_bytes(self._curve, bytes(data))
            point = PointJacobi.from_bytes(
                self._curve,
                bytes(data),
                valid_encodings=("uncompressed", "compressed"),
            )
        except MalformedPointError as e:
            raise InvalidCurvePoint(f"invalid {self.name} point encoding") from e

        # from_bytes does not check uncompressed coordinates against the curve equation
        if not self._curve.contains_point(point.x(), point.y()):
            raise InvalidCurvePoint(f"point is not on {self.name}")
        return point

    @staticmethod
    def is_identity(point: CurvePoint) -> bool:
        return bool(point == INFINITY)

    def in_small_subgroup(self, point: CurvePoint) -> bool:
        # h*X is the identity exactly when X has order dividing h
        return self.is_identity(point * self.h)

    def add(self, a: CurvePoint, b: CurvePoint) -> CurvePoint:
        return a + b

    def mul(self, point: CurvePoint, scalar: int) -> CurvePoint:
        return point * scalar

    def mask(self, scalar: int, blind: CurvePoint, w: int) -> CurvePoint:
        # scalar*P + w*blind
        return self.add(self.mul(self.P, scalar), self.mul(blind, w))

    def unmask(self, peer: CurvePoint, blind: CurvePoint, w: int) -> CurvePoint:
        # peer - w*blind, computed as peer + ((-w) mod p)*blind
        return self.add(peer, self.mul(blind, (-w) % self.order))

    def encode_scalar(self, scalar: int) -> bytes:
        return scalar.to_bytes(self.scalar_length, "big")

    def scalar_from_bytes(self, data: bytes) -> int:
        return int.from_bytes(data, "big") % self.order

    def random_scalar(self) -> int:
        """
        Uniform scalar in [0, p). Eight extra bytes keep the modulo bias
        negligible.
        """
        size = ((self.order - 1).bit_length() + 7) // 8
        return int.from_bytes(secrets.token_bytes(size + 8), "big") % self.order
