import hashlib
import secrets
from collections import OrderedDict

from ecdsa import NIST256p, numbertheory
from ecdsa.ellipticcurve import INFINITY, PointJacobi
from ecdsa.errors import MalformedPointError

from .config import HASH_TO_CURVE_DST
from .errors import CryptoError, InvalidEncodingError

# P-256, cofactor 1: every point on the curve is in the prime-order group
curve = NIST256p
G = curve.generator
order = G.order()
p = curve.curve.p()
A = curve.curve.a() % p
B = curve.curve.b() % p

HASH_SIZE = 32
POINT_SIZE = 33

# RFC 9380, section 8.2 (P256_XMD:SHA-256_SSWU_RO_)
SSWU_Z = (-10) % p
FIELD_ELEMENT_LEN = 48


def hash_bytes(data: bytes) -> bytes:
    """Canonical 32-byte digest of an element: SHA-512 truncated."""
    return hashlib.sha512(data).digest()[:HASH_SIZE]


def expand_message_xmd(msg: bytes, dst: bytes, len_in_bytes: int) -> bytes:
    """RFC 9380 section 5.3.1 with SHA-256."""
    b_in_bytes = hashlib.sha256().digest_size
    s_in_bytes = hashlib.sha256().block_size
    ell = (len_in_bytes + b_in_bytes - 1) // b_in_bytes
    if ell > 255 or len_in_bytes > 0xFFFF or len(dst) > 255:
        raise CryptoError("expand_message_xmd parameters out of range")

    dst_prime = dst + bytes([len(dst)])
    z_pad = b"\x00" * s_in_bytes
    l_i_b_str = len_in_bytes.to_bytes(2, "big")
    b0 = hashlib.sha256(z_pad + msg + l_i_b_str + b"\x00" + dst_prime).digest()
    b_vals = [hashlib.sha256(b0 + b"\x01" + dst_prime).digest()]
    for i in range(2, ell + 1):
        mixed = bytes(x ^ y for x, y in zip(b0, b_vals[-1]))
        b_vals.append(hashlib.sha256(mixed + bytes([i]) + dst_prime).digest())
    return b"".join(b_vals)[:len_in_bytes]


def hash_to_field(msg: bytes, count: int, dst: bytes) -> list:
    """RFC 9380 section 5.2 with m = 1 and L = 48."""
    uniform = expand_message_xmd(msg, dst, count * FIELD_ELEMENT_LEN)
    return [
        int.from_bytes(uniform[i * FIELD_ELEMENT_LEN:(i + 1) * FIELD_ELEMENT_LEN], "big") % p
        for i in range(count)
    ]


def _is_square(x: int) -> bool:
    return numbertheory.jacobi(x, p) != -1


def _sgn0(x: int) -> int:
    return x % 2


def map_to_curve_sswu(u: int) -> PointJacobi:
    """Simplified SWU map, RFC 9380 section 6.6.2."""
    zu2 = SSWU_Z * u * u % p
    tv1 = numbertheory.inverse_mod((zu2 * zu2 + zu2) % p, p)
    if tv1 == 0:
        x1 = B * numbertheory.inverse_mod(SSWU_Z * A % p, p) % p
    else:
        x1 = (-B) * numbertheory.inverse_mod(A, p) * (1 + tv1) % p
    gx1 = (pow(x1, 3, p) + A * x1 + B) % p
    if _is_square(gx1):
        x = x1
        y = numbertheory.square_root_mod_prime(gx1, p)
    else:
        x = zu2 * x1 % p
        y = numbertheory.square_root_mod_prime((pow(x, 3, p) + A * x + B) % p, p)
    if _sgn0(u) != _sgn0(y):
        y = p - y
    return PointJacobi(curve.curve, x, y, 1, order)


def hash_to_point(digest: bytes, dst: bytes = HASH_TO_CURVE_DST) -> PointJacobi:
    """Map a digest onto P-256 (random-oracle variant of hash_to_curve)."""
    u0, u1 = hash_to_field(digest, 2, dst)
    point = map_to_curve_sswu(u0) + map_to_curve_sswu(u1)
    if point == INFINITY:
        raise CryptoError("hash_to_curve produced the identity")
    return point


def hash_elements(elements):
    """Digest -> point for each distinct element, in first-occurrence order."""
    points = OrderedDict()
    for element in elements:
        digest = hash_bytes(element)
        if digest not in points:
            points[digest] = hash_to_point(digest)
    return points


def random_scalar() -> int:
    # uniform in [1, n-1]
    return secrets.randbelow(order - 1) + 1


def blind_point(point: PointJacobi, scalar: int) -> PointJacobi:
    return scalar * point


def compress_point(point: PointJacobi) -> bytes:
    return point.to_bytes("compressed")


def decompress_point(data) -> PointJacobi:
    """Decode a compressed point, rejecting anything that is not a canonical group element."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InvalidEncodingError("expected bytes, got %s" % type(data).__name__)
    data = bytes(data)
    if len(data) != POINT_SIZE:
        raise InvalidEncodingError(
            "expected %d bytes, got %d" % (POINT_SIZE, len(data)))
    if data[0] not in (2, 3):
        raise InvalidEncodingError("bad prefix byte 0x%02x" % data[0])
    if int.from_bytes(data[1:], "big") >= p:
        raise InvalidEncodingError("non-canonical x coordinate")
    try:
        return PointJacobi.from_bytes(
            curve.curve, data, valid_encodings=("compressed",), order=order)
    except MalformedPointError as e:
        raise InvalidEncodingError("not a point on P-256") from e
