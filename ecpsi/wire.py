"""Line-oriented text framing for protocol messages.

A frame is a decimal count line followed by that many lines of lowercase
hex, one compressed point per line. Point validity is checked by the party
that consumes the message, not here.
"""
import binascii

from .config import MAX_WIRE_LINE, MAX_WIRE_POINTS
from .messages import BlindedPointsMessage, DoubleBlindedPointsMessage


class WireFormatError(ValueError):
    pass


def dump_points(points) -> str:
    points = list(points)
    lines = ["%d" % len(points)]
    lines.extend(bytes(pt).hex() for pt in points)
    return "\n".join(lines) + "\n"


def load_points(lines):
    """Parse one frame from an iterable of lines; extra lines are ignored."""
    lines = iter(lines)
    try:
        header = next(lines)
    except StopIteration:
        raise WireFormatError("missing count line")
    if len(header) > MAX_WIRE_LINE:
        raise WireFormatError("count line too long")
    try:
        count = int(header.strip())
    except ValueError:
        raise WireFormatError("bad count line %r" % header.strip()[:32])
    if count < 0:
        raise WireFormatError("negative count %d" % count)
    if count > MAX_WIRE_POINTS:
        raise WireFormatError("count %d exceeds limit %d" % (count, MAX_WIRE_POINTS))

    points = []
    for i in range(count):
        try:
            line = next(lines)
        except StopIteration:
            raise WireFormatError("expected %d points, got %d" % (count, i))
        if len(line) > MAX_WIRE_LINE:
            raise WireFormatError("line %d too long" % (i + 1))
        try:
            points.append(bytes.fromhex(line.strip()))
        except (ValueError, binascii.Error):
            raise WireFormatError("line %d is not hex" % (i + 1))
    return points


def encode_message(message) -> bytes:
    return dump_points(message).encode("ascii")


def _text_lines(data):
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("ascii", errors="replace")
    if isinstance(data, str):
        return data.splitlines()
    return data


def decode_blinded_points(data) -> BlindedPointsMessage:
    return BlindedPointsMessage(tuple(load_points(_text_lines(data))))


def decode_double_blinded_points(data) -> DoubleBlindedPointsMessage:
    return DoubleBlindedPointsMessage(tuple(load_points(_text_lines(data))))
