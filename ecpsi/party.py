import enum
import logging

from .crypto_utils import (blind_point, compress_point, decompress_point,
                           hash_elements, random_scalar)
from .errors import (EmptyInputError, InvalidBlindedPointsError,
                     InvalidEncodingError, InvalidStateError)
from .messages import (BlindedPointsMessage, DoubleBlindedPointsMessage,
                       IntersectionResult)

logger = logging.getLogger(__name__)


class PartyState(enum.Enum):
    FRESH = "fresh"
    PREPARED = "prepared"
    COMPLETED = "completed"


def _decode_all(points):
    # decode everything first so a bad entry anywhere stops the whole message
    decoded = []
    bad = []
    for i, data in enumerate(points):
        try:
            decoded.append(decompress_point(data))
        except InvalidEncodingError:
            bad.append(i)
    if bad:
        raise InvalidBlindedPointsError("not a valid compressed P-256 point", bad)
    return decoded


class Party:
    """One side of a two-party ECDH PSI session.

    Both sides run the same steps:

    1. ``prepare(elements)`` and send the BlindedPointsMessage.
    2. ``reblind(peer_message)`` and send the DoubleBlindedPointsMessage.
    3. ``compute_intersection(peer_message, peer_reply)``.

    The secret scalar lives only inside the instance and is dropped once the
    intersection has been computed. Instances are not thread-safe and cannot
    be copied or pickled.
    """

    def __init__(self):
        self._secret = random_scalar()
        self._state = PartyState.FRESH
        # digest -> compressed blinded point, in first-occurrence order
        self._blinded = {}
        self._double_blinded = {}
        self._reblind_cache = None
        self._count = 0

    @property
    def state(self) -> PartyState:
        return self._state

    @property
    def element_count(self) -> int:
        """Number of distinct elements this party blinded."""
        return self._count

    @property
    def double_blinded_map(self):
        return dict(self._double_blinded)

    def __repr__(self):
        return "<Party state=%s elements=%d>" % (self._state.name, self._count)

    def __copy__(self):
        raise TypeError("Party holds a session secret and cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("Party holds a session secret and cannot be copied")

    def __reduce__(self):
        raise TypeError("Party holds a session secret and cannot be pickled")

    def _require(self, operation, *states, detail=""):
        if self._state not in states:
            raise InvalidStateError(operation, self._state, detail)

    def prepare(self, elements) -> BlindedPointsMessage:
        self._require("prepare", PartyState.FRESH)
        elements = list(elements)
        if not elements:
            raise EmptyInputError()
        for element in elements:
            if not isinstance(element, (bytes, bytearray, memoryview)):
                raise TypeError("elements must be bytes, got %s" % type(element).__name__)

        points = hash_elements(bytes(e) for e in elements)
        for digest, point in points.items():
            self._blinded[digest] = compress_point(blind_point(point, self._secret))

        self._count = len(self._blinded)
        self._state = PartyState.PREPARED
        logger.debug("prepared %d blinded points from %d elements",
                     len(self._blinded), len(elements))
        return BlindedPointsMessage(tuple(self._blinded.values()))

    def _apply_secret(self, peer_message):
        if not peer_message:
            raise InvalidBlindedPointsError("Blinded points vector cannot be empty")
        if self._reblind_cache is not None and self._reblind_cache[0] == peer_message:
            return self._reblind_cache[1]
        points = _decode_all(peer_message)
        return tuple(compress_point(blind_point(pt, self._secret)) for pt in points)

    def reblind(self, peer_message: BlindedPointsMessage) -> DoubleBlindedPointsMessage:
        """Apply this party's secret to the peer's blinded points (round two)."""
        self._require("reblind", PartyState.PREPARED,
                      detail="prepare must run first and the session must not be completed")
        double_blinded = self._apply_secret(peer_message)
        self._reblind_cache = (peer_message, double_blinded)
        logger.debug("re-blinded %d peer points", len(double_blinded))
        return DoubleBlindedPointsMessage(double_blinded)

    def compute_intersection(self, peer_message: BlindedPointsMessage,
                             peer_reply: DoubleBlindedPointsMessage) -> IntersectionResult:
        """Match the peer's reply against our own re-blinding of its points.

        ``peer_reply`` must be what the peer's ``reblind`` returned for the
        message this party sent, so that position i holds
        secret_peer * secret_self * H(m_i) for our i-th distinct element.
        """
        self._require("compute_intersection", PartyState.PREPARED,
                      detail="prepare must run first and results are computed once")
        if len(peer_reply) != len(self._blinded):
            raise InvalidBlindedPointsError(
                "reply has %d points, expected %d" % (len(peer_reply), len(self._blinded)))
        _decode_all(peer_reply)
        comparison = frozenset(self._apply_secret(peer_message))

        matches = {}
        for digest, reply_point in zip(self._blinded, peer_reply):
            if bytes(reply_point) in comparison:
                matches[digest] = bytes(reply_point)

        self._double_blinded = matches
        self._state = PartyState.COMPLETED
        # nothing below needs the secret or the blinded points
        self._secret = None
        self._blinded = {}
        self._reblind_cache = None
        logger.debug("intersection computed: %d common elements", len(matches))
        return IntersectionResult(frozenset(matches), dict(matches))
