"""Two-party private set intersection with ECDH blinding on NIST P-256."""
from .errors import (CryptoError, EmptyInputError, InvalidBlindedPointsError,
                     InvalidEncodingError, InvalidStateError, PsiError)
from .messages import (BlindedPointsMessage, DoubleBlindedPointsMessage,
                       IntersectionResult)
from .party import Party, PartyState

__version__ = "0.1.0"
