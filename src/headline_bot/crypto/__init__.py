"""Key material and the encrypted envelope around every message."""

from .envelope import EnvelopeCodec
from .keys import Identity, PrivateKey, PublicKey, identity_proof, load_identities

__all__ = [
    "EnvelopeCodec",
    "Identity",
    "PrivateKey",
    "PublicKey",
    "identity_proof",
    "load_identities",
]
