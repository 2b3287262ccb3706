"""secp256k1 key material, identity proofs and key-file loading."""

from __future__ import annotations

import hashlib
import os
from datetime import datetime, timezone
from pathlib import Path

import structlog
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import BaseModel, ConfigDict, Field

from headline_bot.exceptions import ConfigurationError
from headline_bot.models import Signed

logger = structlog.get_logger()

CURVE = ec.SECP256K1()
NONCE_SIZE = 12


class PublicKey:
    """Compressed-point secp256k1 public key."""

    def __init__(self, key: ec.EllipticCurvePublicKey) -> None:
        self._key = key

    @classmethod
    def from_compressed(cls, data: bytes) -> PublicKey:
        """Load a key from its 33-byte compressed encoding.

        Raises:
            ValueError: If the bytes do not encode a point on the curve.
        """
        return cls(ec.EllipticCurvePublicKey.from_encoded_point(CURVE, data))

    def compressed(self) -> bytes:
        return self._key.public_bytes(
            serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
        )

    def verify(self, signature: bytes, data: bytes) -> bool:
        try:
            self._key.verify(signature, data, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PublicKey) and self.compressed() == other.compressed()

    def __hash__(self) -> int:
        return hash(self.compressed())


class PrivateKey:
    """secp256k1 private key able to sign and to encrypt for a peer."""

    def __init__(self, key: ec.EllipticCurvePrivateKey) -> None:
        self._key = key

    @classmethod
    def generate(cls) -> PrivateKey:
        return cls(ec.generate_private_key(CURVE))

    @classmethod
    def from_file(cls, path: Path, password: str | None = None) -> PrivateKey:
        """Load a PEM-encoded EC private key.

        Raises:
            ConfigurationError: If the file is missing or does not hold a secp256k1 key.
        """
        try:
            key = serialization.load_pem_private_key(
                Path(path).read_bytes(),
                password=password.encode("utf-8") if password else None,
            )
        except (OSError, ValueError, TypeError) as exc:
            raise ConfigurationError(f"cannot load key file {path}: {exc}") from exc
        if not isinstance(key, ec.EllipticCurvePrivateKey) or key.curve.name != CURVE.name:
            raise ConfigurationError(f"key file {path} does not hold a secp256k1 key")
        return cls(key)

    def to_pem(self) -> bytes:
        return self._key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )

    @property
    def public_key(self) -> PublicKey:
        return PublicKey(self._key.public_key())

    def sign(self, data: bytes) -> bytes:
        return self._key.sign(data, ec.ECDSA(hashes.SHA256()))

    def _shared_key(self, peer: PublicKey) -> bytes:
        secret = self._key.exchange(ec.ECDH(), peer._key)
        return hashlib.sha256(secret).digest()

    def encrypt(self, plaintext: bytes, peer: PublicKey) -> bytes:
        """Encrypt for ``peer``; only ``peer`` (with this key's public half) can decrypt."""
        nonce = os.urandom(NONCE_SIZE)
        return nonce + AESGCM(self._shared_key(peer)).encrypt(nonce, plaintext, None)

    def decrypt(self, ciphertext: bytes, peer: PublicKey) -> bytes:
        """Decrypt content ``peer`` encrypted for this key.

        Raises:
            cryptography.exceptions.InvalidTag: If the content was tampered with
                or was not encrypted between these two keys.
            ValueError: If the content is too short to hold a nonce.
        """
        if len(ciphertext) <= NONCE_SIZE:
            raise ValueError("ciphertext too short")
        nonce, payload = ciphertext[:NONCE_SIZE], ciphertext[NONCE_SIZE:]
        return AESGCM(self._shared_key(peer)).decrypt(nonce, payload, None)


class Identity(BaseModel):
    """A configured identity the responder polls for."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(description="Identity name, also the local part of its address")
    private_key: PrivateKey = Field(description="Identity private key")
    proof: Signed | None = Field(default=None, description="Identity proof sent with receives")
    proof_created: datetime | None = Field(default=None, description="When the proof was made")

    def ensure_proof(self, now: datetime | None = None) -> Signed:
        """Create the identity proof once; later calls return the same proof."""
        if self.proof is None:
            self.proof_created = now or datetime.now(timezone.utc)
            self.proof = identity_proof(self.private_key, self.proof_created)
        return self.proof


def identity_proof(key: PrivateKey, timestamp: datetime) -> Signed:
    """Sign the creation timestamp to prove ownership of ``key``."""
    content = str(int(timestamp.timestamp())).encode("utf-8")
    return Signed(content=content, signature=key.sign(content), key=key.public_key.compressed())


def identity_name(key_file: Path) -> str:
    """Derive the identity name from a ``<name>.<ext>`` key file name."""
    parts = Path(key_file).name.split(".")
    if len(parts) != 2 or not parts[0]:
        raise ConfigurationError(f"cannot parse key file name: {key_file}")
    return parts[0]


def load_identities(key_files: list[Path], password: str | None = None) -> list[Identity]:
    """Load one identity per key file.

    Args:
        key_files: PEM key files named ``<identity>.<ext>``. Relative paths are
            resolved against the working directory.
        password: Optional password shared by the key files.

    Returns:
        Identities in key-file order.

    Raises:
        ConfigurationError: If no key file is given or any of them cannot be loaded.
    """
    if not key_files:
        raise ConfigurationError("at least one key must be specified")

    identities: list[Identity] = []
    for key_file in key_files:
        path = Path(key_file).expanduser().resolve()
        logger.debug("key_file_found", file=str(path))
        name = identity_name(path)
        identities.append(Identity(name=name, private_key=PrivateKey.from_file(path, password)))
        logger.debug("key_loaded", name=name)
    return identities
