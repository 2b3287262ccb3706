"""Unit tests for key material and identity loading."""

from datetime import datetime, timezone

import pytest
from cryptography.exceptions import InvalidTag

from headline_bot.crypto.keys import (
    Identity,
    PrivateKey,
    PublicKey,
    identity_name,
    identity_proof,
    load_identities,
)
from headline_bot.exceptions import ConfigurationError


def test_public_key_compressed_round_trip() -> None:
    key = PrivateKey.generate().public_key

    data = key.compressed()

    assert len(data) == 33
    assert PublicKey.from_compressed(data) == key


def test_sign_and_verify() -> None:
    key = PrivateKey.generate()
    signature = key.sign(b"payload")

    assert key.public_key.verify(signature, b"payload")
    assert not key.public_key.verify(signature, b"tampered")
    assert not PrivateKey.generate().public_key.verify(signature, b"payload")


def test_encryption_is_shared_between_the_two_parties() -> None:
    alice, bob = PrivateKey.generate(), PrivateKey.generate()

    ciphertext = alice.encrypt(b"secret", bob.public_key)

    assert bob.decrypt(ciphertext, alice.public_key) == b"secret"
    with pytest.raises(InvalidTag):
        bob.decrypt(ciphertext, PrivateKey.generate().public_key)


def test_identity_proof_signs_timestamp() -> None:
    key = PrivateKey.generate()
    created = datetime(2024, 3, 1, tzinfo=timezone.utc)

    proof = identity_proof(key, created)

    assert proof.content == str(int(created.timestamp())).encode()
    assert proof.key == key.public_key.compressed()
    assert key.public_key.verify(proof.signature, proof.content)


def test_identity_proof_is_created_once() -> None:
    identity = Identity(name="news", private_key=PrivateKey.generate())

    first = identity.ensure_proof()
    second = identity.ensure_proof(datetime(2030, 1, 1, tzinfo=timezone.utc))

    assert first is second
    assert identity.proof_created is not None
    assert identity.proof_created.year != 2030


@pytest.mark.parametrize(
    ("file_name", "expected"),
    [("news.key", "news"), ("war-info.pem", "war-info")],
)
def test_identity_name(file_name: str, expected: str) -> None:
    assert identity_name(file_name) == expected


@pytest.mark.parametrize("file_name", ["news", "news.key.bak", ".key"])
def test_identity_name_rejects_malformed_names(file_name: str) -> None:
    with pytest.raises(ConfigurationError):
        identity_name(file_name)


def test_load_identities(tmp_path) -> None:
    key = PrivateKey.generate()
    (tmp_path / "news.key").write_bytes(key.to_pem())

    identities = load_identities([tmp_path / "news.key"])

    assert [i.name for i in identities] == ["news"]
    assert identities[0].private_key.public_key == key.public_key
    assert identities[0].proof is None


def test_load_identities_requires_a_key() -> None:
    with pytest.raises(ConfigurationError):
        load_identities([])


def test_load_identities_rejects_unreadable_key(tmp_path) -> None:
    (tmp_path / "news.key").write_text("not a key")

    with pytest.raises(ConfigurationError):
        load_identities([tmp_path / "news.key"])
