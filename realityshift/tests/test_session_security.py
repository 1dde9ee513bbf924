from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from realityshift.application.services.password_hashing import BcryptPasswordHasher
from realityshift.application.services.session_tokens import (
    InvalidSession,
    JwtSessionCodec,
    ValidSession,
    claim_payload,
)


def test_bcrypt_hash_verifies_only_the_original_password() -> None:
    hasher = BcryptPasswordHasher(rounds=4)

    hashed = hasher.hash("secret123")

    assert hashed.startswith("$2")
    assert hashed != "secret123"
    assert hasher.verify("secret123", hashed)
    assert not hasher.verify("secret124", hashed)


def test_bcrypt_verify_rejects_garbage_digest() -> None:
    hasher = BcryptPasswordHasher(rounds=4)

    assert not hasher.verify("secret123", "")
    assert not hasher.verify("secret123", "not-a-bcrypt-digest")


def test_codec_round_trips_identity_and_flags() -> None:
    issued = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
    codec = JwtSessionCodec("s3cret", ttl=timedelta(days=7), clock=lambda: issued)

    token = codec.sign(claim_payload("user-1", "a@example.com", "Alice", isDemo=True))
    result = codec.verify(token)

    assert isinstance(result, ValidSession)
    claim = result.claim
    assert claim.user_id == "user-1"
    assert claim.email == "a@example.com"
    assert claim.display_name == "Alice"
    assert claim.is_demo is True
    assert claim.expires_at - claim.issued_at == timedelta(days=7)


def test_codec_reports_missing_token() -> None:
    codec = JwtSessionCodec("s3cret")

    result = codec.verify(None)

    assert isinstance(result, InvalidSession)
    assert result.reason == "missing"


def test_codec_rejects_token_signed_with_other_secret() -> None:
    token = JwtSessionCodec("other").sign(claim_payload("user-1", "a@example.com", None))

    result = JwtSessionCodec("s3cret").verify(token)

    assert result == InvalidSession("bad_signature")


def test_codec_rejects_expired_token() -> None:
    past = datetime.now(UTC) - timedelta(days=30)
    token = JwtSessionCodec("s3cret", ttl=timedelta(days=1), clock=lambda: past).sign(
        claim_payload("user-1", "a@example.com", None)
    )

    result = JwtSessionCodec("s3cret").verify(token)

    assert result == InvalidSession("expired")


def test_codec_rejects_token_without_subject() -> None:
    now = int(datetime.now(UTC).timestamp())
    token = jwt.encode({"email": "a@example.com", "iat": now, "exp": now + 60}, "s3cret", algorithm="HS256")

    result = JwtSessionCodec("s3cret").verify(token)

    assert result == InvalidSession("missing_subject")


def test_codec_rejects_malformed_token() -> None:
    assert JwtSessionCodec("s3cret").verify("not.a.jwt") == InvalidSession("malformed")


def test_codec_requires_secret() -> None:
    with pytest.raises(ValueError):
        JwtSessionCodec("")


def test_bcrypt_salts_every_hash() -> None:
    hasher = BcryptPasswordHasher(rounds=4)

    first = hasher.hash("secret123")
    second = hasher.hash("secret123")

    assert first != second
    assert hasher.verify("secret123", first)
    assert hasher.verify("secret123", second)


def test_bcrypt_handles_empty_password() -> None:
    hasher = BcryptPasswordHasher(rounds=4)

    hashed = hasher.hash("")

    assert hasher.verify("", hashed)
    assert not hasher.verify("x", hashed)
    assert not hasher.verify("", hasher.hash("secret123"))


def test_codec_round_trips_custom_claim_fields() -> None:
    codec = JwtSessionCodec("s3cret")
    original = {
        "userId": "u1",
        "email": "a@b.co",
        "displayName": "A",
        "plan": "pro",
        "seats": 3,
        "tags": ["early"],
        "isDemo": False,
    }

    result = codec.verify(codec.sign(original))

    assert isinstance(result, ValidSession)
    claim = result.claim
    assert claim.user_id == "u1"
    assert claim.email == "a@b.co"
    assert claim.display_name == "A"
    assert claim.get("plan") == "pro"
    assert claim.get("seats") == 3
    assert claim.get("tags") == ["early"]
    assert claim.get("isDemo") is False
    assert claim.is_demo is False
    assert dict(claim.extra) == {"plan": "pro", "seats": 3, "tags": ["early"]}
    assert dict(claim.flags) == {"isDemo": False}
