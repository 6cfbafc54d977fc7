"""Unit tests for TokenCodec: issuing and verifying signed tokens."""

import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from application.services.token_codec import TokenCodec
from domain.value_objects.auth import TokenStatus

SECRET = "unit-test-secret-0123456789abcdef0123456789"


def _flip_char(segment: str, index: int) -> str:
    """Replace one base64url character with a different valid one."""
    replacement = "A" if segment[index] != "A" else "B"
    return segment[:index] + replacement + segment[index + 1:]


def _payload(token: str) -> dict:
    segment = token.split(".")[1]
    return json.loads(base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4)))


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(secret=SECRET)


class TestIssue:

    def test_issue_then_verify_returns_subject(self, codec):
        issued = codec.issue("user-123", timedelta(days=7))

        result = codec.verify(issued.token)

        assert result.status is TokenStatus.VALID
        assert result.claims.subject == "user-123"

    def test_expiry_matches_ttl(self, codec):
        before = datetime.now(timezone.utc)
        issued = codec.issue("user-123", timedelta(days=7))

        expected = before + timedelta(days=7)
        assert abs((issued.expires_at - expected).total_seconds()) < 2
        assert codec.verify(issued.token).claims.expires_at == issued.expires_at

    def test_token_does_not_embed_secret(self, codec):
        issued = codec.issue("user-123", timedelta(minutes=5))

        assert SECRET not in issued.token
        assert set(_payload(issued.token)) == {"sub", "iat", "exp"}

    def test_issue_requires_subject(self, codec):
        with pytest.raises(ValueError):
            codec.issue("", timedelta(minutes=5))

    def test_secret_not_in_repr(self, codec):
        assert SECRET not in repr(codec)


class TestVerifyRejections:

    def test_already_expired_token_is_expired(self, codec):
        issued = codec.issue("user-123", timedelta(seconds=-1))

        result = codec.verify(issued.token)

        assert result.status is TokenStatus.EXPIRED
        assert result.claims is None

    def test_flipped_payload_byte_is_signature_mismatch(self, codec):
        token = codec.issue("user-123", timedelta(days=7)).token
        header, payload, signature = token.split(".")
        tampered = ".".join([header, _flip_char(payload, len(payload) // 2), signature])

        result = codec.verify(tampered)

        assert result.status is TokenStatus.SIGNATURE_MISMATCH
        assert not result.is_valid

    def test_flipped_signature_byte_is_signature_mismatch(self, codec):
        token = codec.issue("user-123", timedelta(days=7)).token
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, _flip_char(signature, 3)])

        assert codec.verify(tampered).status is TokenStatus.SIGNATURE_MISMATCH

    def test_other_secret_is_signature_mismatch(self, codec):
        other = TokenCodec(secret="another-secret-0123456789abcdef0123456789")
        token = other.issue("user-123", timedelta(days=7)).token

        assert codec.verify(token).status is TokenStatus.SIGNATURE_MISMATCH

    def test_bad_signature_is_checked_before_expiry(self, codec):
        other = TokenCodec(secret="another-secret-0123456789abcdef0123456789")
        token = other.issue("user-123", timedelta(seconds=-60)).token

        assert codec.verify(token).status is TokenStatus.SIGNATURE_MISMATCH

    @pytest.mark.parametrize("token", ["", "garbage", "a.b", "a.b.c", None])
    def test_garbage_is_malformed(self, codec, token):
        assert codec.verify(token).status is TokenStatus.MALFORMED

    def test_unsigned_token_is_rejected(self, codec):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "user-123", "iat": now, "exp": now + timedelta(days=1)},
            key=None,
            algorithm="none",
        )

        result = codec.verify(token)

        assert not result.is_valid

    def test_other_algorithm_is_rejected(self, codec):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "user-123", "iat": now, "exp": now + timedelta(days=1)},
            SECRET,
            algorithm="HS512",
        )

        assert codec.verify(token).status is TokenStatus.MALFORMED

    def test_missing_subject_is_malformed(self, codec):
        now = datetime.now(timezone.utc)
        token = jwt.encode({"iat": now, "exp": now + timedelta(days=1)}, SECRET, algorithm="HS256")

        assert codec.verify(token).status is TokenStatus.MALFORMED

    def test_missing_expiry_is_malformed(self, codec):
        token = jwt.encode(
            {"sub": "user-123", "iat": datetime.now(timezone.utc)}, SECRET, algorithm="HS256"
        )

        assert codec.verify(token).status is TokenStatus.MALFORMED


class TestLeeway:

    def test_leeway_accepts_recently_expired_token(self):
        codec = TokenCodec(secret=SECRET, leeway_seconds=30)
        token = codec.issue("user-123", timedelta(seconds=-5)).token

        assert codec.verify(token).is_valid


class TestConstruction:

    def test_requires_secret(self):
        with pytest.raises(ValueError):
            TokenCodec(secret="")

    def test_rejects_asymmetric_algorithm(self):
        with pytest.raises(ValueError):
            TokenCodec(secret=SECRET, algorithm="RS256")
