from datetime import timedelta

import pytest
from jose import jwt

from pdfshare.core.config import settings
from pdfshare.core.exceptions import DocumentNotFoundError, InvalidShareTokenError, ShareTokenExpiredError
from pdfshare.services.token_service import TokenService
from tests.conftest import make_document, make_user


@pytest.fixture
def tokens(db, clock):
    return TokenService(db, clock=clock)


def test_issue_token_without_expiry_defaults_to_seven_days(tokens, document, owner, clock):
    access_token = tokens.issue_token(document.id, owner.id)

    assert access_token.expires_at == clock.now + timedelta(days=7)
    assert access_token.is_revoked is False
    assert len(access_token.token) >= 43


def test_issue_token_with_past_expiry_defaults_to_seven_days(tokens, document, owner, clock):
    access_token = tokens.issue_token(document.id, owner.id, expires_at=clock.now - timedelta(hours=1))

    assert access_token.expires_at == clock.now + timedelta(days=7)


def test_issue_token_with_expiry_equal_to_now_defaults_to_seven_days(tokens, document, owner, clock):
    access_token = tokens.issue_token(document.id, owner.id, expires_at=clock.now)

    assert access_token.expires_at == clock.now + timedelta(days=7)


def test_issue_token_keeps_future_expiry(tokens, document, owner, clock):
    expires_at = clock.now + timedelta(days=2)

    access_token = tokens.issue_token(document.id, owner.id, expires_at=expires_at)

    assert access_token.expires_at == expires_at


def test_issue_token_for_foreign_document_is_not_found(db, tokens, document):
    stranger = make_user(db, email="stranger@example.com")

    with pytest.raises(DocumentNotFoundError):
        tokens.issue_token(document.id, stranger.id)


def test_issue_token_for_missing_document_is_not_found(tokens, owner):
    with pytest.raises(DocumentNotFoundError):
        tokens.issue_token(9999, owner.id)


def test_tokens_are_unique(tokens, document, owner):
    values = {tokens.issue_token(document.id, owner.id).token for _ in range(5)}

    assert len(values) == 5


def test_validate_token_false_once_expired(tokens, document, owner, clock):
    access_token = tokens.issue_token(document.id, owner.id)
    assert tokens.validate_token(access_token.token) is True

    clock.advance(days=7)
    assert tokens.validate_token(access_token.token) is False

    clock.advance(days=1)
    assert tokens.validate_token(access_token.token) is False


def test_validate_token_false_after_revoke(tokens, document, owner):
    access_token = tokens.issue_token(document.id, owner.id)

    assert tokens.revoke_token(access_token.token, owner.id) is True
    assert tokens.validate_token(access_token.token) is False


def test_validate_unknown_token(tokens):
    assert tokens.validate_token("does-not-exist") is False


def test_revoke_by_non_owner_is_refused(db, tokens, document, owner):
    access_token = tokens.issue_token(document.id, owner.id)
    stranger = make_user(db, email="stranger@example.com")

    assert tokens.revoke_token(access_token.token, stranger.id) is False
    assert tokens.validate_token(access_token.token) is True


def test_revoke_unknown_token(tokens, owner):
    assert tokens.revoke_token("nope", owner.id) is False


def test_list_tokens_newest_first_and_owner_only(db, tokens, document, owner, clock):
    first = tokens.issue_token(document.id, owner.id)
    clock.advance(minutes=1)
    second = tokens.issue_token(document.id, owner.id)
    other_doc = make_document(db, owner, filename="other.pdf")
    tokens.issue_token(other_doc.id, owner.id)

    listed = tokens.list_tokens(document.id, owner.id)

    assert [t.token for t in listed] == [second.token, first.token]

    stranger = make_user(db, email="stranger@example.com")
    with pytest.raises(DocumentNotFoundError):
        tokens.list_tokens(document.id, stranger.id)


def test_share_jwt_round_trip(db, document, owner):
    # JWT lifetimes are checked against the real clock
    tokens = TokenService(db)
    access_token = tokens.issue_token(document.id, owner.id)

    encoded = tokens.encode_share_jwt(access_token)
    claims = jwt.get_unverified_claims(encoded)

    assert claims["documentId"] == str(document.id)
    assert claims["tokenId"] == access_token.token
    assert claims["iss"] == settings.SHARE_JWT_ISSUER
    assert claims["aud"] == settings.SHARE_JWT_AUDIENCE
    assert tokens.decode_share_jwt(encoded) == (document.id, access_token.token)


def test_share_jwt_with_wrong_key_is_invalid(db, document, owner):
    tokens = TokenService(db)
    access_token = tokens.issue_token(document.id, owner.id)
    claims = jwt.get_unverified_claims(tokens.encode_share_jwt(access_token))
    forged = jwt.encode(claims, "not-the-key", algorithm="HS256")

    with pytest.raises(InvalidShareTokenError):
        tokens.decode_share_jwt(forged)


def test_share_jwt_with_wrong_audience_is_invalid(db, document, owner):
    tokens = TokenService(db)
    access_token = tokens.issue_token(document.id, owner.id)
    claims = jwt.get_unverified_claims(tokens.encode_share_jwt(access_token))
    claims["aud"] = "someone-else"
    forged = jwt.encode(claims, settings.SHARE_JWT_KEY, algorithm="HS256")

    with pytest.raises(InvalidShareTokenError):
        tokens.decode_share_jwt(forged)


def test_expired_share_jwt(db, document, owner):
    tokens = TokenService(db)
    access_token = tokens.issue_token(document.id, owner.id)
    claims = jwt.get_unverified_claims(tokens.encode_share_jwt(access_token))
    claims["exp"] = claims["iat"] - 60
    expired = jwt.encode(claims, settings.SHARE_JWT_KEY, algorithm="HS256")

    with pytest.raises(ShareTokenExpiredError):
        tokens.decode_share_jwt(expired)


def test_garbage_share_jwt(tokens):
    with pytest.raises(InvalidShareTokenError):
        tokens.decode_share_jwt("not.a.jwt")
