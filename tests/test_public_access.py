from datetime import timedelta

import pytest

from pdfshare.core.exceptions import CommentValidationError, NestedReplyNotAllowedError
from pdfshare.models.document import AccessLog
from pdfshare.services.comment_service import CommentService
from pdfshare.services.public_access import PublicAccessService
from pdfshare.services.token_service import TokenService
from tests.conftest import make_document


@pytest.fixture
def tokens(db, clock):
    return TokenService(db, clock=clock)


@pytest.fixture
def public(db, tokens, clock):
    return PublicAccessService(db, tokens, CommentService(db, clock=clock))


@pytest.fixture
def token_value(tokens, document, owner):
    return tokens.issue_token(document.id, owner.id).token


def test_resolve_document_records_every_access(db, public, token_value, document):
    for _ in range(3):
        resolved = public.resolve_document(token_value, "10.0.0.1", "pytest-agent")
        assert resolved.id == document.id

    logs = db.query(AccessLog).filter(AccessLog.document_id == document.id).all()
    assert len(logs) == 3
    assert {log.ip_address for log in logs} == {"10.0.0.1"}
    assert logs[0].user_agent == "pytest-agent"


def test_resolve_unknown_token(public):
    assert public.resolve_document("missing") is None


def test_expired_token_scenario(db, public, tokens, token_value, clock):
    assert tokens.validate_token(token_value) is True

    clock.advance(days=7, seconds=1)

    assert tokens.validate_token(token_value) is False
    assert public.resolve_document(token_value) is None
    assert db.query(AccessLog).count() == 0


def test_revoked_token_resolves_to_none(public, tokens, token_value, owner):
    tokens.revoke_token(token_value, owner.id)

    assert public.resolve_document(token_value) is None
    assert public.list_comments(token_value) is None
    assert public.add_comment(token_value, "hi", 1) is None


def test_access_log_failure_does_not_block_resolution(db, public, token_value, document, monkeypatch):
    real_commit = db.commit

    def failing_commit():
        raise RuntimeError("audit table locked")

    monkeypatch.setattr(db, "commit", failing_commit)
    resolved = public.resolve_document(token_value, "10.0.0.2")
    monkeypatch.setattr(db, "commit", real_commit)

    assert resolved is not None
    assert resolved.id == document.id


def test_add_comment_is_invited_and_anonymous(public, token_value, document):
    comment = public.add_comment(token_value, "  nice doc  ", 1, commenter_name="Visitor")

    assert comment.document_id == document.id
    assert comment.content == "nice doc"
    assert comment.user_type == "invited"
    assert comment.commenter_id is None
    assert comment.commenter_name == "Visitor"


@pytest.mark.parametrize("content,page", [("", 1), ("   ", 1), ("ok", 0), ("ok", -3)])
def test_add_comment_validation(public, token_value, content, page):
    with pytest.raises(CommentValidationError):
        public.add_comment(token_value, content, page)


def test_nested_reply_scenario(public, token_value):
    c1 = public.add_comment(token_value, "C1", 1)
    r1 = public.add_comment(token_value, "R1", 1, parent_comment_id=c1.id)

    assert r1.parent_comment_id == c1.id
    with pytest.raises(NestedReplyNotAllowedError):
        public.add_comment(token_value, "R2", 1, parent_comment_id=r1.id)


def test_owner_deletes_visitor_comment_scenario(db, public, token_value, owner, clock):
    comment = public.add_comment(token_value, "nice doc", 1)
    comments = CommentService(db, clock=clock)

    assert comment.commenter_id != owner.id
    assert comments.delete_comment_and_replies(comment.id, owner.id) is True
    assert public.list_comments(token_value) == []


def test_list_comments_includes_every_page(public, token_value, clock):
    public.add_comment(token_value, "first page", 1)
    clock.advance(seconds=1)
    public.add_comment(token_value, "second page", 2)

    listed = public.list_comments(token_value)

    assert [c.content for c in listed] == ["second page", "first page"]


def test_jwt_resolves_through_the_opaque_token(db, document, owner):
    # JWT lifetimes are checked against the real clock
    tokens = TokenService(db)
    public = PublicAccessService(db, tokens, CommentService(db))
    access_token = tokens.issue_token(document.id, owner.id)
    encoded = tokens.encode_share_jwt(access_token)

    assert public.resolve_jwt(encoded).id == document.id
    assert public.add_comment_jwt(encoded, "via jwt", 2).user_type == "invited"
    assert [c.content for c in public.list_comments_jwt(encoded)] == ["via jwt"]

    tokens.revoke_token(access_token.token, owner.id)
    assert public.resolve_jwt(encoded) is None


def test_jwt_with_mismatched_document_resolves_to_none(db, document, owner):
    tokens = TokenService(db)
    public = PublicAccessService(db, tokens, CommentService(db))
    other = make_document(db, owner, filename="other.pdf")
    access_token = tokens.issue_token(document.id, owner.id)
    access_token.document_id = other.id
    mismatched = tokens.encode_share_jwt(access_token)
    db.rollback()

    assert public.resolve_jwt(mismatched) is None
