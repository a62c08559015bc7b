from jose import jwt

from pdfshare.core.config import settings
from tests.conftest import SAMPLE_PDF


def post_comment(client, token, content="nice doc", page_number=1, **extra):
    return client.post(
        f"/api/public/comment/{token}",
        json={"content": content, "page_number": page_number, **extra},
    )


def test_view_shared_document(client, uploaded, share_token):
    response = client.get(f"/api/public/view/{share_token}")

    assert response.status_code == 200
    body = response.json()
    assert body["document"]["id"] == uploaded["id"]
    assert body["document"]["filename"] == "doc.pdf"
    assert body["comments"] == []
    assert body["download_url"].endswith(f"/api/public/download/{share_token}")


def test_unknown_token_is_not_found(client):
    for url in ("/api/public/view/nope", "/api/public/download/nope"):
        response = client.get(url)
        assert response.status_code == 404
        assert response.json()["detail"] == "Invalid or expired token"


def test_public_download_is_byte_identical(client, share_token):
    response = client.get(f"/api/public/download/{share_token}")

    assert response.status_code == 200
    assert response.content == SAMPLE_PDF
    assert response.headers["content-disposition"].startswith("attachment;")


def test_add_comment_and_reply(client, share_token):
    response = post_comment(client, share_token, commenter_name="Visitor")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Comment added successfully"
    assert body["comment"]["user_type"] == "invited"
    assert body["comment"]["commenter_id"] is None
    assert body["comment"]["commenter_name"] == "Visitor"
    parent_id = body["comment"]["id"]

    response = post_comment(client, share_token, content="agreed", parent_comment_id=parent_id)

    assert response.json()["message"] == "Reply added successfully"
    all_comments = response.json()["all_comments"]
    assert [c["id"] for c in all_comments] == [parent_id]
    assert [r["content"] for r in all_comments[0]["replies"]] == ["agreed"]


def test_nested_reply_is_rejected(client, share_token):
    c1 = post_comment(client, share_token, content="C1").json()["comment"]["id"]
    r1 = post_comment(client, share_token, content="R1", parent_comment_id=c1).json()["comment"]["id"]

    response = post_comment(client, share_token, content="R2", parent_comment_id=r1)

    assert response.status_code == 400
    assert "Nested replies are not allowed" in response.json()["detail"]


def test_comment_validation(client, share_token):
    assert post_comment(client, share_token, content="   ").status_code == 422
    assert post_comment(client, share_token, page_number=0).status_code == 422


def test_comment_with_invalid_token(client):
    assert post_comment(client, "nope").status_code == 404


def test_comments_on_every_page_are_listed(client, share_token):
    post_comment(client, share_token, content="one", page_number=1)
    post_comment(client, share_token, content="two", page_number=2)

    comments = client.get(f"/api/public/view/{share_token}").json()["comments"]

    assert {c["page_number"] for c in comments} == {1, 2}


def test_comment_rate_limit(client, share_token, rate_clock):
    for i in range(5):
        response = post_comment(client, share_token, content=f"comment {i}")
        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "5"
        assert response.headers["X-RateLimit-Remaining"] == str(4 - i)

    response = post_comment(client, share_token, content="one too many")

    assert response.status_code == 429
    assert response.json()["detail"] == "Rate limit exceeded. Please try again later."
    comments = client.get(f"/api/public/view/{share_token}").json()["comments"]
    assert len(comments) == 5

    rate_clock.advance(60)
    assert post_comment(client, share_token, content="after the window").status_code == 200


def share_jwt(client, auth_headers, document_id):
    response = client.post(f"/api/documents/{document_id}/share-jwt", headers=auth_headers)
    assert response.status_code == 200
    return response.json()["token"]


def test_view_via_jwt_returns_inline_pdf(client, auth_headers, uploaded):
    token = share_jwt(client, auth_headers, uploaded["id"])

    response = client.get(f"/api/public/view-jwt/{token}")

    assert response.status_code == 200
    assert response.content == SAMPLE_PDF
    assert response.headers["content-disposition"].startswith("inline;")


def test_comment_via_jwt(client, auth_headers, uploaded):
    token = share_jwt(client, auth_headers, uploaded["id"])

    response = client.post(f"/api/public/comment-jwt/{token}", json={"content": "jwt comment", "page_number": 3})

    assert response.status_code == 200
    assert response.json()["comment"]["page_number"] == 3
    assert [c["content"] for c in response.json()["all_comments"]] == ["jwt comment"]


def test_forged_jwt_is_bad_request(client, auth_headers, uploaded):
    token = share_jwt(client, auth_headers, uploaded["id"])
    claims = jwt.get_unverified_claims(token)
    forged = jwt.encode(claims, "wrong-key", algorithm="HS256")

    response = client.get(f"/api/public/view-jwt/{forged}")

    assert response.status_code == 400


def test_expired_jwt_is_bad_request(client, auth_headers, uploaded):
    token = share_jwt(client, auth_headers, uploaded["id"])
    claims = jwt.get_unverified_claims(token)
    claims["exp"] = claims["iat"] - 1
    expired = jwt.encode(claims, settings.SHARE_JWT_KEY, algorithm="HS256")

    response = client.get(f"/api/public/view-jwt/{expired}")

    assert response.status_code == 400
    assert response.json()["detail"] == "Token has expired"


def test_revoking_the_wrapped_token_kills_the_jwt(client, auth_headers, uploaded):
    token = share_jwt(client, auth_headers, uploaded["id"])
    opaque = jwt.get_unverified_claims(token)["tokenId"]

    client.delete(f"/api/documents/{uploaded['id']}/shares/{opaque}", headers=auth_headers)

    assert client.get(f"/api/public/view-jwt/{token}").status_code == 404
