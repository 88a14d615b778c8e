from datetime import datetime, timedelta

from models import Reel, ReelComment, ReelLike
from tests.conftest import login, register_and_login, upload


# Upload

def test_upload_requires_identity(client, media_host):
    response = upload(client, caption="x")
    assert response.status_code == 401
    assert media_host.uploads == []


def test_upload_requires_video(client, create_user):
    user = create_user()
    login(client, user.email)

    response = client.post("/reels/upload", data={"caption": "no video"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Video file is required"


def test_upload_rejects_empty_file(client, create_user):
    user = create_user()
    login(client, user.email)

    response = upload(client, content=b"")
    assert response.status_code == 400


def test_upload_rejects_non_video(client, create_user):
    user = create_user()
    login(client, user.email)

    response = client.post("/reels/upload", files={"video": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 400


def test_upload_creates_reel(client, create_user, media_host):
    user = create_user()
    login(client, user.email)

    response = upload(client, caption="  sunset  ")

    assert response.status_code == 201
    reel = response.json()["reel"]
    assert reel["caption"] == "sunset"
    assert reel["owner_id"] == user.id
    assert reel["user"]["email"] == user.email
    assert reel["video_url"].startswith("https://res.cloudinary.com/")
    assert media_host.uploads[0][0] == "clip.mp4"


def test_upload_caption_defaults_to_empty(client, create_user):
    user = create_user()
    login(client, user.email)

    response = upload(client)
    assert response.status_code == 201
    assert response.json()["reel"]["caption"] == ""


def test_media_host_failure_persists_nothing(client, create_user, media_host, db_session):
    user = create_user()
    login(client, user.email)
    media_host.fail_upload = True

    response = upload(client, caption="lost")

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to upload video"
    assert db_session.query(Reel).count() == 0


# Feed

def test_feed_is_newest_first_and_public(client, create_user, db_session):
    user = create_user()
    now = datetime.utcnow()
    for i in range(3):
        db_session.add(Reel(owner_id=user.id, video_url=f"https://cdn/reels/{i}.mp4",
                            caption=f"reel {i}", created_at=now + timedelta(minutes=i)))
    db_session.commit()

    response = client.get("/reels")

    assert response.status_code == 200
    reels = response.json()["reels"]
    assert [r["caption"] for r in reels] == ["reel 2", "reel 1", "reel 0"]
    assert reels[0]["user"] == {"id": user.id, "name": user.name, "email": user.email}
    assert all(r["is_liked"] is None for r in reels)


def test_feed_is_limited_to_fifty(client, create_user, db_session):
    user = create_user()
    now = datetime.utcnow()
    db_session.add_all([
        Reel(owner_id=user.id, video_url=f"https://cdn/reels/{i}.mp4", created_at=now + timedelta(seconds=i))
        for i in range(55)
    ])
    db_session.commit()

    reels = client.get("/reels").json()["reels"]
    assert len(reels) == 50
    assert reels[0]["video_url"] == "https://cdn/reels/54.mp4"


def test_feed_reports_viewer_like_state(client, create_user):
    owner = create_user()
    viewer = create_user()
    login(client, owner.email)
    reel_id = upload(client).json()["reel"]["id"]

    login(client, viewer.email)
    client.post(f"/reels/{reel_id}/like")

    reel = client.get("/reels").json()["reels"][0]
    assert reel["is_liked"] is True
    assert reel["like_count"] == 1

    login(client, owner.email)
    assert client.get("/reels").json()["reels"][0]["is_liked"] is False


# Likes

def test_like_toggle_alternates(client, create_user):
    user = create_user()
    login(client, user.email)
    reel_id = upload(client).json()["reel"]["id"]

    first = client.post(f"/reels/{reel_id}/like")
    second = client.post(f"/reels/{reel_id}/like")
    third = client.post(f"/reels/{reel_id}/like")

    assert (first.status_code, first.json()["liked"]) == (201, True)
    assert (second.status_code, second.json()["liked"]) == (200, False)
    assert (third.status_code, third.json()["liked"]) == (201, True)
    assert third.json()["like_count"] == 1


def test_like_requires_identity(client, create_user):
    user = create_user()
    login(client, user.email)
    reel_id = upload(client).json()["reel"]["id"]

    client.cookies.clear()
    assert client.post(f"/reels/{reel_id}/like").status_code == 401


def test_like_unknown_reel(client, create_user):
    user = create_user()
    login(client, user.email)
    assert client.post("/reels/missing/like").status_code == 404


# Comments

def test_whitespace_comment_is_rejected(client, create_user):
    user = create_user()
    login(client, user.email)
    reel_id = upload(client).json()["reel"]["id"]

    for text in ("   ", "", None):
        response = client.post(f"/reels/{reel_id}/comments", json={"text": text})
        assert response.status_code == 400
        assert response.json()["detail"] == "Comment text is required"


def test_comment_is_trimmed(client, create_user, db_session):
    user = create_user()
    login(client, user.email)
    reel_id = upload(client).json()["reel"]["id"]

    response = client.post(f"/reels/{reel_id}/comments", json={"text": "  hi  "})

    assert response.status_code == 201
    comment = response.json()["comment"]
    assert comment["text"] == "hi"
    assert comment["user"]["id"] == user.id
    assert db_session.query(ReelComment).one().text == "hi"


def test_comments_are_newest_first(client, create_user, db_session):
    user = create_user()
    login(client, user.email)
    reel_id = upload(client).json()["reel"]["id"]
    now = datetime.utcnow()
    db_session.add_all([
        ReelComment(owner_id=user.id, reel_id=reel_id, text="old", created_at=now - timedelta(minutes=5)),
        ReelComment(owner_id=user.id, reel_id=reel_id, text="new", created_at=now),
    ])
    db_session.commit()

    client.cookies.clear()
    response = client.get(f"/reels/{reel_id}/comments")

    assert response.status_code == 200
    assert [c["text"] for c in response.json()["comments"]] == ["new", "old"]


def test_comment_requires_identity(client):
    response = client.post("/reels/whatever/comments", json={"text": "hi"})
    assert response.status_code == 401


def test_comment_on_unknown_reel(client, create_user):
    user = create_user()
    login(client, user.email)
    response = client.post("/reels/missing/comments", json={"text": "hi"})
    assert response.status_code == 404


def test_comments_of_unknown_reel_are_empty(client):
    response = client.get("/reels/missing/comments")
    assert response.status_code == 200
    assert response.json() == {"comments": []}


# Deletion

def test_delete_requires_identity(client):
    assert client.delete("/reels/whatever").status_code == 401


def test_delete_unknown_reel(client, create_user):
    user = create_user()
    login(client, user.email)
    assert client.delete("/reels/missing").status_code == 404


def test_delete_by_non_owner_is_forbidden(client, create_user, media_host):
    owner = create_user()
    other = create_user()
    login(client, owner.email)
    reel_id = upload(client).json()["reel"]["id"]

    login(client, other.email)
    response = client.delete(f"/reels/{reel_id}")

    assert response.status_code == 403
    assert media_host.destroyed == []
    assert len(client.get("/reels").json()["reels"]) == 1


def test_delete_cascades_likes_and_comments(client, create_user, media_host, db_session):
    owner = create_user()
    login(client, owner.email)
    reel_id = upload(client).json()["reel"]["id"]
    client.post(f"/reels/{reel_id}/like")
    client.post(f"/reels/{reel_id}/comments", json={"text": "mine"})

    response = client.delete(f"/reels/{reel_id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Reel deleted successfully", "media_deleted": True}
    assert media_host.destroyed == ["reels/video1"]
    assert db_session.query(ReelLike).count() == 0
    assert db_session.query(ReelComment).count() == 0
    assert client.get("/reels").json()["reels"] == []


def test_delete_survives_media_host_failure(client, create_user, media_host, db_session):
    owner = create_user()
    login(client, owner.email)
    reel_id = upload(client).json()["reel"]["id"]
    media_host.fail_destroy = True

    response = client.delete(f"/reels/{reel_id}")

    assert response.status_code == 200
    assert response.json()["media_deleted"] is False
    assert db_session.query(Reel).count() == 0


# Full flow

def test_upload_like_comment_delete_scenario(client):
    alice = register_and_login(client, "Alice", "alice@example.com")
    response = upload(client, caption="sunset")
    assert response.status_code == 201
    reel_id = response.json()["reel"]["id"]

    register_and_login(client, "Bob", "bob@example.com")
    liked = client.post(f"/reels/{reel_id}/like")
    assert liked.json()["liked"] is True
    assert client.get("/reels").json()["reels"][0]["like_count"] == 1

    assert client.post(f"/reels/{reel_id}/comments", json={"text": "nice"}).status_code == 201
    assert client.get("/reels").json()["reels"][0]["comment_count"] == 1

    unliked = client.post(f"/reels/{reel_id}/like")
    assert unliked.json()["liked"] is False
    assert client.get("/reels").json()["reels"][0]["like_count"] == 0

    login(client, "alice@example.com")
    assert client.get("/auth/me").json()["user"]["id"] == alice["id"]
    assert client.delete(f"/reels/{reel_id}").status_code == 200

    assert client.get("/reels").json()["reels"] == []
    comments = client.get(f"/reels/{reel_id}/comments")
    assert comments.status_code == 200
    assert comments.json()["comments"] == []
