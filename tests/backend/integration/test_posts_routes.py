import pytest

from blog_api.models import Post, Tag


pytestmark = pytest.mark.asyncio


async def test_guest_listing_only_shows_published(client, create_user, make_post):
    author, _ = await create_user()
    await make_post(author, status="published", title="Visible")
    await make_post(author, status="draft", title="Hidden")
    await make_post(author, status="archived", title="Old")

    resp = await client.get("/api/v1/posts")
    body = resp.json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["total"] == 1
    assert [p["title"] for p in body["data"]] == ["Visible"]
    assert body["current_page"] == 1
    assert body["per_page"] == 15
    assert body["last_page"] == 1


async def test_guest_draft_status_is_forbidden(client):
    resp = await client.get("/api/v1/posts", params={"status": "draft"})
    assert resp.status_code == 403

    ok = await client.get("/api/v1/posts", params={"status": "published"})
    assert ok.status_code == 200


@pytest.mark.parametrize("value", ["archived", "bogus", "PUBLISHED"])
async def test_guest_any_other_status_is_forbidden(client, value):
    resp = await client.get("/api/v1/posts", params={"status": value})
    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "FORBIDDEN"


async def test_empty_status_means_no_filter(client, create_user, make_post):
    author, _ = await create_user()
    await make_post(author, status="published")
    await make_post(author, status="draft")

    resp = await client.get("/api/v1/posts", params={"status": ""})
    assert resp.status_code == 200
    assert resp.json()["total"] == 1


async def test_unknown_status_gives_signed_in_user_an_empty_page(client, create_user, make_post, auth_header_factory):
    user, password = await create_user()
    await make_post(user, status="draft")
    headers = await auth_header_factory(user.email, password)

    resp = await client.get("/api/v1/posts", params={"status": "bogus"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["total"] == 0
    assert resp.json()["data"] == []


async def test_user_sees_own_drafts_but_not_others(client, create_user, make_post, auth_header_factory):
    alice, password = await create_user()
    bob, _ = await create_user()
    await make_post(alice, status="draft", title="Alice draft")
    await make_post(bob, status="draft", title="Bob draft")
    await make_post(bob, status="published", title="Bob public")

    headers = await auth_header_factory(alice.email, password)
    resp = await client.get("/api/v1/posts", headers=headers)
    titles = {p["title"] for p in resp.json()["data"]}
    assert titles == {"Alice draft", "Bob public"}

    drafts = await client.get("/api/v1/posts", params={"status": "draft"}, headers=headers)
    assert [p["title"] for p in drafts.json()["data"]] == ["Alice draft"]


async def test_admin_sees_everything(client, create_admin, create_user, make_post, auth_header_factory):
    admin, password = await create_admin()
    author, _ = await create_user()
    await make_post(author, status="draft")
    await make_post(author, status="archived")
    headers = await auth_header_factory(admin.email, password)

    resp = await client.get("/api/v1/posts", headers=headers)
    assert resp.json()["total"] == 2


async def test_show_draft_visibility(client, create_user, make_post, auth_header_factory):
    owner, owner_pw = await create_user()
    other, other_pw = await create_user()
    post = await make_post(owner, status="draft")

    guest = await client.get(f"/api/v1/posts/{post.id}")
    assert guest.status_code == 404
    assert guest.json()["detail"]["code"] == "POST_NOT_FOUND"

    other_resp = await client.get(
        f"/api/v1/posts/{post.id}", headers=await auth_header_factory(other.email, other_pw)
    )
    assert other_resp.status_code == 404

    owner_resp = await client.get(
        f"/api/v1/posts/{post.id}", headers=await auth_header_factory(owner.email, owner_pw)
    )
    assert owner_resp.status_code == 200
    data = owner_resp.json()["data"]
    assert data["likes_count"] == 0
    assert data["comments_count"] == 0
    assert data["user"]["id"] == owner.id


async def test_show_missing_post(client):
    resp = await client.get("/api/v1/posts/999")
    assert resp.status_code == 404


async def test_create_post(client, create_user, make_category, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)
    category = await make_category("News")
    tag_a = await Tag.create(name="Python", slug="python")
    tag_b = await Tag.create(name="Web", slug="web")

    resp = await client.post(
        "/api/v1/posts",
        headers=headers,
        json={
            "title": "My First Post",
            "content": "Hello",
            "category_id": category.id,
            "tag_ids": [tag_a.id, tag_b.id],
            "status": "published",
        },
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    assert data["slug"] == "my-first-post"
    assert data["user_id"] == user.id
    assert data["category"]["name"] == "News"
    assert {t["slug"] for t in data["tags"]} == {"python", "web"}
    assert data["published_at"] is not None


async def test_create_post_defaults_to_draft(client, create_user, make_category, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)
    category = await make_category()

    resp = await client.post(
        "/api/v1/posts",
        headers=headers,
        json={"title": "Draft", "content": "x", "category_id": category.id},
    )
    data = resp.json()["data"]
    assert data["status"] == "draft"
    assert data["published_at"] is None


async def test_create_post_validation(client, create_user, make_category, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)
    category = await make_category()

    missing = await client.post("/api/v1/posts", headers=headers, json={"content": "x"})
    assert missing.status_code == 422
    errors = missing.json()["detail"]["errors"]
    assert "title" in errors
    assert "category_id" in errors

    bad_status = await client.post(
        "/api/v1/posts",
        headers=headers,
        json={"title": "T", "content": "x", "category_id": category.id, "status": "hidden"},
    )
    assert bad_status.status_code == 422

    bad_refs = await client.post(
        "/api/v1/posts",
        headers=headers,
        json={"title": "T", "content": "x", "category_id": 999, "tag_ids": [12345]},
    )
    assert bad_refs.status_code == 422
    assert set(bad_refs.json()["detail"]["errors"]) == {"category_id", "tag_ids"}
    assert await Post.all().count() == 0


async def test_guest_cannot_create(client, make_category):
    category = await make_category()
    resp = await client.post(
        "/api/v1/posts", json={"title": "T", "content": "x", "category_id": category.id}
    )
    assert resp.status_code == 401


async def test_update_post_by_owner(client, create_user, make_post, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)
    post = await make_post(user, status="draft")
    tag = await Tag.create(name="Tips", slug="tips")

    resp = await client.patch(
        f"/api/v1/posts/{post.id}",
        headers=headers,
        json={"title": "Renamed Post", "status": "published", "tag_ids": [tag.id]},
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["slug"] == "renamed-post"
    assert data["content"] == "Body text"
    assert data["published_at"] is not None
    assert [t["id"] for t in data["tags"]] == [tag.id]
    first_published = data["published_at"]

    # Archiving keeps published_at, an empty tag list clears tags
    archived = await client.put(
        f"/api/v1/posts/{post.id}",
        headers=headers,
        json={"status": "archived", "tag_ids": []},
    )
    data = archived.json()["data"]
    assert data["status"] == "archived"
    assert data["published_at"] == first_published
    assert data["tags"] == []


async def test_update_and_delete_by_other_user_forbidden(client, create_user, make_post, auth_header_factory):
    owner, _ = await create_user()
    other, password = await create_user()
    post = await make_post(owner)
    headers = await auth_header_factory(other.email, password)

    update = await client.put(f"/api/v1/posts/{post.id}", headers=headers, json={"title": "Mine now"})
    assert update.status_code == 403
    assert update.json()["detail"]["code"] == "FORBIDDEN"

    delete = await client.delete(f"/api/v1/posts/{post.id}", headers=headers)
    assert delete.status_code == 403
    assert await Post.filter(id=post.id).exists()


async def test_admin_may_update_and_delete_any_post(client, create_admin, create_user, make_post, auth_header_factory):
    admin, password = await create_admin()
    author, _ = await create_user()
    post = await make_post(author)
    headers = await auth_header_factory(admin.email, password)

    update = await client.patch(f"/api/v1/posts/{post.id}", headers=headers, json={"content": "Edited"})
    assert update.status_code == 200
    assert update.json()["data"]["content"] == "Edited"

    delete = await client.delete(f"/api/v1/posts/{post.id}", headers=headers)
    assert delete.status_code == 200
    assert delete.json() == {"success": True, "message": "Post deleted successfully."}
    assert not await Post.filter(id=post.id).exists()


async def test_update_missing_post_is_not_found(client, create_user, auth_header_factory):
    user, password = await create_user()
    headers = await auth_header_factory(user.email, password)
    resp = await client.patch("/api/v1/posts/4242", headers=headers, json={"title": "x"})
    assert resp.status_code == 404


async def test_pagination(client, create_user, make_post, make_category):
    author, _ = await create_user()
    category = await make_category()
    for i in range(5):
        await make_post(author, category=category, title=f"Post {i}")

    resp = await client.get("/api/v1/posts", params={"page": 2, "per_page": 2})
    body = resp.json()
    assert body["total"] == 5
    assert body["last_page"] == 3
    assert body["current_page"] == 2
    assert len(body["data"]) == 2

    too_big = await client.get("/api/v1/posts", params={"per_page": 101})
    assert too_big.status_code == 422
