"""
Post resource tests: ownership, patch semantics, pagination and the comment cascade
"""

import pytest

from models.pagination import Pagination
from utils.errors import ForbiddenError, NotFoundError, StoreError


async def test_create_sets_creator_and_returns_projection(posts_service, alice):
    post = await posts_service.create_post(alice, title="A", message="m")

    assert post["title"] == "A"
    assert post["message"] == "m"
    assert post["createdBy"] == alice.id
    assert post["updatedBy"] == alice.id
    assert "deleted" not in post and "active" not in post


async def test_create_stores_soft_state_defaults(posts_service, stores, alice):
    post = await posts_service.create_post(alice, title="A")

    stored = stores.posts.documents[post["id"]]
    assert stored["active"] is True
    assert stored["deleted"] is False


@pytest.mark.parametrize("bad_id", ["not-an-id", "", "1234", None])
async def test_get_malformed_id_is_not_found(posts_service, stores, bad_id):
    with pytest.raises(NotFoundError):
        await posts_service.get(bad_id)
    assert "find_by_id" not in stores.posts.calls


async def test_get_unknown_id_is_not_found(posts_service):
    with pytest.raises(NotFoundError):
        await posts_service.get("3f2b8c1e-5d4a-4b3c-9e2f-1a0b9c8d7e6f")


async def test_soft_deleted_post_is_hidden(posts_service, stores, alice):
    post = await posts_service.create_post(alice, title="A")
    stores.posts.documents[post["id"]]["deleted"] = True

    with pytest.raises(NotFoundError):
        await posts_service.get(post["id"])
    assert await posts_service.list_posts() == []


async def test_list_newest_first_with_title_filter(posts_service, alice, bob):
    first = await posts_service.create_post(alice, title="same")
    await posts_service.create_post(bob, title="other")
    third = await posts_service.create_post(bob, title="same")

    posts = await posts_service.list_posts(title="same")

    assert [p["id"] for p in posts] == [third["id"], first["id"]]


async def test_list_pagination_offsets(posts_service, alice):
    created = [await posts_service.create_post(alice, title=f"post {i}") for i in range(7)]
    newest_first = [p["id"] for p in reversed(created)]

    page_1 = await posts_service.list_posts(pagination=Pagination(page=1, per_page=3))
    page_3 = await posts_service.list_posts(pagination=Pagination(page=3, per_page=3))

    assert [p["id"] for p in page_1] == newest_first[0:3]
    assert [p["id"] for p in page_3] == newest_first[6:7]


async def test_list_breaks_created_at_ties_by_id(posts_service, stores, alice):
    created = [await posts_service.create_post(alice, title=f"post {i}") for i in range(4)]
    same_instant = stores.posts.documents[created[0]["id"]]["created_at"]
    for post in created:
        stores.posts.documents[post["id"]]["created_at"] = same_instant

    page_1 = await posts_service.list_posts(pagination=Pagination(page=1, per_page=2))
    page_2 = await posts_service.list_posts(pagination=Pagination(page=2, per_page=2))

    expected = sorted((p["id"] for p in created), reverse=True)
    assert [p["id"] for p in page_1 + page_2] == expected


async def test_replace_by_owner_overwrites_fields(posts_service, alice):
    post = await posts_service.create_post(alice, title="A", message="m")

    replaced = await posts_service.replace_post(alice, post["id"], title="B")

    assert replaced["id"] == post["id"]
    assert replaced["title"] == "B"
    assert replaced["message"] is None
    assert replaced["createdBy"] == alice.id


async def test_replace_by_other_principal_is_forbidden(posts_service, stores, alice, bob):
    post = await posts_service.create_post(alice, title="A", message="m")

    with pytest.raises(ForbiddenError):
        await posts_service.replace_post(bob, post["id"], title="B")
    assert stores.posts.documents[post["id"]]["title"] == "A"


async def test_update_merges_patch_and_tracks_editor(posts_service, alice):
    post = await posts_service.create_post(alice, title="A", message="m")

    updated = await posts_service.update(alice, post["id"], {"message": "edited"})

    assert updated["title"] == "A"
    assert updated["message"] == "edited"
    assert updated["updatedBy"] == alice.id


async def test_update_never_changes_creator(posts_service, stores, alice):
    post = await posts_service.create_post(alice, title="A")

    updated = await posts_service.update(alice, post["id"], {"title": "B", "created_by": "mallory"})

    assert updated["createdBy"] == alice.id
    assert stores.posts.documents[post["id"]]["created_by"] == alice.id


async def test_update_only_writes_title_and_message(posts_service, stores, alice):
    post = await posts_service.create_post(alice, title="A")

    updated = await posts_service.update(
        alice, post["id"], {"message": "m", "deleted": True, "active": False, "updated_by": "mallory"}
    )

    assert updated["message"] == "m"
    assert updated["updatedBy"] == alice.id
    stored = stores.posts.documents[post["id"]]
    assert stored["deleted"] is False
    assert stored["active"] is True
    assert (await posts_service.get(post["id"]))["title"] == "A"


async def test_replace_only_writes_title_and_message(posts_service, stores, alice):
    post = await posts_service.create_post(alice, title="A", message="m")

    replaced = await posts_service.replace(
        alice,
        post["id"],
        {"title": "B", "created_by": "mallory", "deleted": True, "post_id": "ignored"}
    )

    assert replaced["title"] == "B"
    assert replaced["message"] is None
    assert replaced["createdBy"] == alice.id
    stored = stores.posts.documents[post["id"]]
    assert stored["deleted"] is False
    assert "post_id" not in stored


async def test_update_ignores_null_title(posts_service, alice):
    post = await posts_service.create_post(alice, title="A")

    updated = await posts_service.update(alice, post["id"], {"title": None})

    assert updated["title"] == "A"


async def test_update_by_other_principal_is_forbidden(posts_service, alice, bob):
    post = await posts_service.create_post(alice, title="A")

    with pytest.raises(ForbiddenError):
        await posts_service.update(bob, post["id"], {"title": "B"})


async def test_remove_cascades_to_comments(posts_service, comments_service, stores, alice, bob):
    post = await posts_service.create_post(alice, title="A", message="m")
    comment = await comments_service.create_comment(bob, post["id"], message="c1")
    other_post = await posts_service.create_post(bob, title="keep")
    kept = await comments_service.create_comment(alice, other_post["id"], message="stays")

    await posts_service.remove(alice, post["id"])

    with pytest.raises(NotFoundError):
        await posts_service.get(post["id"])
    with pytest.raises(NotFoundError):
        await comments_service.get(comment["id"])
    assert [d for d in stores.comments.documents.values() if d["post_id"] == post["id"]] == []
    assert (await comments_service.get(kept["id"]))["message"] == "stays"


async def test_remove_by_non_owner_is_forbidden_and_keeps_data(posts_service, comments_service, alice, bob):
    post = await posts_service.create_post(alice, title="A", message="m")
    comment = await comments_service.create_comment(bob, post["id"], message="c1")

    with pytest.raises(ForbiddenError):
        await posts_service.remove(bob, post["id"])

    assert (await posts_service.get(post["id"]))["title"] == "A"
    assert (await comments_service.get(comment["id"]))["message"] == "c1"


async def test_failed_cascade_leaves_post_in_place(posts_service, comments_service, stores, alice, store_failure):
    post = await posts_service.create_post(alice, title="A")
    await comments_service.create_comment(alice, post["id"], message="c1")
    stores.comments.fail_on["delete_many"] = store_failure

    with pytest.raises(StoreError):
        await posts_service.remove(alice, post["id"])

    assert "delete_by_id" not in stores.posts.calls
    assert post["id"] in stores.posts.documents


async def test_failed_post_delete_keeps_comments_deleted(posts_service, comments_service, stores, alice, store_failure):
    post = await posts_service.create_post(alice, title="A")
    await comments_service.create_comment(alice, post["id"], message="c1")
    stores.posts.fail_on["delete_by_id"] = store_failure

    with pytest.raises(StoreError):
        await posts_service.remove(alice, post["id"])

    assert stores.comments.documents == {}
