import uuid

import pytest

from conftest import make_post, make_user
from meetfood.core.exceptions import (
    AlreadyCollected,
    AlreadyLiked,
    NotCollected,
    NotFound,
    NotLiked,
    StorageError,
    Unauthorized,
)
from meetfood.models.user import User
from meetfood.models.video_post import VideoPost
from meetfood.services.engagement_service import (
    collect_video,
    delete_comment,
    delete_from_collections,
    delete_user,
    delete_video_post,
    like_video_post,
    post_comment,
    unlike_video_post,
)


async def reload(db, model, pk):
    return await db.get(model, pk, populate_existing=True)


# --- likes ---


async def test_like_updates_post_and_user(db):
    author = await make_user(db, "author")
    fan = await make_user(db, "fan")
    post = await make_post(db, author)

    await like_video_post(db, fan.id, post.id)
    await db.commit()

    post = await reload(db, VideoPost, post.id)
    fan = await reload(db, User, fan.id)
    assert post.count_like == len(post.likes) == 1
    assert [like["user"] for like in post.likes] == [str(fan.id)]
    assert [v["videoPostId"] for v in fan.liked_videos] == [str(post.id)]


async def test_likes_are_prepended(db):
    author = await make_user(db, "author")
    first = await make_user(db, "first")
    second = await make_user(db, "second")
    post = await make_post(db, author)

    await like_video_post(db, first.id, post.id)
    await like_video_post(db, second.id, post.id)
    await db.commit()

    post = await reload(db, VideoPost, post.id)
    assert [like["user"] for like in post.likes] == [str(second.id), str(first.id)]
    assert post.count_like == 2


async def test_like_twice_is_rejected_without_changes(db):
    author = await make_user(db, "author")
    fan = await make_user(db, "fan")
    post = await make_post(db, author)
    await like_video_post(db, fan.id, post.id)
    await db.commit()

    with pytest.raises(AlreadyLiked):
        await like_video_post(db, fan.id, post.id)

    post = await reload(db, VideoPost, post.id)
    fan = await reload(db, User, fan.id)
    assert post.count_like == 1
    assert len(post.likes) == 1
    assert len(fan.liked_videos) == 1


async def test_like_missing_post_or_user(db):
    author = await make_user(db, "author")
    post = await make_post(db, author)

    with pytest.raises(NotFound):
        await like_video_post(db, author.id, uuid.uuid4())
    with pytest.raises(NotFound):
        await like_video_post(db, uuid.uuid4(), post.id)


async def test_unlike_removes_like_from_both_sides(db):
    author = await make_user(db, "author")
    fan = await make_user(db, "fan")
    post = await make_post(db, author)
    await like_video_post(db, fan.id, post.id)
    await db.commit()

    await unlike_video_post(db, fan.id, post.id)
    await db.commit()

    post = await reload(db, VideoPost, post.id)
    fan = await reload(db, User, fan.id)
    assert post.count_like == 0
    assert post.likes == []
    assert fan.liked_videos == []


async def test_unlike_without_like_is_rejected(db):
    author = await make_user(db, "author")
    fan = await make_user(db, "fan")
    post = await make_post(db, author)

    with pytest.raises(NotLiked):
        await unlike_video_post(db, fan.id, post.id)


# --- collections ---


async def test_collect_then_uncollect_restores_counter(db):
    author = await make_user(db, "author")
    saver = await make_user(db, "saver")
    post = await make_post(db, author, count_collections=3)

    collections, updated = await collect_video(db, saver.id, post.id)
    await db.commit()
    assert updated.count_collections == 4
    assert [p.id for p in collections] == [post.id]

    collections, updated = await delete_from_collections(db, saver.id, post.id)
    await db.commit()
    assert updated.count_collections == 3
    assert collections == []

    saver = await reload(db, User, saver.id)
    assert saver.collections == []


async def test_collect_twice_is_rejected(db):
    author = await make_user(db, "author")
    saver = await make_user(db, "saver")
    post = await make_post(db, author)
    await collect_video(db, saver.id, post.id)
    await db.commit()

    with pytest.raises(AlreadyCollected):
        await collect_video(db, saver.id, post.id)

    post = await reload(db, VideoPost, post.id)
    assert post.count_collections == 1


async def test_uncollect_never_collected_changes_nothing(db):
    author = await make_user(db, "author")
    saver = await make_user(db, "saver")
    post = await make_post(db, author, count_collections=2)

    with pytest.raises(NotCollected):
        await delete_from_collections(db, saver.id, post.id)

    post = await reload(db, VideoPost, post.id)
    assert post.count_collections == 2


async def test_uncollect_refuses_to_go_below_zero(db):
    author = await make_user(db, "author")
    saver = await make_user(db, "saver")
    post = await make_post(db, author)
    saver.collections.append({"videoPostId": str(post.id)})
    await db.commit()

    with pytest.raises(NotCollected):
        await delete_from_collections(db, saver.id, post.id)

    post = await reload(db, VideoPost, post.id)
    saver = await reload(db, User, saver.id)
    assert post.count_collections == 0
    assert saver.collections == [{"videoPostId": str(post.id)}]


async def test_collections_keep_insertion_order(db):
    author = await make_user(db, "author")
    saver = await make_user(db, "saver")
    first = await make_post(db, author, "first")
    second = await make_post(db, author, "second")

    await collect_video(db, saver.id, first.id)
    collections, _ = await collect_video(db, saver.id, second.id)
    await db.commit()

    assert [p.id for p in collections] == [first.id, second.id]


# --- comments ---


async def test_post_comment_prepends_and_counts(db):
    author = await make_user(db, "author")
    critic = await make_user(db, "critic")
    post = await make_post(db, author)

    await post_comment(db, critic.id, post.id, "too salty")
    await post_comment(db, author.id, post.id, "thanks!")
    await db.commit()

    post = await reload(db, VideoPost, post.id)
    assert post.count_comment == len(post.comments) == 2
    assert [c["text"] for c in post.comments] == ["thanks!", "too salty"]
    assert post.comments[1]["user"] == str(critic.id)


async def test_post_comment_on_missing_post(db):
    user = await make_user(db, "someone")
    with pytest.raises(NotFound):
        await post_comment(db, user.id, uuid.uuid4(), "hello")


async def test_only_author_can_delete_comment(db):
    author = await make_user(db, "author")
    critic = await make_user(db, "critic")
    post = await make_post(db, author)
    await post_comment(db, critic.id, post.id, "too salty")
    await db.commit()
    comment_id = post.comments[0]["id"]

    with pytest.raises(Unauthorized):
        await delete_comment(db, author.id, post.id, comment_id)
    post = await reload(db, VideoPost, post.id)
    assert post.count_comment == 1

    await delete_comment(db, critic.id, post.id, comment_id)
    await db.commit()
    post = await reload(db, VideoPost, post.id)
    assert post.count_comment == 0
    assert post.comments == []


async def test_delete_missing_comment(db):
    author = await make_user(db, "author")
    post = await make_post(db, author)
    with pytest.raises(NotFound):
        await delete_comment(db, author.id, post.id, "does-not-exist")


# --- post deletion ---


async def test_delete_video_post_cascades(db, storage):
    author = await make_user(db, "author")
    saver = await make_user(db, "saver")
    post = await make_post(db, author)
    post_id = post.id
    await collect_video(db, saver.id, post_id)
    await db.commit()

    await delete_video_post(db, author.id, post_id, storage)

    assert await reload(db, VideoPost, post_id) is None
    author = await reload(db, User, author.id)
    assert author.videos == []
    assert storage.deleted == [
        ("http://blobs/coverImage/Ramen night.jpg", "coverImage"),
        ("http://blobs/video/Ramen night.mp4", "video"),
    ]
    # Other users' references are left dangling
    saver = await reload(db, User, saver.id)
    assert saver.collections == [{"videoPostId": str(post_id)}]


async def test_delete_video_post_by_non_author(db, storage):
    author = await make_user(db, "author")
    intruder = await make_user(db, "intruder")
    post = await make_post(db, author)

    with pytest.raises(Unauthorized):
        await delete_video_post(db, intruder.id, post.id, storage)

    assert await reload(db, VideoPost, post.id) is not None
    assert storage.deleted == []


async def test_delete_missing_video_post(db, storage):
    author = await make_user(db, "author")
    with pytest.raises(NotFound):
        await delete_video_post(db, author.id, uuid.uuid4(), storage)


async def test_delete_video_post_storage_failure_keeps_database_deletion(db, storage):
    author = await make_user(db, "author")
    post = await make_post(db, author)
    post_id = post.id
    storage.fail_on.add(post.video_url)

    with pytest.raises(StorageError):
        await delete_video_post(db, author.id, post_id, storage)

    assert await reload(db, VideoPost, post_id) is None
    author = await reload(db, User, author.id)
    assert author.videos == []


# --- account deletion ---


async def test_delete_user_cascades(db, storage, identity):
    author = await make_user(db, "author", "author@example.com")
    author.profile_photo = "http://blobs/profilePhoto/me.jpg"
    await db.commit()
    first = await make_post(db, author, "first")
    second = await make_post(db, author, "second")
    other = await make_user(db, "other")
    kept = await make_post(db, other, "kept")

    deleted = await delete_user(db, author.id, "author@example.com", storage, identity)

    assert deleted is True
    assert identity.deleted_emails == ["author@example.com"]
    assert await reload(db, User, author.id) is None
    assert await reload(db, VideoPost, first.id) is None
    assert await reload(db, VideoPost, second.id) is None
    assert await reload(db, VideoPost, kept.id) is not None
    deleted_urls = {url for url, _ in storage.deleted}
    assert deleted_urls == {
        "http://blobs/profilePhoto/me.jpg",
        "http://blobs/video/first.mp4",
        "http://blobs/coverImage/first.jpg",
        "http://blobs/video/second.mp4",
        "http://blobs/coverImage/second.jpg",
    }


async def test_delete_user_storage_failure_aborts_before_database(db, storage, identity):
    author = await make_user(db, "author", "author@example.com")
    post = await make_post(db, author)
    storage.fail_on.add(post.cover_image_url)

    with pytest.raises(StorageError):
        await delete_user(db, author.id, "author@example.com", storage, identity)

    assert await reload(db, User, author.id) is not None
    assert await reload(db, VideoPost, post.id) is not None
    assert identity.deleted_emails == []


async def test_delete_user_requires_own_email(db, storage, identity):
    author = await make_user(db, "author", "author@example.com")
    with pytest.raises(Unauthorized):
        await delete_user(db, author.id, "someone-else@example.com", storage, identity)


async def test_delete_user_leaves_engagement_on_other_posts(db, storage, identity):
    chef = await make_user(db, "chef")
    fan = await make_user(db, "fan", "fan@example.com")
    post = await make_post(db, chef)
    await like_video_post(db, fan.id, post.id)
    await collect_video(db, fan.id, post.id)
    await db.commit()

    await delete_user(db, fan.id, "fan@example.com", storage, identity)

    post = await reload(db, VideoPost, post.id)
    assert post.count_like == 1
    assert post.likes == [{"user": str(fan.id)}]
    assert post.count_collections == 1


async def test_delete_missing_user(db, storage, identity):
    with pytest.raises(NotFound):
        await delete_user(db, uuid.uuid4(), "ghost@example.com", storage, identity)


# --- end to end bookkeeping ---


async def test_like_unlike_collect_then_delete_scenario(db, storage):
    author = await make_user(db, "author")
    user_a = await make_user(db, "user-a")
    user_b = await make_user(db, "user-b")
    post = await make_post(db, author)
    post_id = post.id
    assert (post.count_like, post.count_collections) == (0, 0)

    post = await like_video_post(db, user_a.id, post_id)
    await db.commit()
    assert post.count_like == 1

    post = await unlike_video_post(db, user_a.id, post_id)
    await db.commit()
    assert post.count_like == 0

    _, post = await collect_video(db, user_b.id, post_id)
    await db.commit()
    assert post.count_collections == 1

    await delete_video_post(db, author.id, post_id, storage)
    assert await reload(db, VideoPost, post_id) is None
    author = await reload(db, User, author.id)
    assert str(post_id) not in [v["videoPostId"] for v in author.videos]
    assert {cls for _, cls in storage.deleted} == {"video", "coverImage"}
