"""
Trending topics, hashtag lookup and search suggestions.
"""

from microblog.services import fixtures
from microblog.services.trending_service import TrendingService, explore_data, search_suggestions

from tests.fakes import FakeSupabase

FALLBACK_TAGS = [
    "#Programming", "#AI", "#WebDev", "#Blockchain", "#WorkFromHome",
    "#NextJS", "#Gaming", "#UX", "#StartupLife", "#Innovation",
]


def test_failed_read_returns_the_ten_sample_topics():
    db = FakeSupabase()
    db.fail_tables.add("trending_topics")
    result = TrendingService(db).fetch_trending_topics(limit=5)
    assert result["is_fallback"] is True
    assert [topic["tag"] for topic in result["topics"]] == FALLBACK_TAGS


def test_empty_table_also_falls_back():
    result = TrendingService(FakeSupabase()).fetch_trending_topics(limit=5)
    assert result["is_fallback"] is True
    assert len(result["topics"]) == 10


def test_fallback_topics_are_copies():
    db = FakeSupabase()
    TrendingService(db).fetch_trending_topics()["topics"][0]["tag"] = "#Changed"
    assert fixtures.FALLBACK_TRENDING_TOPICS[0]["tag"] == "#Programming"


def test_topics_ordered_by_post_count_and_limited():
    db = FakeSupabase(trending_topics=[
        {"id": 1, "tag": "#Small", "posts_count": 10},
        {"id": 2, "tag": "#Big", "posts_count": 900},
        {"id": 3, "tag": "#Medium", "posts_count": 100},
    ])
    result = TrendingService(db).fetch_trending_topics(limit=2)
    assert result["is_fallback"] is False
    assert [topic["tag"] for topic in result["topics"]] == ["#Big", "#Medium"]


def test_search_hashtags_ignores_leading_hash():
    db = FakeSupabase(trending_topics=[
        {"id": 1, "tag": "#Python", "posts_count": 5},
        {"id": 2, "tag": "#PyCon", "posts_count": 3},
        {"id": 3, "tag": "#Rust", "posts_count": 9},
    ])
    tags = [row["tag"] for row in TrendingService(db).search_hashtags("#py", limit=5)]
    assert sorted(tags) == ["#PyCon", "#Python"]
    assert TrendingService(db).search_hashtags("#") == []


def test_suggestions_include_hashtags_only_for_hash_queries():
    db = FakeSupabase(
        users=[{"id": "u1", "username": "pyfan", "name": "Py Fan"}],
        trending_topics=[{"id": 1, "tag": "#Python", "posts_count": 5}],
    )
    plain = search_suggestions(db, "py")
    assert [u["username"] for u in plain["users"]] == ["pyfan"]
    assert plain["hashtags"] == []

    tagged = search_suggestions(db, "#py")
    assert [h["tag"] for h in tagged["hashtags"]] == ["#Python"]


def test_suggestions_for_blank_query_are_empty():
    db = FakeSupabase()
    assert search_suggestions(db, "   ") == {"users": [], "hashtags": []}
    assert db.calls == []


def test_explore_falls_back_section_by_section():
    db = FakeSupabase(users=[{"id": "u1", "username": "a", "name": "A", "followers_count": 3}])
    db.fail_tables.add("posts")
    data = explore_data(db, None)
    assert data["is_fallback"] is True
    assert [u["id"] for u in data["users"]] == ["u1"]
    assert len(data["posts"]) == 10
    likes = [post["likes_count"] for post in data["posts"]]
    assert likes == sorted(likes, reverse=True)


def test_explore_tag_filters_sample_posts_on_failure():
    db = FakeSupabase()
    db.fail_tables.add("posts")
    data = explore_data(db, None, tag="AI")
    assert data["posts"]
    assert all("#ai" in post["content"].lower() or "#AI" in post["hashtags"] for post in data["posts"])


def test_trending_endpoint_serves_fallback(client, db):
    db.fail_tables.add("trending_topics")
    response = client.get("/api/explore/trending")
    assert response.status_code == 200
    body = response.json()
    assert body["is_fallback"] is True
    assert [topic["tag"] for topic in body["topics"]] == FALLBACK_TAGS
