import pytest

from postboard import crud
from postboard.config import settings
from postboard.errors import NotFoundError, ValidationError


@pytest.fixture()
def author(store, user_factory):
    user = user_factory("Alice")
    crud.create_post(store, user.id, "Learning PYTHON", "Basics", ["beginner"])
    crud.create_post(store, user.id, "Cooking", "A python-free recipe", [])
    crud.create_post(store, user.id, "Misc", "Nothing here", ["PythonTips"])
    crud.create_post(store, user.id, "Unrelated", "Nope", ["travel"])
    return user


@pytest.mark.parametrize("keyword", ["", "a", "py"])
def test_search_rejects_short_keyword(store, keyword):
    with pytest.raises(ValidationError, match="at least 3 characters"):
        crud.search_posts(store, keyword)


def test_search_is_case_insensitive_across_fields(store, author):
    results = crud.search_posts(store, "PyThOn")
    assert [p.title for p in results] == ["Learning PYTHON", "Cooking", "Misc"]


def test_search_respects_max_results(store, author):
    results = crud.search_posts(store, "python", max_results=2)
    assert [p.id for p in results] == [1, 2]


def test_search_default_limit_comes_from_settings(store, user_factory, monkeypatch):
    user = user_factory("Alice")
    for i in range(5):
        crud.create_post(store, user.id, f"Post {i}", "searchable")

    monkeypatch.setattr(settings, "search_max_results", 3)
    assert len(crud.search_posts(store, "searchable")) == 3


def test_search_defaults_to_ten_results(store, user_factory):
    user = user_factory("Alice")
    for i in range(12):
        crud.create_post(store, user.id, f"Post {i}", "searchable")

    assert len(crud.search_posts(store, "searchable")) == 10


def test_search_no_matches(store, author):
    assert crud.search_posts(store, "kotlin") == []


def test_stats_for_user_without_posts(store, user_factory):
    user = user_factory("Alice")

    stats = crud.get_user_stats(store, user.id)
    assert stats.total_posts == 0
    assert stats.total_likes == 0
    assert stats.average_likes_per_post == 0
    assert stats.most_popular_post is None


def test_stats_for_missing_user_raises(store):
    with pytest.raises(NotFoundError, match="User not found"):
        crud.get_user_stats(store, 1)


def test_stats_aggregates_likes(store, author):
    for post_id, likes in [(1, 2), (2, 3), (3, 2)]:
        for _ in range(likes):
            crud.like_post(store, post_id)

    stats = crud.get_user_stats(store, author.id)
    assert stats.total_posts == 4
    assert stats.total_likes == 7
    assert stats.average_likes_per_post == 1.75
    assert stats.most_popular_post.model_dump() == {
        "id": 2,
        "title": "Cooking",
        "likes": 3,
    }


def test_stats_average_is_rounded(store, author):
    crud.like_post(store, 1)
    crud.like_post(store, 2)
    store.posts.pop()  # leave three posts with two likes between them

    stats = crud.get_user_stats(store, author.id)
    assert stats.average_likes_per_post == 0.67


def test_stats_tie_goes_to_first_post(store, author):
    crud.like_post(store, 2)
    crud.like_post(store, 3)

    stats = crud.get_user_stats(store, author.id)
    assert stats.most_popular_post.id == 2


def test_stats_with_zero_likes_picks_first_post(store, author):
    stats = crud.get_user_stats(store, author.id)
    assert stats.most_popular_post.id == 1
    assert stats.average_likes_per_post == 0


def test_search_rejects_negative_max_results(store, author):
    with pytest.raises(ValidationError, match="max_results must not be negative"):
        crud.search_posts(store, "python", max_results=-1)


@pytest.mark.parametrize("total_likes, expected", [(1, 0.13), (5, 0.63), (3, 0.38)])
def test_stats_average_rounds_half_up(store, user_factory, total_likes, expected):
    user = user_factory("Alice")
    for i in range(8):
        crud.create_post(store, user.id, f"Post {i}", "body")
    for _ in range(total_likes):
        crud.like_post(store, 1)

    stats = crud.get_user_stats(store, user.id)
    assert stats.average_likes_per_post == expected
