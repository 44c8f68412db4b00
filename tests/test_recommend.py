import pytest

from app.lookup import recommend
from tests.helpers import FakeOmdbClient, make_title


async def test_recommend_empty_ratings_skips_client():
    client = FakeOmdbClient([make_title("tt1")])
    assert await recommend({}, client) == []
    assert client.calls == []


async def test_recommend_no_liked_titles():
    client = FakeOmdbClient(
        [make_title("A", "Drama"), make_title("B", "Comedy"), make_title("C", "Drama")],
        searches={"Drama": ["C"], "Comedy": ["C"]},
    )
    assert await recommend({"A": 3, "B": 2}, client) == []
    assert not any(kind == "search" for kind, _ in client.calls)


async def test_recommend_expected_score():
    client = FakeOmdbClient(
        [make_title("tt1", "Drama"), make_title("tt2", "Drama, Romance", rating=8.0)],
        searches={"Drama": ["tt2"]},
    )
    recos = await recommend({"tt1": 5}, client)
    assert [r.title.id for r in recos] == ["tt2"]
    assert recos[0].score == pytest.approx(1.0 * 0.7 + 0.4)


async def test_recommend_excludes_rated_and_caps_length():
    titles = [make_title("r1", "Action"), make_title("r2", "Comedy")]
    titles += [make_title(f"a{i}", "Action", rating=float(i)) for i in range(5)]
    titles += [make_title(f"c{i}", "Comedy", rating=float(i)) for i in range(5)]
    client = FakeOmdbClient(
        titles,
        searches={
            "Action": ["r1", "r2", "a0", "a1", "a2", "a3", "a4"],
            "Comedy": ["c0", "c1", "c2", "c3", "c4"],
        },
    )
    ratings = {"r1": 5, "r2": 4}
    recos = await recommend(ratings, client)
    assert len(recos) == 5
    assert not set(ratings) & {r.title.id for r in recos}


async def test_recommend_takes_five_results_per_genre():
    titles = [make_title("r1", "Action")] + [make_title(f"a{i}", "Action") for i in range(10)]
    client = FakeOmdbClient(titles, searches={"Action": [f"a{i}" for i in range(10)]})
    await recommend({"r1": 5}, client)
    fetched = [movie_id for kind, movie_id in client.calls if kind == "details" and movie_id != "r1"]
    assert fetched == ["a0", "a1", "a2", "a3", "a4"]


async def test_recommend_searches_at_most_three_genres_sequentially():
    genres = ["Drama", "Action", "Comedy", "Fantasy"]
    titles = [make_title(f"r{i}", genre) for i, genre in enumerate(genres)]
    client = FakeOmdbClient(titles)
    await recommend({f"r{i}": 5 for i in range(4)}, client)
    searches = [query for kind, query in client.calls if kind == "search"]
    assert searches == ["Drama", "Action", "Comedy"]


async def test_recommend_genre_failure_does_not_abort():
    client = FakeOmdbClient(
        [make_title("r1", "Drama"), make_title("r2", "Comedy"), make_title("c1", "Comedy")],
        searches={"Comedy": ["c1"]},
        failing={"Drama"},
    )
    recos = await recommend({"r1": 5, "r2": 5}, client)
    assert [r.title.id for r in recos] == ["c1"]


async def test_recommend_skips_titles_without_details():
    client = FakeOmdbClient(
        [make_title("r1", "Drama"), make_title("c1", "Drama")],
        searches={"Drama": ["missing", "c1"]},
    )
    recos = await recommend({"r1": 5, "gone": 5}, client)
    assert [r.title.id for r in recos] == ["c1"]


async def test_recommend_duplicate_candidates_across_genres():
    client = FakeOmdbClient(
        [
            make_title("r1", "Drama"),
            make_title("r2", "Action"),
            make_title("both", "Action, Drama", rating=9.0),
            make_title("d1", "Drama", rating=5.0),
        ],
        searches={"Drama": ["both", "d1"], "Action": ["both"]},
    )
    recos = await recommend({"r1": 5, "r2": 5}, client)
    assert [r.title.id for r in recos] == ["both", "d1"]
