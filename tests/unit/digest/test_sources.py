"""Tests for hnbrief.digest.sources."""

from datetime import datetime, timezone

from hnbrief.digest.sources import (
    MAX_STORY_IDS_TO_PROCESS,
    HackerNewsSource,
    clean_html_text,
    dedupe_by_title,
    detect_category,
    normalize_title,
)
from tests.fakes import HN, FakeResponse, FakeSession, hn_item, make_article


def _source(routes: dict, max_comments: int = 10) -> tuple[HackerNewsSource, FakeSession]:
    session = FakeSession(routes)
    return HackerNewsSource(base_url=HN, max_comments=max_comments, session=session), session


def _item_route(item: dict) -> tuple[str, FakeResponse]:
    return f"{HN}/item/{item['id']}.json", FakeResponse(200, item)


def _routes(ids: list[int], items: list[dict]) -> dict:
    routes = {f"{HN}/topstories.json": FakeResponse(200, ids)}
    routes.update(_item_route(i) for i in items)
    return routes


class TestFetchTopArticles:
    def test_returns_articles_in_rank_order(self) -> None:
        items = [hn_item(i) for i in (3, 1, 2)]
        source, _ = _source(_routes([3, 1, 2], items))

        result = source.fetch_top_articles(limit=3)

        assert [a.hn_id for a in result] == [3, 1, 2]

    def test_stops_fetching_once_limit_reached(self) -> None:
        items = [hn_item(i) for i in range(1, 6)]
        source, session = _source(_routes([1, 2, 3, 4, 5], items))

        result = source.fetch_top_articles(limit=2)

        assert len(result) == 2
        assert f"{HN}/item/3.json" not in session.get_calls

    def test_candidate_pool_is_capped(self) -> None:
        ids = list(range(1, 51))
        items = [hn_item(i) for i in ids]
        source, session = _source(_routes(ids, items))

        result = source.fetch_top_articles(limit=100)

        assert len(result) == MAX_STORY_IDS_TO_PROCESS
        assert f"{HN}/item/31.json" not in session.get_calls

    def test_id_list_failure_returns_empty(self) -> None:
        source, _ = _source({f"{HN}/topstories.json": FakeResponse(500, None)})
        assert source.fetch_top_articles(3) == []

    def test_empty_id_list_returns_empty(self) -> None:
        source, _ = _source({f"{HN}/topstories.json": FakeResponse(200, [])})
        assert source.fetch_top_articles(3) == []

    def test_malformed_id_list_returns_empty(self) -> None:
        source, _ = _source({f"{HN}/topstories.json": FakeResponse(200, ValueError("bad json"))})
        assert source.fetch_top_articles(3) == []

    def test_network_error_on_id_list_returns_empty(self) -> None:
        import requests

        source, _ = _source({f"{HN}/topstories.json": requests.ConnectionError("down")})
        assert source.fetch_top_articles(3) == []

    def test_skips_invalid_items_and_fills_from_pool(self) -> None:
        import requests

        items = [
            hn_item(2, title=""),
            hn_item(3, time=None),
            hn_item(4, deleted=True),
            hn_item(5, dead=True),
            hn_item(7),
            hn_item(8),
        ]
        routes = _routes([1, 2, 3, 4, 5, 6, 7, 8], items)
        routes[f"{HN}/item/1.json"] = FakeResponse(503, None)
        routes[f"{HN}/item/6.json"] = requests.Timeout("slow")
        source, _ = _source(routes)

        result = source.fetch_top_articles(limit=2)

        assert [a.hn_id for a in result] == [7, 8]

    def test_deduplicates_by_normalized_title(self) -> None:
        items = [
            hn_item(1, title="Same  story "),
            hn_item(2, title=" Same story"),
            hn_item(3, title="same story"),
            hn_item(4, title="Other"),
        ]
        source, _ = _source(_routes([1, 2, 3, 4], items))

        result = source.fetch_top_articles(limit=3)

        assert [a.hn_id for a in result] == [1, 3, 4]
        assert result[0].title == "Same story"

    def test_output_is_a_dedup_fixed_point(self) -> None:
        items = [
            hn_item(1, title="Alpha"),
            hn_item(2, title="Alpha "),
            hn_item(3, title="Beta"),
            hn_item(4, title="  Beta"),
            hn_item(5, title="Gamma"),
        ]
        source, _ = _source(_routes([1, 2, 3, 4, 5], items))

        result = source.fetch_top_articles(limit=10)

        assert [a.hn_id for a in result] == [1, 3, 5]
        assert dedupe_by_title(result) == result

    def test_duplicates_do_not_use_up_the_limit(self) -> None:
        items = [hn_item(1, title="Same"), hn_item(2, title="Same"), hn_item(3), hn_item(4)]
        source, session = _source(_routes([1, 2, 3, 4], items))

        result = source.fetch_top_articles(limit=2)

        assert [a.hn_id for a in result] == [1, 3]
        assert f"{HN}/item/4.json" not in session.get_calls

    def test_limit_zero(self) -> None:
        source, session = _source({})
        assert source.fetch_top_articles(0) == []
        assert session.get_calls == []


class TestFetchArticle:
    def test_normalizes_fields(self) -> None:
        item = hn_item(
            42,
            title="Show HN: A thing",
            url="https://thing.dev",
            text="<p>Hello &amp; welcome</p>",
            score=120,
            by="pg",
            descendants=7,
            time=1700000000,
        )
        source, _ = _source(dict([_item_route(item)]))

        article = source.fetch_article(42)

        assert article is not None
        assert article.link == "https://thing.dev"
        assert article.body == "Hello & welcome"
        assert article.published_at == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert article.score == 120
        assert article.author == "pg"
        assert article.comment_count == 7
        assert article.category == "Show HN"
        assert article.comments == ()

    def test_falls_back_to_discussion_link_and_title_body(self) -> None:
        source, _ = _source(dict([_item_route(hn_item(9))]))

        article = source.fetch_article(9)

        assert article.link == "https://news.ycombinator.com/item?id=9"
        assert article.link == article.discussion_url
        assert article.body == "Story 9"
        assert article.score is None
        assert article.author is None
        assert article.comment_count is None


class TestComments:
    def test_skips_deleted_dead_and_empty_comments(self) -> None:
        comments = [
            {"id": 101, "text": "first"},
            {"id": 102, "deleted": True},
            {"id": 103, "text": "dead one", "dead": True},
            {"id": 104},
            {"id": 105, "text": "<i>second</i>"},
        ]
        story = hn_item(1, kids=[101, 102, 103, 104, 105])
        source, _ = _source(dict(_item_route(i) for i in [story, *comments]))

        article = source.fetch_article(1)

        assert article.comments == ("first", "second")

    def test_window_is_twice_max_comments(self) -> None:
        kids = list(range(100, 110))
        dead = [{"id": k, "dead": True, "text": "x"} for k in kids[:4]]
        live = [{"id": k, "text": f"c{k}"} for k in kids[4:]]
        story = hn_item(1, kids=kids)
        source, session = _source(dict(_item_route(i) for i in [story, *dead, *live]), max_comments=2)

        article = source.fetch_article(1)

        # window is the first 4 ids, all dead
        assert article.comments == ()
        assert f"{HN}/item/104.json" not in session.get_calls

    def test_stops_at_max_comments(self) -> None:
        kids = list(range(100, 120))
        comments = [{"id": k, "text": f"c{k}"} for k in kids]
        story = hn_item(1, kids=kids)
        source, session = _source(dict(_item_route(i) for i in [story, *comments]), max_comments=3)

        article = source.fetch_article(1)

        assert article.comments == ("c100", "c101", "c102")
        assert f"{HN}/item/103.json" not in session.get_calls

    def test_unreadable_comment_skips_only_that_comment(self) -> None:
        story = hn_item(1, kids=[101, 102])
        comments = [{"id": 101, "text": 5}, {"id": 102, "text": "ok"}]
        routes = _routes([1], [story, *comments])
        source, _ = _source(routes)

        result = source.fetch_top_articles(limit=3)

        assert [a.hn_id for a in result] == [1]
        assert result[0].comments == ("ok",)

    def test_comment_fetch_failure_is_skipped(self) -> None:
        story = hn_item(1, kids=[101, 102])
        routes = dict(_item_route(i) for i in [story, {"id": 102, "text": "ok"}])
        routes[f"{HN}/item/101.json"] = FakeResponse(500, None)
        source, _ = _source(routes)

        assert source.fetch_article(1).comments == ("ok",)


class TestHelpers:
    def test_normalize_title(self) -> None:
        assert normalize_title("  A \t title\n here ") == "A title here"

    def test_dedupe_keeps_first_occurrence(self) -> None:
        a = make_article(1, "Hello  world")
        b = make_article(2, "Hello world")
        c = make_article(3, "Hello World")

        assert dedupe_by_title([a, b, c]) == [a, c]

    def test_dedupe_is_a_fixed_point(self) -> None:
        articles = [make_article(i, t) for i, t in enumerate(["x", "x ", "y", " y", "z"])]

        once = dedupe_by_title(articles)

        assert dedupe_by_title(once) == once

    def test_detect_category(self) -> None:
        assert detect_category("Show HN: my app") == "Show HN"
        assert detect_category("ask hn: why?") == "Ask HN"
        assert detect_category("Tell HN: news") == "Tell HN"
        assert detect_category("Acme (YC S21) is hiring") == "Job"
        assert detect_category("Something else") == "Story"

    def test_clean_html_text(self) -> None:
        raw = 'Line one<p>Line <a href="https://x.y">two</a> &gt; 1'
        assert clean_html_text(raw) == "Line one\nLine two > 1"
        assert clean_html_text("") == ""
