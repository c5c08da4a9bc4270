"""
Unit tests for book search query construction and pagination.
"""

import math

import pytest

from catalog.search import (
    MAX_PAGE_SIZE, BookSearchParams, SortBy, SortOrder,
    author_name_filter, build_book_filter, build_pagination, build_sort
)


class TestBookSearchParams:
    """Test cases for parameter normalization."""

    def test_defaults(self):
        """Test default search parameters."""
        params = BookSearchParams()

        assert params.page == 1
        assert params.limit == 10
        assert params.sort_by == SortBy.CREATED_AT
        assert params.order == SortOrder.DESC
        assert params.skip == 0

    @pytest.mark.parametrize("requested, expected", [
        (0, 1),
        (-5, 1),
        (1, 1),
        (25, 25),
        (50, 50),
        (51, 50),
        (1000, 50),
        ("20", 20),
        ("abc", 10),
        (None, 10),
        ("", 10),
    ])
    def test_limit_is_clamped(self, requested, expected):
        """Limit always lands in [1, 50]."""
        params = BookSearchParams(limit=requested)
        assert params.limit == expected
        assert 1 <= params.limit <= MAX_PAGE_SIZE

    @pytest.mark.parametrize("requested, expected", [
        (0, 1),
        (-3, 1),
        ("4", 4),
        ("x", 1),
        (None, 1),
    ])
    def test_page_has_floor_of_one(self, requested, expected):
        """Page numbers start at 1."""
        assert BookSearchParams(page=requested).page == expected

    def test_skip(self):
        """Skip is (page - 1) * limit."""
        params = BookSearchParams(page=3, limit=20)
        assert params.skip == 40

    def test_unknown_sort_falls_back(self):
        """Unknown sort field and order use the defaults."""
        params = BookSearchParams(sort_by="pages", order="sideways")

        assert params.sort_by == SortBy.CREATED_AT
        assert params.order == SortOrder.DESC

    def test_order_is_case_insensitive(self):
        """Test that order accepts upper case."""
        assert BookSearchParams(order="ASC").order == SortOrder.ASC

    def test_blank_filters_are_omitted(self):
        """Empty strings count as missing filters."""
        params = BookSearchParams(search="", genre="", author_name="")

        assert params.search is None
        assert params.genre is None
        assert params.author_name is None

    def test_whitespace_filter_is_kept(self):
        """Only the empty string is omitted; whitespace still filters."""
        params = BookSearchParams(genre="  ")

        assert params.genre == "  "
        assert build_book_filter(params) == {"$and": [{"genre": "  "}]}


class TestBuildBookFilter:
    """Test cases for the conjunctive filter."""

    def test_no_filters(self):
        """No supplied condition gives an empty filter."""
        assert build_book_filter(BookSearchParams()) == {}

    def test_genre_only(self):
        """A genre-only search filters on exact genre alone."""
        params = BookSearchParams(genre="Fantasy")

        assert build_book_filter(params) == {"$and": [{"genre": "Fantasy"}]}

    def test_title_is_case_insensitive_substring(self):
        """Test title search uses an escaped case-insensitive regex."""
        params = BookSearchParams(search="c++ (2nd)")

        query = build_book_filter(params)

        assert query == {"$and": [{"title": {"$regex": r"c\+\+\ \(2nd\)", "$options": "i"}}]}

    def test_author_name_uses_resolved_ids(self):
        """Author-name condition filters by matching author ids."""
        params = BookSearchParams(author_name="garcía")

        query = build_book_filter(params, author_ids=["a1", "a2"])

        assert query == {"$and": [{"author_id": {"$in": ["a1", "a2"]}}]}

    def test_author_name_without_matches(self):
        """No matching authors yields a filter that matches nothing."""
        params = BookSearchParams(author_name="nadie")

        assert build_book_filter(params, author_ids=[]) == {"$and": [{"author_id": {"$in": []}}]}

    def test_all_filters_combined(self):
        """All supplied conditions are AND-ed in a stable order."""
        params = BookSearchParams(search="amor", genre="Novela", author_name="gabo")

        query = build_book_filter(params, author_ids=["a1"])

        assert len(query["$and"]) == 3
        assert query["$and"][0]["title"]["$regex"] == "amor"
        assert query["$and"][1] == {"genre": "Novela"}
        assert query["$and"][2] == {"author_id": {"$in": ["a1"]}}

    def test_author_name_filter(self):
        """Test the authors-collection filter for author names."""
        assert author_name_filter(BookSearchParams()) is None
        assert author_name_filter(BookSearchParams(author_name="Gabo")) == {
            "name": {"$regex": "Gabo", "$options": "i"}
        }


class TestBuildSort:
    """Test cases for sort construction."""

    @pytest.mark.parametrize("sort_by, order, expected", [
        ("title", "asc", [("title", 1), ("_id", 1)]),
        ("publishedYear", "desc", [("published_year", -1), ("_id", -1)]),
        ("createdAt", "asc", [("created_at", 1), ("_id", 1)]),
        (None, None, [("created_at", -1), ("_id", -1)]),
    ])
    def test_sort(self, sort_by, order, expected):
        """Test sort field mapping and direction."""
        params = BookSearchParams(sort_by=sort_by, order=order)
        assert build_sort(params) == expected

    def test_sort_breaks_ties_by_id(self):
        """Tied sort keys still page in a stable order."""
        sort = build_sort(BookSearchParams(sort_by="publishedYear", order="asc"))

        assert sort[-1] == ("_id", 1)


class TestBuildPagination:
    """Test cases for pagination metadata."""

    def test_empty_result_has_one_page(self):
        """Zero matches still report a single page."""
        pagination = build_pagination(page=1, limit=10, total=0)

        assert pagination.total_pages == 1
        assert pagination.has_next is False
        assert pagination.has_prev is False

    def test_middle_page(self):
        """Test navigation flags on a middle page."""
        pagination = build_pagination(page=2, limit=10, total=25)

        assert pagination.total_pages == 3
        assert pagination.has_next is True
        assert pagination.has_prev is True

    def test_last_page(self):
        """Test navigation flags on the last page."""
        pagination = build_pagination(page=3, limit=10, total=25)

        assert pagination.has_next is False
        assert pagination.has_prev is True

    @pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 49, 50, 51, 500])
    @pytest.mark.parametrize("limit", [1, 7, 10, 50])
    def test_total_pages_formula(self, total, limit):
        """totalPages is max(ceil(total / limit), 1)."""
        for page in (1, 2, 5):
            pagination = build_pagination(page=page, limit=limit, total=total)
            assert pagination.total_pages == max(math.ceil(total / limit), 1)
            assert pagination.has_next == (page < pagination.total_pages)
            assert pagination.has_prev == (page > 1)
