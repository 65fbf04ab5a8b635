"""Tests for the journal filter, sort and pagination stage.

Tests cover:
- Each filter predicate and their conjunction
- Idempotence and order preservation
- Display and chronological sort orders, mixed id types
- Pagination coverage and clamping
"""

import itertools

import pytest

from fxjournal.journal.filters import (
    apply_filters,
    paginate,
    sort_chronological,
    sort_for_display,
)
from fxjournal.journal.models import FilterCriteria, id_sort_key


def ids(trades):
    return [t.id for t in trades]


# =============================================================================
# Filter Predicate Tests
# =============================================================================


class TestApplyFilters:
    """Tests for apply_filters."""

    def test_empty_input(self):
        assert apply_filters([], FilterCriteria(pair="EUR")) == []

    def test_default_criteria_keeps_everything(self, sample_trades):
        assert ids(apply_filters(sample_trades, FilterCriteria())) == ids(sample_trades)

    def test_account_filter_compares_as_strings(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(account_id="1"))
        assert ids(result) == [1, 2, 5, 6, 8]

    def test_account_filter_numeric_id(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(account_id=2))
        assert ids(result) == [3, 4, 7]

    def test_account_all_is_noop(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(account_id="all"))
        assert len(result) == len(sample_trades)

    def test_date_range_is_inclusive(self, sample_trades):
        criteria = FilterCriteria(date_from="2024-01-03", date_to="2024-02-01")
        assert ids(apply_filters(sample_trades, criteria)) == [3, 4, 5, 6, 7]

    def test_pair_substring_case_insensitive(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(pair="eur"))
        assert ids(result) == [1, 3, 6, 8]

    def test_type_exact(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(type="sell"))
        assert ids(result) == [2, 4, 6]

    def test_min_pnl_inclusive(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(min_pnl=0))
        assert ids(result) == [1, 3, 4, 6, 8]

    def test_max_pnl_from_string(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(max_pnl="-40"))
        assert ids(result) == [2, 5, 7]

    def test_unparseable_bound_is_ignored(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(min_pnl="abc"))
        assert len(result) == len(sample_trades)

    def test_search_covers_date(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(search_term="2024-02"))
        assert ids(result) == [6, 7, 8]

    def test_search_covers_type(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(search_term="SELL"))
        assert ids(result) == [2, 4, 6]

    def test_search_covers_pair(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(search_term="us30"))
        assert ids(result) == [7]

    def test_has_notes(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(has_notes=True))
        assert ids(result) == [1, 7]

    def test_has_rating(self, sample_trades):
        result = apply_filters(sample_trades, FilterCriteria(has_rating=True))
        assert ids(result) == [1]

    def test_filters_are_conjunctive(self, sample_trades):
        criteria = FilterCriteria(account_id=1, pair="EUR", min_pnl=100)
        assert ids(apply_filters(sample_trades, criteria)) == [1, 6]

    def test_empty_strings_are_unset(self, sample_trades):
        criteria = FilterCriteria(
            account_id="", date_from="", pair="", type="", min_pnl="", search_term=""
        )
        assert len(apply_filters(sample_trades, criteria)) == len(sample_trades)

    def test_preserves_input_order(self, sample_trades):
        reversed_trades = list(reversed(sample_trades))
        result = apply_filters(reversed_trades, FilterCriteria(pair="EUR"))
        assert ids(result) == [8, 6, 3, 1]

    def test_does_not_mutate_input(self, sample_trades):
        before = ids(sample_trades)
        apply_filters(sample_trades, FilterCriteria(type="buy"))
        assert ids(sample_trades) == before

    @pytest.mark.parametrize(
        "criteria",
        [
            FilterCriteria(),
            FilterCriteria(account_id=1),
            FilterCriteria(pair="usd", type="buy"),
            FilterCriteria(date_from="2024-01-05", max_pnl=100),
            FilterCriteria(search_term="2024-01", min_pnl="-100"),
            FilterCriteria(has_notes=True, account_id="2"),
        ],
    )
    def test_idempotent(self, sample_trades, criteria):
        once = apply_filters(sample_trades, criteria)
        twice = apply_filters(once, criteria)
        assert ids(twice) == ids(once)


# =============================================================================
# Sort Tests
# =============================================================================


class TestSorting:
    """Tests for display and chronological sorts."""

    def test_display_sort_newest_first(self, sample_trades):
        assert ids(sort_for_display(sample_trades)) == [8, 7, 6, 5, 4, 3, 2, 1]

    def test_display_sort_ties_by_id_desc(self, trade_factory):
        trades = [trade_factory(1, 10), trade_factory(3, 10), trade_factory(2, 10)]
        assert ids(sort_for_display(trades)) == [3, 2, 1]

    def test_chronological_uses_time(self, trade_factory):
        trades = [
            trade_factory(1, 10, time="15:00"),
            trade_factory(2, 10, time="08:00"),
            trade_factory(3, 10),
        ]
        # Missing time sorts as 00:00
        assert ids(sort_chronological(trades)) == [3, 2, 1]

    def test_chronological_ties_by_id_asc(self, trade_factory):
        trades = [trade_factory(5, 1), trade_factory(2, 1), trade_factory(9, 1)]
        assert ids(sort_chronological(trades)) == [2, 5, 9]

    def test_chronological_across_dates(self, sample_trades):
        shuffled = [sample_trades[i] for i in (6, 2, 7, 0, 4, 1, 5, 3)]
        assert ids(sort_chronological(shuffled)) == [1, 2, 3, 4, 5, 6, 7, 8]

    def test_mixed_id_types(self, trade_factory):
        trades = [
            trade_factory(10, 1),
            trade_factory("2", 1),
            trade_factory("abc", 1),
            trade_factory(3, 1),
        ]
        assert ids(sort_chronological(trades)) == ["2", 3, 10, "abc"]

    def test_id_sort_key_numeric_before_text(self):
        assert id_sort_key(99) < id_sort_key("a")
        assert id_sort_key("10") > id_sort_key(9)

    @pytest.mark.parametrize("trade_id", ["nan", "NaN", "inf", "1_000", " 12 ", "12 ", "1e3", float("nan"), True])
    def test_non_numeric_ids_sort_as_text(self, trade_id):
        assert id_sort_key(trade_id)[0] == 1

    @pytest.mark.parametrize("trade_id, value", [("12", 12.0), ("-3.5", -3.5), ("+4", 4.0), (".5", 0.5), (7, 7.0)])
    def test_plain_numeric_ids(self, trade_id, value):
        assert id_sort_key(trade_id)[:2] == (0, value)

    def test_nan_like_ids_sort_independent_of_input_order(self, trade_factory):
        trades = [trade_factory(i, 1) for i in ["3", "nan", "1", "2", "NaN", "1.0"]]
        expected = ids(sort_chronological(trades))
        assert expected == ["1", "1.0", "2", "3", "NaN", "nan"]
        for order in itertools.permutations(trades):
            assert ids(sort_chronological(list(order))) == expected

    def test_sort_returns_new_list(self, sample_trades):
        result = sort_for_display(sample_trades)
        assert result is not sample_trades
        assert ids(sample_trades)[0] == 1


# =============================================================================
# Pagination Tests
# =============================================================================


class TestPaginate:
    """Tests for paginate."""

    def test_first_page(self, sample_trades):
        page = paginate(sample_trades, 1, 3)
        assert ids(page.items) == [1, 2, 3]
        assert page.total_pages == 3
        assert page.total_items == 8
        assert page.has_next
        assert not page.has_previous

    def test_last_page_partial(self, sample_trades):
        page = paginate(sample_trades, 3, 3)
        assert ids(page.items) == [7, 8]
        assert not page.has_next

    def test_empty_list_has_one_page(self):
        page = paginate([], 1, 50)
        assert page.items == []
        assert page.total_pages == 1
        assert page.page_number == 1

    def test_page_number_clamped_high(self, sample_trades):
        page = paginate(sample_trades, 10, 3)
        assert page.page_number == 3
        assert ids(page.items) == [7, 8]

    def test_page_number_clamped_low(self, sample_trades):
        page = paginate(sample_trades, 0, 3)
        assert page.page_number == 1

    def test_zero_page_size_clamped(self, sample_trades):
        page = paginate(sample_trades, 1, 0)
        assert page.page_size == 1
        assert page.total_pages == 8

    @pytest.mark.parametrize("page_size", [1, 2, 3, 5, 8, 50])
    def test_pages_cover_list_exactly_once(self, sample_trades, page_size):
        ordered = sort_for_display(sample_trades)
        first = paginate(ordered, 1, page_size)
        collected = []
        for number in range(1, first.total_pages + 1):
            collected.extend(paginate(ordered, number, page_size).items)
        assert ids(collected) == ids(ordered)

    def test_to_dict(self, sample_trades):
        d = paginate(sample_trades, 2, 3).to_dict()
        assert d["page"] == 2
        assert d["totalPages"] == 3
        assert d["hasPrevious"] is True
        assert [item["id"] for item in d["items"]] == [4, 5, 6]
