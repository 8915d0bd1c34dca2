"""Property-based tests for freshness selection."""

from datetime import UTC, datetime, timedelta

from hypothesis import given
from hypothesis import strategies as st

from episode_notifier.models import FeedEntry
from episode_notifier.selector import select_all_fresh, select_second_latest

NOW = datetime(2024, 3, 15, 6, 0, tzinfo=UTC)
CUTOFF = NOW - timedelta(hours=24)

# Ages in minutes relative to NOW; 24h == 1440 minutes
fresh_age = st.integers(min_value=0, max_value=24 * 60 - 1)
stale_age = st.integers(min_value=24 * 60, max_value=24 * 60 * 30)
any_age = st.integers(min_value=0, max_value=24 * 60 * 30)
titles = st.text(min_size=1, max_size=30)


def make_entry(title: str, age_minutes: int) -> FeedEntry:
    published = NOW - timedelta(minutes=age_minutes)
    return FeedEntry(
        title=title,
        link=f"https://example.com/{age_minutes}",
        published=published.isoformat(),
    )


entries_strategy = st.lists(st.builds(make_entry, titles, any_age), max_size=10)


class TestSelectorProperties:
    """Property-based tests for both selection policies."""

    @given(stale_age, st.lists(st.builds(make_entry, titles, any_age), max_size=5))
    def test_stale_latest_never_selects(self, latest_age, rest):
        """If the latest entry is not after the cutoff, nothing is selected."""
        entries = [make_entry("latest", latest_age), *rest]
        assert select_second_latest(entries, CUTOFF) is None

    @given(fresh_age)
    def test_fewer_than_two_entries_never_selects(self, latest_age):
        assert select_second_latest([make_entry("latest", latest_age)], CUTOFF) is None

    @given(fresh_age, titles, any_age, st.lists(st.builds(make_entry, titles, any_age), max_size=5))
    def test_second_entry_selected_regardless_of_its_age(
        self, latest_age, second_title, second_age, rest
    ):
        """A fresh latest entry always yields the second entry, old or not."""
        entries = [make_entry("latest", latest_age), make_entry(second_title, second_age), *rest]

        selected = select_second_latest(entries, CUTOFF)

        assert selected is not None
        assert selected.display_title == second_title
        assert selected.published_at == NOW - timedelta(minutes=second_age)

    @given(entries_strategy)
    def test_all_fresh_selects_exactly_the_fresh_entries(self, entries):
        selected = select_all_fresh(entries, CUTOFF)

        expected = [
            e for e in entries
            if datetime.fromisoformat(e.published) > CUTOFF
        ]
        assert len(selected) == len(expected)
        assert [s.display_title for s in selected] == [e.title for e in expected]
        assert all(s.published_at > CUTOFF for s in selected)

    @given(entries_strategy)
    def test_second_latest_selects_at_most_one(self, entries):
        selected = select_second_latest(entries, CUTOFF)
        if selected is not None:
            assert len(entries) >= 2
            assert selected.display_title == entries[1].title
