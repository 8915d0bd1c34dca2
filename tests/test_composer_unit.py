"""Unit tests for notification composition."""

import os
import time
from datetime import UTC, datetime, timedelta, timezone

import pytest

from episode_notifier.composer import (
    SUBJECT,
    build_message,
    compose_notification,
    format_jst,
)
from episode_notifier.models import NotificationMessage, SelectedEntry

INSTANT = datetime(2024, 3, 15, 5, 30, tzinfo=UTC)


class TestFormatJst:
    """Unit tests for format_jst."""

    def test_utc_instant_is_shifted_nine_hours(self):
        assert format_jst(INSTANT) == "2024/03/15 14:30 (JST)"

    def test_day_and_year_rollover(self):
        instant = datetime(2023, 12, 31, 15, 5, tzinfo=UTC)
        assert format_jst(instant) == "2024/01/01 00:05 (JST)"

    def test_zero_padding(self):
        instant = datetime(999, 1, 2, 0, 1, tzinfo=UTC)
        assert format_jst(instant) == "0999/01/02 09:01 (JST)"

    def test_other_offsets_are_converted(self):
        instant = datetime(2024, 3, 15, 0, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert format_jst(instant) == "2024/03/15 14:30 (JST)"

    def test_naive_instant_taken_as_utc(self):
        assert format_jst(datetime(2024, 3, 15, 5, 30)) == "2024/03/15 14:30 (JST)"

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="tzset not available")
    def test_host_timezone_is_ignored(self, monkeypatch):
        monkeypatch.setenv("TZ", "America/Los_Angeles")
        time.tzset()
        try:
            assert format_jst(INSTANT) == "2024/03/15 14:30 (JST)"
        finally:
            monkeypatch.undo()
            time.tzset()


class TestBuildMessage:
    """Unit tests for build_message."""

    def test_full_message_layout(self):
        message = build_message("第12話", INSTANT, "https://example.com/ep12")

        assert message.split("\n") == [
            "『みいちゃんと山田さん』が公開されました！",
            "",
            "詳細情報",
            "- タイトル: 第12話",
            "- 配信日: 2024/03/15 14:30 (JST)",
            "- URL: https://example.com/ep12",
        ]

    def test_url_line_omitted_without_url(self):
        message = build_message("第12話", INSTANT)

        lines = message.split("\n")
        assert len(lines) == 5
        assert not any(line.startswith("- URL:") for line in lines)

    @pytest.mark.parametrize("title", [None, ""])
    def test_missing_title_uses_placeholder(self, title):
        message = build_message(title, INSTANT, "https://example.com")
        assert "- タイトル: タイトルなし" in message

    def test_same_input_same_output(self):
        first = build_message("Ep1", INSTANT, "https://example.com/1")
        second = build_message("Ep1", INSTANT, "https://example.com/1")
        assert first == second


class TestComposeNotification:
    """Unit tests for compose_notification."""

    def test_subject_and_body(self):
        selected = SelectedEntry(
            display_title="Ep1",
            published_at=INSTANT,
            display_url="URLなし",
        )

        notification = compose_notification(selected)

        assert isinstance(notification, NotificationMessage)
        assert notification.subject == SUBJECT == "配信予定: 『みいちゃんと山田さん』"
        assert "- タイトル: Ep1" in notification.body
        assert notification.body.endswith("- URL: URLなし")

    def test_notification_is_immutable(self):
        notification = compose_notification(
            SelectedEntry(display_title="Ep1", published_at=INSTANT)
        )
        with pytest.raises(AttributeError):
            notification.body = "changed"
