"""Notification text composition for the episode release notifier."""

from datetime import datetime, timedelta, timezone

from .models import NotificationMessage, SelectedEntry

JST = timezone(timedelta(hours=9), "JST")

SERIES_TITLE = "『みいちゃんと山田さん』"
SUBJECT = f"配信予定: {SERIES_TITLE}"
TITLE_PLACEHOLDER = "タイトルなし"
URL_PLACEHOLDER = "URLなし"


def format_jst(instant: datetime) -> str:
    """Render an instant as ``YYYY/MM/DD HH:MM (JST)``.

    Naive datetimes are taken as UTC. The host timezone never matters.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    local = instant.astimezone(JST)
    return (
        f"{local.year:04d}/{local.month:02d}/{local.day:02d} "
        f"{local.hour:02d}:{local.minute:02d} (JST)"
    )


def build_message(title: str | None, published_at: datetime, url: str | None = None) -> str:
    """Build the notification body.

    Args:
        title: Episode title, replaced by a placeholder when empty
        published_at: Publish instant of the episode
        url: Episode URL; the URL line is left out when None

    Returns:
        Multi-line message text
    """
    lines = [
        f"{SERIES_TITLE}が公開されました！",
        "",
        "詳細情報",
        f"- タイトル: {title or TITLE_PLACEHOLDER}",
        f"- 配信日: {format_jst(published_at)}",
    ]
    if url is not None:
        lines.append(f"- URL: {url}")
    return "\n".join(lines)


def compose_notification(selected: SelectedEntry) -> NotificationMessage:
    """Turn a selected entry into the subject/body pair sent to the topic."""
    return NotificationMessage(
        subject=SUBJECT,
        body=build_message(
            selected.display_title, selected.published_at, selected.display_url
        ),
    )
