"""Scheduled notifier for new episodes published on a magazine RSS feed."""
