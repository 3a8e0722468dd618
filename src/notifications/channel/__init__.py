"""Channel adapter registry — order mail dispatch.

Provides singleton access to the email adapter. The fake adapter is the
default; a real transport can be registered with ``register_channel``
when the application is assembled.
"""

from notifications.notification.notification import NotificationChannel

_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str = NotificationChannel.EMAIL.value):
    """Return the configured channel adapter (singleton per channel type)."""
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.EMAIL.value:
            from notifications.channel.fake_email import FakeEmailAdapter

            _channel_instances[channel_type] = FakeEmailAdapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def register_channel(channel_type: str, adapter) -> None:
    """Install a specific adapter for a channel type."""
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
