"""Email channel registry.

The fake adapter is used unless another adapter is installed with
``set_email_channel`` (e.g. an SMTP or provider-backed adapter at startup).
"""

from storefront.notification.channel.email_port import EmailPort

_email_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _email_channel
    if _email_channel is None:
        from storefront.notification.channel.fake_email import FakeEmailAdapter

        _email_channel = FakeEmailAdapter()
    return _email_channel


def set_email_channel(adapter: EmailPort):
    global _email_channel
    _email_channel = adapter


def reset_email_channel():
    """Reset the email singleton (useful for testing)."""
    global _email_channel
    _email_channel = None
