"""Email channel adapter registry.

Provides singleton access to the email adapter. Uses the fake adapter by
default; the SMTP adapter is selected with EMAIL_ADAPTER=smtp and the
MAIL_* environment variables.
"""

from shared import settings

from notifications.channel.email_port import EmailPort

_email_adapter: EmailPort | None = None


def get_email_adapter() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _email_adapter
    if _email_adapter is None:
        if settings.EMAIL_ADAPTER == "fake":
            from notifications.channel.fake_email import FakeEmailAdapter

            _email_adapter = FakeEmailAdapter()
        elif settings.EMAIL_ADAPTER == "smtp":
            from notifications.channel.smtp_email import SmtpEmailAdapter

            _email_adapter = SmtpEmailAdapter(
                host=settings.MAIL_HOST,
                port=settings.MAIL_PORT,
                sender=settings.MAIL_FROM,
                username=settings.MAIL_USER,
                password=settings.MAIL_PASS,
            )
        else:
            raise ValueError(f"Unknown email adapter: {settings.EMAIL_ADAPTER}")

    return _email_adapter


def set_email_adapter(adapter: EmailPort) -> None:
    """Override the active email adapter (useful for tests)."""
    global _email_adapter
    _email_adapter = adapter


def reset_email_adapter() -> None:
    """Reset the email adapter singleton (useful for testing)."""
    global _email_adapter
    _email_adapter = None
