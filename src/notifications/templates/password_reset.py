"""Password reset template — sent when a customer requests a reset link."""

from html import escape


def wrap_html(content: str) -> str:
    """Wrap rendered HTML content in the shared storefront email layout."""
    return (
        '<div class="email" style="border: 1px solid black; padding: 20px; '
        'font-family: sans-serif; line-height: 2; font-size: 20px;">'
        "<h2>Hello There!</h2>"
        f"<p>{content}</p>"
        "<p>The Sick Fits Team</p>"
        "</div>"
    )


class PasswordResetTemplate:
    notification_type = "password_reset"

    @staticmethod
    def render(context: dict) -> dict:
        reset_url = context["reset_url"]
        expires_in_minutes = context.get("expires_in_minutes", 60)
        return {
            "subject": "Your Password Reset Token",
            "body": (
                "Your password reset token is here!\n\n"
                f"Open this link to choose a new password: {reset_url}\n\n"
                f"The link expires in {expires_in_minutes} minutes and can be used once.\n"
                "If you did not ask for a reset you can ignore this email."
            ),
            "html_body": wrap_html(
                "Your password reset token is here!<br /><br />"
                f'<a href="{escape(reset_url, quote=True)}">Click Here to Reset</a><br /><br />'
                f"The link expires in {expires_in_minutes} minutes and can be used once."
            ),
        }
