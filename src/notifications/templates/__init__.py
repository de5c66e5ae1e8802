"""Template registry — maps notification types to template classes.

Each template knows how to render subject, plain-text body and HTML body
from context data.
"""

from notifications.templates.password_reset import PasswordResetTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    PasswordResetTemplate.notification_type: PasswordResetTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
