"""
Email templates for lifecycle notifications.

Each template kind has a subject line, a plain-text body and an HTML
body, rendered with Jinja2 from the strings below.
"""

from typing import Any, Dict, Tuple

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

SEMESTER_ENDING = "semester_ending"
SEMESTER_UPCOMING = "semester_upcoming"
SUBSCRIPTION_EXPIRING = "subscription_expiring"
SUBSCRIPTION_EXPIRED = "subscription_expired"
SUBSCRIPTION_DIGEST = "subscription_digest"
BOOKING_CONFIRMATION = "booking_confirmation"
PAYMENT_RECEIPT = "payment_receipt"
BALANCE_CLEARED = "balance_cleared"

_LAYOUT = """<!DOCTYPE html>
<html>
<head><meta charset="UTF-8"><title>{% block title %}{% endblock %}</title></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
<div style="background: #366092; color: white; padding: 16px; text-align: center;">
<h2>{{ portal_name }}</h2>
</div>
<div style="padding: 20px;">{% block content %}{% endblock %}</div>
<div style="padding: 12px; font-size: 12px; color: #777;">This is an automated message from {{ portal_name }}.</div>
</body>
</html>
"""

_TEMPLATES: Dict[str, Dict[str, str]] = {
    SEMESTER_ENDING: {
        "subject": "{{ semester_name }} has ended",
        "text": (
            "Dear {{ student_name }},\n\n"
            "{{ semester_name }} at {{ hostel_name }} ended on {{ end_date }}. "
            "Your enrollment has been marked as completed and your room assignment closed.\n\n"
            "Thank you for staying with us."
        ),
        "html": (
            "{% extends 'layout.html' %}{% block title %}Semester ended{% endblock %}"
            "{% block content %}<p>Dear {{ student_name }},</p>"
            "<p><strong>{{ semester_name }}</strong> at {{ hostel_name }} ended on {{ end_date }}.</p>"
            "<p>Your enrollment has been marked as completed and your room assignment closed.</p>"
            "{% endblock %}"
        ),
    },
    SEMESTER_UPCOMING: {
        "subject": "{{ semester_name }} starts in {{ days_until_start }} day{{ 's' if days_until_start != 1 else '' }}",
        "text": (
            "Dear {{ student_name }},\n\n"
            "{{ semester_name }} at {{ hostel_name }} starts on {{ start_date }} "
            "({{ days_until_start }} day{{ 's' if days_until_start != 1 else '' }} from today)."
        ),
        "html": (
            "{% extends 'layout.html' %}{% block title %}Semester reminder{% endblock %}"
            "{% block content %}<p>Dear {{ student_name }},</p>"
            "<p><strong>{{ semester_name }}</strong> at {{ hostel_name }} starts on {{ start_date }}"
            " ({{ days_until_start }} day{{ 's' if days_until_start != 1 else '' }} from today).</p>"
            "{% endblock %}"
        ),
    },
    SUBSCRIPTION_EXPIRING: {
        "subject": "{{ hostel_name }} subscription expires in {{ days_left }} day{{ 's' if days_left != 1 else '' }}",
        "text": (
            "Hello {{ recipient_name }},\n\n"
            "The {{ plan_name }} subscription for {{ hostel_name }} expires on {{ end_date }} "
            "({{ days_left }} day{{ 's' if days_left != 1 else '' }} left). "
            "Renew before then to keep portal access."
        ),
        "html": (
            "{% extends 'layout.html' %}{% block title %}Subscription expiring{% endblock %}"
            "{% block content %}<p>Hello {{ recipient_name }},</p>"
            "<p>The {{ plan_name }} subscription for <strong>{{ hostel_name }}</strong> expires on {{ end_date }}"
            " ({{ days_left }} day{{ 's' if days_left != 1 else '' }} left).</p>"
            "<p>Renew before then to keep portal access.</p>{% endblock %}"
        ),
    },
    SUBSCRIPTION_EXPIRED: {
        "subject": "{{ hostel_name }} subscription has expired",
        "text": (
            "Hello {{ recipient_name }},\n\n"
            "The {{ plan_name }} subscription for {{ hostel_name }} expired on {{ end_date }}. "
            "Staff logins are blocked until the subscription is renewed."
        ),
        "html": (
            "{% extends 'layout.html' %}{% block title %}Subscription expired{% endblock %}"
            "{% block content %}<p>Hello {{ recipient_name }},</p>"
            "<p>The {{ plan_name }} subscription for <strong>{{ hostel_name }}</strong> expired on {{ end_date }}.</p>"
            "<p>Staff logins are blocked until the subscription is renewed.</p>{% endblock %}"
        ),
    },
    SUBSCRIPTION_DIGEST: {
        "subject": "{{ subscriptions | length }} subscription{{ 's' if subscriptions | length != 1 else '' }} expiring within {{ window_days }} days",
        "text": (
            "Hello {{ recipient_name }},\n\n"
            "The following subscriptions expire within {{ window_days }} days:\n"
            "{% for item in subscriptions %}"
            "- {{ item.hostel_name }}: {{ item.end_date }} ({{ item.days_left }} days left)\n"
            "{% endfor %}"
        ),
        "html": (
            "{% extends 'layout.html' %}{% block title %}Expiring subscriptions{% endblock %}"
            "{% block content %}<p>Hello {{ recipient_name }},</p>"
            "<p>The following subscriptions expire within {{ window_days }} days:</p><ul>"
            "{% for item in subscriptions %}<li>{{ item.hostel_name }}: {{ item.end_date }}"
            " ({{ item.days_left }} days left)</li>{% endfor %}</ul>{% endblock %}"
        ),
    },
    BOOKING_CONFIRMATION: {
        "subject": "Booking confirmed at {{ hostel_name }}",
        "text": (
            "Dear {{ student_name }},\n\n"
            "Your booking for room {{ room_number }} in {{ semester_name }} is confirmed. "
            "Booking fee received: {{ currency }} {{ amount }}. "
            "Outstanding balance: {{ currency }} {{ balance }}."
        ),
        "html": (
            "{% extends 'layout.html' %}{% block title %}Booking confirmed{% endblock %}"
            "{% block content %}<p>Dear {{ student_name }},</p>"
            "<p>Your booking for room <strong>{{ room_number }}</strong> in {{ semester_name }} is confirmed.</p>"
            "<p>Booking fee received: {{ currency }} {{ amount }}<br>"
            "Outstanding balance: {{ currency }} {{ balance }}</p>{% endblock %}"
        ),
    },
    PAYMENT_RECEIPT: {
        "subject": "Payment receipt from {{ hostel_name }}",
        "text": (
            "Dear {{ student_name }},\n\n"
            "We received {{ currency }} {{ amount }} for {{ semester_name }}. "
            "Total paid: {{ currency }} {{ total_paid }}. "
            "Balance: {{ currency }} {{ balance }}."
        ),
        "html": (
            "{% extends 'layout.html' %}{% block title %}Payment receipt{% endblock %}"
            "{% block content %}<p>Dear {{ student_name }},</p>"
            "<p>We received <strong>{{ currency }} {{ amount }}</strong> for {{ semester_name }}.</p>"
            "<p>Total paid: {{ currency }} {{ total_paid }}<br>Balance: {{ currency }} {{ balance }}</p>"
            "{% endblock %}"
        ),
    },
    BALANCE_CLEARED: {
        "subject": "Thank you, your {{ semester_name }} balance is cleared",
        "text": (
            "Dear {{ student_name }},\n\n"
            "Thank you for completing payment for {{ semester_name }} at {{ hostel_name }}. "
            "Total paid: {{ currency }} {{ total_paid }}."
        ),
        "html": (
            "{% extends 'layout.html' %}{% block title %}Payment complete{% endblock %}"
            "{% block content %}<p>Dear {{ student_name }},</p>"
            "<p>Thank you for completing payment for {{ semester_name }} at {{ hostel_name }}.</p>"
            "<p>Total paid: {{ currency }} {{ total_paid }}</p>{% endblock %}"
        ),
    },
}

TEMPLATE_KINDS = frozenset(_TEMPLATES)


def _build_environment() -> Environment:
    sources = {"layout.html": _LAYOUT}
    for kind, parts in _TEMPLATES.items():
        for part, source in parts.items():
            sources[f"{kind}.{part}"] = source
    return Environment(
        loader=DictLoader(sources),
        autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
        undefined=StrictUndefined,
        trim_blocks=True,
    )


_environment = _build_environment()


def render(kind: str, data: Dict[str, Any]) -> Tuple[str, str, str]:
    """
    Render a notification.

    Returns:
        (subject, text body, html body)

    Raises:
        KeyError: unknown template kind
        jinja2.TemplateError: missing template data
    """
    if kind not in _TEMPLATES:
        raise KeyError(f"Unknown notification template: {kind}")
    subject = _environment.get_template(f"{kind}.subject").render(**data).strip()
    text = _environment.get_template(f"{kind}.text").render(**data)
    html = _environment.get_template(f"{kind}.html").render(**data)
    return subject, text, html
