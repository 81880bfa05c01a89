"""Email templates: template key -> subject/HTML body (Jinja).

Autoescaping is on: names, feedback and course titles are user-supplied.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined, Template

from course_advising.core.constants import (
    TEMPLATE_ADVISING_REVIEWED,
    TEMPLATE_EMAIL_VERIFIED,
    TEMPLATE_PASSWORD_RESET,
    TEMPLATE_TWO_FACTOR_CODE,
    TEMPLATE_TWO_FACTOR_CODE_RESEND,
    TEMPLATE_VERIFY_EMAIL,
)

_CODE_BODY = (
    "<p>Your verification code is <strong>{{ code }}</strong>. "
    "It will expire in {{ ttl_minutes }} minutes.</p>"
)

# In-repo template definitions: key -> (subject_template, body_template)
_DEFAULT_TEMPLATES: dict[str, tuple[str, str]] = {
    TEMPLATE_TWO_FACTOR_CODE: ("Your login verification code", _CODE_BODY),
    TEMPLATE_TWO_FACTOR_CODE_RESEND: ("Your login verification code (resend)", _CODE_BODY),
    TEMPLATE_VERIFY_EMAIL: (
        "Verify your email",
        "<p>Hi {{ first_name }},</p>\n"
        "<p>Click the link below to verify your account:</p>\n"
        '<a href="{{ link }}">Verify Email</a>',
    ),
    TEMPLATE_EMAIL_VERIFIED: (
        "Your Email Has Been Verified!",
        "<h2>Congratulations, {{ first_name }}!</h2>\n"
        "<p>Your email has been successfully verified.</p>\n"
        "<p>You may now log in using your account credentials.</p>",
    ),
    TEMPLATE_PASSWORD_RESET: (
        "Password Reset Request",
        "<p>Click the link below to reset your password:</p>\n"
        '<a href="{{ link }}">Reset Password</a>',
    ),
    TEMPLATE_ADVISING_REVIEWED: (
        "Course Advising Request {{ status }}",
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">\n'
        '  <h2 style="color: #1976d2;">Course Advising Update</h2>\n'
        "  <p>Hello {{ student_name }},</p>\n"
        "  <p>Your course advising request for <strong>{{ current_term or 'the upcoming term' }}</strong>"
        " has been reviewed.</p>\n"
        '  <div style="background-color: {{ status_color }}; color: white; padding: 15px;'
        ' border-radius: 8px; margin: 20px 0;">\n'
        '    <h3 style="margin: 0;">Status: {{ status }}</h3>\n'
        "  </div>\n"
        '  <div style="background-color: #f5f5f5; padding: 15px; border-radius: 8px;'
        ' margin: 20px 0;">\n'
        '    <h4 style="margin-top: 0;">Admin Feedback:</h4>\n'
        '    <p style="margin: 0;">{{ feedback }}</p>\n'
        "  </div>\n"
        "  <h4>Requested Courses:</h4>\n"
        "  <ul>{% for c in courses %}<li>{{ c.course_level }}: {{ c.course_name }}</li>"
        "{% endfor %}</ul>\n"
        '  <p style="color: #666; font-size: 12px; margin-top: 30px;">\n'
        "    This is an automated message. Please do not reply to this email.\n"
        "  </p>\n"
        "</div>",
    ),
}

STATUS_COLORS = {"Approved": "#4caf50", "Rejected": "#f44336"}


class EmailTemplateRenderer:
    """Renders subject and HTML body for outgoing email from a template key."""

    def __init__(
        self,
        templates: dict[str, tuple[str, str]] | None = None,
    ) -> None:
        """Initialize with optional template dict; falls back to _DEFAULT_TEMPLATES."""
        self._templates = templates or _DEFAULT_TEMPLATES
        # Bodies are HTML; subjects are plain-text headers and are not escaped.
        self._env = Environment(autoescape=True, undefined=StrictUndefined)
        self._subject_env = Environment(autoescape=False, undefined=StrictUndefined)
        self._compiled: dict[str, tuple[Template, Template]] = {}
        for key, (sub_str, body_str) in self._templates.items():
            self._compiled[key] = (
                self._subject_env.from_string(sub_str),
                self._env.from_string(body_str),
            )

    def render(self, template_key: str, context: dict[str, Any]) -> tuple[str, str]:
        """Render subject and body for the template key. Raises KeyError if key unknown."""
        if template_key not in self._compiled:
            raise KeyError(f"Unknown email template: {template_key}")
        ctx = dict(context)
        if template_key == TEMPLATE_ADVISING_REVIEWED:
            ctx.setdefault("status_color", STATUS_COLORS.get(str(ctx.get("status")), "#757575"))
        subject_tpl, body_tpl = self._compiled[template_key]
        subject = subject_tpl.render(**ctx)
        body = body_tpl.render(**ctx)
        return subject, body
