"""
Email Service using Resend

Delivers InternBridge notifications by email. Templates share one layout;
every user-supplied value is HTML-escaped before it is interpolated.
"""

import asyncio
import logging
from html import escape

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key

EMAIL_FROM = settings.email_from
FRONTEND_URL = settings.frontend_url.rstrip("/")

_LAYOUT = """
<!DOCTYPE html>
<html>
<head>
    <style>
        body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
        .header {{ color: #0f4c81; margin-bottom: 24px; }}
        .info-box {{ background-color: #f3f4f6; padding: 16px; border-radius: 8px; margin: 16px 0; }}
        .button {{ display: inline-block; background-color: #0f4c81; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; margin: 24px 0; }}
        .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
    </style>
</head>
<body>
    <div class="container">
        <h1 class="header">{heading}</h1>
        {content}
        <a href="{action_url}" class="button">Open InternBridge</a>
        <div class="footer">
            <p>You are receiving this email because you have an InternBridge account.</p>
            <p>InternBridge - Connecting youth with internships</p>
        </div>
    </div>
</body>
</html>
"""


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Without an API key the email is logged instead of sent.

    Returns:
        True if the email was sent (or logged), False if Resend failed
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": EMAIL_FROM,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend's client is synchronous
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


def _action_link(action_url: str | None) -> str:
    if not action_url:
        return FRONTEND_URL
    return f"{FRONTEND_URL}{action_url}"


async def send_application_update(
    to_email: str,
    recipient_name: str,
    opportunity_title: str,
    status_label: str,
    feedback: str | None = None,
    action_url: str | None = None,
) -> bool:
    """Tell a candidate that their application changed status."""
    safe_name = escape(recipient_name)
    safe_title = escape(opportunity_title)
    safe_status = escape(status_label)

    content = f"""
        <p>Hello {safe_name},</p>
        <p>Your application for <strong>{safe_title}</strong> is now <strong>{safe_status}</strong>.</p>
    """
    if feedback:
        content += f'<div class="info-box"><p>{escape(feedback)}</p></div>'

    html_content = _LAYOUT.format(
        heading="Application Update",
        content=content,
        action_url=_action_link(action_url),
    )
    return await send_email(
        to_email=to_email,
        subject=f"Your application for {opportunity_title} is now {status_label}",
        html_content=html_content,
    )


async def send_eligibility_result(
    to_email: str,
    recipient_name: str,
    opportunity_title: str,
    score: int,
    is_eligible: bool,
    missing_skills: list[str],
    action_url: str | None = None,
) -> bool:
    """Send the outcome of an on-demand eligibility check."""
    safe_name = escape(recipient_name)
    safe_title = escape(opportunity_title)
    verdict = "eligible" if is_eligible else "not yet eligible"

    content = f"""
        <p>Hello {safe_name},</p>
        <p>You are <strong>{verdict}</strong> for <strong>{safe_title}</strong> (score: {score}%).</p>
    """
    if missing_skills:
        items = "".join(f"<li>{escape(skill)}</li>" for skill in missing_skills)
        content += f'<div class="info-box"><p><strong>Skills to build:</strong></p><ul>{items}</ul></div>'

    html_content = _LAYOUT.format(
        heading="Eligibility Results",
        content=content,
        action_url=_action_link(action_url),
    )
    return await send_email(
        to_email=to_email,
        subject=f"Eligibility results for {opportunity_title}",
        html_content=html_content,
    )


async def send_new_application(
    to_email: str,
    organization_name: str,
    opportunity_title: str,
    candidate_name: str,
    action_url: str | None = None,
) -> bool:
    """Tell an organization that a candidate applied to one of its postings."""
    content = f"""
        <p>Hello {escape(organization_name)},</p>
        <p><strong>{escape(candidate_name)}</strong> applied for <strong>{escape(opportunity_title)}</strong>.</p>
        <p>Review the application from your organization dashboard.</p>
    """
    html_content = _LAYOUT.format(
        heading="New Application Received",
        content=content,
        action_url=_action_link(action_url),
    )
    return await send_email(
        to_email=to_email,
        subject=f"New application for {opportunity_title}",
        html_content=html_content,
    )
