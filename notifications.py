# notifications.py
import html
import logging
import os
import re
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from formatting import format_price_range
from pricing_engine import component_label

logger = logging.getLogger(__name__)

SENDGRID_API_KEY = os.environ.get("SENDGRID_API_KEY", "")
FROM_EMAIL = os.environ.get("FROM_EMAIL", "projects@servdubai.ae")
CONSTRUCTION_TEAM_EMAIL = os.environ.get("CONSTRUCTION_TEAM_EMAIL", "construction@servdubai.ae")

WHATSAPP_NUMBER = os.environ.get("WHATSAPP_NUMBER", "971552418446")
TEAM_WHATSAPP_NUMBER = os.environ.get("TEAM_WHATSAPP_NUMBER", "971552418447")
SUPPORT_PHONE = os.environ.get("SUPPORT_PHONE", "+971 55 241 8446")


def whatsapp_link(number: str, message: str) -> str:
    digits = re.sub(r"[^0-9]", "", number)
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"


def generic_contact_link(number: str = WHATSAPP_NUMBER) -> str:
    return whatsapp_link(
        number,
        "Hi ServDubai! I'd like a quote for a construction finishing project. "
        "Could you help me with pricing?",
    )


def _range_text(estimated: Mapping[str, Any]) -> str:
    return format_price_range(estimated["min"], estimated["max"], estimated.get("currency", "AED"))


# ----------------------------
# WhatsApp messages
# ----------------------------
def customer_whatsapp_link(project: Mapping[str, Any], number: str = WHATSAPP_NUMBER) -> str:
    contact = project["contactInfo"]
    location = project.get("projectLocation") or {}
    message = (
        "Hi ServDubai!\n\n"
        "I submitted a construction project assessment:\n\n"
        f"Project ID: {project['projectId']}\n"
        f"Project Type: {project['projectType']}\n"
        f"Building: {location.get('buildingName', '')}, {location.get('area', '')}\n"
        f"Estimate: {_range_text(project['estimatedQuote'])}\n"
        f"Contact: {contact['name']}\n"
        f"Phone: {contact['phone']}\n\n"
        "Looking forward to the site visit and detailed quote!"
    )
    return whatsapp_link(number, message)


def team_whatsapp_link(project: Mapping[str, Any], number: str = TEAM_WHATSAPP_NUMBER) -> str:
    contact = project["contactInfo"]
    message = (
        "NEW CONSTRUCTION PROJECT ASSESSMENT\n\n"
        f"Project ID: {project['projectId']}\n"
        f"Type: {project['projectType'].upper()}\n"
        f"Client: {contact['name']}\n"
        f"Phone: {contact['phone']}\n"
        f"Estimate: {_range_text(project['estimatedQuote'])}\n"
        f"Priority: {project['priority'].upper()}"
    )
    return whatsapp_link(number, message)


# ----------------------------
# Email
# ----------------------------
def requirements_summary(requirements: Mapping[str, Optional[Mapping[str, bool]]]) -> List[str]:
    lines: List[str] = []
    for project_type, reqs in requirements.items():
        picked = [component_label(k) for k, v in (reqs or {}).items() if v]
        if picked:
            lines.append(f"{project_type.upper()}: {', '.join(picked)}")
    return lines


def team_notification_html(project: Mapping[str, Any]) -> str:
    contact = project["contactInfo"]
    esc = html.escape
    reqs = "".join(f"<li>{esc(line)}</li>" for line in requirements_summary(project.get("requirements") or {}))
    recs = "".join(f"<li>{esc(r)}</li>" for r in project.get("recommendations") or [])
    specialist = (project.get("assignedSpecialist") or {}).get("name", "Unassigned")
    return f"""
    <p><b>{esc(project['priority'].upper())} PRIORITY</b> construction project assessment</p>
    <p><b>Project ID:</b> {esc(project['projectId'])}</p>
    <p><b>Type:</b> {esc(project['projectType'])} | <b>Size:</b> {esc(project.get('projectSize') or '')}</p>
    <p><b>Client:</b> {esc(contact['name'])} ({esc(contact.get('company') or 'Individual Client')})<br>
       <b>Phone:</b> {esc(contact['phone'])} | <b>Email:</b> {esc(contact['email'])}</p>
    <p><b>Estimated quote:</b> {esc(_range_text(project['estimatedQuote']))}</p>
    <p><b>Assigned specialist:</b> {esc(specialist)}</p>
    <ul>{reqs or '<li>No specific requirements specified</li>'}</ul>
    <ul>{recs}</ul>
    <p><a href="{esc(team_whatsapp_link(project))}">Team WhatsApp</a></p>
    """


def customer_confirmation_html(project: Mapping[str, Any]) -> str:
    esc = html.escape
    return f"""
    <h2>Construction Project Assessment Received!</h2>
    <p>Thank you for choosing ServDubai for your construction finishing needs.</p>
    <p><b>Project ID:</b> {esc(project['projectId'])}</p>
    <p><b>Estimated Quote:</b> {esc(_range_text(project['estimatedQuote']))}</p>
    <p>A free site visit will be scheduled and a detailed written quote provided within 24 hours of the visit.</p>
    <p>Need help now? Call {esc(SUPPORT_PHONE)} or
       <a href="{esc(customer_whatsapp_link(project))}">chat on WhatsApp</a>.</p>
    """


def send_email(to_email: str, subject: str, html_content: str) -> bool:
    # Allow running without email configured
    if not SENDGRID_API_KEY:
        logger.info("SENDGRID_API_KEY not set; skipping email to %s", to_email)
        return False

    msg = Mail(
        from_email=FROM_EMAIL,
        to_emails=to_email,
        subject=subject,
        html_content=html_content,
    )
    SendGridAPIClient(SENDGRID_API_KEY).send(msg)
    return True


def notify_assessment(project: Dict[str, Any]) -> None:
    """Team notification + customer confirmation. Failures are logged, not raised."""
    project_id = project.get("projectId")
    try:
        send_email(
            CONSTRUCTION_TEAM_EMAIL,
            f"{project['priority'].upper()}: {project['projectType']} Project - {project_id}",
            team_notification_html(project),
        )
    except Exception:
        logger.exception("failed to send team notification for %s", project_id)

    try:
        send_email(
            project["contactInfo"]["email"],
            f"Construction Project Assessment Confirmed - {project_id} | ServDubai",
            customer_confirmation_html(project),
        )
    except Exception:
        logger.exception("failed to send customer confirmation for %s", project_id)
