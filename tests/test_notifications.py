import notifications
from notifications import (
    customer_whatsapp_link,
    generic_contact_link,
    notify_assessment,
    requirements_summary,
    send_email,
    team_notification_html,
    whatsapp_link,
)

PROJECT = {
    "projectId": "PROJ-1234",
    "projectType": "kitchen",
    "projectSize": "10 units",
    "contactInfo": {"name": "Sara Ali", "phone": "+971501234567", "email": "sara@example.com", "company": None},
    "projectLocation": {"buildingName": "Marina Heights", "area": "Dubai Marina"},
    "estimatedQuote": {"min": 17000, "max": 25500, "currency": "AED"},
    "requirements": {"kitchen": {"cabinetInstallation": True, "plumbingWork": False}},
    "recommendations": ["Site visit recommended for accurate quote and timeline"],
    "priority": "normal",
}


def test_whatsapp_link_strips_number_and_encodes_text():
    link = whatsapp_link("+971 55 241 8446", "Hi there & more")
    assert link == "https://wa.me/971552418446?text=Hi%20there%20%26%20more"


def test_generic_contact_link():
    assert generic_contact_link().startswith("https://wa.me/971552418446?text=Hi%20ServDubai")


def test_customer_link_mentions_project_and_estimate():
    link = customer_whatsapp_link(PROJECT)
    assert "PROJ-1234" in link
    assert "AED%2017%2C000%20-%20AED%2025%2C500" in link
    assert "Marina%20Heights" in link


def test_requirements_summary_lists_selected_only():
    summary = requirements_summary({"kitchen": {"cabinetInstallation": True, "plumbingWork": False}, "bathroom": None})
    assert summary == ["KITCHEN: cabinet installation"]


def test_team_html_escapes_user_input():
    project = dict(PROJECT, contactInfo=dict(PROJECT["contactInfo"], name="<script>x</script>"))
    body = team_notification_html(project)
    assert "<script>" not in body
    assert "&lt;script&gt;" in body
    assert "Individual Client" in body
    assert "KITCHEN: cabinet installation" in body


def test_send_email_skips_without_key(monkeypatch):
    monkeypatch.setattr(notifications, "SENDGRID_API_KEY", "")
    assert send_email("a@example.com", "subject", "<p>hi</p>") is False


def test_notify_assessment_sends_team_then_customer(monkeypatch):
    sent = []
    monkeypatch.setattr(notifications, "send_email", lambda to, subject, body: sent.append((to, subject)) or True)
    notify_assessment(PROJECT)
    assert sent[0] == (notifications.CONSTRUCTION_TEAM_EMAIL, "NORMAL: kitchen Project - PROJ-1234")
    assert sent[1][0] == "sara@example.com"


def test_notify_assessment_never_raises(monkeypatch):
    def boom(*args):
        raise RuntimeError("sendgrid down")

    monkeypatch.setattr(notifications, "send_email", boom)
    notify_assessment(PROJECT)


def test_customer_confirmation_sent_when_team_email_fails(monkeypatch):
    sent = []

    def flaky(to, subject, body):
        if to == notifications.CONSTRUCTION_TEAM_EMAIL:
            raise RuntimeError("sendgrid rejected team email")
        sent.append(to)
        return True

    monkeypatch.setattr(notifications, "send_email", flaky)
    notify_assessment(PROJECT)
    assert sent == ["sara@example.com"]


def test_team_html_names_assigned_specialist():
    project = dict(PROJECT, assignedSpecialist={"name": "Ahmed Al-Mansouri"})
    assert "Ahmed Al-Mansouri" in team_notification_html(project)
