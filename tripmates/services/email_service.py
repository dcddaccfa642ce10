import logging
import smtplib
from email.message import EmailMessage

from tripmates.core.config import get_settings, get_smtp_ctx

logger = logging.getLogger(__name__)


def send_trip_invitation(
    to_email: str,
    link: str,
    trip_title: str,
    inviter_name: str | None = None,
) -> None:
    settings = get_settings()
    if not settings.smtp_configured:
        logger.warning(
            "SMTP is not configured; invitation for %s was not emailed", to_email
        )
        return

    who = inviter_name or "A fellow traveller"
    msg = EmailMessage()
    msg["Subject"] = f"You're invited to plan {trip_title}"
    msg["From"] = settings.mail_from
    msg["To"] = to_email
    msg.set_content(
        f"Hi,\n\n{who} invited you to plan the trip {trip_title!r}. "
        f"Accept your invitation here: {link}\n"
    )
    msg.add_alternative(
        f"""<p>Hi,</p>
            <p>{who} invited you to plan <b>{trip_title}</b>.</p>
            <p>Follow this link to join: <a href=\"{link}\">{link}</a></p>
            <p>If you did not expect this email, you can safely ignore it.</p>""",
        subtype="html",
    )
    ctx = get_smtp_ctx()
    with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=20) as smtp:
        smtp.ehlo()
        smtp.starttls(context=ctx)
        smtp.ehlo()
        if settings.smtp_username and settings.smtp_password:
            smtp.login(settings.smtp_username, settings.smtp_password)
        smtp.send_message(msg)
    logger.info("Sent trip invitation to %s", to_email)
