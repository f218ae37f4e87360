"""
Outbound email delivery.

A single ``Mailer`` is created when the application starts and shared by
every request through the ``get_mailer`` dependency.
"""
import html
import logging
from typing import List

from fastapi import Request
from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType

from ..config import Settings

# Set up logging
logger = logging.getLogger(__name__)

class Mailer:
    """
    Sends HTML emails through fastapi-mail.

    ``send`` reports the outcome instead of raising, callers decide whether a
    failed delivery is fatal for them.
    """
    def __init__(self, config: ConnectionConfig):
        self.config = config
        self.client = FastMail(config)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Mailer":
        config = ConnectionConfig(
            MAIL_USERNAME=settings.mail_username,
            MAIL_PASSWORD=settings.mail_password,
            MAIL_FROM=settings.mail_from,
            MAIL_FROM_NAME=settings.mail_from_name,
            MAIL_PORT=settings.mail_port,
            MAIL_SERVER=settings.mail_server,
            MAIL_STARTTLS=settings.mail_starttls,
            MAIL_SSL_TLS=settings.mail_ssl_tls,
            USE_CREDENTIALS=settings.use_credentials,
            VALIDATE_CERTS=settings.validate_certs,
            SUPPRESS_SEND=1 if settings.suppress_send else 0
        )
        return cls(config)

    async def send(self, to: str, subject: str, html_body: str) -> bool:
        """
        Send an HTML email to a single recipient.
        
        Args:
            to: Recipient address
            subject: Email subject
            html_body: HTML content
            
        Returns:
            bool: True if the message was handed to the SMTP server
        """
        message = MessageSchema(
            subject=subject,
            recipients=[to],
            body=html_body,
            subtype=MessageType.html
        )
        try:
            await self.client.send_message(message)
        except Exception as e:
            logger.error(f"Failed to send email '{subject}' to {to}: {str(e)}")
            return False
        
        logger.info(f"Email '{subject}' sent to {to}")
        return True


def get_mailer(request: Request) -> Mailer:
    """
    Mailer dependency - Returns the application-wide mailer.
    """
    return request.app.state.mailer


def render_email(title: str, paragraphs: List[str], link: str = None, link_text: str = None) -> str:
    """
    Render the shared HTML layout used by every email the clinic sends.

    Text is escaped, names and service labels come from user input.
    """
    title = html.escape(title)
    body = "\n".join(f"<p>{html.escape(paragraph)}</p>" for paragraph in paragraphs)
    button = ""
    if link:
        button = f'<p><a href="{html.escape(link)}">{html.escape(link_text or link)}</a></p>'
    return f"""
    <html>
        <head><title>{title}</title></head>
        <body style="font-family: Arial, sans-serif; line-height: 1.6;">
            <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2>{title}</h2>
                {body}
                {button}
            </div>
        </body>
    </html>
    """
