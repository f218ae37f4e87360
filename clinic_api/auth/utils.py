"""
Authentication email helpers.
"""
from ..config import settings
from ..core.mail import Mailer, render_email

def build_frontend_link(action: str, token: str) -> str:
    """Links in emails point at ``<frontend>/auth/<action>/<token>``."""
    return f"{settings.frontend_url.rstrip('/')}/auth/{action}/{token}"

async def send_verification_email(mailer: Mailer, email: str, name: str, token: str) -> bool:
    link = build_frontend_link("confirm-account", token)
    html = render_email(
        "Confirm your account",
        [
            f"Hello {name}, confirm your account.",
            "Your account is almost ready, you only need to confirm it using the link below.",
            "If you did not create this account, you can ignore this message.",
        ],
        link=link,
        link_text="Confirm account"
    )
    return await mailer.send(email, "Confirm your account", html)

async def send_password_reset_email(mailer: Mailer, email: str, name: str, token: str) -> bool:
    link = build_frontend_link("forgot-password", token)
    html = render_email(
        "Reset your password",
        [
            f"Hello {name}, you requested to reset your password.",
            f"The link below is valid for {settings.password_reset_token_expire_minutes} minutes.",
            "If you did not request this, you can ignore this message.",
        ],
        link=link,
        link_text="Reset password"
    )
    return await mailer.send(email, "Reset your password", html)
