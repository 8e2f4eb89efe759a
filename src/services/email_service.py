"""
E-mail service: ad-hoc messages and workspace invitations.
"""

import logging
from html import escape

from src.core.config import settings
from src.integrations.smtp import SmtpMailer
from src.schemas.integrations import SendEmailResult

logger = logging.getLogger(__name__)


class EmailService:
    """
    Compose and send e-mail through the SMTP mailer.

    Usage:
        result = await EmailService().send(to, subject, body)
    """

    def __init__(self, mailer: SmtpMailer | None = None):
        self.mailer = mailer or SmtpMailer()

    async def send(
        self,
        to: str,
        subject: str,
        body: str,
        html: str | None = None,
    ) -> SendEmailResult:
        """Send one message. Delivery problems are reported, not raised."""
        return await self.mailer.send(to, subject, body, html)

    @staticmethod
    def invitation_link(token: str) -> str:
        return f"{settings.frontend_url.rstrip('/')}/invitation/{token}"

    async def send_invitation(
        self,
        to: str,
        token: str,
        workspace_name: str,
        inviter_name: str,
        role: str,
    ) -> SendEmailResult:
        """
        Send the invitation link for a pending membership.

        Args:
            to: Invited e-mail
            token: Member id of the pending invitation
            workspace_name: Workspace being joined
            inviter_name: Display name (or e-mail) of the inviter
            role: Role granted on acceptance
        """
        link = self.invitation_link(token)
        subject = f"{inviter_name} invited you to {workspace_name} on Ascent"
        body = (
            f"{inviter_name} invited you to join the workspace \"{workspace_name}\" "
            f"as {role}.\n\n"
            f"Open this link and sign in with Google using {to} to accept:\n{link}\n"
        )
        html = (
            f"<p><strong>{escape(inviter_name)}</strong> invited you to join the workspace "
            f"<strong>{escape(workspace_name)}</strong> as {escape(role)}.</p>"
            f'<p><a href="{link}">Accept the invitation</a></p>'
            f"<p>Sign in with Google using {escape(to)} to accept.</p>"
        )
        return await self.send(to, subject, body, html)
