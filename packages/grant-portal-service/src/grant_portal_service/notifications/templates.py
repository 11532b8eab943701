"""HTML bodies for outgoing email."""

from __future__ import annotations

from html import escape

BRAND_COLOR = "#204652"


def _layout(title: str, body: str, footer: str) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: {BRAND_COLOR}; padding: 20px; text-align: center;">
    <h1 style="color: white; margin: 0;">{escape(title)}</h1>
  </div>
  <div style="padding: 30px; background: #f9fafb;">
    {body}
  </div>
  <div style="padding: 20px; text-align: center; color: #6b7280; font-size: 14px;">
    <p>{escape(footer)}</p>
  </div>
</div>
"""


def applicant_invitation(sender_name: str, sign_up_url: str, contact_email: str) -> str:
    """Invitation for an organization to register and apply."""
    body = f"""
    <p style="font-size: 16px; color: #374151;">
      {escape(sender_name)} has invited you to register on the Grant Portal.
    </p>
    <p style="font-size: 16px; color: #374151;">
      Through the portal, your organization can submit Letters of Interest and
      full grant applications for funding consideration.
    </p>
    <ol style="color: #374151; padding-left: 20px;">
      <li>Create your account</li>
      <li>Complete your organization profile</li>
      <li>Submit a Letter of Interest when a grant cycle is open</li>
    </ol>
    <div style="text-align: center; margin-top: 30px;">
      <a href="{escape(sign_up_url, quote=True)}"
         style="background: {BRAND_COLOR}; color: white; padding: 14px 36px; text-decoration: none; border-radius: 6px; display: inline-block;">
        Create Your Account
      </a>
    </div>
    <p style="font-size: 14px; color: #6b7280; margin-top: 30px; text-align: center;">
      Questions? Contact us at {escape(contact_email)}
    </p>
"""
    return _layout("Grant Portal Invitation", body, "Grant Portal")
