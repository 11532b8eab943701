"""Transactional email over the email provider's HTTP API.

Sending is fire-and-forget from the caller's point of view: failures are
logged and reported in the returned ``EmailResult``, never raised and never
retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

import httpx
import structlog
from fastapi import Depends

from grant_portal_service.settings import settings

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EmailResult:
    success: bool
    id: str | None = None
    error: str | None = None


class EmailService:
    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        sender: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._api_url = (api_url or settings.email_api_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.email_api_key
        self._sender = sender or settings.email_from
        self._transport = transport
        self._timeout = timeout

    async def send(
        self,
        to: str | list[str],
        subject: str,
        html: str,
        reply_to: str | None = None,
    ) -> EmailResult:
        recipients = to if isinstance(to, list) else [to]
        if not self._api_key:
            log.warning("email_not_configured", to=recipients, subject=subject)
            return EmailResult(success=False, error="Email not configured")

        payload: dict[str, Any] = {
            "from": self._sender,
            "to": recipients,
            "subject": subject,
            "html": html,
        }
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(
                    f"{self._api_url}/emails",
                    json=payload,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
        except httpx.HTTPError as exc:
            log.error("email_send_error", to=recipients, subject=subject, error=str(exc))
            return EmailResult(success=False, error="Failed to send email")

        if resp.status_code >= 400:
            message = _error_message(resp)
            log.error("email_send_failed", to=recipients, status=resp.status_code, error=message)
            return EmailResult(success=False, error=message)

        email_id = _email_id(resp)
        log.info("email_sent", id=email_id, to=recipients)
        return EmailResult(success=True, id=email_id)


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"Email provider returned {resp.status_code}"
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return f"Email provider returned {resp.status_code}"


def _email_id(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body.get("id") if isinstance(body, dict) else None


def get_email_service() -> EmailService:
    return EmailService()


EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]
