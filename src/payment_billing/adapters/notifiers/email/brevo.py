from __future__ import annotations

import httpx
import structlog

from medpass_core.core.domain.events.exceptions import ConfigurationError
from payment_billing.adapters.notifiers.base import BaseNotifier

logger = structlog.get_logger()


class BrevoEmail(BaseNotifier):
    """
    Envia e-mails HTML usando a API Brevo Transactional Emails v3.
    """

    def __init__(self, api_key: str | None, from_email: str | None):
        super().__init__("brevo", "email")
        self._api_key    = api_key
        self._from_email = from_email
        self._endpoint   = "https://api.brevo.com/v3/smtp/email"

    def send(self, recipients: list[str], subject: str, html: str) -> None:
        if not recipients:
            return
        if not self._api_key or not self._from_email:
            raise ConfigurationError("BREVO_API_KEY / DEFAULT_FROM_EMAIL não configurados")

        payload = {
            "sender":      {"email": self._from_email, "name": "MedPass"},
            "to":          [{"email": r} for r in recipients],
            "subject":     subject,
            "htmlContent": html,
        }
        headers = {
            "api-key":      self._api_key,
            "accept":       "application/json",
            "content-type": "application/json",
        }

        try:
            self._request("POST", self._endpoint, json=payload, headers=headers)
        except httpx.HTTPStatusError as exc:
            resp = exc.response
            detail = (
                resp.json()
                if resp.headers.get("content-type", "").startswith("application/json")
                else resp.text
            )
            logger.error("brevo.error", status=resp.status_code, detail=detail)
            raise

        logger.info(
            "email.sent",
            provider=self.provider,
            recipients=len(recipients),
            subject=subject,
        )
