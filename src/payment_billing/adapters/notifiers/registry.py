"""
Fábrica de notifiers.
"""
from functools import lru_cache

from django.conf import settings

from payment_billing.adapters.notifiers.base import BaseNotifier
from payment_billing.adapters.notifiers.email.brevo import BrevoEmail


@lru_cache
def get_email_notifier() -> BaseNotifier:
    return BrevoEmail(
        api_key=settings.BREVO_API_KEY,
        from_email=settings.DEFAULT_FROM_EMAIL,
    )
