import time
from abc import ABC, abstractmethod
from http import HTTPStatus

import backoff
import httpx
import structlog

from payment_billing.adapters.observability.metrics import (
    PROVIDER_FAILURE,
    PROVIDER_LATENCY,
    PROVIDER_SUCCESS,
)

logger = structlog.get_logger()


def _is_client_error(exc: Exception) -> bool:
    # 4xx não melhora com nova tentativa
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code < HTTPStatus.INTERNAL_SERVER_ERROR
    return False


class BaseProvider(ABC):
    """
    Provedor HTTP (httpx) com retry `backoff` e métricas por
    (provider, channel). Base dos notifiers e do cliente de assinatura.
    Só timeouts, falhas de rede e 5xx são repetidos.
    """
    DEFAULT_TIMEOUT = 10

    def __init__(self, provider: str, channel: str, timeout: float | None = None) -> None:
        self.provider = provider
        self.channel  = channel
        self.timeout  = timeout or self.DEFAULT_TIMEOUT

    @backoff.on_exception(
        backoff.expo,
        httpx.HTTPError,
        max_tries=3,
        jitter=None,
        giveup=_is_client_error,
    )
    def _request(self, method: str, url: str, **kw) -> httpx.Response:
        started = time.perf_counter()
        try:
            resp = httpx.request(method, url, timeout=self.timeout, **kw)
            if resp.status_code >= HTTPStatus.BAD_REQUEST:
                raise httpx.HTTPStatusError(
                    f"{self.provider} respondeu {resp.status_code}",
                    request=resp.request,
                    response=resp,
                )
        except httpx.HTTPError as exc:
            PROVIDER_FAILURE.labels(self.provider, self.channel).inc()
            logger.warning(
                "provider.request_failed",
                provider=self.provider,
                channel=self.channel,
                method=method,
                error=str(exc),
            )
            raise
        finally:
            PROVIDER_LATENCY.labels(self.provider, self.channel).observe(time.perf_counter() - started)

        PROVIDER_SUCCESS.labels(self.provider, self.channel).inc()
        return resp


class BaseNotifier(BaseProvider):
    @abstractmethod
    def send(self, *args, **kwargs) -> None:
        """Envia uma notificação. Assinatura varia por canal."""
        ...
