from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import urljoin

import requests
import structlog
from pydantic import BaseModel
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

T = TypeVar("T", bound=BaseModel)


class BaseAPIClient:
    """
    Utilitário HTTP para os provedores externos com:
      • retry exponencial (5xx), nunca em 401/403
      • timeout obrigatório em toda chamada
      • parse + validação Pydantic
    """

    def __init__(
        self,
        *,
        base_url: str,
        default_headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        retries: int = 3,
        auth: tuple[str, str] | None = None,
        retry_methods: frozenset[str] | None = None,
    ) -> None:
        self.log = structlog.get_logger(__name__).bind(component=type(self).__name__)
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout

        self.log.debug("Configurando cliente", base_url=self.base_url, timeout=timeout)

        # sessão + retry -----------------------------------------------------------------
        self.session = requests.Session()
        if default_headers:
            self.session.headers.update(default_headers)
        if auth:
            self.session.auth = auth

        retry_cfg = Retry(
            total=retries,
            backoff_factor=0.3,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=retry_methods or Retry.DEFAULT_ALLOWED_METHODS,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_cfg)
        for scheme in ("https://", "http://"):
            self.session.mount(scheme, adapter)

    # ---------------------------------------------------------------------- utils -----
    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return urljoin(self.base_url, path.lstrip("/"))

    @staticmethod
    def _json_or_text(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def _on_error(self, resp: requests.Response, body: Any) -> None:
        """Subclasses traduzem status >= 400 em exceções de domínio."""
        resp.raise_for_status()

    def _on_transport_error(self, exc: requests.RequestException) -> None:
        """Timeout ou conexão recusada. Padrão: propaga a exceção original."""

    # ---------------------------------------------------------------------- HTTP ------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Executa a chamada e devolve o corpo já decodificado (JSON ou texto)."""
        url = self._url(path)
        log = self.log.bind(method=method.upper(), url=url)
        log.debug("Enviando requisição", params=params)

        try:
            resp = self.session.request(
                method.upper(), url, params=params, json=json_body, headers=headers, timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.error("Falha de transporte", error=str(exc))
            self._on_transport_error(exc)
            raise
        body = self._json_or_text(resp)
        log.debug("Resposta recebida", status_code=resp.status_code)

        if resp.status_code >= 400:  # noqa: PLR2004
            log.warning("Resposta de erro", status_code=resp.status_code, body=body)
            self._on_error(resp, body)
        return body

    def _get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        response_model: type[T],
        headers: dict[str, str] | None = None,
    ) -> T:
        """GET validado por um modelo Pydantic."""
        payload = self._request("GET", path, params=params, headers=headers)
        try:
            return response_model.model_validate(payload)
        except Exception as exc:
            self.log.error("Falha ao validar resposta", path=path, error=str(exc), exc_info=True)
            raise

    def _post(
        self,
        path: str,
        *,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return self._request("POST", path, params=params, json_body=json_body, headers=headers)

    def _put(self, path: str, *, json_body: Any = None) -> Any:
        return self._request("PUT", path, json_body=json_body)

    def _delete(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return self._request("DELETE", path, params=params)
