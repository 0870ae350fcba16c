from __future__ import annotations

import json
import re

import httpx
import structlog

from medpass_core.core.domain.events.exceptions import ConfigurationError
from payment_billing.adapters.notifiers.base import BaseProvider
from payment_billing.core.domain.events.exceptions import ESignatureError

logger = structlog.get_logger(__name__)

AUTENTIQUE_GRAPHQL_URL = "https://api.autentique.com.br/v2/graphql"

CREATE_DOCUMENT_MUTATION = """
mutation CreateDocumentMutation($document: DocumentInput!, $signers: [SignerInput!]!, $file: Upload!) {
  createDocument(document: $document, signers: $signers, file: $file) {
    id
    name
    created_at
    signatures {
      public_id
      name
      email
      action { name }
      link { short_link }
    }
  }
}
"""


class AutentiqueAPIClient(BaseProvider):
    """
    Upload multipart (GraphQL multipart request) de contratos HTML para assinatura.
    """
    DEFAULT_TIMEOUT = 30

    def __init__(self, api_key: str | None, url: str = AUTENTIQUE_GRAPHQL_URL) -> None:
        super().__init__("autentique", "esignature")
        self._api_key = api_key
        self._url = url

    @staticmethod
    def _file_name(name: str) -> str:
        slug = re.sub(r"\s+", "_", re.sub(r"[^a-zA-Z0-9\s]", "", name)).strip("_")
        return f"contrato_medpass_{slug or 'beneficiario'}.html"

    def create_document(self, name: str, signer_email: str, html: str) -> tuple[str, str | None]:
        """Cria o documento e devolve `(document_id, signature_link)`."""
        if not self._api_key:
            raise ConfigurationError("AUTENTIQUE_API_KEY não configurada", setting="AUTENTIQUE_API_KEY")

        operations = {
            "query": CREATE_DOCUMENT_MUTATION,
            "variables": {
                "document": {"name": f"Contrato Adesão MedPass - {name}"},
                "signers": [
                    {
                        "email": signer_email,
                        "action": "SIGN",
                        "positions": [{"x": "50.00", "y": "88.00", "z": 1}],
                    }
                ],
                "file": None,
            },
        }
        try:
            resp = self._request(
                "POST",
                self._url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                data={"operations": json.dumps(operations), "map": json.dumps({"0": ["variables.file"]})},
                files={"0": (self._file_name(name), html.encode("utf-8"), "text/html")},
            )
        except httpx.HTTPError as exc:
            logger.error("autentique.http_error", error=str(exc))
            raise ESignatureError(f"Falha ao enviar contrato: {exc}") from exc

        body = resp.json()
        if body.get("errors"):
            logger.error("autentique.graphql_error", errors=body["errors"])
            raise ESignatureError(f"Erro Autentique: {json.dumps(body['errors'])}", errors=body["errors"])

        document = (body.get("data") or {}).get("createDocument") or {}
        if not document.get("id"):
            raise ESignatureError("Autentique não retornou o documento criado")

        signatures = document.get("signatures") or []
        link = ((signatures[0].get("link") or {}).get("short_link")) if signatures else None
        logger.info("autentique.document_created", document_id=document["id"], has_link=bool(link))
        return document["id"], link
