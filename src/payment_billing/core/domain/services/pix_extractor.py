"""
Extração dos dados PIX de uma fatura Vindi.

O gateway não devolve os campos sempre no mesmo lugar; a busca segue:
campos diretos da cobrança → metadata → `last_transaction` (inclusive
`gateway_response_fields`) → URL de impressão.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

PRINT_URL = "https://app.vindi.com.br/customer/bills/{bill_id}/charge/{charge_id}/print"

_CODE_KEYS = ("pix_qr", "pix_emv", "pix_code", "pix_copia_e_cola")
_BASE64_KEYS = ("pix_qr_base64", "pix_qrcode_base64", "qr_code_base64")
_URL_KEYS = ("pix_qr_url", "pix_qrcode_url", "qr_code_url")

_GW_CODE_KEYS = ("qr_code_text", "emv", "pix_copia_e_cola", "qrcode_original_path", "copy_paste")
_GW_BASE64_KEYS = ("qr_code_base64", "qr_code_png_base64")
_GW_URL_KEYS = ("qr_code_url", "qr_code_image_url")


@dataclass(frozen=True)
class PixData:
    code: str | None = None
    qr_code_base64: str | None = None
    qr_code_url: str | None = None
    due_at: str | None = None

    @property
    def found(self) -> bool:
        return bool(self.code or self.qr_code_base64)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _first(source: dict | None, keys: tuple[str, ...]) -> Any:
    if not source:
        return None
    for k in keys:
        if source.get(k):
            return source[k]
    return None


def extract_pix_data(bill: dict[str, Any]) -> PixData:
    charges = bill.get("charges") or []
    charge = charges[0] if charges else None
    if not charge:
        return PixData(due_at=bill.get("due_at"))

    code = _first(charge, _CODE_KEYS)
    b64 = _first(charge, _BASE64_KEYS)
    url = _first(charge, _URL_KEYS)

    meta = charge.get("metadata") or {}
    code = code or _first(meta, _CODE_KEYS)
    b64 = b64 or _first(meta, _BASE64_KEYS)
    url = url or _first(meta, _URL_KEYS)

    lt = charge.get("last_transaction") or {}
    gw = lt.get("gateway_response_fields") or {}
    code = code or _first(lt, ("pix_qr", "pix_emv")) or _first(gw, _GW_CODE_KEYS)
    b64 = b64 or lt.get("pix_qr_base64") or _first(gw, _GW_BASE64_KEYS)
    url = url or lt.get("pix_qr_url") or _first(gw, _GW_URL_KEYS)

    if not url:
        url = charge.get("print_url")
    if not url and charge.get("id") and bill.get("id"):
        url = PRINT_URL.format(bill_id=bill["id"], charge_id=charge["id"])

    return PixData(
        code=code,
        qr_code_base64=b64,
        qr_code_url=url,
        due_at=charge.get("due_at") or bill.get("due_at"),
    )
