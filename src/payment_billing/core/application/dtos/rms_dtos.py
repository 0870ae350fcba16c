from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RmsBeneficiary(BaseModel):
    """Beneficiário como devolvido pela consulta do RMS."""
    model_config = ConfigDict(extra="allow")

    beneficiario: str | None = None
    cpf: str | None = None
    codigoExterno: str | None = None  # noqa: N815
    status: str | None = None
    plano: str | None = None
    tipoPlano: str | None = None  # noqa: N815
    dataAdesao: str | None = None  # noqa: N815
    dataCancelamento: str | None = None  # noqa: N815
    email: str | None = None
    celular: str | None = None
    uf: str | None = None


class RmsBeneficiaryPage(BaseModel):
    model_config = ConfigDict(extra="allow")

    offset: int = 0
    limit: int = 0
    count: int = 0
    beneficiarios: list[RmsBeneficiary] = Field(default_factory=list)


class RmsResponse(BaseModel):
    """Resposta de adesão / cancelamento / erro."""
    model_config = ConfigDict(extra="allow")

    codigo: int | None = None
    mensagem: str | None = None
