from pydantic import BaseModel, Field


class ContractDTO(BaseModel):
    beneficiary_id: str
    document_id: str
    signature_link: str | None = None
    status: str = Field(default="pending_signature", pattern="^(pending_signature|signed|refused)$")


class ContractUpdateDTO(BaseModel):
    signature_link: str | None = None
    status: str | None = Field(default=None, pattern="^(pending_signature|signed|refused)$")
