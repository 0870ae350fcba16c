from __future__ import annotations

from django.db import IntegrityError, transaction
from django.db.models import F, Q

from medpass_core.adapters.repositories._orm import model_defaults, paginate
from medpass_core.core.application.cqrs import PagedResult
from medpass_core.core.domain.entities.beneficiary_entity import (
    BeneficiaryEntity,
    BeneficiaryStatus,
)
from medpass_core.core.domain.events.exceptions import DuplicateError, NotFoundError
from medpass_core.core.domain.repositories.beneficiary_repository import BeneficiaryRepository
from medpass_core.core.domain.services.validators import only_digits
from plugins.django_interface.models import Beneficiary as BeneficiaryModel


class BeneficiaryRepoImpl(BeneficiaryRepository):
    """
    Implementação Django do repositório de beneficiários.

    • CPF é sempre gravado apenas com dígitos (chave única)
    • `lock()` exige transação aberta (SELECT ... FOR UPDATE)
    """

    # ────────────────────────── consultas ──────────────────────────
    def find_by_id(self, beneficiary_id: str) -> BeneficiaryEntity | None:
        m = BeneficiaryModel.objects.filter(id=beneficiary_id).first()
        return BeneficiaryEntity.from_model(m) if m else None

    def find_by_cpf(self, cpf: str) -> BeneficiaryEntity | None:
        m = BeneficiaryModel.objects.filter(cpf=only_digits(cpf)).first()
        return BeneficiaryEntity.from_model(m) if m else None

    def find_by_vindi_subscription(self, vindi_subscription_id: int) -> BeneficiaryEntity | None:
        m = BeneficiaryModel.objects.filter(vindi_subscription_id=vindi_subscription_id).first()
        return BeneficiaryEntity.from_model(m) if m else None

    def find_by_document_id(self, document_id: str) -> BeneficiaryEntity | None:
        m = BeneficiaryModel.objects.filter(autentique_document_id=document_id).first()
        return BeneficiaryEntity.from_model(m) if m else None

    def lock(self, beneficiary_id: str) -> BeneficiaryEntity:
        try:
            m = BeneficiaryModel.objects.select_for_update().get(id=beneficiary_id)
        except BeneficiaryModel.DoesNotExist as exc:
            raise NotFoundError("Beneficiário não encontrado", beneficiary_id=str(beneficiary_id)) from exc
        return BeneficiaryEntity.from_model(m)

    # ─────────────────────── persistência ───────────────────────
    @transaction.atomic
    def save(self, entity: BeneficiaryEntity) -> BeneficiaryEntity:
        entity.cpf = only_digits(entity.cpf)
        if BeneficiaryModel.objects.filter(cpf=entity.cpf).exclude(id=entity.id).exists():
            raise DuplicateError("Já existe um beneficiário com este CPF", cpf=entity.cpf)
        try:
            with transaction.atomic():
                m, _ = BeneficiaryModel.objects.update_or_create(
                    id=entity.id, defaults=model_defaults(entity)
                )
        except IntegrityError as exc:
            raise DuplicateError("Já existe um beneficiário com este CPF", cpf=entity.cpf) from exc
        return BeneficiaryEntity.from_model(m)

    def update_fields(self, beneficiary_id: str, **fields) -> BeneficiaryEntity:
        updated = BeneficiaryModel.objects.filter(id=beneficiary_id).update(**fields)
        if not updated:
            raise NotFoundError("Beneficiário não encontrado", beneficiary_id=str(beneficiary_id))
        return BeneficiaryEntity.from_model(BeneficiaryModel.objects.get(id=beneficiary_id))

    def increment_registry_retry(self, beneficiary_id: str, **fields) -> None:
        BeneficiaryModel.objects.filter(id=beneficiary_id).update(
            registry_retry_count=F("registry_retry_count") + 1, **fields
        )

    def deactivate(self, beneficiary_id: str) -> None:
        BeneficiaryModel.objects.filter(id=beneficiary_id).update(status=BeneficiaryStatus.INACTIVE)

    # ─────────────────────── listagens ───────────────────────
    def list_registry_failed(self, max_retries: int) -> list[BeneficiaryEntity]:
        qs = BeneficiaryModel.objects.filter(
            status=BeneficiaryStatus.REGISTRY_FAILED,
            registry_retry_count__lt=max_retries,
        ).order_by("last_registry_attempt_at")
        return [BeneficiaryEntity.from_model(m) for m in qs]

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[BeneficiaryEntity]:
        """
        Filtros aceitos: campos diretos do modelo + `search` (nome, CPF ou e-mail).
        """
        filtros = dict(filtros or {})
        search = (filtros.pop("search", "") or "").strip()
        qs = BeneficiaryModel.objects.filter(**filtros)
        if search:
            qs = qs.filter(
                Q(name__icontains=search)
                | Q(cpf__icontains=only_digits(search) or search)
                | Q(email__icontains=search)
            )
        return paginate(qs.order_by("-created_at"), BeneficiaryEntity, page, page_size)
