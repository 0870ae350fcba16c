from django.db.models.signals import pre_save
from django.dispatch import receiver

from medpass_core.adapters.utils.phone_utils import normalize_phone
from medpass_core.core.domain.services.validators import only_digits

from .models import Beneficiary, Unit


@receiver(pre_save, sender=Beneficiary)
def normalize_beneficiary_before_save(sender, instance: Beneficiary, **kwargs):
    instance.cpf = only_digits(instance.cpf)
    if instance.cep:
        instance.cep = only_digits(instance.cep)
    if instance.phone:
        norm = normalize_phone(instance.phone)
        if not norm:
            raise ValueError(f"Telefone inválido: {instance.phone!r}")
        instance.phone = norm


@receiver(pre_save, sender=Unit)
def normalize_unit_before_save(sender, instance: Unit, **kwargs):
    if instance.cnpj:
        instance.cnpj = only_digits(instance.cnpj)
    if instance.cep:
        instance.cep = only_digits(instance.cep)
