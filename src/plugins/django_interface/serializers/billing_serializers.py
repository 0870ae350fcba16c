"""Entrada das funções de cobrança que não têm DTO pydantic próprio."""
from rest_framework import serializers


class CancelBeneficiaryRequestSerializer(serializers.Serializer):
    beneficiary_id = serializers.UUIDField()
    reason         = serializers.CharField(allow_blank=True)
    notes          = serializers.CharField(allow_blank=True, allow_null=True, required=False)


class CreateContractRequestSerializer(serializers.Serializer):
    beneficiary_id = serializers.UUIDField()


class RefreshPaymentStatusesRequestSerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=500, default=100)


class RegistryBeneficiariesRequestSerializer(serializers.Serializer):
    start  = serializers.DateField()
    end    = serializers.DateField()
    offset = serializers.IntegerField(min_value=0, default=0)
    cpf    = serializers.CharField(allow_blank=True, allow_null=True, required=False)

    def validate(self, attrs):
        if attrs["start"] > attrs["end"]:
            raise serializers.ValidationError("Data inicial maior que a final.")
        return attrs
