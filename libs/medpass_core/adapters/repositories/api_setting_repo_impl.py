from medpass_core.core.domain.repositories.api_setting_repository import ApiSettingRepository
from plugins.django_interface.models import ApiSetting as ApiSettingModel


class ApiSettingRepoImpl(ApiSettingRepository):
    def get(self, name: str) -> str | None:
        m = ApiSettingModel.objects.filter(setting_name=name).first()
        return m.setting_value if m and m.setting_value else None

    def get_many(self, names: list[str]) -> dict[str, str]:
        qs = ApiSettingModel.objects.filter(setting_name__in=names).exclude(setting_value="")
        return {m.setting_name: m.setting_value for m in qs}

    def set(self, name: str, value: str) -> None:
        ApiSettingModel.objects.update_or_create(setting_name=name, defaults={"setting_value": value})
