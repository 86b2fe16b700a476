from __future__ import annotations

import pytest

from app.config import CRMImportSettings, get_crm_import_settings


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_crm_import_settings.cache_clear()
    yield
    get_crm_import_settings.cache_clear()


class TestCRMImportSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in (
            "CRM_IMPORT_MAX_ROW_MESSAGES",
            "CRM_IMPORT_LOG_ROW_MESSAGES",
            "CRM_IMPORT_DEFAULT_SERVICE_TYPE",
            "CRM_IMPORT_DEFAULT_LEAD_SOURCE",
        ):
            monkeypatch.delenv(name, raising=False)

        assert get_crm_import_settings() == CRMImportSettings()

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CRM_IMPORT_MAX_ROW_MESSAGES", "25")
        monkeypatch.setenv("CRM_IMPORT_LOG_ROW_MESSAGES", "yes")
        monkeypatch.setenv("CRM_IMPORT_DEFAULT_SERVICE_TYPE", "Photography")
        monkeypatch.setenv("CRM_IMPORT_DEFAULT_LEAD_SOURCE", "  ")

        settings = get_crm_import_settings()

        assert settings.max_row_messages == 25
        assert settings.log_row_messages is True
        assert settings.default_service_type_name == "Photography"
        assert settings.default_lead_source_name == "Direct"

    @pytest.mark.parametrize("raw", ["many", "0", "-3"])
    def test_invalid_or_non_positive_cap_is_clamped(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv("CRM_IMPORT_MAX_ROW_MESSAGES", raw)

        expected = 5000 if raw == "many" else 1
        assert get_crm_import_settings().max_row_messages == expected
