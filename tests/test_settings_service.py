"""Tests for app.services.settings (feature flags and automation rules)."""
import pytest
from unittest.mock import MagicMock, Mock

from app.models.admin_setting import AdminSetting, AdminSettingHistory
from app.models.plan import PlanType
from app.services import settings as feature_settings


def _db(rows=None, first=None):
    db = MagicMock()
    db.query.return_value = db
    db.filter.return_value = db
    db.all.return_value = rows or []
    db.first.return_value = first
    return db


def test_flags_default_to_enabled():
    flags = feature_settings.get_feature_flags(_db())
    assert set(flags) == set(feature_settings.FEATURE_FLAGS)
    assert all(flags.values())


def test_stored_value_overrides_default():
    row = AdminSetting(setting_key="tiktok_enabled", setting_value=False)
    flags = feature_settings.get_feature_flags(_db(rows=[row]))
    assert flags["tiktok_enabled"] is False
    assert flags["models_enabled"] is True


def test_automation_defaults():
    values = feature_settings.get_automation_settings(_db())
    assert values["automation_module_enabled"] is True
    assert values[feature_settings.automation_plan_key(PlanType.PRO)] is False
    assert "automation_agency_plan_access" in values


def test_is_enabled_uses_row_or_default():
    assert feature_settings.is_enabled(_db(), "funnels_enabled") is True
    row = AdminSetting(setting_key="funnels_enabled", setting_value=False)
    assert feature_settings.is_enabled(_db(first=row), "funnels_enabled") is False


class TestUpdateSetting:
    def test_creates_row_and_history(self):
        db = _db()
        user = Mock(id=3)
        row = feature_settings.update_setting(db, "tiktok_enabled", False, user)

        added = [c.args[0] for c in db.add.call_args_list]
        history = next(a for a in added if isinstance(a, AdminSettingHistory))
        assert row.setting_value is False
        assert row.updated_by == 3
        assert history.old_value is None
        assert history.new_value is False
        assert history.changed_by == 3
        db.commit.assert_called_once()

    def test_updates_existing_row(self):
        existing = AdminSetting(setting_key="tiktok_enabled", setting_value=False)
        db = _db(first=existing)
        row = feature_settings.update_setting(db, "tiktok_enabled", True, Mock(id=3))

        assert row is existing
        assert existing.setting_value is True
        history = db.add.call_args.args[0]
        assert (history.old_value, history.new_value) == (False, True)

    def test_unknown_key(self):
        db = _db()
        with pytest.raises(ValueError):
            feature_settings.update_setting(db, "does_not_exist", True)
        db.commit.assert_not_called()
