import pytest

import config
from models.member import PremiumMember, RegularMember
from models.roster import Roster


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keeps every test away from the real data folder and ~/.gymroster_config."""
    monkeypatch.setattr(config, "BASE_FOLDER", None)
    monkeypatch.setattr(config, "MEMBERS_FILE", None)
    monkeypatch.setattr(config, "EXPORT_FOLDER", None)
    monkeypatch.setattr(config, "LOG_FILE", None)
    monkeypatch.setattr(config, "CONFIG_FILE", tmp_path / ".gymroster_config")
    monkeypatch.delenv(config.DATA_ENV_VAR, raising=False)


@pytest.fixture
def make_regular():
    def _make(member_id=1, name="John Doe", **kwargs):
        return RegularMember(
            member_id, name, kwargs.get("location", "Kathmandu"),
            kwargs.get("phone", "9812345678"), kwargs.get("email", "john@example.com"),
            kwargs.get("gender", "Male"), kwargs.get("dob", "1995-05-05"),
            kwargs.get("start_date", "2025-01-01"),
            referral_source=kwargs.get("referral_source", "Friend"),
        )
    return _make


@pytest.fixture
def make_premium():
    def _make(member_id=2, name="Jane Smith", **kwargs):
        return PremiumMember(
            member_id, name, kwargs.get("location", "Pokhara"),
            kwargs.get("phone", "9712345678"), kwargs.get("email", "jane@example.com"),
            kwargs.get("gender", "Female"), kwargs.get("dob", "1992-02-02"),
            kwargs.get("start_date", "2025-02-01"),
            personal_trainer=kwargs.get("personal_trainer", "Ram"),
        )
    return _make


@pytest.fixture
def roster():
    return Roster()


