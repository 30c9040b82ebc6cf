"""Tests for configuration and settings."""

from config.settings import Settings, settings


def test_settings_has_expected_attributes():
    """Settings should have expected configuration attributes."""
    assert hasattr(settings, "database_path")
    assert hasattr(settings, "log_level")
    assert hasattr(settings, "latency_scale")
    assert hasattr(settings, "genesis_offset_minutes")


def test_default_failure_rates():
    """Job/candidate writes fail 10% of the time, reorders 20%."""
    rates = Settings(_env_file=None).failure_rates
    assert rates["create_job"] == 0.1
    assert rates["update_job"] == 0.1
    assert rates["reorder_job"] == 0.2
    assert rates["create_candidate"] == 0.1
    assert rates["update_candidate"] == 0.1


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("REORDER_JOB_FAILURE_RATE", "0.5")
    monkeypatch.setenv("CANDIDATE_PAGE_SIZE", "50")
    fresh = Settings(_env_file=None)
    assert fresh.failure_rates["reorder_job"] == 0.5
    assert fresh.candidate_page_size == 50
