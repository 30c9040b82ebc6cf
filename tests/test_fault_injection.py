"""Tests for simulated latency and failure strategies."""

import random

import pytest

from config.settings import Settings
from core.exceptions import ConfigurationError
from services.fault_injection import AlwaysFail, FaultDecision, NoFaults, RandomFaults, ScriptedFaults


def test_zero_and_full_failure_rates():
    never = RandomFaults({"create_job": 0.0}, latency_enabled=False)
    always = RandomFaults({"create_job": 1.0}, latency_enabled=False)
    for _ in range(100):
        assert never("create_job").fail is False
        assert always("create_job").fail is True


def test_endpoints_without_a_rate_never_fail():
    faults = RandomFaults({"reorder_job": 1.0}, latency_enabled=False)
    assert faults("list_jobs") == FaultDecision(delay=0.0, fail=False)


def test_seeded_failures_are_reproducible():
    first = RandomFaults({"reorder_job": 0.2}, latency_enabled=False, rng=random.Random(7))
    second = RandomFaults({"reorder_job": 0.2}, latency_enabled=False, rng=random.Random(7))
    assert [first("reorder_job").fail for _ in range(50)] == [second("reorder_job").fail for _ in range(50)]


def test_failure_rate_is_roughly_honoured():
    faults = RandomFaults({"reorder_job": 0.2}, latency_enabled=False, rng=random.Random(1))
    failures = sum(faults("reorder_job").fail for _ in range(5000))
    assert 800 < failures < 1200


def test_fixed_and_ranged_latency():
    faults = RandomFaults(rng=random.Random(3))
    assert faults.delay_for("reorder_job") == pytest.approx(0.8)
    assert faults.delay_for("unknown_endpoint") == 0.0
    for _ in range(20):
        assert 0.2 <= faults.delay_for("create_job") <= 1.2


def test_latency_scale_and_disable():
    assert RandomFaults(latency_scale=0.5).delay_for("submit_assessment") == pytest.approx(0.5)
    assert RandomFaults(latency_enabled=False).delay_for("submit_assessment") == 0.0


def test_invalid_configuration_is_rejected():
    with pytest.raises(ConfigurationError):
        RandomFaults({"create_job": 1.5})
    with pytest.raises(ConfigurationError):
        RandomFaults(latency_scale=-1)


def test_from_settings():
    settings = Settings(_env_file=None, latency_enabled=False, random_seed=5, update_job_failure_rate=1.0)
    faults = RandomFaults.from_settings(settings)
    assert faults.failure_rates["update_job"] == 1.0
    assert faults("update_job") == FaultDecision(delay=0.0, fail=True)


def test_deterministic_strategies():
    assert NoFaults()("create_job") == FaultDecision(0.0, False)

    only_reorder = AlwaysFail(["reorder_job"])
    assert only_reorder("reorder_job").fail
    assert not only_reorder("create_job").fail
    assert AlwaysFail()("get_job").fail

    scripted = ScriptedFaults([True, False, True])
    assert [scripted("x").fail for _ in range(5)] == [True, False, True, False, False]
