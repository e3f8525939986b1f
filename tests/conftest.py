"""Shared test fixtures for the CPF tool test suite."""

import random

import pytest

from cpf_cli.checksum import CPFEngine
from cpf_cli.config import Config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep telemetry state in a temp dir and never pick up a real PostHog key."""
    config_dir = tmp_path / "cpf-cli"
    monkeypatch.setenv("CPF_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("CPF_POSTHOG_API_KEY", raising=False)
    monkeypatch.delenv("CPF_LOG_LEVEL", raising=False)
    monkeypatch.setattr("cpf_cli.config._config", None)
    return config_dir


@pytest.fixture
def config(tmp_path):
    """Config with telemetry keyed but pointed at a temp dir."""
    return Config(config_dir=tmp_path / "telemetry", posthog_api_key="test-key")


@pytest.fixture
def seeded_engine():
    """Engine with a deterministic random source."""
    return CPFEngine(rng=random.Random(1234))


@pytest.fixture
def sample_lines():
    """Mixed batch: valid, repeated digits, valid with a zero check digit, blank."""
    return ["529.982.247-25", "111.111.111-11", "123.456.789-09", ""]


@pytest.fixture
def cpf_file(tmp_path, sample_lines):
    path = tmp_path / "cpfs.txt"
    path.write_text("\n".join(sample_lines) + "\n", encoding="utf-8")
    return path
