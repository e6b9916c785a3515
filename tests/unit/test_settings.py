"""Tests for environment-bound settings."""

from pathlib import Path

from agentplatform.config import Settings, get_project_root, resolve_project_path
from agentplatform.config.settings import DomainSettings, ExecutorSettings, ModelSettings


def test_defaults(monkeypatch):
    for name in ["MODEL_ID", "MODEL_NAME", "AGENTS_DOMAINS_PATH", "DOMAINS_PATH", "EXECUTOR_TASK_TIMEOUT"]:
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.executor.task_timeout_seconds == 300
    assert settings.executor.shutdown_timeout_seconds == 30
    assert settings.domains.plugin_enabled is True
    assert settings.domains.manifest_file == "domain.yaml"


def test_model_aliases(monkeypatch):
    monkeypatch.delenv("MODEL_ID", raising=False)
    monkeypatch.setenv("MODEL_NAME", "my-model")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    settings = ModelSettings(_env_file=None)

    assert settings.model == "my-model"
    assert settings.api_key == "sk-test"


def test_domain_env_overrides(monkeypatch):
    monkeypatch.setenv("AGENTS_DOMAINS_PATH", "/srv/domains")
    monkeypatch.setenv("AGENTS_DOMAIN_PLUGIN_ENABLED", "false")

    settings = DomainSettings(_env_file=None)

    assert settings.domains_path == "/srv/domains"
    assert settings.plugin_enabled is False


def test_executor_env_overrides(monkeypatch):
    monkeypatch.setenv("EXECUTOR_TASK_TIMEOUT", "12.5")

    settings = ExecutorSettings(_env_file=None)

    assert settings.task_timeout_seconds == 12.5


def test_project_paths():
    root = get_project_root()

    assert (root / "agentplatform").is_dir()
    assert resolve_project_path("domains") == root / "domains"
    assert resolve_project_path(Path("/abs/path")) == Path("/abs/path")
