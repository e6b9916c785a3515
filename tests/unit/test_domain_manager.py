"""Tests for DomainManager bookkeeping, health, unload and reload."""

import pytest

from agentplatform.domains import DomainHealth, DomainLoader, DomainManager
from agentplatform.utils.error_handler import ConfigValidationError, DomainNotFoundError

from tests.conftest import DEVELOPER_YAML, QA_YAML, write_domain


@pytest.fixture
def manager(agent_registry, formatter_registry):
    return DomainManager(DomainLoader(agent_registry, formatter_registry), agent_registry)


def test_load_records_metadata(tmp_path, manager, stub_provider):
    domain = write_domain(tmp_path, "engineering", agents={"dev.yaml": DEVELOPER_YAML, "qa.yaml": QA_YAML})

    assert manager.load_domain(domain, stub_provider) == 2

    metadata = manager.get_domain_metadata("engineering")
    assert metadata.agent_count == 2
    assert metadata.agent_names == ("Developer", "QA")
    assert metadata.enabled is True
    assert metadata.path == str(domain)
    assert metadata.display_info() == "engineering v1.0.0 (2 agents)"
    assert manager.is_domain_loaded("engineering")
    assert manager.loaded_domains() == ["engineering"]
    assert manager.domain_count() == 1
    assert manager.total_agent_count() == 2


def test_failed_load_records_nothing(tmp_path, manager, stub_provider):
    domain = write_domain(tmp_path, "broken", manifest="description: no name\n")

    with pytest.raises(ConfigValidationError):
        manager.load_domain(domain, stub_provider)
    assert manager.domain_count() == 0


def test_health_states(tmp_path, manager, stub_provider):
    manager.load_domain(write_domain(tmp_path, "healthy", agents={"qa.yaml": QA_YAML}), stub_provider)
    manager.load_domain(write_domain(tmp_path, "empty"), stub_provider)
    manager.load_domain(
        write_domain(tmp_path, "paused", manifest="name: paused\nenabled: false\n", agents={"qa.yaml": QA_YAML}),
        stub_provider,
    )

    assert manager.get_domain_health("healthy") is DomainHealth.HEALTHY
    assert manager.get_domain_health("empty") is DomainHealth.NO_AGENTS
    assert manager.get_domain_health("paused") is DomainHealth.DISABLED
    assert manager.get_domain_health("unknown") is DomainHealth.NOT_LOADED
    assert DomainHealth.HEALTHY.value == "HEALTHY"


def test_load_all_domains(tmp_path, manager, stub_provider):
    write_domain(tmp_path, "a", agents={"dev.yaml": DEVELOPER_YAML})
    write_domain(tmp_path, "b", agents={"qa.yaml": QA_YAML})
    write_domain(tmp_path, "c", manifest="name: [broken\n")

    assert manager.load_all_domains(tmp_path, stub_provider) == 2
    assert manager.loaded_domains() == ["a", "b"]
    assert set(manager.all_domain_metadata()) == {"a", "b"}


def test_unload_removes_owned_agents(tmp_path, manager, agent_registry, stub_provider):
    manager.load_domain(write_domain(tmp_path, "a", agents={"dev.yaml": DEVELOPER_YAML}), stub_provider)
    manager.load_domain(write_domain(tmp_path, "b", agents={"qa.yaml": QA_YAML}), stub_provider)

    assert manager.unload_domain("a") == 1

    assert not manager.is_domain_loaded("a")
    assert agent_registry.list_names() == ["QA"]
    assert manager.get_domain_health("a") is DomainHealth.NOT_LOADED


def test_unload_keeps_agent_replaced_by_another_domain(tmp_path, manager, agent_registry, stub_provider):
    manager.load_domain(write_domain(tmp_path, "a", agents={"qa.yaml": QA_YAML}), stub_provider)
    manager.load_domain(
        write_domain(tmp_path, "b", agents={"qa.yaml": QA_YAML.replace("Tests code", "From b")}),
        stub_provider,
    )

    assert manager.unload_domain("a") == 0
    assert agent_registry.get("QA").description == "From b"


def test_unload_unknown_domain(manager):
    with pytest.raises(DomainNotFoundError):
        manager.unload_domain("nope")


def test_reload_picks_up_changes(tmp_path, manager, agent_registry, stub_provider):
    domain = write_domain(tmp_path, "a", agents={"qa.yaml": QA_YAML})
    manager.load_domain(domain, stub_provider)

    (domain / "agents" / "dev.yaml").write_text(DEVELOPER_YAML)
    (domain / "agents" / "qa.yaml").unlink()

    assert manager.reload_domain("a", stub_provider) == 1
    assert agent_registry.list_names() == ["Developer"]
    assert manager.get_domain_metadata("a").agent_names == ("Developer",)


def test_reload_unknown_domain(manager, stub_provider):
    with pytest.raises(DomainNotFoundError):
        manager.reload_domain("nope", stub_provider)


def test_discover_domains(tmp_path, manager):
    write_domain(tmp_path, "a")
    write_domain(tmp_path, "b")
    (tmp_path / "not-a-domain").mkdir()
    (tmp_path / "file.txt").write_text("x")

    discovered = manager.discover_domains(tmp_path)

    assert discovered == [str(tmp_path / "a"), str(tmp_path / "b")]


def test_discover_missing_base(tmp_path, manager):
    assert manager.discover_domains(tmp_path / "missing") == []


def test_same_domain_name_from_two_directories(tmp_path, manager, agent_registry, stub_provider):
    first = write_domain(tmp_path, "first", manifest="name: shared\n", agents={"dev.yaml": DEVELOPER_YAML})
    second = write_domain(tmp_path, "second", manifest="name: shared\n", agents={"qa.yaml": QA_YAML})

    manager.load_domain(first, stub_provider)
    manager.load_domain(second, stub_provider)

    assert manager.get_domain_metadata("shared").path == str(second)
    assert manager.unload_domain("shared") == 2
    assert agent_registry.count() == 0
