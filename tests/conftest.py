"""Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and ensures proper test environment setup.
"""

import sys
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional

import pytest

# Ensure project root is in PYTHONPATH for imports to work
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from agentplatform.agents import AgentRegistry, ConfigurableAgent  # noqa: E402
from agentplatform.formatters import OutputFormatterRegistry  # noqa: E402
from agentplatform.models import AgentConfig, AgentInfo, Completion, TaskRequest, TaskResult  # noqa: E402


class StubCompletionProvider:
    """In-memory completion provider.

    Replies with `reply` (or `reply_fn(prompt)`), optionally sleeping first, and
    records every prompt it receives.
    """

    def __init__(
        self,
        reply: str = "OK",
        reply_fn: Optional[Callable[[str], Optional[Completion]]] = None,
        delay: float = 0.0,
        error: Optional[Exception] = None,
        input_tokens: int = 10,
        output_tokens: int = 5,
        estimated_cost: float = 0.001,
    ) -> None:
        self.provider_name = "stub"
        self.model = "stub-model"
        self.reply = reply
        self.reply_fn = reply_fn
        self.delay = delay
        self.error = error
        self.input_tokens = input_tokens
        self.output_tokens = output_tokens
        self.estimated_cost = estimated_cost
        self.prompts: List[str] = []
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    def generate(self, prompt: str, temperature: float, max_tokens: int) -> Optional[Completion]:
        with self._lock:
            self.prompts.append(prompt)
            self.calls.append((prompt, temperature, max_tokens))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.reply_fn is not None:
            return self.reply_fn(prompt)
        return Completion(
            content=self.reply,
            provider=self.provider_name,
            model=self.model,
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            total_tokens=self.input_tokens + self.output_tokens,
            estimated_cost=self.estimated_cost,
        )

    def is_healthy(self) -> bool:
        return self.error is None


class FunctionAgent:
    """Agent whose behaviour is a plain function of the request."""

    def __init__(self, name: str, handler: Callable[[TaskRequest], TaskResult]) -> None:
        self._name = name
        self._handler = handler

    @property
    def name(self) -> str:
        return self._name

    @property
    def capabilities(self) -> List[str]:
        return []

    def execute_task(self, request: TaskRequest) -> TaskResult:
        return self._handler(request)

    def agent_info(self) -> AgentInfo:
        return AgentInfo(name=self._name, description="function agent")


def sleeping_agent(name: str, seconds: float, output: str = "done") -> FunctionAgent:
    def handler(request: TaskRequest) -> TaskResult:
        time.sleep(seconds)
        return TaskResult.succeeded(name, request.task, output)

    return FunctionAgent(name, handler)


def raising_agent(name: str, error: Exception) -> FunctionAgent:
    def handler(request: TaskRequest) -> TaskResult:
        raise error

    return FunctionAgent(name, handler)


def echo_agent(name: str) -> FunctionAgent:
    def handler(request: TaskRequest) -> TaskResult:
        context = ", ".join(f"{k}={v}" for k, v in request.context.items())
        return TaskResult.succeeded(name, request.task, f"{name}: {request.task} [{context}]")

    return FunctionAgent(name, handler)


@pytest.fixture
def stub_provider():
    return StubCompletionProvider()


@pytest.fixture
def formatter_registry():
    return OutputFormatterRegistry()


@pytest.fixture
def agent_registry():
    return AgentRegistry()


@pytest.fixture
def make_agent(stub_provider, formatter_registry):
    """Factory for ConfigurableAgents sharing the stub provider and formatters."""

    def _make(name: str = "Developer", provider=None, **overrides) -> ConfigurableAgent:
        config = AgentConfig(name=name, **overrides)
        return ConfigurableAgent(config, provider or stub_provider, formatter_registry)

    return _make


DEVELOPER_YAML = """
name: Developer
description: Writes code
capabilities:
  - Code review
  - Refactoring
temperature: 0.3
maxTokens: 1024
outputFormat: technical
promptTemplate: |
  You are a {role}.
  Task: {task}
  Context: {context}
"""

QA_YAML = """
name: QA
description: Tests code
capabilities: [Testing]
outputFormat: raw
"""


def write_domain(
    base: Path,
    dirname: str,
    manifest: Optional[str] = None,
    agents: Optional[dict] = None,
    agent_dir: str = "agents",
) -> Path:
    """Create `<base>/<dirname>/domain.yaml` plus one YAML file per agent."""
    domain_dir = base / dirname
    domain_dir.mkdir(parents=True)
    if manifest is None:
        manifest = f"name: {dirname}\nversion: '1.0.0'\ndescription: test domain\n"
    (domain_dir / "domain.yaml").write_text(manifest, encoding="utf-8")
    if agents:
        (domain_dir / agent_dir).mkdir(parents=True, exist_ok=True)
        for filename, content in agents.items():
            (domain_dir / agent_dir / filename).write_text(content, encoding="utf-8")
    return domain_dir
