# /*
# Copyright 2026 The Kubernetes Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Shared fixtures: an isolated run context and a fake command runner."""

from __future__ import annotations

import signal
from dataclasses import dataclass, field
from pathlib import Path
from unittest.mock import patch

import pytest

from kind_e2e.context import RunContext
from kind_e2e.orchestrator import install_signal_handlers

E2E_ENV_VARS = (
    "SKIP", "FOCUS", "IP_FAMILY", "PARALLEL", "ARTIFACTS",
    "BAZEL_REMOTE_CACHE_ENABLED", "KUBE_ROOT", "KIND_NODE_IMAGE",
    "KIND_WAIT", "KIND_LOGLEVEL",
)


@dataclass
class Call:
    name: str
    args: tuple
    env: dict
    kwargs: dict = field(default_factory=dict)
    stream: bool = False

    @property
    def binary(self) -> str:
        return Path(self.name).name


class FakeCommands:
    """Stand-in for RunContext.command that records every invocation."""

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self._responses: list[tuple[str, tuple, object, Exception | None]] = []

    def respond(self, binary: str, *prefix: str, output: object = "", error: Exception | None = None) -> None:
        self._responses.append((binary, prefix, output, error))

    def __call__(self, name: str, *, stream: bool = False, **extra_env: str):
        def _run(*args, **kwargs):
            call = Call(name=name, args=args, env=extra_env, kwargs=kwargs, stream=stream)
            self.calls.append(call)
            for binary, prefix, output, error in self._responses:
                if binary == call.binary and args[:len(prefix)] == prefix:
                    if error is not None:
                        raise error
                    return output
            return ""
        return _run

    def invoked(self) -> list[tuple[str, ...]]:
        return [(c.binary, *c.args) for c in self.calls]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in E2E_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sigterm_handler():
    """Install the runner's SIGTERM handler and restore the previous one afterwards."""
    previous = signal.getsignal(signal.SIGTERM)
    install_signal_handlers()
    yield
    signal.signal(signal.SIGTERM, previous)


@pytest.fixture
def ctx(tmp_path) -> RunContext:
    tmp_dir = tmp_path / "workspace"
    work_dir = tmp_path / "kubernetes"
    artifacts = tmp_path / "artifacts"
    for d in (tmp_dir, work_dir, artifacts):
        d.mkdir()
    return RunContext(
        repo_root=tmp_path / "kind",
        work_dir=work_dir,
        tmp_dir=tmp_dir,
        artifacts=artifacts,
    )


@pytest.fixture
def commands():
    fake = FakeCommands()
    with patch.object(RunContext, "command", side_effect=fake):
        yield fake
