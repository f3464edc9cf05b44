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

"""Tests for environment-driven configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from rich.console import Console

from kind_e2e.config import E2EConfig, display_config
from kind_e2e.constants import DEFAULT_FOCUS


class TestE2EConfig:
    """E2EConfig loading from the environment."""

    def test_defaults(self):
        cfg = E2EConfig()
        assert cfg.skip == ""
        assert cfg.focus == DEFAULT_FOCUS
        assert cfg.ip_family == "ipv4"
        assert cfg.parallel is False
        assert cfg.bazel_remote_cache_enabled is False
        assert cfg.artifacts is None
        assert cfg.kind_node_image == "kindest/node:latest"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SKIP", "Slow")
        monkeypatch.setenv("FOCUS", "Networking")
        monkeypatch.setenv("IP_FAMILY", "ipv6")
        monkeypatch.setenv("PARALLEL", "true")
        monkeypatch.setenv("BAZEL_REMOTE_CACHE_ENABLED", "true")
        cfg = E2EConfig()
        assert cfg.skip == "Slow"
        assert cfg.focus == "Networking"
        assert cfg.ip_family == "ipv6"
        assert cfg.parallel is True
        assert cfg.bazel_remote_cache_enabled is True

    @pytest.mark.parametrize("value", ["yes", "1", "True", "y"])
    def test_switches_need_literal_true(self, monkeypatch, value):
        monkeypatch.setenv("PARALLEL", value)
        assert E2EConfig().parallel is False

    def test_empty_focus_falls_back_to_conformance(self, monkeypatch):
        monkeypatch.setenv("FOCUS", "")
        assert E2EConfig().focus == DEFAULT_FOCUS

    def test_rejects_unknown_ip_family(self, monkeypatch):
        monkeypatch.setenv("IP_FAMILY", "dual")
        with pytest.raises(ValidationError):
            E2EConfig()


class TestArtifactsDir:
    """Resolution of the artifacts directory."""

    def test_defaults_under_work_dir(self, tmp_path):
        assert E2EConfig().artifacts_dir(tmp_path) == tmp_path / "_artifacts"

    def test_absolute_path_is_kept(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ARTIFACTS", "/logs/artifacts")
        assert E2EConfig().artifacts_dir(tmp_path) == Path("/logs/artifacts")

    def test_relative_path_is_anchored_at_work_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ARTIFACTS", "out")
        assert E2EConfig().artifacts_dir(tmp_path) == tmp_path / "out"


class TestDisplayConfig:
    """The configuration banner shows values exactly as configured."""

    def test_regex_values_are_not_treated_as_markup(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SKIP", r"\[Serial\]|[/red]")
        recorder = Console(record=True, width=200)
        with patch("kind_e2e.config.console", recorder):
            display_config(E2EConfig(), tmp_path)
        text = recorder.export_text()
        assert r"focus           : \[Conformance\]" in text
        assert r"skip            : \[Serial\]|[/red]" in text
