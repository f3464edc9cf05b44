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

"""Run configuration, loaded from the CI environment."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from kind_e2e import console
from kind_e2e.constants import (
    DEFAULT_ARTIFACTS_DIRNAME,
    DEFAULT_CLUSTER_WAIT,
    DEFAULT_FOCUS,
    DEFAULT_IP_FAMILY,
    DEFAULT_KIND_LOGLEVEL,
    DEFAULT_NODE_IMAGE,
)


class E2EConfig(BaseSettings):
    """Conformance run configuration, auto-loaded from the environment.

    Empty variables behave like unset ones, and the boolean switches are
    only enabled by the literal value ``true``.

    Attributes:
        skip: Ginkgo skip regex (``SKIP``).
        focus: Ginkgo focus regex (``FOCUS``).
        ip_family: ``ipv4`` or ``ipv6`` (``IP_FAMILY``).
        parallel: Run ginkgo in parallel and skip serial tests (``PARALLEL``).
        artifacts: Output directory for logs, kind config and junit reports
            (``ARTIFACTS``), or None for ``$PWD/_artifacts``.
        bazel_remote_cache_enabled: Warm up the bazel remote cache before
            building (``BAZEL_REMOTE_CACHE_ENABLED``).
        kube_root: Kubernetes checkout used to build the node image
            (``KUBE_ROOT``), or None for ``$(go env GOPATH)/src/k8s.io/kubernetes``.
        kind_node_image: Tag of the node image to build and boot.
        kind_wait: How long ``kind create cluster`` waits for the control plane.
        kind_loglevel: Log level passed to kind.
    """

    model_config = SettingsConfigDict(extra="ignore", env_ignore_empty=True)

    skip: str = ""
    focus: str = DEFAULT_FOCUS
    ip_family: str = Field(default=DEFAULT_IP_FAMILY, pattern=r"^ipv[46]$")
    parallel: bool = False
    artifacts: Path | None = None
    bazel_remote_cache_enabled: bool = False
    kube_root: Path | None = None
    kind_node_image: str = DEFAULT_NODE_IMAGE
    kind_wait: str = DEFAULT_CLUSTER_WAIT
    kind_loglevel: str = DEFAULT_KIND_LOGLEVEL

    @field_validator("parallel", "bazel_remote_cache_enabled", mode="before")
    @classmethod
    def _literal_true(cls, value: object) -> object:
        if isinstance(value, str):
            return value == "true"
        return value

    def artifacts_dir(self, work_dir: Path) -> Path:
        """Return the absolute artifacts directory for a run in ``work_dir``."""
        if self.artifacts is None:
            return work_dir / DEFAULT_ARTIFACTS_DIRNAME
        return self.artifacts if self.artifacts.is_absolute() else work_dir / self.artifacts


def display_config(cfg: E2EConfig, work_dir: Path) -> None:
    """Print the resolved configuration.

    Args:
        cfg: Resolved run configuration.
        work_dir: Kubernetes checkout the run operates in.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print(f"  work_dir        : {work_dir}", markup=False)
    console.print(f"  artifacts       : {cfg.artifacts_dir(work_dir)}", markup=False)
    console.print(f"  kube_root       : {cfg.kube_root or '(from go env GOPATH)'}", markup=False)
    console.print(f"  ip_family       : {cfg.ip_family}", markup=False)
    console.print(f"  parallel        : {cfg.parallel}", markup=False)
    console.print(f"  focus           : {cfg.focus}", markup=False)
    console.print(f"  skip            : {cfg.skip or '(none)'}", markup=False)
    console.print(f"  node_image      : {cfg.kind_node_image}", markup=False)
    console.print(f"  bazel_cache     : {cfg.bazel_remote_cache_enabled}", markup=False)
