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

"""Build the node image and the e2e binaries with bazel."""

from __future__ import annotations

import shutil
from pathlib import Path

from rich.panel import Panel

from kind_e2e import console, logger
from kind_e2e.config import E2EConfig
from kind_e2e.constants import (
    BAZEL_CACHE_SCRIPT,
    BAZEL_TARGETS,
    DROP_CACHES_PATH,
    E2E_TEST_BINARY,
    REL_BAZEL_BIN,
    REL_BAZEL_E2E_TEST,
    REL_KUBE_ROOT,
    REL_OUTPUT_BIN,
)
from kind_e2e.context import RunContext
from kind_e2e.errors import ToolNotFoundError
from kind_e2e.results import StepResult, best_effort


def resolve_kube_root(ctx: RunContext, cfg: E2EConfig) -> Path:
    """Return the configured kube root or ``$(go env GOPATH)/src/k8s.io/kubernetes``."""
    if cfg.kube_root is not None:
        return cfg.kube_root
    gopath = str(ctx.command("go")("env", "GOPATH")).strip()
    return Path(gopath) / REL_KUBE_ROOT


def warm_bazel_cache(ctx: RunContext) -> StepResult:
    """Configure bazel remote caching; failures only produce a warning."""
    console.print("[yellow]ℹ️  Enabling bazel remote cache...[/yellow]")
    return best_effort(
        "bazel remote cache setup",
        lambda: ctx.command(BAZEL_CACHE_SCRIPT, stream=True)(),
    )


def build_node_image(ctx: RunContext, kube_root: Path) -> None:
    """Build the kind node image from ``kube_root`` using bazel."""
    console.print(f"[yellow]ℹ️  Building node image from {kube_root}...[/yellow]")
    ctx.command("kind", stream=True)(
        "build", "node-image", "--type=bazel", f"--kube-root={kube_root}",
    )
    console.print("[green]✅ Node image built[/green]")


def build_e2e_binaries(ctx: RunContext) -> None:
    """Build kubectl, e2e.test and ginkgo."""
    console.print("[yellow]ℹ️  Building e2e binaries...[/yellow]")
    ctx.command("bazel", stream=True)("build", *BAZEL_TARGETS)
    console.print("[green]✅ e2e binaries built[/green]")


def stage_e2e_test(ctx: RunContext) -> Path:
    """Copy e2e.test to ``_output/bin`` where hack/ginkgo-e2e.sh looks for it.

    Returns:
        The staged binary's path.
    """
    output_bin = ctx.work_dir / REL_OUTPUT_BIN
    output_bin.mkdir(parents=True, exist_ok=True)
    dest = output_bin / E2E_TEST_BINARY
    shutil.copy2(ctx.work_dir / REL_BAZEL_E2E_TEST, dest)
    return dest


def find_kubectl_dir(ctx: RunContext) -> Path:
    """Find the directory of the bazel-built kubectl.

    Raises:
        ToolNotFoundError: If bazel-bin holds no kubectl binary.
    """
    bazel_bin = ctx.work_dir / REL_BAZEL_BIN
    for candidate in sorted(bazel_bin.rglob("kubectl")):
        if candidate.is_file():
            return candidate.parent
    raise ToolNotFoundError(f"kubectl not found under {bazel_bin}")


def _drop_caches() -> None:
    Path(DROP_CACHES_PATH).write_text("1\n")


def release_memory(ctx: RunContext) -> list[StepResult]:
    """Try to release memory held by the page cache after building."""
    return [
        best_effort("sync", lambda: ctx.command("sync")()),
        best_effort("drop caches", _drop_caches),
    ]


def build(ctx: RunContext, cfg: E2EConfig) -> None:
    """Build the node image and e2e binaries, then expose them to later stages.

    Args:
        ctx: Current run context; the bazel kubectl is put first on its path.
        cfg: Run configuration.
    """
    console.print(Panel.fit("Building Kubernetes", style="bold blue"))
    if cfg.bazel_remote_cache_enabled:
        warm_bazel_cache(ctx)

    build_node_image(ctx, resolve_kube_root(ctx, cfg))
    build_e2e_binaries(ctx)

    staged = stage_e2e_test(ctx)
    logger.info("staged %s", staged)
    kubectl_dir = find_kubectl_dir(ctx)
    ctx.prepend_path(kubectl_dir)
    console.print(f"[green]✅ Using kubectl from {kubectl_dir}[/green]")

    release_memory(ctx)
