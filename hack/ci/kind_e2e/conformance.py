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

"""Run the Kubernetes conformance suite against the kind cluster."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from rich.panel import Panel

from kind_e2e import console, logger
from kind_e2e.cluster import kubeconfig_path
from kind_e2e.config import E2EConfig
from kind_e2e.constants import (
    CONTROL_PLANE_TAINT_KEYS,
    GINKGO_PROVIDER,
    REL_GINKGO_E2E,
    SERIAL_SKIP,
)
from kind_e2e.context import RunContext
from kind_e2e.coredns import fix_ipv6_dns


@dataclass(frozen=True)
class GinkgoFilters:
    """Ginkgo focus/skip regexes and whether to run in parallel."""

    focus: str
    skip: str
    parallel: bool = False


def ginkgo_filters(focus: str, skip: str, parallel: bool) -> GinkgoFilters:
    """Compute the ginkgo filters, skipping serial tests when parallel.

    Args:
        focus: Focus regex.
        skip: Skip regex, possibly empty.
        parallel: Whether ginkgo runs in parallel.

    Returns:
        The resolved filters.
    """
    if parallel:
        skip = f"{SERIAL_SKIP}|{skip}" if skip else SERIAL_SKIP
    return GinkgoFilters(focus=focus, skip=skip, parallel=parallel)


def _is_control_plane(node: dict) -> bool:
    taints = (node.get("spec") or {}).get("taints") or []
    return any(taint.get("key") in CONTROL_PLANE_TAINT_KEYS for taint in taints)


def count_worker_nodes(nodes: list[dict]) -> int:
    """Count nodes that are not tainted as control-plane/master.

    Args:
        nodes: Node objects as returned by ``kubectl get nodes -o json``.
    """
    return sum(1 for node in nodes if not _is_control_plane(node))


def get_nodes(ctx: RunContext) -> list[dict]:
    raw = ctx.command("kubectl")("get", "nodes", "-o", "json")
    return json.loads(str(raw)).get("items", [])


def ginkgo_args(filters: GinkgoFilters, num_nodes: int, artifacts: Path) -> list[str]:
    return [
        f"--provider={GINKGO_PROVIDER}",
        f"--num-nodes={num_nodes}",
        f"--ginkgo.focus={filters.focus}",
        f"--ginkgo.skip={filters.skip}",
        f"--report-dir={artifacts}",
        "--disable-log-dump=true",
    ]


def run_tests(ctx: RunContext, cfg: E2EConfig) -> None:
    """Point tooling at the cluster and run ``hack/ginkgo-e2e.sh``.

    A failing conformance run raises, failing the job.

    Args:
        ctx: Current run context; its kubeconfig is set here.
        cfg: Run configuration with filters, parallelism and IP family.
    """
    ctx.kubeconfig = kubeconfig_path(ctx)
    logger.info("KUBECONFIG=%s", ctx.kubeconfig)

    fix_ipv6_dns(ctx, cfg.ip_family)

    console.print(Panel.fit("Running conformance tests", style="bold blue"))
    filters = ginkgo_filters(cfg.focus, cfg.skip, cfg.parallel)
    num_nodes = count_worker_nodes(get_nodes(ctx))
    console.print(f"  focus     : {filters.focus}", markup=False)
    console.print(f"  skip      : {filters.skip}", markup=False)
    console.print(f"  num_nodes : {num_nodes}", markup=False)

    # keeps the e2e framework from running provider setup
    runner_env = {"KUBERNETES_CONFORMANCE_TEST": "y"}
    if filters.parallel:
        runner_env["GINKGO_PARALLEL"] = "y"
    runner = ctx.command(str(ctx.work_dir / REL_GINKGO_E2E), stream=True, **runner_env)
    runner(*ginkgo_args(filters, num_nodes, ctx.artifacts))
    console.print("[green]✅ Conformance tests passed[/green]")
