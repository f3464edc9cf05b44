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

"""kind cluster lifecycle: config rendering, create, delete and log export."""

from __future__ import annotations

from pathlib import Path

import yaml
from rich.panel import Panel

from kind_e2e import console
from kind_e2e.config import E2EConfig
from kind_e2e.constants import (
    KIND_API_VERSION,
    KIND_CLUSTER_NODE_ROLES,
    KIND_CONFIG_FILENAME,
    LOGS_DIRNAME,
)
from kind_e2e.context import RunContext

_KIND_CONFIG_HEADER = (
    "# config for 1 control plane node and 2 workers\n"
    "# necessary for conformance\n"
)


def kind_config(ip_family: str) -> dict:
    """Build the kind Cluster document used for conformance.

    Args:
        ip_family: ``ipv4`` or ``ipv6``.

    Returns:
        The kind config as a dictionary ready for YAML serialization.
    """
    return {
        "kind": "Cluster",
        "apiVersion": KIND_API_VERSION,
        "networking": {"ipFamily": ip_family},
        "nodes": [{"role": role} for role in KIND_CLUSTER_NODE_ROLES],
    }


def write_kind_config(artifacts: Path, ip_family: str) -> Path:
    """Write the kind config into the artifacts directory.

    Args:
        artifacts: Artifacts directory.
        ip_family: ``ipv4`` or ``ipv6``.

    Returns:
        Path of the written config file.
    """
    path = artifacts / KIND_CONFIG_FILENAME
    body = yaml.safe_dump(kind_config(ip_family), default_flow_style=False, sort_keys=False)
    path.write_text(_KIND_CONFIG_HEADER + body)
    return path


def create_cluster(ctx: RunContext, cfg: E2EConfig) -> None:
    """Create the kind cluster and mark it as up.

    ``ctx.cluster_up`` is only set once kind returns successfully, so a
    failed create never leads to a delete during cleanup.

    Args:
        ctx: Current run context.
        cfg: Run configuration with the node image, IP family and wait time.
    """
    console.print(Panel.fit("Creating kind cluster", style="bold blue"))
    config_path = write_kind_config(ctx.artifacts, cfg.ip_family)
    console.print(f"[yellow]ℹ️  Wrote {config_path} (ipFamily: {cfg.ip_family})[/yellow]")
    ctx.command("kind", stream=True)(
        "create", "cluster",
        f"--image={cfg.kind_node_image}",
        "--retain",
        f"--wait={cfg.kind_wait}",
        f"--loglevel={cfg.kind_loglevel}",
        f"--config={config_path}",
    )
    ctx.cluster_up = True
    console.print("[green]✅ Cluster created successfully[/green]")


def delete_cluster(ctx: RunContext) -> None:
    """Delete the kind cluster."""
    console.print("[yellow]ℹ️  Deleting kind cluster...[/yellow]")
    ctx.command("kind", stream=True)("delete", "cluster")
    ctx.cluster_up = False
    console.print("[green]✅ Cluster deleted[/green]")


def export_logs(ctx: RunContext) -> None:
    """Export the cluster logs into ``<artifacts>/logs``."""
    logs_dir = ctx.artifacts / LOGS_DIRNAME
    console.print(f"[yellow]ℹ️  Exporting cluster logs to {logs_dir}...[/yellow]")
    ctx.command("kind", stream=True)("export", "logs", str(logs_dir))


def kubeconfig_path(ctx: RunContext) -> Path:
    """Ask kind where the cluster's kubeconfig was written."""
    return Path(str(ctx.command("kind")("get", "kubeconfig-path")).strip())
