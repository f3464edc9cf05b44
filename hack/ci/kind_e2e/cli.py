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

"""Command line entry point for the kind conformance runner."""

from __future__ import annotations

import logging
from pathlib import Path

import sh
import typer
from pydantic import ValidationError
from rich.markup import escape

from kind_e2e import console
from kind_e2e.config import E2EConfig, display_config
from kind_e2e.constants import IP_FAMILIES, REPO_ROOT
from kind_e2e.orchestrator import install_signal_handlers, run

app = typer.Typer(help="Build kind and Kubernetes, bring up a cluster and run conformance.")


def _overrides(**options: object) -> dict:
    return {key: value for key, value in options.items() if value is not None}


@app.command()
def main(
    focus: str | None = typer.Option(None, "--focus", help="Ginkgo focus regex (overrides FOCUS)"),
    skip: str | None = typer.Option(None, "--skip", help="Ginkgo skip regex (overrides SKIP)"),
    parallel: bool | None = typer.Option(
        None, "--parallel/--no-parallel", help="Run ginkgo in parallel (overrides PARALLEL)"),
    ip_family: str | None = typer.Option(
        None, "--ip-family", help="ipv4 or ipv6 (overrides IP_FAMILY)"),
    artifacts: Path | None = typer.Option(
        None, "--artifacts", help="Artifacts directory (overrides ARTIFACTS)"),
    kube_root: Path | None = typer.Option(
        None, "--kube-root", help="Kubernetes checkout for the node image build"),
    node_image: str | None = typer.Option(
        None, "--node-image", help="Node image tag to build and boot"),
    repo_root: Path = typer.Option(
        REPO_ROOT, "--repo-root", help="kind repository to install kind from"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log external commands"),
) -> None:
    """Run the kind conformance e2e job from a Kubernetes checkout.

    Must be run from the Kubernetes checkout. Every option falls back to
    its environment variable when not given.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("sh").setLevel(logging.DEBUG if verbose else logging.WARNING)
    if ip_family is not None and ip_family not in IP_FAMILIES:
        raise typer.BadParameter(f"must be one of {', '.join(IP_FAMILIES)}", param_hint="--ip-family")

    try:
        cfg = E2EConfig()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']).upper()}: {err['msg']}" for err in e.errors()
        )
        raise typer.BadParameter(f"invalid environment: {problems}")
    overrides = _overrides(
        focus=focus,
        skip=skip,
        parallel=parallel,
        ip_family=ip_family,
        artifacts=artifacts,
        kube_root=kube_root,
        kind_node_image=node_image,
    )
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    work_dir = Path.cwd()
    display_config(cfg, work_dir)
    install_signal_handlers()

    try:
        run(cfg, repo_root, work_dir)
    except sh.ErrorReturnCode as e:
        console.print(f"[red]❌ {escape(str(e.full_cmd))} failed with exit code {e.exit_code}[/red]")
        raise typer.Exit(e.exit_code)
    except KeyboardInterrupt:
        console.print("[red]❌ Interrupted[/red]")
        raise typer.Exit(130)
    except Exception as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
