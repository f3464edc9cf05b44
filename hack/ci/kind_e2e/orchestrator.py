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

"""Sequence the e2e stages inside a single teardown boundary."""

from __future__ import annotations

import signal
from pathlib import Path

from kind_e2e import logger
from kind_e2e.build import build
from kind_e2e.cluster import create_cluster
from kind_e2e.config import E2EConfig
from kind_e2e.conformance import run_tests
from kind_e2e.context import RunContext
from kind_e2e.installer import install_kind
from kind_e2e.workspace import Teardown, register_cleanup, setup_workspace


def _raise_on_sigterm(signum, frame) -> None:
    raise SystemExit(128 + signum)


def install_signal_handlers() -> None:
    """Turn SIGTERM into SystemExit so cleanup runs when CI aborts the job."""
    signal.signal(signal.SIGTERM, _raise_on_sigterm)


def run(
    cfg: E2EConfig,
    repo_root: Path,
    work_dir: Path,
    teardown: Teardown | None = None,
) -> RunContext:
    """Install kind, build Kubernetes, create a cluster and run conformance.

    Cleanup runs exactly once on every exit path, after which the first
    failure propagates to the caller.

    Args:
        cfg: Resolved run configuration.
        repo_root: kind repository to build kind from.
        work_dir: Kubernetes checkout to build and test.
        teardown: Teardown list to register cleanup on, or None for a new one.

    Returns:
        The final run context.
    """
    ctx = setup_workspace(repo_root, work_dir, cfg.artifacts_dir(work_dir))
    with teardown or Teardown() as cleanup:
        register_cleanup(cleanup, ctx)
        install_kind(ctx)
        build(ctx, cfg)
        create_cluster(ctx, cfg)
        run_tests(ctx, cfg)
    logger.info("e2e run finished")
    return ctx
