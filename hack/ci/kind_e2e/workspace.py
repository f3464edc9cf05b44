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

"""Temporary workspace creation and guaranteed teardown."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path

from rich.panel import Panel

from kind_e2e import console, logger
from kind_e2e.cluster import delete_cluster, export_logs
from kind_e2e.constants import E2E_TEST_BINARY, REL_OUTPUT_BIN, TMP_DIR_PREFIX
from kind_e2e.context import RunContext
from kind_e2e.results import StepResult, best_effort


class Teardown:
    """Named cleanup steps released in reverse registration order.

    Every step is best-effort and the whole list runs at most once, no
    matter how many times ``run()`` is called or how the ``with`` block
    is left. An interrupt during one step does not cancel the others; it
    is re-raised once every step has been attempted.
    """

    def __init__(self) -> None:
        self._steps: list[tuple[str, Callable[[], object]]] = []
        self._done = False
        self.results: list[StepResult] = []

    def register(self, name: str, fn: Callable[[], object]) -> None:
        self._steps.append((name, fn))

    @property
    def done(self) -> bool:
        return self._done

    def run(self) -> list[StepResult]:
        if self._done:
            return self.results
        self._done = True
        console.print(Panel.fit("Cleaning up", style="bold blue"))
        interrupted: BaseException | None = None
        for name, fn in reversed(self._steps):
            logger.info("cleanup: %s", name)
            try:
                self.results.append(best_effort(name, fn))
            except (KeyboardInterrupt, SystemExit) as err:
                # later steps still run; the first interrupt is re-raised at the end
                logger.warning("cleanup: %s interrupted by %s", name, type(err).__name__)
                self.results.append(
                    StepResult(name=name, ok=False, warning=f"interrupted by {type(err).__name__}")
                )
                if interrupted is None:
                    interrupted = err
        if interrupted is not None:
            raise interrupted
        return self.results

    def __enter__(self) -> Teardown:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.run()


def setup_workspace(repo_root: Path, work_dir: Path, artifacts: Path) -> RunContext:
    """Create the temporary workspace and the artifacts directory.

    Args:
        repo_root: kind repository root.
        work_dir: Kubernetes checkout the run operates in.
        artifacts: Artifacts directory, created if missing.

    Returns:
        A fresh RunContext owning the new temporary directory.
    """
    tmp_dir = Path(tempfile.mkdtemp(prefix=TMP_DIR_PREFIX))
    try:
        artifacts.mkdir(parents=True, exist_ok=True)
    except OSError:
        shutil.rmtree(tmp_dir, ignore_errors=True)
        raise
    logger.info("workspace %s, artifacts %s", tmp_dir, artifacts)
    return RunContext(
        repo_root=repo_root.resolve(),
        work_dir=work_dir.resolve(),
        tmp_dir=tmp_dir,
        artifacts=artifacts.resolve(),
    )


def _delete_cluster_if_up(ctx: RunContext) -> None:
    if not ctx.cluster_up:
        logger.info("no cluster was created, skipping kind delete")
        return
    delete_cluster(ctx)


def _remove_e2e_test(ctx: RunContext) -> None:
    (ctx.work_dir / REL_OUTPUT_BIN / E2E_TEST_BINARY).unlink(missing_ok=True)


def _remove_workspace(ctx: RunContext) -> None:
    shutil.rmtree(ctx.tmp_dir)


def register_cleanup(teardown: Teardown, ctx: RunContext) -> None:
    """Register the run's cleanup steps.

    They are released as: export logs, delete cluster, remove the staged
    e2e.test, remove the workspace. The workspace goes last because the
    kind binary used by the first two steps lives in it.
    """
    teardown.register("remove workspace", lambda: _remove_workspace(ctx))
    teardown.register("remove e2e.test", lambda: _remove_e2e_test(ctx))
    teardown.register("delete cluster", lambda: _delete_cluster_if_up(ctx))
    teardown.register("export logs", lambda: export_logs(ctx))
