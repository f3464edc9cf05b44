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

"""Per-run state threaded explicitly through every stage."""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path

import sh

from kind_e2e import logger
from kind_e2e.errors import ToolNotFoundError


@dataclass
class RunContext:
    """Mutable state of one e2e run.

    Stages read and update this object instead of exporting variables into
    the process environment; ``env()`` renders it for child processes.

    Attributes:
        repo_root: kind repository the runner was started from.
        work_dir: Kubernetes checkout the build and tests run in.
        tmp_dir: Exclusively owned temporary workspace.
        artifacts: Directory receiving logs, kind config and test reports.
        path_prepend: Directories searched before the inherited PATH,
            highest precedence first.
        kubeconfig: Kubeconfig of the kind cluster once it is known.
        cluster_up: True once ``kind create cluster`` returned successfully.
    """

    repo_root: Path
    work_dir: Path
    tmp_dir: Path
    artifacts: Path
    path_prepend: list[Path] = field(default_factory=list)
    kubeconfig: Path | None = None
    cluster_up: bool = False

    @property
    def bin_dir(self) -> Path:
        return self.tmp_dir / "bin"

    def prepend_path(self, directory: Path) -> None:
        """Give ``directory`` precedence over everything already on the path."""
        self.path_prepend.insert(0, directory)

    def search_path(self) -> str:
        inherited = os.environ.get("PATH", "")
        parts = [str(p) for p in self.path_prepend]
        if inherited:
            parts.append(inherited)
        return os.pathsep.join(parts)

    def env(self, **extra: str) -> dict[str, str]:
        """Build the environment for a child process.

        Args:
            **extra: Additional variables for this invocation only.

        Returns:
            A copy of the current environment with this run's PATH,
            ARTIFACTS and KUBECONFIG applied.
        """
        env = dict(os.environ)
        env["PATH"] = self.search_path()
        env["ARTIFACTS"] = str(self.artifacts)
        if self.kubeconfig is not None:
            env["KUBECONFIG"] = str(self.kubeconfig)
        env.update(extra)
        return env

    def which(self, name: str) -> Path:
        """Resolve ``name`` against this run's search path.

        Raises:
            ToolNotFoundError: If the binary is not on the search path.
        """
        found = shutil.which(name, path=self.search_path())
        if found is None:
            raise ToolNotFoundError(f"Required command '{name}' not found on PATH")
        return Path(found)

    def command(self, name: str, *, stream: bool = False, **extra_env: str) -> sh.Command:
        """Return an ``sh`` command bound to this run's environment.

        Args:
            name: Binary name or path to run.
            stream: Forward the command's output to this process's
                stdout/stderr instead of capturing it.
            **extra_env: Extra environment variables for the command.

        Returns:
            A baked ``sh.Command`` running in ``work_dir``.
        """
        path = Path(name) if os.sep in name else self.which(name)
        logger.debug("resolved %s -> %s", name, path)
        kwargs: dict = {"_env": self.env(**extra_env), "_cwd": str(self.work_dir)}
        if stream:
            kwargs.update(_out=sys.stdout, _err=sys.stderr)
        return sh.Command(str(path)).bake(**kwargs)
