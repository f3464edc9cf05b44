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

"""Install kind from this checkout into the run's workspace."""

from __future__ import annotations

from rich.panel import Panel

from kind_e2e import console
from kind_e2e.context import RunContext


def require_command(ctx: RunContext, cmd: str) -> None:
    """Check that ``cmd`` resolves on the run's search path.

    Raises:
        ToolNotFoundError: If the command is not found.
    """
    ctx.which(cmd)


def install_kind(ctx: RunContext) -> None:
    """Build kind with ``make install`` into ``<tmp>/bin`` and put it first on PATH.

    Args:
        ctx: Current run context; its search path is updated in place.
    """
    console.print(Panel.fit("Installing kind", style="bold blue"))
    require_command(ctx, "make")
    ctx.bin_dir.mkdir(parents=True, exist_ok=True)
    ctx.command("make", stream=True)(
        "-C", str(ctx.repo_root), "install", f"INSTALL_PATH={ctx.bin_dir}",
    )
    ctx.prepend_path(ctx.bin_dir)
    console.print(f"[green]✅ kind installed to {ctx.bin_dir}[/green]")
