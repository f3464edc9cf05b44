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

"""Outcome of best-effort steps whose failures must not abort the run."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import sh

from kind_e2e import console, logger


@dataclass(frozen=True)
class StepResult:
    """Result of a best-effort step.

    Attributes:
        name: Human readable step name.
        ok: Whether the step completed without error.
        warning: Failure description when ``ok`` is False, else None.
    """

    name: str
    ok: bool
    warning: str | None = None


def _describe(err: Exception) -> str:
    if isinstance(err, sh.ErrorReturnCode):
        return f"{err.full_cmd} exited with status {err.exit_code}"
    return str(err) or type(err).__name__


def best_effort(name: str, fn: Callable[[], object]) -> StepResult:
    """Run ``fn`` and turn any failure into a warning.

    Args:
        name: Step name used in the warning message.
        fn: Zero-argument callable to run.

    Returns:
        A successful StepResult, or one carrying the warning text.
    """
    try:
        fn()
    except Exception as err:
        warning = _describe(err)
        logger.warning("%s failed (ignored): %s", name, warning)
        console.print(f"[yellow]⚠️  {name} failed, continuing: {warning}[/yellow]")
        return StepResult(name=name, ok=False, warning=warning)
    return StepResult(name=name, ok=True)
