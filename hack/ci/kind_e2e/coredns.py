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

"""CoreDNS adjustments for IPv6 clusters in CI.

CI has no IPv6 connectivity, so CoreDNS must work offline: it stops
forwarding to the host resolver and answers authoritatively, including
NXDOMAIN for the ``internal`` search domains CI adds to resolv.conf
(otherwise pods get SERVFAIL and stop resolving).
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass

import yaml
from rich.panel import Panel

from kind_e2e import console, logger
from kind_e2e.constants import (
    COREDNS_CLUSTER_ZONE,
    COREDNS_CONFIGMAP,
    COREDNS_EXTRA_ZONE,
    COREDNS_POD_SELECTOR,
    COREDNS_RESOLV_CONF,
    IP_FAMILY_IPV6,
    NS_KUBE_SYSTEM,
)
from kind_e2e.context import RunContext
from kind_e2e.errors import CoreDNSPatchError

_CLUSTER_ZONE_RE = re.compile(
    r"(\bkubernetes\s+" + re.escape(COREDNS_CLUSTER_ZONE) + r")(?=\s|$)"
)


@dataclass(frozen=True)
class CorefilePatch:
    """Result of patching a Corefile.

    Attributes:
        text: The patched Corefile.
        removed: Stripped text of every dropped directive line.
        cluster_zone_found: Whether a ``kubernetes cluster.local`` directive
            was present (and now also serves the extra zone).
    """

    text: str
    removed: tuple[str, ...]
    cluster_zone_found: bool


def _is_dropped(tokens: list[str]) -> bool:
    if not tokens:
        return False
    if tokens in (["upstream"], ["loop"]):
        return True
    if tokens[0] == "fallthrough":
        return True
    return tokens == ["forward", ".", COREDNS_RESOLV_CONF]


def _serve_extra_zone(line: str, tokens: list[str]) -> str:
    if COREDNS_EXTRA_ZONE in tokens[2:]:
        return line
    return _CLUSTER_ZONE_RE.sub(r"\1 " + COREDNS_EXTRA_ZONE, line, count=1)


def patch_corefile(corefile: str) -> CorefilePatch:
    """Make a Corefile answer authoritatively without upstream resolution.

    The ``kubernetes cluster.local`` directive also serves the ``internal``
    zone; ``upstream``, ``fallthrough``, ``loop`` and
    ``forward . /etc/resolv.conf`` are removed. Other lines are untouched.

    Args:
        corefile: Corefile text from the coredns ConfigMap.

    Returns:
        The patched text and what was changed.
    """
    kept: list[str] = []
    removed: list[str] = []
    zone_found = False
    for line in corefile.splitlines(keepends=True):
        tokens = line.split()
        if _is_dropped(tokens):
            removed.append(line.strip())
            continue
        if tokens[:2] == ["kubernetes", COREDNS_CLUSTER_ZONE]:
            line = _serve_extra_zone(line, tokens)
            zone_found = True
        kept.append(line)
    return CorefilePatch(text="".join(kept), removed=tuple(removed), cluster_zone_found=zone_found)


def patch_coredns_configmap(configmap: dict) -> tuple[dict, CorefilePatch]:
    """Patch the Corefile of a coredns ConfigMap document.

    Args:
        configmap: Parsed ``configmap/coredns`` document.

    Returns:
        Tuple of (patched copy of the document, applied patch).

    Raises:
        CoreDNSPatchError: If the document has no Corefile or the Corefile
            has no ``kubernetes cluster.local`` directive.
    """
    corefile = (configmap.get("data") or {}).get("Corefile")
    if not isinstance(corefile, str):
        raise CoreDNSPatchError("coredns ConfigMap has no data.Corefile")
    patch = patch_corefile(corefile)
    if not patch.cluster_zone_found:
        raise CoreDNSPatchError(
            f"Corefile has no 'kubernetes {COREDNS_CLUSTER_ZONE}' directive to extend"
        )
    if not patch.removed:
        logger.warning("Corefile had no upstream/fallthrough/forward/loop directives to remove")
    patched = copy.deepcopy(configmap)
    patched["data"]["Corefile"] = patch.text
    return patched, patch


class _BlockDumper(yaml.SafeDumper):
    """SafeDumper that keeps multi-line strings readable."""


def _str_representer(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    style = "|" if "\n" in value else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", value, style=style)


_BlockDumper.add_representer(str, _str_representer)


def dump_configmap(configmap: dict) -> str:
    return yaml.dump(configmap, Dumper=_BlockDumper, default_flow_style=False, sort_keys=False)


def get_coredns_configmap(ctx: RunContext) -> dict:
    """Fetch and parse the coredns ConfigMap."""
    raw = ctx.command("kubectl")("get", "-oyaml", f"-n={NS_KUBE_SYSTEM}", COREDNS_CONFIGMAP)
    return yaml.safe_load(str(raw))


def apply_configmap(ctx: RunContext, configmap: dict) -> None:
    ctx.command("kubectl", stream=True)("apply", "-f", "-", _in=dump_configmap(configmap))


def restart_coredns(ctx: RunContext) -> None:
    """Delete the CoreDNS pods so they come back with the new config."""
    ctx.command("kubectl", stream=True)(
        "-n", NS_KUBE_SYSTEM, "delete", "pods", "-l", COREDNS_POD_SELECTOR,
    )


def fix_ipv6_dns(ctx: RunContext, ip_family: str) -> CorefilePatch | None:
    """Patch and restart CoreDNS when the cluster is IPv6.

    Args:
        ctx: Current run context with the cluster's kubeconfig.
        ip_family: Configured IP family.

    Returns:
        The applied patch, or None when nothing had to be done.
    """
    if ip_family != IP_FAMILY_IPV6:
        return None
    console.print(Panel.fit("Configuring CoreDNS for offline IPv6", style="bold blue"))
    original = get_coredns_configmap(ctx)
    console.print("Original CoreDNS config:")
    console.print((original.get("data") or {}).get("Corefile", ""), markup=False, highlight=False)

    patched, patch = patch_coredns_configmap(original)
    console.print("Patched CoreDNS config:")
    console.print(patch.text, markup=False, highlight=False)
    for line in patch.removed:
        logger.info("removed Corefile directive: %s", line)

    apply_configmap(ctx, patched)
    restart_coredns(ctx)
    console.print("[green]✅ CoreDNS reconfigured[/green]")
    return patch
