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

"""Tests for kind cluster lifecycle."""

import sh
import pytest
import yaml

from kind_e2e.cluster import (
    create_cluster,
    delete_cluster,
    kind_config,
    kubeconfig_path,
    write_kind_config,
)
from kind_e2e.config import E2EConfig


class TestKindConfig:
    """Rendering of the kind cluster config."""

    def test_one_control_plane_two_workers(self):
        config = kind_config("ipv4")
        assert config["kind"] == "Cluster"
        assert config["apiVersion"] == "kind.sigs.k8s.io/v1alpha3"
        assert [n["role"] for n in config["nodes"]] == ["control-plane", "worker", "worker"]

    def test_written_file(self, tmp_path):
        path = write_kind_config(tmp_path, "ipv6")
        text = path.read_text()
        assert path == tmp_path / "kind-config.yaml"
        assert text.startswith("# config for 1 control plane node and 2 workers")
        assert yaml.safe_load(text)["networking"] == {"ipFamily": "ipv6"}


class TestCreateCluster:
    """kind create cluster and the cluster-up flag."""

    def test_creates_and_marks_up(self, ctx, commands):
        create_cluster(ctx, E2EConfig())

        assert ctx.cluster_up is True
        assert commands.invoked() == [(
            "kind", "create", "cluster",
            "--image=kindest/node:latest",
            "--retain",
            "--wait=1m",
            "--loglevel=debug",
            f"--config={ctx.artifacts / 'kind-config.yaml'}",
        )]
        assert (ctx.artifacts / "kind-config.yaml").exists()

    def test_failure_leaves_flag_down(self, ctx, commands):
        commands.respond("kind", "create", error=sh.ErrorReturnCode_1("kind create cluster", b"", b"boom"))
        with pytest.raises(sh.ErrorReturnCode):
            create_cluster(ctx, E2EConfig())
        assert ctx.cluster_up is False

    def test_delete_clears_flag(self, ctx, commands):
        ctx.cluster_up = True
        delete_cluster(ctx)
        assert commands.invoked() == [("kind", "delete", "cluster")]
        assert ctx.cluster_up is False


class TestKubeconfigPath:
    def test_strips_output(self, ctx, commands):
        commands.respond("kind", "get", "kubeconfig-path", output="/root/.kube/kind-config-kind\n")
        assert str(kubeconfig_path(ctx)) == "/root/.kube/kind-config-kind"
