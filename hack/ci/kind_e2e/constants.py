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

"""Constants shared by the e2e stages."""

from __future__ import annotations

from pathlib import Path

# -- Resolved paths --
SCRIPT_DIR = Path(__file__).resolve().parent.parent
REPO_ROOT = SCRIPT_DIR.parent.parent

# -- Defaults --
DEFAULT_IP_FAMILY = "ipv4"
IP_FAMILY_IPV6 = "ipv6"
IP_FAMILIES = (DEFAULT_IP_FAMILY, IP_FAMILY_IPV6)
DEFAULT_FOCUS = r"\[Conformance\]"
SERIAL_SKIP = r"\[Serial\]"
DEFAULT_ARTIFACTS_DIRNAME = "_artifacts"
DEFAULT_NODE_IMAGE = "kindest/node:latest"
DEFAULT_CLUSTER_WAIT = "1m"
DEFAULT_KIND_LOGLEVEL = "debug"
REL_KUBE_ROOT = "src/k8s.io/kubernetes"

# -- Workspace --
TMP_DIR_PREFIX = "kind-e2e."
KIND_CONFIG_FILENAME = "kind-config.yaml"
LOGS_DIRNAME = "logs"

# -- Build --
BAZEL_CACHE_SCRIPT = "create_bazel_cache_rcs.sh"
BAZEL_TARGETS = (
    "//cmd/kubectl",
    "//test/e2e:e2e.test",
    "//vendor/github.com/onsi/ginkgo/ginkgo",
)
REL_BAZEL_BIN = "bazel-bin"
REL_BAZEL_E2E_TEST = "bazel-bin/test/e2e/e2e.test"
REL_OUTPUT_BIN = "_output/bin"
E2E_TEST_BINARY = "e2e.test"
DROP_CACHES_PATH = "/proc/sys/vm/drop_caches"

# -- kind cluster --
KIND_API_VERSION = "kind.sigs.k8s.io/v1alpha3"
KIND_CLUSTER_NODE_ROLES = ("control-plane", "worker", "worker")

# -- Namespaces and labels --
NS_KUBE_SYSTEM = "kube-system"
COREDNS_CONFIGMAP = "configmap/coredns"
COREDNS_POD_SELECTOR = "k8s-app=kube-dns"
CONTROL_PLANE_TAINT_KEYS = (
    "node-role.kubernetes.io/master",
    "node-role.kubernetes.io/control-plane",
)

# -- CoreDNS --
COREDNS_CLUSTER_ZONE = "cluster.local"
COREDNS_EXTRA_ZONE = "internal"
COREDNS_RESOLV_CONF = "/etc/resolv.conf"

# -- Conformance runner --
REL_GINKGO_E2E = "hack/ginkgo-e2e.sh"
GINKGO_PROVIDER = "skeleton"
