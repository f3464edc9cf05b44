#!/usr/bin/env python3
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

"""
e2e.py - kind conformance e2e job.

Must be run with a Kubernetes checkout as the working directory. Installs
kind from this repository, builds the node image and e2e binaries, creates
a 1 control-plane + 2 worker cluster, runs the conformance suite and tears
everything down again.

Environment Variables:
    - SKIP: ginkgo skip regex (default: none)
    - FOCUS: ginkgo focus regex (default: \\[Conformance\\])
    - IP_FAMILY: ipv4 (default) or ipv6
    - PARALLEL: "true" to run in parallel, skipping [Serial] tests
    - ARTIFACTS: output directory (default: $PWD/_artifacts)
    - BAZEL_REMOTE_CACHE_ENABLED: "true" to set up bazel remote caching

Examples:
    # Conformance run from a kubernetes checkout
    SKIP="Alpha" PARALLEL=true ../kind/hack/ci/e2e.py

    # IPv6 cluster
    ../kind/hack/ci/e2e.py --ip-family ipv6

For detailed usage information, run: ./e2e.py --help
"""

from __future__ import annotations

from kind_e2e.cli import app

if __name__ == "__main__":
    app()
