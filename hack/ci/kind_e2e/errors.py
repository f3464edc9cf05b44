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

"""Exception types raised by fatal stages."""

from __future__ import annotations


class E2EError(RuntimeError):
    """Base class for errors raised by the e2e runner itself."""


class ToolNotFoundError(E2EError):
    """A required binary could not be found on the search path."""


class CoreDNSPatchError(E2EError):
    """The CoreDNS ConfigMap did not have the layout the IPv6 fix expects."""
