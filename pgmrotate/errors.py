# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


class FormatError(ValueError):
    """Raised when a PGM stream is malformed or truncated."""


class BackendError(RuntimeError):
    """Raised when a rotation backend fails or cannot be created."""


class CapabilityUnmet(Exception):
    """
    Raised when the selected device does not meet the minimum compute
    capability. This is not a failure: the samples exit cleanly on it.
    """

    def __init__(self, min_major, min_minor, message=None):
        self.min_major = min_major
        self.min_minor = min_minor
        super().__init__(
            message
            or "Device does not meet the minimum compute capability %d.%d"
            % (min_major, min_minor)
        )
