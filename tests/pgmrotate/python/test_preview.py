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

from matplotlib import pyplot as plt

from pgmrotate import pattern
from pgmrotate.preview import write_preview


def test_write_preview(tmp_path):
    path = tmp_path / "pattern.png"
    write_preview(pattern.generate(64, 48), str(path))

    assert path.read_bytes().startswith(b"\x89PNG")
    pixels = plt.imread(str(path))
    assert pixels.shape[:2] == (48, 64)
    # The white tile is brighter than the gray one next to it.
    assert pixels[0, 0, 0] > pixels[0, 32, 0]
