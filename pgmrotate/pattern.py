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

import numpy as np

from .pgm import RasterImage

TILE_SIZE = 32
WHITE = 255
GRAY = 64

DEFAULT_WIDTH = 512
DEFAULT_HEIGHT = 512


def generate(width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT, tile=TILE_SIZE):
    """
    Creates a checkerboard test image.

    Tile ``(tx, ty)`` is white when ``tx + ty`` is even and gray otherwise, so
    the top-left tile is always white.
    """
    if width <= 0 or height <= 0:
        raise ValueError(
            "Pattern dimensions must be positive, got %dx%d." % (width, height)
        )
    if tile <= 0:
        raise ValueError("tile must be a value >=1.")

    ty = np.arange(height)[:, None] // tile
    tx = np.arange(width)[None, :] // tile
    board = np.where((tx + ty) % 2 == 0, WHITE, GRAY).astype(np.uint8)
    return RasterImage.from_array(board)
