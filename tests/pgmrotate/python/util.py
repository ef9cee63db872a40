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
from pgmrotate.pgm import RasterImage


def generate_data(shape, max_random=256, rng=None):
    """Generate uint8 data as numpy array

    Args:
        shape (tuple or list): Data shape
        max_random (number): Exclusive upper bound of the random values
        rng (numpy random Generator): To fill data with random values

    Returns:
        numpy.array: The generated data, all zeros if rng is None
    """
    if rng is None:
        return np.zeros(shape, dtype=np.uint8)
    return rng.integers(max_random, size=shape, dtype=np.uint8)


def create_image(size, rng=None, stride=None, padding_value=0):
    """Create a raster image

    Args:
        size (tuple or list): Image size (width, height)
        rng (numpy random Generator): To fill the image with random values
        stride (int): Row stride, defaults to the width
        padding_value (int): Value stored in the padding samples of every row

    Returns:
        pgmrotate.RasterImage: The created image
    """
    width, height = size
    stride = width if stride is None else stride
    pixels = generate_data((height, width), rng=rng)
    rows = np.full((height, stride), padding_value, dtype=np.uint8)
    rows[:, :width] = pixels
    return RasterImage(width, height, rows.reshape(-1), stride=stride)


def pgm_bytes(width, height, payload, maxval=255, comments=()):
    header = b"P5\n"
    for comment in comments:
        header += b"# " + comment + b"\n"
    header += b"%d %d\n%d\n" % (width, height, maxval)
    return header + bytes(payload)
