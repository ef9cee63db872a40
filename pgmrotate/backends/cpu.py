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

"""
Host only rotation backend using numpy. Samples that map outside of the
source ROI are filled with zero.
"""

import sys

import numpy as np

from . import DeviceBuffer, RotationBackend
from ..errors import BackendError
from ..geometry import Interpolation, inverse_map
from ..pgm import RasterImage


class HostBuffer(DeviceBuffer):
    def __init__(self, array):
        super().__init__(array.shape[1], array.shape[0])
        self.array = array

    @property
    def stride(self):
        return self.array.shape[1]

    def _release(self):
        self.array = None

    def download(self):
        self._check_alive()
        return RasterImage.from_array(self.array)


def _sample_nearest(src, src_x, src_y, roi):
    xi = np.floor(src_x + 0.5).astype(np.int64)
    yi = np.floor(src_y + 0.5).astype(np.int64)
    inside = (xi >= roi.x) & (xi < roi.x + roi.width)
    inside &= (yi >= roi.y) & (yi < roi.y + roi.height)

    out = np.zeros(src_x.shape, dtype=np.uint8)
    out[inside] = src[yi[inside], xi[inside]]
    return out


def _sample_linear(src, src_x, src_y, roi):
    x0 = np.floor(src_x).astype(np.int64)
    y0 = np.floor(src_y).astype(np.int64)
    fx = src_x - x0
    fy = src_y - y0

    acc = np.zeros(src_x.shape, dtype=np.float64)
    for oy, wy in ((0, 1.0 - fy), (1, fy)):
        for ox, wx in ((0, 1.0 - fx), (1, fx)):
            xi = x0 + ox
            yi = y0 + oy
            inside = (xi >= roi.x) & (xi < roi.x + roi.width)
            inside &= (yi >= roi.y) & (yi < roi.y + roi.height)
            values = np.zeros(src_x.shape, dtype=np.float64)
            values[inside] = src[yi[inside], xi[inside]]
            acc += values * wx * wy

    return np.clip(np.floor(acc + 0.5), 0, 255).astype(np.uint8)


class CpuBackend(RotationBackend):
    """Rotation on the host. Always available and always capable."""

    name = "cpu"

    def is_capable(self, min_major, min_minor):
        return True

    def describe(self):
        info = super().describe()
        info["numpy_version"] = np.__version__
        info["python_version"] = sys.version.split()[0]
        info["device"] = "CPU"
        return info

    def upload(self, image):
        return HostBuffer(image.view().copy())

    def allocate(self, width, height):
        if width < 0 or height < 0:
            raise BackendError("Cannot allocate a %dx%d buffer." % (width, height))
        return HostBuffer(np.zeros((height, width), dtype=np.uint8))

    def rotate(self, src, dst, request):
        src._check_alive()
        dst._check_alive()

        roi = request.src_roi
        droi = request.dst_roi
        if (
            roi.x < 0
            or roi.y < 0
            or roi.x + roi.width > src.width
            or roi.y + roi.height > src.height
        ):
            raise BackendError("Source ROI %s lies outside of the source image." % (roi,))
        if (
            droi.x < 0
            or droi.y < 0
            or droi.x + droi.width > dst.width
            or droi.y + droi.height > dst.height
        ):
            raise BackendError(
                "Destination ROI %s lies outside of the destination image." % (droi,)
            )
        if droi.is_empty() or roi.is_empty():
            return dst

        v, u = np.mgrid[0 : droi.height, 0 : droi.width]
        src_x, src_y = inverse_map(request, u, v)

        if request.interpolation is Interpolation.NEAREST:
            rotated = _sample_nearest(src.array, src_x, src_y, roi)
        elif request.interpolation is Interpolation.LINEAR:
            rotated = _sample_linear(src.array, src_x, src_y, roi)
        else:
            raise BackendError("Unsupported interpolation: %s" % request.interpolation)

        dst.array[droi.y : droi.y + droi.height, droi.x : droi.x + droi.width] = rotated
        return dst
