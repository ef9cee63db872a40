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
Rectangles, rotation requests and the affine mapping shared by all backends.

Angles are in degrees. A positive angle turns the image counter-clockwise as
seen on screen (y pointing down). The rotation center of the source lands on
the center of the destination ROI, ``(x + width // 2, y + height // 2)``.
"""

import enum
import math
from dataclasses import dataclass

HEURISTIC_SCALE = 1.5


class Interpolation(enum.Enum):
    NEAREST = "nearest"
    LINEAR = "linear"


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def center(self):
        return Point(self.x + self.width // 2, self.y + self.height // 2)

    def is_empty(self):
        return self.width == 0 or self.height == 0


@dataclass(frozen=True)
class RotationRequest:
    """Everything a backend needs to rotate one image."""

    src_size: tuple
    src_roi: Rect
    dst_roi: Rect
    angle_deg: float
    center: Point
    interpolation: Interpolation = Interpolation.NEAREST

    def __post_init__(self):
        for name in ("src_roi", "dst_roi"):
            roi = getattr(self, name)
            if roi.width < 0 or roi.height < 0:
                raise ValueError(
                    "%s dimensions must be >= 0, got %dx%d."
                    % (name, roi.width, roi.height)
                )


def default_center(width, height):
    # Integer division truncates for odd dimensions.
    return Point(width // 2, height // 2)


def heuristic_canvas(width, height):
    """
    The 1.5x canvas used by the samples. Large enough for any angle up to 45
    degrees, but not a bound for arbitrary angles; use :func:`exact_canvas`
    for that.
    """
    return Rect(0, 0, int(width * HEURISTIC_SCALE), int(height * HEURISTIC_SCALE))


def rotated_bounds(width, height, angle_deg, center):
    """
    Rotates the four corner pixels of a ``width`` x ``height`` image around
    ``center`` and returns their extents ``(min_x, min_y, max_x, max_y)``
    relative to the center.

    This is ``x' = x cos - y sin``, ``y' = x sin + y cos`` with the y axis
    flipped, so that it agrees with the on-screen direction of the backends.
    Pixels are sampled at integer positions, so the last column and row sit
    at ``width - 1`` and ``height - 1``.
    """
    theta = math.radians(angle_deg)
    cos_t, sin_t = math.cos(theta), math.sin(theta)

    last_x, last_y = max(width - 1, 0), max(height - 1, 0)
    xs, ys = [], []
    for x, y in ((0, 0), (last_x, 0), (last_x, last_y), (0, last_y)):
        dx, dy = x - center.x, y - center.y
        xs.append(dx * cos_t + dy * sin_t)
        ys.append(-dx * sin_t + dy * cos_t)
    return min(xs), min(ys), max(xs), max(ys)


def _canvas_span(low, high):
    # Rounding noise from cos/sin must not add a whole extra pixel.
    before = max(0, int(math.ceil(round(-low, 6))))
    after = max(0, int(math.ceil(round(high, 6))))
    # A canvas of size n has n // 2 pixels before its center and
    # n - 1 - n // 2 after it.
    return max(2 * before, 2 * after + 1)


def exact_canvas(width, height, angle_deg, center):
    """
    The smallest canvas that holds every rotated source pixel without clipping
    when the rotation center is placed on the canvas center.
    """
    if width == 0 or height == 0:
        return Rect(0, 0, 0, 0)
    min_x, min_y, max_x, max_y = rotated_bounds(width, height, angle_deg, center)
    return Rect(0, 0, _canvas_span(min_x, max_x), _canvas_span(min_y, max_y))


def forward_coefficients(request):
    """
    Returns ``(cos, sin, shift_x, shift_y)`` such that a source point relative
    to the source ROI maps to the destination ROI as::

        dst_x =  cos * src_x + sin * src_y + shift_x
        dst_y = -sin * src_x + cos * src_y + shift_y
    """
    theta = math.radians(request.angle_deg)
    cos_t, sin_t = math.cos(theta), math.sin(theta)

    cx = request.center.x - request.src_roi.x
    cy = request.center.y - request.src_roi.y
    dcx = request.dst_roi.width // 2
    dcy = request.dst_roi.height // 2

    shift_x = dcx - (cos_t * cx + sin_t * cy)
    shift_y = dcy - (-sin_t * cx + cos_t * cy)
    return cos_t, sin_t, shift_x, shift_y


def inverse_map(request, u, v):
    """
    Maps destination ROI coordinates ``(u, v)`` (scalars or numpy arrays) back
    to absolute source coordinates.
    """
    theta = math.radians(request.angle_deg)
    cos_t, sin_t = math.cos(theta), math.sin(theta)

    rel_x = u - request.dst_roi.width // 2
    rel_y = v - request.dst_roi.height // 2
    src_x = request.center.x + rel_x * cos_t - rel_y * sin_t
    src_y = request.center.y + rel_x * sin_t + rel_y * cos_t
    return src_x, src_y
