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

"""Rotate 8-bit grayscale PGM images on the GPU with CV-CUDA, or on the CPU."""

from .errors import BackendError, CapabilityUnmet, FormatError
from .geometry import Interpolation, Point, Rect, RotationRequest
from .pattern import generate
from .pgm import RasterImage, decode, encode, load, save
from .pipeline import RotationPipeline

__version__ = "0.1.0"

__all__ = [
    "BackendError",
    "CapabilityUnmet",
    "FormatError",
    "Interpolation",
    "Point",
    "RasterImage",
    "Rect",
    "RotationPipeline",
    "RotationRequest",
    "decode",
    "encode",
    "generate",
    "load",
    "save",
]
