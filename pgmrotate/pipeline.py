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

import logging

from . import pattern, pgm
from .errors import BackendError, CapabilityUnmet, FormatError
from .geometry import (
    Interpolation,
    Rect,
    RotationRequest,
    default_center,
    exact_canvas,
    heuristic_canvas,
)
from .perf import PipelinePerf

# Oldest supported devices are SM 1.0
MIN_COMPUTE_CAPABILITY = (1, 0)

FIT_MODES = ["heuristic", "exact"]


class RotationPipeline:
    """
    Load-or-generate, upload, rotate, download and save, strictly in sequence.
    """

    def __init__(
        self,
        backend,
        angle=45.0,
        interpolation=Interpolation.NEAREST,
        fit="heuristic",
        perf=None,
    ):
        """
        Initializes a new pipeline.
        :param backend: The :class:`RotationBackend` doing the actual work.
        :param angle: Rotation angle in degrees, counter-clockwise.
        :param interpolation: An :class:`Interpolation` value.
        :param fit: How to size the output canvas. ``heuristic`` always uses
         1.5x the source size, ``exact`` computes the rotated bounding box.
        :param perf: Optional :class:`PipelinePerf` to record stage timings.
        """
        if fit not in FIT_MODES:
            raise ValueError("Unknown fit mode: %s" % fit)
        self.logger = logging.getLogger(__name__)
        self.backend = backend
        self.angle = angle
        self.interpolation = interpolation
        self.fit = fit
        self.perf = perf or PipelinePerf("rotation_pipeline")

    def canvas_for(self, image):
        if self.fit == "exact":
            return exact_canvas(
                image.width,
                image.height,
                self.angle,
                default_center(image.width, image.height),
            )
        return heuristic_canvas(image.width, image.height)

    def build_request(self, image):
        return RotationRequest(
            src_size=image.size,
            src_roi=Rect(0, 0, image.width, image.height),
            dst_roi=self.canvas_for(image),
            angle_deg=self.angle,
            center=default_center(image.width, image.height),
            interpolation=self.interpolation,
        )

    def load_or_generate(self, input_path):
        """
        Loads the input image. Any I/O or format problem is logged and the
        checkerboard test pattern is used instead.
        """
        if input_path is None:
            self.logger.info(
                "Creating test image (%dx%d checkerboard pattern)"
                % (pattern.DEFAULT_WIDTH, pattern.DEFAULT_HEIGHT)
            )
            return pattern.generate()

        try:
            return pgm.load(input_path)
        except (OSError, FormatError) as e:
            self.logger.warning(
                "Failed to load image %s (%s). Creating test pattern instead."
                % (input_path, e)
            )
            return pattern.generate()

    def rotate(self, image):
        """
        Rotates a host image and returns the result as a new host image.
        :raises BackendError: If the backend fails for any reason.
        """
        request = self.build_request(image)
        self.logger.info(
            "Rotating image by %g degrees: %dx%d -> %dx%d"
            % (
                request.angle_deg,
                image.width,
                image.height,
                request.dst_roi.width,
                request.dst_roi.height,
            )
        )

        with self.backend:
            with self.perf.range("upload"):
                src = self.backend.upload(image)
            with src, self.backend.allocate(
                request.dst_roi.width, request.dst_roi.height
            ) as dst:
                with self.perf.range("rotate"):
                    try:
                        self.backend.rotate(src, dst, request)
                    except BackendError:
                        raise
                    except Exception as e:
                        raise BackendError(
                            "The %s backend failed: %s" % (self.backend.name, e)
                        ) from e
                with self.perf.range("download"):
                    return dst.download()

    def run(self, input_path, output_path):
        """
        Runs the whole pipeline.
        :param input_path: PGM file to rotate or None to use the test pattern.
        :param output_path: Where the rotated PGM is written.
        :returns: The rotated image.
        :raises CapabilityUnmet: If the device is not capable. Nothing is
         loaded or written in that case.
        """
        if not self.backend.is_capable(*MIN_COMPUTE_CAPABILITY):
            raise CapabilityUnmet(*MIN_COMPUTE_CAPABILITY)

        with self.perf.range("run"):
            with self.perf.range("load"):
                image = self.load_or_generate(input_path)

            rotated = self.rotate(image)

            with self.perf.range("save"):
                pgm.save(output_path, rotated)

        return rotated
