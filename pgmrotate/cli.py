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

import argparse
import logging
import math
import os
import sys

from .backends import available_backends, get_backend
from .errors import CapabilityUnmet
from .geometry import Interpolation
from .perf import PipelinePerf
from .pipeline import FIT_MODES, RotationPipeline
from .preview import write_preview

logger = logging.getLogger(__name__)

DATA_DIR = "data"


class SampleArgumentParser(argparse.ArgumentParser):
    """Reports usage errors with exit code 1, like every other sample error."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, "%s: error: %s\n" % (self.prog, message))


def get_default_arg_parser(
    message,
    with_input=True,
    input_path=os.path.join(DATA_DIR, "Lena_gray.pgm"),
    output_path=os.path.join(DATA_DIR, "Lena_rotated.pgm"),
    angle=45.0,
    device_id=0,
    backend="cvcuda",
    log_level="info",
):
    """
    Prepares and returns an argparse command line argument parser shared by
    both rotation samples. The pattern sample simply has no input path.
    """
    parser = SampleArgumentParser(
        description=message,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    if with_input:
        parser.add_argument(
            "-i",
            "--input_path",
            default=input_path,
            type=str,
            help="The path to a binary PGM (P5) image to rotate. A checkerboard "
            "test pattern is used if it cannot be loaded.",
        )

    parser.add_argument(
        "-o",
        "--output_path",
        default=output_path,
        type=str,
        help="Where the rotated PGM image should be written.",
    )

    parser.add_argument(
        "-a",
        "--angle",
        default=angle,
        type=float,
        help="Rotation angle in degrees, counter-clockwise.",
    )

    parser.add_argument(
        "-in",
        "--interpolation",
        type=str,
        choices=[mode.value for mode in Interpolation],
        default=Interpolation.NEAREST.value,
        help="The interpolation used by the rotation.",
    )

    parser.add_argument(
        "-f",
        "--fit",
        type=str,
        choices=FIT_MODES,
        default="heuristic",
        help="How the output canvas is sized. 'heuristic' is 1.5x the input, "
        "'exact' is the bounding box of the rotated input.",
    )

    parser.add_argument(
        "-bk",
        "--backend",
        type=str,
        choices=available_backends(),
        default=backend,
        help="The rotation backend to use. Currently supports %s."
        % ", ".join(available_backends()),
    )

    parser.add_argument(
        "-d",
        "--device_id",
        default=device_id,
        type=int,
        help="The GPU device to use for this sample.",
    )

    parser.add_argument(
        "-p",
        "--preview_path",
        default=None,
        type=str,
        help="Optionally also write the result as a PNG image to this path.",
    )

    parser.add_argument(
        "-bj",
        "--benchmark_json",
        default=None,
        type=str,
        help="Optionally write the stage timings as JSON to this path.",
    )

    parser.add_argument(
        "-ll",
        "--log_level",
        type=str,
        choices=["info", "error", "debug", "warning"],
        default=log_level,
        help="Sets the desired logging level. Affects the std-out printed by the "
        "sample when it is run.",
    )

    return parser


def validate_args(args):
    output_dir = os.path.dirname(os.path.abspath(args.output_path))
    if not os.path.isdir(output_dir):
        raise ValueError("Output directory does not exist: %s" % output_dir)

    if not math.isfinite(args.angle):
        raise ValueError("angle must be a finite number.")

    if args.device_id < 0:
        raise ValueError("device_id must be a value >=0.")

    return args


def setup_logging(log_level):
    logging.basicConfig(
        format="[%(name)s:%(lineno)d] %(asctime)s %(levelname)-6s %(message)s",
        level=getattr(logging, log_level.upper()),
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run_sample(args, sample_name):
    """
    Runs one of the samples with already parsed arguments.
    :returns: The process exit code.
    """
    try:
        validate_args(args)

        backend = get_backend(args.backend, args.device_id)
        backend_info = backend.describe()
        for key, value in backend_info.items():
            logger.info("%s: %s" % (key, value))

        perf = PipelinePerf(sample_name, args)
        pipeline = RotationPipeline(
            backend,
            angle=args.angle,
            interpolation=Interpolation(args.interpolation),
            fit=args.fit,
            perf=perf,
        )
        rotated = pipeline.run(getattr(args, "input_path", None), args.output_path)

        if args.preview_path:
            write_preview(rotated, args.preview_path)

        perf.finalize(args.benchmark_json, backend_info)

    except CapabilityUnmet as e:
        logger.warning("%s. Skipping the sample." % e)
        return 0
    except Exception as e:
        logger.error("Program error! The following exception occurred: %s" % e)
        logger.debug("Traceback:", exc_info=True)
        logger.error("Aborting.")
        return 1

    logger.info("Saved rotated image: %s" % args.output_path)
    return 0


def main_image(argv=None):
    """Rotates a PGM image loaded from disk."""
    parser = get_default_arg_parser("Rotates a grayscale PGM image.")
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    return run_sample(args, "rotate_image_sample")


def main_pattern(argv=None):
    """Rotates a generated 512x512 checkerboard."""
    parser = get_default_arg_parser(
        "Rotates a generated checkerboard test image.",
        with_input=False,
        output_path=os.path.join(DATA_DIR, "test_rotated.pgm"),
    )
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    return run_sample(args, "rotate_pattern_sample")


if __name__ == "__main__":
    sys.exit(main_image())
