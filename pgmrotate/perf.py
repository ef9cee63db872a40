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

import json
import logging
import os
import sys
import time
from collections import deque
from contextlib import contextmanager

import nvtx


class PipelinePerf:
    """
    Keeps track of the wall-clock time spent in the stages of the rotation
    pipeline. Every range is also pushed as an NVTX range so that the same
    stages show up in Nsight Systems.

    Ranges nest like directories: a ``rotate`` range pushed inside ``run`` is
    recorded as ``run/rotate``.
    """

    def __init__(self, obj_name, args=None):
        """
        Initializes a new instance of the `PipelinePerf` class.
        :param obj_name: The name under which all the ranges are recorded.
        :param args: Optional argparse namespace stored as metadata in the
         JSON report.
        """
        self.obj_name = obj_name
        self.command_line_args = args
        self.logger = logging.getLogger(__name__)
        # Stack of (message, start time) for the currently open ranges.
        self.stack = deque()
        self.stack_path = self.obj_name
        self.timing_info = {}

    def push_range(self, message, color="blue", domain=None):
        """
        Pushes a code range on to the stack.
        :param message: A message associated with the annotated code range.
        :param color: A color associated with the annotated code range.
        :param domain: Name of a domain under which the code range is scoped.
        """
        nvtx.push_range(message, color, domain)
        self.stack.append((message, time.perf_counter()))
        self.stack_path = "/".join((self.stack_path, message))

    def pop_range(self, domain=None):
        """
        Pops the innermost code range off of the stack and records its duration
        in milliseconds.
        """
        if not self.stack:
            raise ValueError("pop_range called without a matching push_range.")

        message, start = self.stack.pop()
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        self.timing_info[self.stack_path] = (
            self.timing_info.get(self.stack_path, 0.0) + elapsed_ms
        )
        self.logger.debug("%s took %.3f ms" % (self.stack_path, elapsed_ms))

        # Unwind the path one level up.
        self.stack_path = self.stack_path.rsplit("/", 1)[0]
        nvtx.pop_range(domain)

    @contextmanager
    def range(self, message, color="blue", domain=None):
        self.push_range(message, color, domain)
        try:
            yield
        finally:
            self.pop_range(domain)

    def finalize(self, output_path=None, backend_info=None):
        """
        Builds the timing report and optionally writes it as JSON.
        :param output_path: Where to write the report. Nothing is written if None.
        :param backend_info: Optional dictionary describing the backend used.
        :returns: The report as a dictionary.
        """
        if len(self.stack):
            raise Exception(
                "Unable to finalize timing info. The stack was non empty with %d"
                " item(s) still not popped." % len(self.stack)
            )

        report = {
            "data": dict(self.timing_info),
            "meta": {
                "obj_name": self.obj_name,
                "measurement_unit": "milliseconds",
                "python_version": sys.version,
                "backend": backend_info or {},
                "args": {},
            },
        }
        if self.command_line_args:
            for arg in vars(self.command_line_args):
                report["meta"]["args"][arg] = getattr(self.command_line_args, arg)

        if output_path:
            with open(output_path, "w") as f:
                f.write(json.dumps(report, indent=4))
            self.logger.info(
                "Timing report was written to: %s" % os.path.abspath(output_path)
            )

        return report
