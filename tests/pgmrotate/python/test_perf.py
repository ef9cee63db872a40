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
import json

import pytest as t

from pgmrotate.perf import PipelinePerf


def test_nested_ranges():
    perf = PipelinePerf("sample")
    perf.push_range("outer")
    perf.push_range("inner")
    assert perf.stack_path == "sample/outer/inner"
    perf.pop_range()
    assert perf.stack_path == "sample/outer"
    perf.pop_range()
    assert perf.stack_path == "sample"

    assert set(perf.timing_info) == {"sample/outer", "sample/outer/inner"}
    assert all(value >= 0.0 for value in perf.timing_info.values())


def test_range_context_pops_on_error():
    perf = PipelinePerf("sample")
    with t.raises(KeyError):
        with perf.range("stage"):
            raise KeyError("stage failed")
    assert len(perf.stack) == 0
    assert "sample/stage" in perf.timing_info


def test_repeated_ranges_accumulate():
    perf = PipelinePerf("sample")
    for _ in range(3):
        with perf.range("stage"):
            pass
    assert list(perf.timing_info) == ["sample/stage"]


def test_pop_without_push():
    with t.raises(ValueError):
        PipelinePerf("sample").pop_range()


def test_finalize_with_open_range():
    perf = PipelinePerf("sample")
    perf.push_range("never_popped")
    with t.raises(Exception, match="still not popped"):
        perf.finalize()


def test_finalize_writes_json(tmp_path):
    args = argparse.Namespace(angle=45.0, backend="cpu")
    perf = PipelinePerf("sample", args)
    with perf.range("stage"):
        pass

    output_path = tmp_path / "benchmark.json"
    report = perf.finalize(str(output_path), {"backend": "cpu"})

    assert json.loads(output_path.read_text()) == report
    assert report["meta"]["obj_name"] == "sample"
    assert report["meta"]["measurement_unit"] == "milliseconds"
    assert report["meta"]["args"] == {"angle": 45.0, "backend": "cpu"}
    assert report["meta"]["backend"] == {"backend": "cpu"}


def test_finalize_without_path(tmp_path):
    report = PipelinePerf("sample").finalize()
    assert report["data"] == {}
    assert list(tmp_path.iterdir()) == []
