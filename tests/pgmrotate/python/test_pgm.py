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
import pytest as t
import util

from pgmrotate import pgm
from pgmrotate.errors import FormatError


RNG = np.random.default_rng(0)


@t.mark.parametrize("size", [(1, 1), (7, 5), (64, 3), (3, 64), (512, 512)])
def test_round_trip(size):
    image = util.create_image(size, rng=RNG)
    decoded = pgm.decode(pgm.encode(image))
    assert decoded.size == image.size
    assert decoded.maxval == 255
    np.testing.assert_array_equal(decoded.view(), image.view())


def test_decode_header_fields():
    image = pgm.decode(util.pgm_bytes(3, 2, [0, 1, 2, 3, 4, 5]))
    assert image.width == 3
    assert image.height == 2
    assert image.stride == 3
    assert image.maxval == 255
    assert image.pixel(2, 0) == 2
    assert image.pixel(0, 1) == 3
    np.testing.assert_array_equal(image.view(), [[0, 1, 2], [3, 4, 5]])


def test_decode_skips_comments():
    data = util.pgm_bytes(2, 1, [9, 8], comments=[b"created by", b"another"])
    image = pgm.decode(data)
    assert image.size == (2, 1)
    np.testing.assert_array_equal(image.view(), [[9, 8]])


def test_decode_crlf_header():
    image = pgm.decode(b"P5\r\n2 1\r\n255\r\n\x01\x02")
    assert image.size == (2, 1)
    np.testing.assert_array_equal(image.view(), [[1, 2]])


def test_decode_keeps_declared_maxval():
    image = pgm.decode(util.pgm_bytes(1, 1, [15], maxval=15))
    assert image.maxval == 15


def test_decode_ignores_trailing_bytes():
    image = pgm.decode(util.pgm_bytes(2, 2, [1, 2, 3, 4, 5, 6, 7]))
    np.testing.assert_array_equal(image.view(), [[1, 2], [3, 4]])


@t.mark.parametrize(
    "data",
    [
        b"",
        b"P2\n2 2\n255\n\x00\x00\x00\x00",
        b"P6\n2 2\n255\n\x00\x00\x00\x00",
        b"P55\n2 2\n255\n\x00\x00\x00\x00",
        b"GIF89a",
    ],
)
def test_decode_bad_magic(data):
    with t.raises(FormatError):
        pgm.decode(data)


@t.mark.parametrize(
    "header",
    [
        b"P5\nx 4\n255\n",
        b"P5\n4\n255\n",
        b"P5\n4 4 4\n255\n",
        b"P5\n0 4\n255\n",
        b"P5\n4 -1\n255\n",
        b"P5\n4 4\n",
        b"P5\n# only a comment\n",
    ],
)
def test_decode_bad_dimensions(header):
    with t.raises(FormatError):
        pgm.decode(header + bytes(16))


@t.mark.parametrize("maxval", [b"abc", b"0", b"256", b"65535", b""])
def test_decode_bad_maxval(maxval):
    with t.raises(FormatError):
        pgm.decode(b"P5\n2 2\n" + maxval + b"\n" + bytes(4))


def test_decode_truncated_data():
    with t.raises(FormatError, match="Truncated"):
        pgm.decode(util.pgm_bytes(4, 4, range(15)))


def test_encode_layout():
    image = pgm.RasterImage(2, 2, [10, 20, 30, 40])
    assert pgm.encode(image) == b"P5\n2 2\n255\n\x0a\x14\x1e\x28"


def test_encode_ignores_stride_padding():
    image = util.create_image((3, 2), rng=RNG, stride=5, padding_value=99)
    data = pgm.encode(image)
    assert data.startswith(b"P5\n3 2\n255\n")
    payload = data[len(b"P5\n3 2\n255\n") :]
    assert len(payload) == 6
    assert payload == image.view().tobytes()


def test_encode_always_writes_255():
    image = pgm.RasterImage(1, 1, [3], maxval=15)
    assert pgm.encode(image).split(b"\n")[2] == b"255"


@t.mark.parametrize(
    "width, height, data, stride",
    [
        (0, 1, None, None),
        (1, 0, None, None),
        (-2, 2, None, None),
        (4, 2, None, 3),
        (2, 2, [1, 2, 3], None),
        (2, 2, [1, 2, 3, 4, 5, 6, 7], 4),
    ],
)
def test_raster_image_invariants(width, height, data, stride):
    with t.raises(ValueError):
        pgm.RasterImage(width, height, data, stride=stride)


def test_raster_image_from_array():
    image = pgm.RasterImage.from_array(np.arange(6).reshape(2, 3))
    assert image.size == (3, 2)
    assert image.stride == 3
    assert image.view().dtype == np.uint8

    with t.raises(ValueError):
        pgm.RasterImage.from_array(np.zeros((2, 3, 1)))


def test_save_and_load(tmp_path):
    image = util.create_image((33, 17), rng=RNG)
    path = tmp_path / "image.pgm"
    pgm.save(str(path), image)

    assert path.read_bytes() == pgm.encode(image)
    loaded = pgm.load(str(path))
    np.testing.assert_array_equal(loaded.view(), image.view())


def test_load_missing_file(tmp_path):
    with t.raises(OSError):
        pgm.load(str(tmp_path / "missing.pgm"))


def test_save_into_missing_directory(tmp_path):
    with t.raises(OSError):
        pgm.save(str(tmp_path / "missing" / "out.pgm"), util.create_image((2, 2)))
