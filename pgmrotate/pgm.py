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
Reader and writer for binary 8-bit grayscale PGM (P5) rasters.

The container is a three line ASCII header followed by the raw samples::

    P5
    # optional comment lines
    <width> <height>
    <maxval>
    <width * height bytes, row-major, no padding>
"""

import io
import logging

import numpy as np

from .errors import FormatError

logger = logging.getLogger(__name__)

MAGIC = b"P5"
COMMENT = b"#"
MAX_SAMPLE_VALUE = 255


class RasterImage:
    """
    A single channel 8-bit image living in host memory.

    The pixel buffer is a flat ``uint8`` numpy array. Rows start every
    ``stride`` samples, so ``stride`` may exceed ``width`` when rows are
    padded.
    """

    def __init__(self, width, height, data=None, stride=None, maxval=MAX_SAMPLE_VALUE):
        """
        Initializes a new raster.
        :param width: Number of samples per row. Must be positive.
        :param height: Number of rows. Must be positive.
        :param data: Optional pixel buffer. Anything numpy can turn into a flat
         ``uint8`` array. A zero filled buffer is allocated when omitted.
        :param stride: Distance in samples between the starts of two rows.
         Defaults to ``width``.
        :param maxval: The maximum sample value declared by the container.
        """
        if stride is None:
            stride = width
        if width <= 0 or height <= 0:
            raise ValueError(
                "Raster dimensions must be positive, got %dx%d." % (width, height)
            )
        if stride < width:
            raise ValueError("stride (%d) must be >= width (%d)." % (stride, width))

        if data is None:
            data = np.zeros(height * stride, dtype=np.uint8)
        else:
            data = np.ascontiguousarray(data, dtype=np.uint8).reshape(-1)
            if data.size < height * stride:
                raise ValueError(
                    "Pixel buffer holds %d samples, %d are required."
                    % (data.size, height * stride)
                )

        self.width = int(width)
        self.height = int(height)
        self.stride = int(stride)
        self.maxval = int(maxval)
        self.data = data

    @classmethod
    def from_array(cls, array, maxval=MAX_SAMPLE_VALUE):
        """Creates an unpadded raster from a 2-D ``(height, width)`` array."""
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError("Expected a 2-D array, got shape %s." % (array.shape,))
        height, width = array.shape
        return cls(width, height, array.astype(np.uint8, copy=True), maxval=maxval)

    @property
    def size(self):
        return (self.width, self.height)

    def view(self):
        """Returns a ``(height, width)`` view of the samples, ignoring padding."""
        rows = self.data[: self.height * self.stride].reshape(self.height, self.stride)
        return rows[:, : self.width]

    def pixel(self, x, y):
        return int(self.data[y * self.stride + x])

    def __repr__(self):
        return "RasterImage(width=%d, height=%d, stride=%d, maxval=%d)" % (
            self.width,
            self.height,
            self.stride,
            self.maxval,
        )


def _read_line(stream):
    line = stream.readline()
    if not line:
        raise FormatError("Unexpected end of stream while reading the header.")
    return line.rstrip()


def _parse_int(token, what):
    try:
        return int(token)
    except ValueError:
        raise FormatError("Unable to parse %s: %r" % (what, token)) from None


def decode(data):
    """
    Decodes a P5 container into a :class:`RasterImage`.
    :param data: The raw bytes of the container.
    :returns: The decoded image. Its stride equals its width.
    :raises FormatError: On a bad magic token, unparseable header fields or
     when fewer than ``width * height`` samples follow the header.
    """
    stream = io.BytesIO(data)

    magic = _read_line(stream)
    if magic != MAGIC:
        raise FormatError("Unsupported PGM format: %r" % magic)

    line = _read_line(stream)
    while line.startswith(COMMENT):
        line = _read_line(stream)

    tokens = line.split()
    if len(tokens) != 2:
        raise FormatError("Expected '<width> <height>', got %r" % line)
    width = _parse_int(tokens[0], "width")
    height = _parse_int(tokens[1], "height")
    if width <= 0 or height <= 0:
        raise FormatError("Image dimensions must be positive, got %dx%d" % (width, height))

    maxval = _parse_int(_read_line(stream).strip(), "maximum sample value")
    if not 0 < maxval <= MAX_SAMPLE_VALUE:
        raise FormatError("Unsupported maximum sample value: %d" % maxval)

    count = width * height
    samples = stream.read(count)
    if len(samples) < count:
        raise FormatError(
            "Truncated pixel data: expected %d bytes, got %d." % (count, len(samples))
        )

    return RasterImage(
        width, height, np.frombuffer(samples, dtype=np.uint8).copy(), maxval=maxval
    )


def encode(image):
    """
    Encodes a :class:`RasterImage` into a P5 container. Any row padding is
    dropped and the declared maximum sample value is always 255.
    """
    header = b"%s\n%d %d\n%d\n" % (MAGIC, image.width, image.height, MAX_SAMPLE_VALUE)
    return header + image.view().tobytes()


def load(path):
    """
    Loads a PGM file from disk.
    :raises OSError: If the file cannot be opened or read.
    :raises FormatError: If the file content is not a valid P5 container.
    """
    with open(path, "rb") as in_file:
        data = in_file.read()
    image = decode(data)
    logger.info(
        "Loaded image %s: %dx%d (max: %d)" % (path, image.width, image.height, image.maxval)
    )
    return image


def save(path, image):
    """
    Saves an image to disk as a P5 container.
    :raises OSError: If the file cannot be opened for writing.
    """
    with open(path, "wb") as out_file:
        out_file.write(encode(image))
    logger.info("Saved %dx%d image to %s" % (image.width, image.height, path))
