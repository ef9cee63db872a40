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

# NOTE: One must import PyCuda driver first, before CVCUDA or VPF otherwise
# things may throw unexpected errors.
import pycuda.driver as cuda

import contextlib

import cvcuda
import torch

from . import DeviceBuffer, RotationBackend
from ..errors import BackendError
from ..geometry import Interpolation, forward_coefficients
from ..pgm import RasterImage

INTERP = {
    Interpolation.NEAREST: cvcuda.Interp.NEAREST,
    Interpolation.LINEAR: cvcuda.Interp.LINEAR,
}


class CudaBuffer(DeviceBuffer):
    """A ``(height, width, 1)`` uint8 torch tensor resident on the GPU."""

    def __init__(self, backend, tensor):
        super().__init__(tensor.shape[1], tensor.shape[0])
        self.backend = backend
        self.tensor = tensor

    @property
    def stride(self):
        return self.tensor.stride(0)

    def _release(self):
        self.tensor = None

    def download(self):
        self._check_alive()
        with self.backend._on_stream():
            host = self.tensor.cpu().numpy()[..., 0]
        return RasterImage.from_array(host)


class CvCudaBackend(RotationBackend):
    """
    Rotates on the GPU with ``cvcuda.rotate_into``. Host/device transfers go
    through torch, device selection and version reporting through PyCUDA.
    """

    name = "cvcuda"

    def __init__(self, device_id=0):
        super().__init__(device_id)
        try:
            cuda.init()
            if device_id < 0 or device_id >= cuda.Device.count():
                raise BackendError(
                    "device_id must be a valid value from 0 to %d."
                    % (cuda.Device.count() - 1)
                )
            self.cuda_device = cuda.Device(device_id)
        except cuda.Error as exc:
            raise BackendError("Unable to initialize CUDA: %s" % exc) from exc

        self.torch_device = "cuda:%d" % device_id
        self.cuda_ctx = None
        self.cvcuda_stream = None
        self.torch_stream = None

    def __enter__(self):
        # Define the cuda context and streams.
        self.cuda_ctx = self.cuda_device.retain_primary_context()
        self.cuda_ctx.push()
        self.cvcuda_stream = cvcuda.Stream()
        self.torch_stream = torch.cuda.ExternalStream(self.cvcuda_stream.handle)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.cvcuda_stream = None
        self.torch_stream = None
        if self.cuda_ctx is not None:
            self.cuda_ctx.pop()
            self.cuda_ctx = None
        return False

    def is_capable(self, min_major, min_minor):
        major, minor = self.cuda_device.compute_capability()
        if (major, minor) < (min_major, min_minor):
            self.logger.warning(
                "%s has compute capability %d.%d, at least %d.%d is required."
                % (self.cuda_device.name(), major, minor, min_major, min_minor)
            )
            return False
        return True

    def describe(self):
        info = super().describe()
        driver_version = cuda.get_driver_version()
        major, minor = self.cuda_device.compute_capability()
        info["cvcuda_version"] = cvcuda.__version__
        info["pytorch_version"] = torch.__version__
        info["cuda_driver_version"] = "%d.%d" % (
            driver_version // 1000,
            (driver_version % 100) // 10,
        )
        info["cuda_runtime_version"] = torch.version.cuda
        info["device"] = {
            "id": self.device_id,
            "name": self.cuda_device.name(),
            "compute_capability": "%d.%d" % (major, minor),
        }
        return info

    @contextlib.contextmanager
    def _on_stream(self):
        """
        Runs the enclosed torch and CV-CUDA work on this backend's stream. If
        the backend was not entered yet it is entered for the duration of the
        block and its stream is synchronized before leaving.
        """
        with contextlib.ExitStack() as stack:
            if self.cvcuda_stream is None:
                stack.enter_context(self)
                stack.callback(self.cvcuda_stream.sync)
            stack.enter_context(self.cvcuda_stream)
            stack.enter_context(torch.cuda.stream(self.torch_stream))
            yield self.cvcuda_stream

    def upload(self, image):
        host = torch.as_tensor(image.view().copy()).reshape(image.height, image.width, 1)
        with self._on_stream():
            return CudaBuffer(self, host.to(device=self.torch_device))

    def allocate(self, width, height):
        if width < 0 or height < 0:
            raise BackendError("Cannot allocate a %dx%d buffer." % (width, height))
        with self._on_stream():
            return CudaBuffer(
                self,
                torch.zeros(
                    (height, width, 1), dtype=torch.uint8, device=self.torch_device
                ),
            )

    def rotate(self, src, dst, request):
        src._check_alive()
        dst._check_alive()
        roi = request.src_roi
        droi = request.dst_roi
        if droi.is_empty() or roi.is_empty():
            return dst

        cos_t, sin_t, shift_x, shift_y = forward_coefficients(request)
        self.logger.debug(
            "cvcuda.rotate_into angle=%.3f shift=(%.3f, %.3f)"
            % (request.angle_deg, shift_x, shift_y)
        )

        try:
            with self._on_stream() as stream:
                # CVCUDA works on whole tensors, so both ROIs become their own
                # tensors.
                src_roi = src.tensor[
                    roi.y : roi.y + roi.height, roi.x : roi.x + roi.width
                ].contiguous()
                dst_roi = torch.zeros(
                    (droi.height, droi.width, 1),
                    dtype=torch.uint8,
                    device=self.torch_device,
                )
                cvcuda.rotate_into(
                    src=cvcuda.as_tensor(src_roi, "HWC"),
                    dst=cvcuda.as_tensor(dst_roi, "HWC"),
                    angle_deg=request.angle_deg,
                    shift=[shift_x, shift_y],
                    interpolation=INTERP[request.interpolation],
                    stream=stream,
                )
                dst.tensor[
                    droi.y : droi.y + droi.height, droi.x : droi.x + droi.width
                ] = dst_roi
                stream.sync()
        except (RuntimeError, ValueError, cuda.Error) as exc:
            raise BackendError("cvcuda.rotate_into failed: %s" % exc) from exc

        return dst
