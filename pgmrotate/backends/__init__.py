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

import importlib
import logging
from abc import ABC, abstractmethod

from ..errors import BackendError

logger = logging.getLogger(__name__)

# Backend name -> (module, class). Modules are imported on demand so that the
# GPU stack is only required when it is actually selected.
BACKENDS = {
    "cvcuda": ("pgmrotate.backends.cvcuda_backend", "CvCudaBackend"),
    "cpu": ("pgmrotate.backends.cpu", "CpuBackend"),
}


class DeviceBuffer(ABC):
    """
    A single channel 8-bit image owned by a backend. Use it as a context
    manager so that it is released on every exit path.
    """

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.released = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()
        return False

    def release(self):
        """Frees the backing memory. Calling it more than once is harmless."""
        if not self.released:
            self._release()
            self.released = True

    def _check_alive(self):
        if self.released:
            raise BackendError("Buffer was already released.")

    @property
    @abstractmethod
    def stride(self):
        pass

    @abstractmethod
    def _release(self):
        pass

    @abstractmethod
    def download(self):
        """
        Copies the buffer back to host memory.
        :returns: A :class:`pgmrotate.pgm.RasterImage`.
        """
        pass


class RotationBackend(ABC):
    """
    This is an abstract base class of all the rotation backends. Concrete
    backends provide memory transfer, the capability query and the rotation
    primitive itself.
    """

    name = None

    def __init__(self, device_id=0):
        self.logger = logging.getLogger(__name__)
        self.device_id = device_id

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return False

    @abstractmethod
    def is_capable(self, min_major, min_minor):
        """
        Checks whether the device meets the given minimum compute capability.
        """
        pass

    def describe(self):
        """
        Returns a dictionary with library and device versions, for logging.
        """
        return {"backend": self.name}

    @abstractmethod
    def upload(self, image):
        """Copies a host :class:`RasterImage` into a new :class:`DeviceBuffer`."""
        pass

    @abstractmethod
    def allocate(self, width, height):
        """Allocates a zero filled :class:`DeviceBuffer`."""
        pass

    @abstractmethod
    def rotate(self, src, dst, request):
        """
        Rotates ``src`` into the destination ROI of ``dst``.
        Samples of ``dst`` outside of the ROI are left untouched and ``src`` is
        never modified.
        :raises BackendError: If the rotation could not be carried out.
        """
        pass


def available_backends():
    return sorted(BACKENDS)


def get_backend(name, device_id=0):
    """
    Creates the backend registered under ``name``.
    :raises BackendError: If the name is unknown or its dependencies are not
     installed.
    """
    if name not in BACKENDS:
        raise BackendError(
            "Unknown backend: %s. Supported backends are %s."
            % (name, ", ".join(available_backends()))
        )

    module_name, class_name = BACKENDS[name]
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise BackendError(
            "The %s backend is not available (%s). "
            "Install it with: pip install pgmrotate[gpu]" % (name, exc)
        ) from exc

    logger.debug("Using %s backend on device %d" % (name, device_id))
    return getattr(module, class_name)(device_id)
