"""
Statistical colour transfer between images.

This package contains:
- colorspace: colorspace catalog (LAB, RGB, HSV, XYZ conversions and labels)
- transfer: log-space statistical transfer and per-channel blending
- session: colorspace switching and blend ratio state
- image_io: image loading, saving and validation
- gui: OpenCV HighGUI front end
- cli: command line entry point
"""

from colortransfer.colorspace import Colorspace, resolve
from colortransfer.transfer import TransferEngine, transfer

__all__ = ["Colorspace", "TransferEngine", "resolve", "transfer"]
