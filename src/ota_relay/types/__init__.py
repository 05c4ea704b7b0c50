"""Reusable type definitions for the relay."""

from .base import StrictBaseModel
from .byte_arrays import BaseBytes, Bytes10
from .uint import BaseUint, Uint16, Uint32

__all__ = [
    "BaseBytes",
    "BaseUint",
    "Bytes10",
    "StrictBaseModel",
    "Uint16",
    "Uint32",
]
