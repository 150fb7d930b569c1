"""
Binding module
"""

from imgpool.binding.image_slot import ImageSlot

__all__ = [
    "ImageSlot",
]
