"""Grain-direction orientation rules.

Pure functions only: they read a part instance and never mutate it.
"""

from __future__ import annotations

from sheetnest.domain.entities import PartInstance
from sheetnest.domain.value_objects import GrainDirection, OrientationOptions


def legal_orientations(instance: PartInstance) -> OrientationOptions:
    """Return which placements are legal for an instance.

    - Square parts: both (rotation is a no-op).
    - WITH grain: as defined only.
    - REVERSE grain: rotated only; the natural placement swaps the axes.
    - No grain: both.
    """
    if instance.is_square:
        return OrientationOptions(as_defined=True, rotated=True)
    if instance.grain == GrainDirection.WITH:
        return OrientationOptions(as_defined=True, rotated=False)
    if instance.grain == GrainDirection.REVERSE:
        return OrientationOptions(as_defined=False, rotated=True)
    return OrientationOptions(as_defined=True, rotated=True)


def effective_dimensions(instance: PartInstance) -> tuple[float, float]:
    """Return ``(height, width)`` used to order instances before packing.

    A REVERSE-grain part wider than it is tall is placed with its axes
    swapped, so its width counts as its height.
    """
    if (
        instance.grain == GrainDirection.REVERSE
        and instance.original_width > instance.original_height
    ):
        return instance.original_width, instance.original_height
    return instance.original_height, instance.original_width
