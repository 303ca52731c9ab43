"""
Layer lifecycle module for Sheets Map Creator.

Sheets are loaded more than once per session (seed data first, then the live sheet),
so every load produces a new layer for its kind. LayerLifecycleManager keeps exactly
one displayed layer per kind: the previous layer is detached from the display
surface before the new one is attached.

Classes:
    LayerKind: The two independent layer slots
    LayerLifecycleManager: Replace-on-load ownership of displayed layers
"""

from enum import Enum
from typing import Any, Dict, Optional

from utils.logger import get_logger

logger = get_logger(__name__)


class LayerKind(str, Enum):
    """Renderable layer categories; each holds at most one displayed layer."""

    GEOMETRIES = 'geometries'
    POINTS = 'points'


class LayerLifecycleManager:
    """
    Owns the currently displayed layer handle for each LayerKind.

    The display surface must provide ``attach(handle)`` and ``detach(handle)``.
    Handles are opaque to the manager.

    Example:
        >>> manager = LayerLifecycleManager(surface)
        >>> manager.replace(LayerKind.POINTS, first_layer)
        >>> manager.replace(LayerKind.POINTS, second_layer)  # first_layer detached
        >>> manager.active(LayerKind.POINTS) is second_layer
        True
    """

    def __init__(self, surface: Any):
        self.surface = surface
        self._layers: Dict[LayerKind, Any] = {}
        self._generations: Dict[LayerKind, int] = {}

    def replace(self, kind: LayerKind, new_layer: Any) -> None:
        """
        Display new_layer for kind, detaching the previous layer of that kind first.

        Slots are independent: replacing one kind never touches the other.
        """
        kind = LayerKind(kind)
        previous = self._layers.pop(kind, None)

        if previous is not None:
            self.surface.detach(previous)
            logger.debug(f"Detached previous {kind.value} layer")

        self.surface.attach(new_layer)
        self._layers[kind] = new_layer
        self._generations[kind] = self._generations.get(kind, 0) + 1

        logger.debug(f"Attached {kind.value} layer (generation {self._generations[kind]})")

    def active(self, kind: LayerKind) -> Optional[Any]:
        """Return the displayed handle for kind, or None if nothing was loaded yet."""
        return self._layers.get(LayerKind(kind))

    def generation(self, kind: LayerKind) -> int:
        """Number of layers attached for kind so far in this session."""
        return self._generations.get(LayerKind(kind), 0)
