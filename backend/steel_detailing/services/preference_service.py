"""Preferencia 01 (básico): acero corrido estándar y conexiones por nodo."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from steel_detailing.core.logging import get_logger
from steel_detailing.schemas import (
    Development,
    EndConnection,
    Face,
    Node,
    SteelKind,
    SteelMeta,
    SupportType,
)

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class BasicPreference:
    main_qty: int = 2
    main_diameter: str = "5/8"

    # Longitud de columna |b2 - b1| (m)
    hook_threshold_end_m: float = 0.80
    continuous_threshold_top_m: float = 1.80
    continuous_threshold_bottom_m: float = 1.50

    anchorage_top_m: float = 0.75
    anchorage_bottom_m: float = 0.60


BASIC_PREFERENCE = BasicPreference()

SUPPORT_STEEL_LENGTH_M: Dict[SupportType, float] = {
    SupportType.COLUMNA_INFERIOR: 1.50,
    SupportType.COLUMNA_SUPERIOR: 1.80,
}


def node_steel_length_m(node: Node, default: float = 0.80) -> float:
    """Longitud de acero dentro del nodo según el tipo de apoyo."""
    support = node.support_type
    if support in SUPPORT_STEEL_LENGTH_M:
        return SUPPORT_STEEL_LENGTH_M[support]
    if support in (SupportType.PLACA, SupportType.APOYO_INTERMEDIO):
        width = node.column_length_m
        return width if width > 0.01 else 0.80
    return default


def _anchorage_m(face: Face, preference: BasicPreference) -> float:
    return preference.anchorage_top_m if face == Face.TOP else preference.anchorage_bottom_m


def node_connection_for(
    node: Node,
    face: Face,
    is_end_node: bool,
    preference: BasicPreference = BASIC_PREFERENCE,
) -> EndConnection:
    column_length = node.column_length_m
    if is_end_node:
        if column_length <= preference.hook_threshold_end_m:
            return EndConnection(kind=SteelKind.HOOK, to_face=True)
        return EndConnection(kind=SteelKind.DEVELOPMENT, anchorage_length_m=_anchorage_m(face, preference))

    threshold = (
        preference.continuous_threshold_top_m if face == Face.TOP else preference.continuous_threshold_bottom_m
    )
    if column_length <= threshold:
        return EndConnection(kind=SteelKind.CONTINUOUS)
    return EndConnection(kind=SteelKind.DEVELOPMENT, anchorage_length_m=_anchorage_m(face, preference))


def apply_basic_preference(
    development: Development,
    preference: Optional[BasicPreference] = None,
) -> Development:
    """Nueva instantánea con la preferencia básica aplicada a tramos y nodos."""
    preference = preference or BASIC_PREFERENCE
    updated = development.model_copy(deep=True)

    for span in updated.spans:
        span.steel_top = SteelMeta(qty=preference.main_qty, diameter=preference.main_diameter)
        span.steel_bottom = SteelMeta(qty=preference.main_qty, diameter=preference.main_diameter)

    total = len(updated.nodes)
    for index, node in enumerate(updated.nodes):
        is_end_node = index == 0 or index == total - 1
        for face in (Face.TOP, Face.BOTTOM):
            connection = node_connection_for(node, face, is_end_node, preference)
            for end in (1, 2):
                node.end(face, end).main = connection.model_copy()
        logger.debug(
            "Preferencia básica nodo=%d columna=%.2fm extremo=%s superior=%s inferior=%s",
            index + 1,
            node.column_length_m,
            is_end_node,
            node.top_1.main.kind.value,
            node.bottom_1.main.kind.value,
        )
    return updated


__all__ = [
    "BASIC_PREFERENCE",
    "BasicPreference",
    "apply_basic_preference",
    "node_connection_for",
    "node_steel_length_m",
]
