"""Coordenadas a lo largo del desarrollo (m): orígenes de nodo y rangos por cara."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

from steel_detailing.schemas.enums import Face
from steel_detailing.schemas.steel_layout import NodeSlot

if TYPE_CHECKING:
    from steel_detailing.schemas.development import Development


def m_to_units(development: "Development", value_m: float) -> float:
    return value_m * development.unit_scale


def compute_node_origins(development: "Development") -> List[float]:
    """(origin[i] + a2_i) + L_i == (origin[i+1] + a1_{i+1})."""
    nodes = development.nodes
    if not nodes:
        return []
    origins = [development.x0]
    for index in range(len(nodes) - 1):
        span_length = development.spans[index].L if index < len(development.spans) else 0.0
        origins.append(origins[index] + nodes[index].a2 + span_length - nodes[index + 1].a1)
    return origins


def span_face_range(
    development: "Development",
    origins: List[float],
    span_index: int,
    face: Face,
) -> Tuple[float, float]:
    """Extremos (xa, xb) del acero de una cara del tramo.

    Inferior: desde la cara a2 del nodo izquierdo, longitud L.
    Superior: entre b2 del nodo izquierdo y b1 del nodo derecho.
    """
    left = development.nodes[span_index]
    right = development.nodes[span_index + 1]
    if face == Face.BOTTOM:
        x0 = origins[span_index] + left.a2
        x1 = x0 + development.spans[span_index].L
    else:
        x0 = origins[span_index] + left.b2
        x1 = origins[span_index + 1] + right.b1
    return min(x0, x1), max(x0, x1)


def build_node_slots(node_count: int) -> List[NodeSlot]:
    slots: List[NodeSlot] = []
    for index in range(node_count):
        if index == 0:
            slots.append(NodeSlot(node_index=index, end=2, label=f"Nodo {index + 1}.2"))
            continue
        if index == node_count - 1:
            slots.append(NodeSlot(node_index=index, end=1, label=f"Nodo {index + 1}.1"))
            continue
        slots.append(NodeSlot(node_index=index, end=1, label=f"Nodo {index + 1}.1"))
        slots.append(NodeSlot(node_index=index, end=2, label=f"Nodo {index + 1}.2"))
    return slots


__all__ = [
    "build_node_slots",
    "compute_node_origins",
    "m_to_units",
    "span_face_range",
]
