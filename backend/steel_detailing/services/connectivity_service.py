"""Conexión del acero en los nodos: corrido, gancho o anclaje recto.

Cada nodo tiene dos extremos por cara: el extremo 1 recibe el tramo de la
izquierda y el extremo 2 el de la derecha. El primer nodo sólo tiene extremo 2
y el último sólo extremo 1.
"""

from __future__ import annotations

from typing import Optional

from steel_detailing.core.config import settings
from steel_detailing.core.errors import ContractViolationError
from steel_detailing.core.logging import get_logger
from steel_detailing.modules.rebar import (
    CodeLengthTable,
    compute_node_origins,
    length_from_table_m,
    span_face_range,
)
from steel_detailing.schemas import (
    BarGroup,
    ConnectivityResult,
    Development,
    Face,
    FaceLayout,
    LayoutFailure,
    SteelKind,
    Zone,
)
from steel_detailing.services.cutoff_service import build_zone_intervals
from steel_detailing.services.layout_service import compute_span_face_layout

logger = get_logger(__name__)


def _contract_violation(message: str) -> None:
    if settings.DETAILING_VALIDATION_STRICT:
        raise ContractViolationError(message)
    logger.error("Consulta de conectividad ignorada: %s", message)


def check_node_end(development: Development, node_index: int, end: int) -> bool:
    """True si el par (nodo, extremo) existe; si no, aplica la política de contrato."""
    node_count = len(development.nodes)
    if end not in (1, 2):
        _contract_violation(f"Extremo {end} inválido (debe ser 1 o 2)")
        return False
    if not 0 <= node_index < node_count:
        _contract_violation(f"Nodo {node_index} fuera de rango (hay {node_count} nodos)")
        return False
    if end == 1 and node_index == 0:
        _contract_violation("El primer nodo no tiene extremo 1")
        return False
    if end == 2 and node_index == node_count - 1:
        _contract_violation("El último nodo no tiene extremo 2")
        return False
    return True


def effective_kind(development: Development, node_index: int, face: Face, end: int, group: BarGroup) -> SteelKind:
    node = development.nodes[node_index]
    kind = node.end(face, end).connection(group).kind
    if development.is_internal_node(node_index):
        other = node.end(face, 2 if end == 1 else 1).connection(group).kind
        if SteelKind.CONTINUOUS in (kind, other):
            return SteelKind.CONTINUOUS
    return kind


def set_node_steel_kind(
    development: Development,
    node_index: int,
    face: Face,
    end: int,
    group: BarGroup,
    kind: SteelKind,
) -> Development:
    """Nueva instantánea con el tipo de conexión actualizado.

    En nodos internos ``continuous`` se escribe en ambos extremos; pasar a
    gancho o anclaje sólo cambia el extremo pedido.
    """
    updated = development.model_copy(deep=True)
    if not check_node_end(updated, node_index, end):
        return updated

    node = updated.nodes[node_index]
    node.end(face, end).connection(group).kind = kind
    if kind == SteelKind.CONTINUOUS and updated.is_internal_node(node_index):
        node.end(face, 2 if end == 1 else 1).connection(group).kind = kind
    return updated


def _cutoff_line_active(development: Development, span_index: int, face: Face, zone: Zone, group: BarGroup) -> bool:
    span = development.spans[span_index]
    for interval in build_zone_intervals(span, face, development.baston_Lc):
        if interval.zone == zone and interval.line == group:
            return True
    return False


def resolve_connectivity(
    development: Development,
    node_index: int,
    face: Face,
    end: int,
    group: BarGroup,
    code_lengths: Optional[CodeLengthTable] = None,
    hook_leg_m: Optional[float] = None,
    layout: Optional[FaceLayout | LayoutFailure] = None,
) -> Optional[ConnectivityResult]:
    """Conexión de un grupo de barras en un extremo de nodo.

    ``layout`` es el de la cara del tramo que llega al extremo; si no se pasa
    se calcula. Sin layout factible no hay barras que conectar.
    """
    if not check_node_end(development, node_index, end):
        return None

    kind = effective_kind(development, node_index, face, end, group)
    result = ConnectivityResult(node_index=node_index, face=face, end=end, group=group, kind=kind)

    # Extremo 1: tramo de la izquierda, la barra avanza hacia +x dentro del nodo.
    span_index = node_index - 1 if end == 1 else node_index
    direction = 1.0 if end == 1 else -1.0
    if not 0 <= span_index < len(development.spans):
        _contract_violation(f"El nodo {node_index} no tiene tramo en el extremo {end}")
        return None
    span = development.spans[span_index]

    if layout is None:
        layout = compute_span_face_layout(development, span_index, face)
    if isinstance(layout, LayoutFailure):
        logger.debug(
            "Sin barras en nodo=%d cara=%s extremo=%d: %s", node_index, face.value, end, layout.code
        )
        result.active = False
        return result

    if group == BarGroup.MAIN:
        diameter = span.steel(face).diameter
    else:
        zone = Zone.Z3 if end == 1 else Zone.Z1
        cfg = span.bastones_side(face).zone(zone)
        placed = layout.l1_bars if group == BarGroup.L1 else layout.l2_bars
        if (
            not cfg.line_enabled(group)
            or not placed
            or not _cutoff_line_active(development, span_index, face, zone, group)
        ):
            result.active = False
            return result
        diameter = cfg.line_diameter(group)
    result.diameter = diameter

    origins = compute_node_origins(development)
    xa, xb = span_face_range(development, origins, span_index, face)
    anchor = xb if end == 1 else xa
    result.anchor_x_m = anchor

    if kind == SteelKind.CONTINUOUS:
        return result

    node = development.nodes[node_index]
    connection = node.end(face, end).connection(group)

    if connection.to_face:
        if face == Face.TOP:
            offset = node.b2 if end == 1 else node.b1
        else:
            offset = node.a2 if end == 1 else node.a1
        target = origins[node_index] + offset
        terminal = target - direction * development.recubrimiento
        lo, hi = min(anchor, target), max(anchor, target)
        terminal = min(hi, max(lo, terminal))
        result.to_face_applied = True
    else:
        length: Optional[float] = None
        if group == BarGroup.MAIN:
            length = connection.anchorage_length_m
        if length is None:
            table_kind = "hook" if kind == SteelKind.HOOK else "anchorage"
            length = length_from_table_m(diameter, table_kind, face, code_lengths)
        terminal = anchor + direction * length

    result.terminal_x_m = terminal
    result.length_m = abs(terminal - anchor)

    if kind == SteelKind.HOOK:
        leg = settings.HOOK_LEG_M if hook_leg_m is None else hook_leg_m
        result.leg_dy_m = -leg if face == Face.TOP else leg
    return result


__all__ = [
    "check_node_end",
    "effective_kind",
    "resolve_connectivity",
    "set_node_steel_kind",
]
