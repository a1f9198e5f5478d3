"""Distribución de estribos por tramo entre las caras de los apoyos."""

from __future__ import annotations

from typing import List, Optional

from steel_detailing.core.logging import get_logger
from steel_detailing.modules.rebar import compute_node_origins, span_face_range
from steel_detailing.modules.stirrups import (
    default_abcr_for_height,
    resolve_end_specs,
    rest_spacing_from_spec,
    stirrup_blocks_from_spec,
)
from steel_detailing.schemas import Development, Face, SpanStirrups, StirrupBlock

logger = get_logger(__name__)

_EPS = 1e-6


def _center_stirrup(left: List[StirrupBlock], right: List[StirrupBlock], rest_m: Optional[float]) -> Optional[float]:
    """Estribo suelto al centro cuando el hueco entre ambos lados supera R."""
    left_positions = [x for block in left for x in block.positions_m]
    right_positions = [x for block in right for x in block.positions_m]
    if not left_positions or not right_positions or not rest_m:
        return None
    left_last = max(left_positions)
    right_first = min(right_positions)
    if right_first - left_last > rest_m + _EPS:
        return (left_last + right_first) / 2
    return None


def compute_span_stirrups(development: Development, span_index: int) -> SpanStirrups:
    """Estribos de un tramo medidos en x global (m).

    Cada lado arranca en la cara del apoyo y avanza hasta el centro del tramo.
    Sin especificación se usa la tabla por altura de viga según ``design_mode``.
    """
    span = development.spans[span_index]
    origins = compute_node_origins(development)
    x_start, x_end = span_face_range(development, origins, span_index, Face.BOTTOM)
    result = SpanStirrups(span_index=span_index, x_start_m=x_start, x_end_m=x_end)

    distribution = span.stirrups
    if distribution is None or x_end - x_start <= _EPS:
        return result

    left_spec, right_spec = resolve_end_specs(distribution)
    if left_spec is None and right_spec is None:
        left_spec = right_spec = default_abcr_for_height(span.h, distribution.design_mode).format()

    middle = (x_start + x_end) / 2
    left = stirrup_blocks_from_spec(left_spec, x_start, middle, +1, "left") if left_spec else []
    right = stirrup_blocks_from_spec(right_spec, x_end, middle, -1, "right") if right_spec else []

    # Ambos lados pueden llegar justo al centro: un solo estribo ahí.
    left_positions = [x for block in left for x in block.positions_m]
    if left_positions:
        left_last = max(left_positions)
        for block in right:
            block.positions_m = [x for x in block.positions_m if abs(x - left_last) > _EPS]
        right = [block for block in right if block.positions_m]

    spacings = [s for s in (rest_spacing_from_spec(left_spec), rest_spacing_from_spec(right_spec)) if s]
    center = _center_stirrup(left, right, min(spacings) if spacings else None)

    blocks = left + right
    if center is not None:
        blocks.append(StirrupBlock(key="mid", side="center", positions_m=[center]))

    result.diameter = distribution.diameter
    result.left_spec = left_spec
    result.right_spec = right_spec
    result.blocks = blocks
    logger.debug(
        "Estribos tramo=%d caso=%s izquierda=%s derecha=%s total=%d",
        span_index + 1,
        distribution.case_type,
        left_spec,
        right_spec,
        result.count,
    )
    return result


def compute_development_stirrups(development: Development) -> List[SpanStirrups]:
    return [compute_span_stirrups(development, index) for index in range(len(development.spans))]


__all__ = ["compute_development_stirrups", "compute_span_stirrups"]
