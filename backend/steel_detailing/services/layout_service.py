"""Ubicación de barras en la sección (grilla filas x columnas por cara).

El acero corrido ocupa primero la grilla desde la fila exterior; los bastones
rellenan los huecos restantes (L1 antes que L2). El orden de llenado dentro
de cada fila es por pares de afuera hacia adentro y la columna central, si
existe, es la última.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from steel_detailing.core.logging import get_logger
from steel_detailing.modules.rebar import (
    diameter_to_cm,
    min_clear_spacing_cm,
    resolve_column_range,
    stirrup_wrap_thickness_cm,
)
from steel_detailing.schemas import (
    BarPoint,
    CutoffDemand,
    Development,
    Face,
    FaceLayout,
    FaceOverride,
    LayoutDiagnostics,
    LayoutFailure,
    SteelLayoutSettings,
    SteelMeta,
    StirrupsSection,
)
from steel_detailing.services.cutoff_service import compute_cutoff_demand

logger = get_logger(__name__)

_PITCH_TOLERANCE = 1e-9
_BOUNDS_TOLERANCE = 1e-6


@dataclass(frozen=True, slots=True)
class GridCandidate:
    rows: int
    cols: int
    dx_cm: float


def row_y_cm(face: Face, h_cm: float, cover_cm: float, db_cm: float, s_min_cm: float, row: int) -> float:
    pitch = db_cm + s_min_cm
    if face == Face.TOP:
        return h_cm - cover_cm - db_cm / 2 - row * pitch
    return cover_cm + db_cm / 2 + row * pitch


def rows_fit_height(face: Face, h_cm: float, cover_cm: float, db_cm: float, s_min_cm: float, rows: int) -> bool:
    min_y = cover_cm + db_cm / 2
    max_y = h_cm - cover_cm - db_cm / 2
    for row in range(rows):
        y = row_y_cm(face, h_cm, cover_cm, db_cm, s_min_cm, row)
        if not (min_y - _BOUNDS_TOLERANCE <= y <= max_y + _BOUNDS_TOLERANCE):
            return False
    return True


def symmetric_z_cm(cols: int, usable_width_cm: float) -> List[float]:
    if cols <= 1:
        return [0.0]
    dx = usable_width_cm / (cols - 1)
    half = (cols - 1) / 2
    return [(col - half) * dx for col in range(cols)]


def column_fill_order(cols: int) -> List[int]:
    """Pares (0, n-1), (1, n-2)...; la columna central va al final."""
    order: List[int] = []
    for k in range(cols // 2):
        order.extend((k, cols - 1 - k))
    if cols % 2 == 1:
        order.append(cols // 2)
    return order


def iter_slots(rows: int, cols: int) -> Iterator[Tuple[int, int]]:
    order = column_fill_order(cols)
    for row in range(rows):
        for col in order:
            yield row, col


def enumerate_candidates(
    *,
    face: Face,
    b_cm: float,
    h_cm: float,
    cover_cm: float,
    db_cm: float,
    s_min_cm: float,
    usable_width_cm: float,
    required: int,
    settings: SteelLayoutSettings,
    override: Optional[FaceOverride] = None,
) -> List[GridCandidate]:
    max_rows = max(1, min(3, settings.max_rows_per_face))
    rows_forced = override.rows_override if override is not None else None
    cols_forced = override.cols_override if override is not None else None

    if rows_forced:
        rows_list = [max(1, min(max_rows, rows_forced))]
    else:
        rows_list = list(range(1, max_rows + 1))

    if cols_forced:
        cols_min = cols_max = max(2, cols_forced)
    else:
        cols_min, cols_max = resolve_column_range(b_cm, settings)

    candidates: List[GridCandidate] = []
    for rows in rows_list:
        for cols in range(cols_min, cols_max + 1):
            dx = usable_width_cm / (cols - 1)
            if dx < db_cm + s_min_cm - _PITCH_TOLERANCE:
                continue
            if not rows_fit_height(face, h_cm, cover_cm, db_cm, s_min_cm, rows):
                continue
            if rows * cols < required:
                continue
            candidates.append(GridCandidate(rows=rows, cols=cols, dx_cm=dx))
        # Menos filas siempre gana: no hace falta probar más.
        if candidates:
            break
    return candidates


def pick_candidate(candidates: List[GridCandidate]) -> GridCandidate:
    """Menor cantidad de filas; a igualdad, la mayor separación horizontal."""
    return sorted(candidates, key=lambda c: (c.rows, -c.dx_cm))[0]


def compute_face_layout(
    face: Face,
    b_cm: float,
    h_cm: float,
    cover_cm: float,
    main_steel: Optional[SteelMeta],
    cutoff_demand: Optional[CutoffDemand] = None,
    settings: Optional[SteelLayoutSettings] = None,
    overrides: Optional[FaceOverride] = None,
    stirrups: Optional[StirrupsSection] = None,
) -> FaceLayout | LayoutFailure:
    settings = settings or SteelLayoutSettings()
    demand = cutoff_demand or CutoffDemand()

    main_qty = main_steel.qty if main_steel is not None else 0
    if main_qty <= 0:
        return LayoutFailure(code="empty", reason="Sin acero principal (qty<=0)")

    if not (b_cm > 0 and h_cm > 0 and cover_cm >= 0) or not all(
        math.isfinite(v) for v in (b_cm, h_cm, cover_cm)
    ):
        return LayoutFailure(
            code="invalid_geometry",
            reason="Geometría inválida",
            debug={"b_cm": b_cm, "h_cm": h_cm, "cover_cm": cover_cm},
        )

    main_db = diameter_to_cm(main_steel.diameter, settings)
    cutoff_db = demand.governing_diameter_cm if demand.requested > 0 else 0.0
    db_governing = max(main_db, cutoff_db)
    s_min = min_clear_spacing_cm(db_governing, settings)

    stirrups_thickness = stirrup_wrap_thickness_cm(stirrups, settings)
    cover_eff = cover_cm + stirrups_thickness
    usable_width = b_cm - 2 * (cover_eff + db_governing / 2)
    if usable_width <= 0:
        return LayoutFailure(
            code="no_usable_width",
            reason="No hay espacio útil en ancho",
            debug={"usable_width_cm": usable_width, "cover_effective_cm": cover_eff},
        )

    l1_requested = max(0, demand.l1_peak)
    l2_requested = max(0, demand.l2_peak)
    required = main_qty + l1_requested + l2_requested

    candidates = enumerate_candidates(
        face=face,
        b_cm=b_cm,
        h_cm=h_cm,
        cover_cm=cover_eff,
        db_cm=db_governing,
        s_min_cm=s_min,
        usable_width_cm=usable_width,
        required=required,
        settings=settings,
        override=overrides,
    )
    if not candidates:
        logger.info(
            "Layout infactible cara=%s b=%.1fcm h=%.1fcm barras=%d db=%.3fcm s_min=%.2fcm",
            face.value,
            b_cm,
            h_cm,
            required,
            db_governing,
            s_min,
        )
        return LayoutFailure(
            code="infeasible",
            reason="No hay layout factible (separación/filas/columnas)",
            debug={
                "main_qty": main_qty,
                "cutoff_qty_requested": l1_requested + l2_requested,
                "b_cm": b_cm,
                "h_cm": h_cm,
                "cover_cm": cover_cm,
                "db_governing_cm": db_governing,
                "s_min_cm": s_min,
                "usable_width_cm": usable_width,
            },
        )

    best = pick_candidate(candidates)
    zs = symmetric_z_cm(best.cols, usable_width)

    def point(row: int, col: int) -> BarPoint:
        return BarPoint(
            y_cm=row_y_cm(face, h_cm, cover_eff, db_governing, s_min, row),
            z_cm=zs[col],
        )

    main_bars: List[BarPoint] = []
    l1_bars: List[BarPoint] = []
    l2_bars: List[BarPoint] = []
    remaining_l1 = l1_requested
    remaining_l2 = l2_requested

    for row, col in iter_slots(best.rows, best.cols):
        if len(main_bars) < main_qty:
            main_bars.append(point(row, col))
        elif remaining_l1 > 0:
            l1_bars.append(point(row, col))
            remaining_l1 -= 1
        elif remaining_l2 > 0:
            l2_bars.append(point(row, col))
            remaining_l2 -= 1
        else:
            break

    diagnostics = LayoutDiagnostics(
        main_qty=len(main_bars),
        l1_requested=l1_requested,
        l1_placed=len(l1_bars),
        l2_requested=l2_requested,
        l2_placed=len(l2_bars),
        stirrups_thickness_cm=stirrups_thickness,
        cover_effective_cm=cover_eff,
        usable_width_cm=usable_width,
    )
    if diagnostics.shortfall > 0:
        logger.warning(
            "Bastones sin espacio cara=%s: L1 %d/%d, L2 %d/%d",
            face.value,
            diagnostics.l1_placed,
            l1_requested,
            diagnostics.l2_placed,
            l2_requested,
        )

    return FaceLayout(
        face=face,
        rows=best.rows,
        cols=best.cols,
        s_min_cm=s_min,
        dx_cm=best.dx_cm,
        db_governing_cm=db_governing,
        main_db_cm=main_db,
        cutoff_db_cm=cutoff_db,
        main_bars=main_bars,
        l1_bars=l1_bars,
        l2_bars=l2_bars,
        diagnostics=diagnostics,
    )


def compute_span_face_layout(
    development: Development,
    span_index: int,
    face: Face,
    demand: Optional[CutoffDemand] = None,
) -> FaceLayout | LayoutFailure:
    """Layout de una cara de tramo a partir de la instantánea del desarrollo.

    Si ya se calculó la demanda de bastones se puede pasar en ``demand``.
    """
    span = development.spans[span_index]
    if demand is None:
        demand = compute_cutoff_demand(development, span, face)
    return compute_face_layout(
        face,
        span.b * 100,
        span.h * 100,
        development.recubrimiento * 100,
        span.steel(face),
        demand,
        settings=development.steel_layout_settings,
        overrides=span.layout_override(face),
        stirrups=span.stirrups_section,
    )


__all__ = [
    "GridCandidate",
    "column_fill_order",
    "compute_face_layout",
    "compute_span_face_layout",
    "enumerate_candidates",
    "iter_slots",
    "pick_candidate",
    "row_y_cm",
    "rows_fit_height",
    "symmetric_z_cm",
]
