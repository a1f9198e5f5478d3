"""Demanda de bastones por cara de tramo (barrido de intervalos ponderados)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from steel_detailing.core.logging import get_logger
from steel_detailing.modules.rebar import diameter_to_cm, snap_to_grid_m
from steel_detailing.schemas import (
    ActiveCutoffs,
    BarGroup,
    BastonCfg,
    CutoffDemand,
    Development,
    Face,
    FaceLayout,
    Span,
    Zone,
)

logger = get_logger(__name__)

_EPS = 1e-9


@dataclass(frozen=True, slots=True)
class WeightedInterval:
    start: float
    end: float
    weight: int
    zone: Zone
    line: BarGroup

    def covers(self, x: float) -> bool:
        return self.start - _EPS <= x <= self.end + _EPS


def resolve_zone_length_m(cfg: BastonCfg, field: str, fallback_m: float, span_length_m: float) -> float:
    value = getattr(cfg, field)
    length = value if value is not None and value > 0 else fallback_m
    return min(span_length_m, max(0.0, snap_to_grid_m(length)))


def _add(intervals: List[WeightedInterval], start: float, end: float, weight: int, zone: Zone,
         line: BarGroup, span_length: float) -> None:
    if weight <= 0:
        return
    lo = max(0.0, min(start, end))
    hi = min(span_length, max(start, end))
    if hi > lo + _EPS:
        intervals.append(WeightedInterval(lo, hi, weight, zone, line))


def build_zone_intervals(span: Span, face: Face, lc_m: float) -> List[WeightedInterval]:
    """Intervalos [inicio, fin] (coordenada local del tramo) de cada línea activa."""
    span_length = span.L
    intervals: List[WeightedInterval] = []
    if span_length <= 0:
        return intervals

    default_len = span_length / 5
    default_l3 = span_length / 3
    side = span.bastones_side(face)

    for zone in (Zone.Z1, Zone.Z2, Zone.Z3):
        cfg = side.zone(zone)
        if not cfg.any_enabled:
            continue
        q1, q2 = cfg.l1_qty, cfg.l2_qty

        if zone == Zone.Z1:
            l3 = resolve_zone_length_m(cfg, "L3_m", default_l3, span_length)
            if cfg.l1_enabled:
                _add(intervals, 0.0, l3, q1, zone, BarGroup.L1, span_length)
            if cfg.l2_enabled and l3 > lc_m + _EPS:
                _add(intervals, 0.0, l3 - lc_m, q2, zone, BarGroup.L2, span_length)
        elif zone == Zone.Z3:
            l3 = resolve_zone_length_m(cfg, "L3_m", default_l3, span_length)
            if cfg.l1_enabled:
                _add(intervals, span_length - l3, span_length, q1, zone, BarGroup.L1, span_length)
            if cfg.l2_enabled and l3 > lc_m + _EPS:
                _add(intervals, span_length - l3 + lc_m, span_length, q2, zone, BarGroup.L2, span_length)
        else:
            start = resolve_zone_length_m(cfg, "L1_m", default_len, span_length)
            end = span_length - resolve_zone_length_m(cfg, "L2_m", default_len, span_length)
            if end <= start + _EPS:
                continue
            if cfg.l1_enabled:
                _add(intervals, start, end, q1, zone, BarGroup.L1, span_length)
            if cfg.l2_enabled and end - lc_m > start + lc_m + _EPS:
                _add(intervals, start + lc_m, end - lc_m, q2, zone, BarGroup.L2, span_length)
    return intervals


def sweep_peak(intervals: Iterable[WeightedInterval]) -> int:
    """Máximo solape ponderado. En una misma x se cierran antes de abrir (semiabiertos)."""
    events = []
    for interval in intervals:
        events.append((interval.start, 1, interval.weight))
        events.append((interval.end, 0, -interval.weight))
    if not events:
        return 0
    events.sort(key=lambda event: (event[0], event[1]))

    current = 0
    best = 0
    for _, _, delta in events:
        current += delta
        best = max(best, current)
    return max(0, int(round(best)))


def governing_cutoff_diameter_cm(development: Development, span: Span, face: Face) -> float:
    settings = development.steel_layout_settings
    db_max = 0.0
    side = span.bastones_side(face)
    for zone in (Zone.Z1, Zone.Z2, Zone.Z3):
        cfg = side.zone(zone)
        if cfg.l1_enabled:
            db_max = max(db_max, diameter_to_cm(cfg.l1_diameter, settings))
        if cfg.l2_enabled:
            db_max = max(db_max, diameter_to_cm(cfg.l2_diameter, settings))
    return db_max


def compute_cutoff_demand(development: Development, span: Span, face: Face) -> CutoffDemand:
    if span.L <= 0:
        return CutoffDemand()

    intervals = build_zone_intervals(span, face, development.baston_Lc)
    demand = CutoffDemand(
        l1_peak=sweep_peak(i for i in intervals if i.line == BarGroup.L1),
        l2_peak=sweep_peak(i for i in intervals if i.line == BarGroup.L2),
        total_peak=sweep_peak(intervals),
        governing_diameter_cm=governing_cutoff_diameter_cm(development, span, face),
    )
    logger.debug(
        "Demanda de bastones cara=%s L=%.2f intervalos=%d l1=%d l2=%d total=%d",
        face.value,
        span.L,
        len(intervals),
        demand.l1_peak,
        demand.l2_peak,
        demand.total_peak,
    )
    return demand


def active_cutoff_intervals_at(
    development: Development,
    span: Span,
    face: Face,
    x_m: float,
    pool: Optional[FaceLayout] = None,
) -> List[Tuple[WeightedInterval, int]]:
    """Intervalos que cubren ``x_m`` con la cantidad de barras que aportan.

    Los intervalos son cerrados, así que en un borde compartido dos zonas se
    tocan; cada línea se recorta a su pico del barrido y, con ``pool``, a las
    barras que el layout pudo ubicar. Se conservan primero las zonas en orden
    z1, z2, z3.
    """
    if span.L <= 0:
        return []
    x = min(span.L, max(0.0, x_m))
    intervals = build_zone_intervals(span, face, development.baston_Lc)

    result: List[Tuple[WeightedInterval, int]] = []
    for line in (BarGroup.L1, BarGroup.L2):
        line_intervals = [i for i in intervals if i.line == line]
        limit = sweep_peak(line_intervals)
        if pool is not None:
            placed = pool.l1_bars if line == BarGroup.L1 else pool.l2_bars
            limit = min(limit, len(placed))
        for interval in line_intervals:
            if limit <= 0:
                break
            if not interval.covers(x):
                continue
            count = min(interval.weight, limit)
            result.append((interval, count))
            limit -= count
    return result


def active_cutoffs_at(
    development: Development,
    span: Span,
    face: Face,
    x_m: float,
    pool: Optional[FaceLayout] = None,
) -> ActiveCutoffs:
    """Bastones presentes en un corte a ``x_m`` del inicio del tramo.

    Nunca supera el pico de cada línea; con ``pool`` tampoco supera las barras
    que el layout pudo ubicar.
    """
    if span.L <= 0:
        return ActiveCutoffs(x_m=0.0)
    x = min(span.L, max(0.0, x_m))
    covering = active_cutoff_intervals_at(development, span, face, x, pool)
    l1 = sum(count for interval, count in covering if interval.line == BarGroup.L1)
    l2 = sum(count for interval, count in covering if interval.line == BarGroup.L2)
    return ActiveCutoffs(x_m=x, l1=l1, l2=l2)


__all__ = [
    "WeightedInterval",
    "active_cutoff_intervals_at",
    "active_cutoffs_at",
    "build_zone_intervals",
    "compute_cutoff_demand",
    "governing_cutoff_diameter_cm",
    "resolve_zone_length_m",
    "sweep_peak",
]
