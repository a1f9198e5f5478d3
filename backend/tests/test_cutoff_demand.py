from __future__ import annotations

from typing import Any, Dict

import pytest

from conftest import build_development, span_data
from steel_detailing.schemas import BarGroup, CutoffDemand, Face, Zone
from steel_detailing.services.cutoff_service import (
    active_cutoff_intervals_at,
    active_cutoffs_at,
    build_zone_intervals,
    compute_cutoff_demand,
    sweep_peak,
)
from steel_detailing.services.layout_service import compute_span_face_layout


def _with_bastones(top: Dict[str, Any], L: float = 6.0, **extra: Any):
    return build_development([span_data(L=L, bastones={"top": top})], **extra)


def _brute_force_peak(intervals) -> int:
    points = sorted({p for i in intervals for p in (i.start, i.end)})
    best = 0
    for lo, hi in zip(points, points[1:]):
        mid = (lo + hi) / 2
        best = max(best, sum(i.weight for i in intervals if i.start < mid < i.end))
    return best


def test_default_end_zone_length() -> None:
    dev = _with_bastones({"z1": {"l1_enabled": True, "l1_qty": 2}})
    span = dev.spans[0]

    demand = compute_cutoff_demand(dev, span, Face.TOP)
    assert demand.l1_peak == 2
    assert demand.l2_peak == 0
    assert demand.total_peak == 2

    assert active_cutoffs_at(dev, span, Face.TOP, 1.0).l1 == 2
    assert active_cutoffs_at(dev, span, Face.TOP, 2.0).l1 == 2
    assert active_cutoffs_at(dev, span, Face.TOP, 2.5).l1 == 0
    # La cara inferior no tiene bastones.
    assert compute_cutoff_demand(dev, span, Face.BOTTOM).total_peak == 0


def test_overlapping_zones_add_up() -> None:
    dev = _with_bastones(
        {
            "z1": {"l1_enabled": True, "l1_qty": 2},
            "z2": {"l1_enabled": True, "l1_qty": 1, "L1_m": 1.0},
        }
    )
    span = dev.spans[0]

    demand = compute_cutoff_demand(dev, span, Face.TOP)
    assert demand.l1_peak == 3
    assert active_cutoffs_at(dev, span, Face.TOP, 1.5).l1 == 3
    assert active_cutoffs_at(dev, span, Face.TOP, 3.0).l1 == 1


def test_touching_zones_do_not_stack() -> None:
    # z1 termina en 2.0 y z2 empieza en 2.0.
    dev = _with_bastones(
        {
            "z1": {"l1_enabled": True, "l1_qty": 2},
            "z2": {"l1_enabled": True, "l1_qty": 1, "L1_m": 2.0},
        }
    )
    assert compute_cutoff_demand(dev, dev.spans[0], Face.TOP).l1_peak == 2

    # En el borde compartido el corte no puede superar el pico.
    span = dev.spans[0]
    assert active_cutoffs_at(dev, span, Face.TOP, 2.0).l1 == 2
    assert active_cutoffs_at(dev, span, Face.TOP, 1.9).l1 == 2
    assert active_cutoffs_at(dev, span, Face.TOP, 2.1).l1 == 1


def test_sweep_matches_brute_force() -> None:
    dev = _with_bastones(
        {
            "z1": {"l1_enabled": True, "l1_qty": 2, "l2_enabled": True, "l2_qty": 1, "L3_m": 2.5},
            "z2": {"l1_enabled": True, "l1_qty": 3, "L1_m": 1.5, "L2_m": 1.0},
            "z3": {"l2_enabled": True, "l2_qty": 2, "L3_m": 3.0},
        },
        L=7.0,
    )
    intervals = build_zone_intervals(dev.spans[0], Face.TOP, dev.baston_Lc)

    assert sweep_peak(intervals) == _brute_force_peak(intervals)
    for line in (BarGroup.L1, BarGroup.L2):
        subset = [i for i in intervals if i.line == line]
        assert sweep_peak(subset) == _brute_force_peak(subset)


def test_line_two_is_shorter_by_lc() -> None:
    dev = _with_bastones({"z1": {"l1_enabled": True, "l2_enabled": True, "l2_qty": 2}})
    intervals = build_zone_intervals(dev.spans[0], Face.TOP, dev.baston_Lc)

    l2 = [i for i in intervals if i.line == BarGroup.L2]
    assert len(l2) == 1
    assert (l2[0].start, l2[0].end) == pytest.approx((0.0, 1.5))
    assert active_cutoffs_at(dev, dev.spans[0], Face.TOP, 1.75).l2 == 0


def test_line_two_collapses_when_zone_is_short() -> None:
    dev = _with_bastones({"z3": {"l1_enabled": True, "l2_enabled": True, "L3_m": 0.5}})

    demand = compute_cutoff_demand(dev, dev.spans[0], Face.TOP)
    assert demand.l1_peak == 1
    assert demand.l2_peak == 0


def test_zone_lengths_snap_to_grid() -> None:
    dev = _with_bastones({"z3": {"l1_enabled": True, "L3_m": 1.23}})
    intervals = build_zone_intervals(dev.spans[0], Face.TOP, dev.baston_Lc)

    assert intervals[0].zone == Zone.Z3
    assert (intervals[0].start, intervals[0].end) == pytest.approx((6.0 - 1.25, 6.0))


def test_middle_zone_defaults() -> None:
    dev = _with_bastones({"z2": {"l1_enabled": True, "l2_enabled": True}})
    intervals = {i.line: i for i in build_zone_intervals(dev.spans[0], Face.TOP, dev.baston_Lc)}

    assert (intervals[BarGroup.L1].start, intervals[BarGroup.L1].end) == pytest.approx((1.2, 4.8))
    assert (intervals[BarGroup.L2].start, intervals[BarGroup.L2].end) == pytest.approx((1.7, 4.3))


def test_zero_length_span() -> None:
    dev = _with_bastones({"z1": {"l1_enabled": True, "l1_qty": 3}}, L=0.0)
    span = dev.spans[0]

    demand = compute_cutoff_demand(dev, span, Face.TOP)
    assert (demand.l1_peak, demand.l2_peak, demand.total_peak) == (0, 0, 0)
    assert active_cutoffs_at(dev, span, Face.TOP, 1.0).l1 == 0


def test_active_counts_clipped_to_layout_pool() -> None:
    dev = _with_bastones({"z1": {"l1_enabled": True, "l1_qty": 3}})
    span = dev.spans[0]
    layout = compute_span_face_layout(dev, 0, Face.TOP)

    active = active_cutoffs_at(dev, span, Face.TOP, 0.5, pool=layout)
    assert active.l1 == len(layout.l1_bars) == 3


def test_governing_diameter_from_enabled_lines() -> None:
    dev = _with_bastones(
        {
            "z1": {"l1_enabled": True, "l1_diameter": "1/2"},
            "z3": {"l2_enabled": True, "l2_diameter": "1", "L3_m": 2.0},
            "z2": {"l1_enabled": False, "l1_diameter": "1-3/8"},
        }
    )
    demand = compute_cutoff_demand(dev, dev.spans[0], Face.TOP)

    assert demand.governing_diameter_cm == pytest.approx(2.54)


def test_legacy_zone_keys() -> None:
    dev = _with_bastones({"z1": {"enabled": True, "qty": 2, "diameter": "Ø5/8"}})
    cfg = dev.spans[0].bastones.top.z1

    assert cfg.l1_enabled and cfg.l2_enabled
    assert cfg.l1_qty == cfg.l2_qty == 2
    assert cfg.l2_diameter == "5/8"


def test_active_counts_never_exceed_placed_bars() -> None:
    dev = _with_bastones({"z1": {"l1_enabled": True, "l1_qty": 3}})
    span = dev.spans[0]
    # Layout armado con lugar para un solo bastón.
    demand = CutoffDemand(l1_peak=1, total_peak=1, governing_diameter_cm=1.905)
    layout = compute_span_face_layout(dev, 0, Face.TOP, demand)

    assert len(layout.l1_bars) == 1
    assert active_cutoffs_at(dev, span, Face.TOP, 0.5).l1 == 3
    assert active_cutoffs_at(dev, span, Face.TOP, 0.5, pool=layout).l1 == 1


def test_covering_intervals_keep_zone_order() -> None:
    dev = _with_bastones(
        {
            "z1": {"l1_enabled": True, "l1_qty": 2, "l1_diameter": "3/4"},
            "z2": {"l1_enabled": True, "l1_qty": 1, "l1_diameter": "1/2", "L1_m": 2.0},
        }
    )
    covering = active_cutoff_intervals_at(dev, dev.spans[0], Face.TOP, 2.0)

    assert [(interval.zone, count) for interval, count in covering] == [(Zone.Z1, 2)]
