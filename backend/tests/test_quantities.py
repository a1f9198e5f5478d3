from __future__ import annotations

import pytest

from conftest import build_development, span_data
from steel_detailing.modules.rebar import bar_area_cm2
from steel_detailing.schemas import Face, Span
from steel_detailing.services.quantity_service import (
    QuantityLimits,
    compute_development_quantities,
    compute_section_quantities,
    compute_span_quantities,
    installed_area_cm2,
    quantity_cuts_m,
)

# b = 30 cm, d = 50 - 4 = 46 cm
BD = 30 * 46


def test_default_limits() -> None:
    limits = QuantityLimits()

    assert limits.beta1 == pytest.approx(0.85)
    assert limits.rho_min == pytest.approx(14 / 4200)
    assert limits.rho_max == pytest.approx(0.75 * 0.85 * 0.85 * (210 / 4200) * (6000 / 10200))


def test_high_strength_concrete_reduces_beta1() -> None:
    assert QuantityLimits(fc_kgcm2=350).beta1 == pytest.approx(0.80)
    assert QuantityLimits(fc_kgcm2=700).beta1 == pytest.approx(0.65)


def test_bar_areas() -> None:
    assert bar_area_cm2("5/8") == pytest.approx(1.979)
    assert bar_area_cm2("1 3/8") == pytest.approx(9.583)
    assert bar_area_cm2("7/8") == 0.0


def test_main_steel_only_below_minimum() -> None:
    dev = build_development([span_data()])
    result = compute_section_quantities(dev, 0, 2.5)

    assert result.b_cm == pytest.approx(30)
    assert result.d_cm == pytest.approx(46)
    assert result.As_min_cm2 == pytest.approx(BD * 14 / 4200)
    assert result.top.As_installed_cm2 == pytest.approx(2 * 1.979)
    # Sin acero requerido se compara contra As mín.
    assert result.top.As_required_cm2 == pytest.approx(result.As_min_cm2)
    assert result.top.rho_installed == pytest.approx(2 * 1.979 / BD)
    assert result.top.ok is False
    assert result.top.margin_cm2 == pytest.approx(2 * 1.979 - BD * 14 / 4200)


def test_cutoff_bars_count_only_inside_their_zone() -> None:
    dev = build_development([span_data(bastones={"top": {"z1": {"l1_enabled": True, "l1_qty": 2, "l1_diameter": "5/8"}}})])

    near_support = compute_section_quantities(dev, 0, 5.0 / 6)
    assert near_support.top.As_installed_cm2 == pytest.approx(4 * 1.979)
    assert near_support.top.ok is True
    assert near_support.bottom.As_installed_cm2 == pytest.approx(2 * 1.979)

    midspan = compute_section_quantities(dev, 0, 2.5)
    assert midspan.top.As_installed_cm2 == pytest.approx(2 * 1.979)


def test_each_cutoff_line_uses_its_own_diameter() -> None:
    dev = build_development(
        [
            span_data(
                bastones={
                    "bottom": {
                        "z2": {
                            "l1_enabled": True,
                            "l1_diameter": "3/4",
                            "l2_enabled": True,
                            "l2_qty": 2,
                            "l2_diameter": "1/2",
                        }
                    }
                }
            )
        ]
    )
    span = dev.spans[0]

    assert installed_area_cm2(dev, span, Face.BOTTOM, 2.5) == pytest.approx(2 * 1.979 + 2.85 + 2 * 1.267)


def test_touching_zones_are_not_counted_twice() -> None:
    dev = build_development(
        [
            span_data(
                bastones={
                    "top": {
                        "z1": {"l1_enabled": True, "l1_qty": 2, "l1_diameter": "3/4", "L3_m": 2.0},
                        "z2": {"l1_enabled": True, "l1_qty": 1, "l1_diameter": "1/2", "L1_m": 2.0},
                    }
                }
            )
        ]
    )
    span = dev.spans[0]

    assert installed_area_cm2(dev, span, Face.TOP, 2.0) == pytest.approx(2 * 1.979 + 2 * 2.85)
    assert installed_area_cm2(dev, span, Face.TOP, 2.5) == pytest.approx(2 * 1.979 + 1.267)


def test_required_area_aliases() -> None:
    dev = build_development([span_data(bottom_qty=3, As_req_bottom_cm2=5.0, as_requerida_top=7.0)])
    result = compute_section_quantities(dev, 0, 2.5)

    assert result.bottom.As_required_cm2 == pytest.approx(5.0)
    assert result.bottom.ok is True
    assert result.top.As_required_cm2 == pytest.approx(7.0)
    assert result.top.ok is False
    assert result.top.margin_rho == pytest.approx((2 * 1.979 - 7.0) / BD)


def test_invalid_required_area_falls_back_to_minimum() -> None:
    span = Span.model_validate({"L": 5.0, "As_requerida_top": -1, "As_requerida_bottom": "nan"})

    assert span.required_area_cm2(Face.TOP) is None
    assert span.required_area_cm2(Face.BOTTOM) is None


def test_maximum_ratio_is_enforced() -> None:
    dev = build_development([span_data(bottom_qty=6, diameter="1", h=0.3, b=0.25)])
    result = compute_section_quantities(dev, 0, 2.5)

    assert result.bottom.rho_installed > result.rho_max
    assert result.bottom.ok is False


def test_section_without_depth() -> None:
    dev = build_development([span_data(h=0.04)])

    assert compute_section_quantities(dev, 0, 1.0) is None
    assert compute_span_quantities(dev, 0) == []


def test_default_cuts() -> None:
    span = Span(L=6.0)

    assert quantity_cuts_m(span) == pytest.approx([1.0, 3.0, 5.0])
    assert quantity_cuts_m(Span(L=0.0)) == []


def test_development_cuts(two_spans) -> None:
    results = compute_development_quantities(two_spans)

    assert len(results) == 6
    assert [r.span_index for r in results] == [0, 0, 0, 1, 1, 1]
    assert results[1].x_m == pytest.approx(2.5)


def test_custom_material() -> None:
    dev = build_development([span_data()])
    result = compute_section_quantities(dev, 0, 2.5, limits=QuantityLimits(fy_kgcm2=2800))

    assert result.rho_min == pytest.approx(0.005)
