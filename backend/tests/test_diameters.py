from __future__ import annotations

import pytest

from steel_detailing.modules.rebar import (
    diameter_to_cm,
    length_from_table_m,
    min_clear_spacing_cm,
    parse_inches,
    resolve_column_range,
    snap_to_grid_m,
    stirrup_wrap_thickness_cm,
)
from steel_detailing.schemas import Face, SteelLayoutSettings, StirrupsSection


def test_table_diameters() -> None:
    assert diameter_to_cm("3/4") == pytest.approx(1.905)
    assert diameter_to_cm("5/8") == pytest.approx(1.5875)
    assert diameter_to_cm("1") == pytest.approx(2.54)


def test_mixed_spellings_resolve_to_same_key() -> None:
    for token in ("1 3/8", "1-3/8", "1-3/8in", '1-3/8"'):
        assert diameter_to_cm(token) == pytest.approx(3.4925)


def test_parsed_inches_outside_table() -> None:
    assert diameter_to_cm("3/8") == pytest.approx(0.9525)
    assert diameter_to_cm("0.5") == pytest.approx(1.27)


@pytest.mark.parametrize("token", ["", "abc", "3/0", None, "nan"])
def test_unreadable_tokens_fall_back_to_three_quarters(token) -> None:
    assert diameter_to_cm(token) == pytest.approx(1.905)


def test_diameter_is_monotonic_in_inches() -> None:
    tokens = ["3/8", "1/2", "5/8", "3/4", "7/8", "1", "1 1/8", "1-3/8"]
    values = [diameter_to_cm(token) for token in tokens]
    assert values == sorted(values)
    assert all(value > 0 for value in values)


def test_custom_table_wins() -> None:
    settings = SteelLayoutSettings(rebar_diameters_cm={"3/4": 2.0})
    assert diameter_to_cm("3/4", settings) == pytest.approx(2.0)
    # Claves ausentes se interpretan como pulgadas.
    assert diameter_to_cm("1/2", settings) == pytest.approx(1.27)


def test_parse_inches() -> None:
    assert parse_inches("1-3/8") == pytest.approx(1.375)
    assert parse_inches("1 1/2") == pytest.approx(1.5)
    assert parse_inches("3/4in") == pytest.approx(0.75)
    assert parse_inches("abc") is None
    assert parse_inches("") is None


def test_min_clear_spacing() -> None:
    assert min_clear_spacing_cm(1.905) == pytest.approx(4.0)
    loose = SteelLayoutSettings(use_practical_min=False)
    assert min_clear_spacing_cm(1.905, loose) == pytest.approx(3.25)
    assert min_clear_spacing_cm(3.4925, loose) == pytest.approx(3.4925)
    assert min_clear_spacing_cm(1.0, SteelLayoutSettings(use_practical_min=False, dag_cm=1.0)) == pytest.approx(2.5)


def test_column_range() -> None:
    assert resolve_column_range(15) == (2, 2)
    assert resolve_column_range(25) == (2, 3)
    assert resolve_column_range(30) == (2, 4)
    assert resolve_column_range(50) == (3, 6)
    # Hueco entre reglas: rango por defecto.
    assert resolve_column_range(42) == (2, 5)


def test_stirrup_wrap_thickness() -> None:
    assert stirrup_wrap_thickness_cm(None) == 0.0
    assert stirrup_wrap_thickness_cm(StirrupsSection()) == pytest.approx(0.9525)
    assert stirrup_wrap_thickness_cm(StirrupsSection(qty=2, diameter="1/2")) == pytest.approx(2.54)
    assert stirrup_wrap_thickness_cm(StirrupsSection(qty=0)) == 0.0


def test_snap_to_grid() -> None:
    assert snap_to_grid_m(2.0) == pytest.approx(2.0)
    assert snap_to_grid_m(1.23) == pytest.approx(1.25)
    assert snap_to_grid_m(1.21) == pytest.approx(1.2)


def test_code_lengths() -> None:
    assert length_from_table_m("5/8", "hook", Face.TOP) == pytest.approx(0.47)
    assert length_from_table_m("5/8", "anchorage", Face.TOP) == pytest.approx(1.20)
    assert length_from_table_m("5/8", "anchorage", Face.BOTTOM) == pytest.approx(0.95)
    # Diámetro desconocido: fila de 3/4".
    assert length_from_table_m("7/8", "anchorage", Face.TOP) == pytest.approx(1.45)
