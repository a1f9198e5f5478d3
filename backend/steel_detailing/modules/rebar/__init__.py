"""Utilidades de barras: diámetros, separaciones, longitudes de norma y geometría."""

from .diameters import (
    DEFAULT_COL_RULES,
    DEFAULT_REBAR_DIAMETERS_CM,
    REBAR_AREA_CM2,
    bar_area_cm2,
    diameter_to_cm,
    min_clear_spacing_cm,
    normalize_diameter_key,
    parse_inches,
    resolve_column_range,
    snap_to_grid_m,
    stirrup_wrap_thickness_cm,
)
from .lengths import DEFAULT_CODE_LENGTHS_CM, CodeLengthRow, CodeLengthTable, length_from_table_m
from .geometry import build_node_slots, compute_node_origins, m_to_units, span_face_range

__all__ = [
    "CodeLengthRow",
    "CodeLengthTable",
    "DEFAULT_CODE_LENGTHS_CM",
    "DEFAULT_COL_RULES",
    "DEFAULT_REBAR_DIAMETERS_CM",
    "REBAR_AREA_CM2",
    "bar_area_cm2",
    "build_node_slots",
    "compute_node_origins",
    "diameter_to_cm",
    "length_from_table_m",
    "m_to_units",
    "min_clear_spacing_cm",
    "normalize_diameter_key",
    "parse_inches",
    "resolve_column_range",
    "snap_to_grid_m",
    "span_face_range",
    "stirrup_wrap_thickness_cm",
]
