"""Diámetros de barra y separaciones mínimas (E.060) para el layout de sección."""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from steel_detailing.schemas.development import StirrupsSection, SteelLayoutSettings

DEFAULT_DIAMETER_KEY = "3/4"
DEFAULT_STIRRUP_DIAMETER_KEY = "3/8"
INCH_TO_CM = 2.54

DEFAULT_REBAR_DIAMETERS_CM: Dict[str, float] = {
    "1/2": 1.27,
    "5/8": 1.5875,
    "3/4": 1.905,
    "1": 2.54,
    "1-3/8": 3.4925,
}

# Áreas nominales (cm2) para cuantías.
REBAR_AREA_CM2: Dict[str, float] = {
    "6mm": 0.28,
    "8mm": 0.50,
    "3/8": 0.713,
    "12mm": 1.13,
    "1/2": 1.267,
    "5/8": 1.979,
    "3/4": 2.85,
    "1": 5.067,
    "1-3/8": 9.583,
}

# (b_min_cm, b_max_cm, min_cols, max_cols)
DEFAULT_COL_RULES: List[Tuple[float, float, int, int]] = [
    (0.0, 20.0, 2, 2),
    (20.0, 27.5, 2, 3),
    (27.5, 32.5, 2, 4),
    (32.5, 40.0, 2, 5),
    (45.0, 50.0, 3, 6),
    (55.0, 60.0, 4, 7),
]
DEFAULT_COLUMN_RANGE = (2, 5)

DEFAULT_DAG_CM = 2.5
DEFAULT_PRACTICAL_MIN_CM = 4.0
ABSOLUTE_MIN_SPACING_CM = 2.5

_MIXED_SPELLINGS = {"1 3/8", "1-3/8", "1-3/8'", "1-3/8in"}
_FRACTION_RE = re.compile(r"^(-?\d+)\s*/\s*(\d+)$")
_INCH_SUFFIX_RE = re.compile(r"in(ch(es)?)?", re.IGNORECASE)


def normalize_diameter_key(token: object) -> str:
    """Lleva variantes como '1 3/8', '1-3/8in' o '3/4"' a la clave canónica."""
    key = str(token if token is not None else "").strip().replace('"', "")
    if key in _MIXED_SPELLINGS:
        return "1-3/8"
    return key


def _parse_fraction(text: str) -> Optional[float]:
    match = _FRACTION_RE.match(text)
    if not match:
        return None
    numerator = float(match.group(1))
    denominator = float(match.group(2))
    if denominator == 0:
        return None
    return numerator / denominator


def parse_inches(token: str) -> Optional[float]:
    """Interpreta '0.75', '3/4', '1 3/8' o '1-3/8' como pulgadas."""
    text = _INCH_SUFFIX_RE.sub("", str(token or "").strip())
    text = re.sub(r"\s+", " ", text).strip()
    if not text:
        return None

    try:
        value = float(text)
    except ValueError:
        value = None
    if value is not None:
        return value if math.isfinite(value) else None

    parts = [part for part in text.replace("-", " ", 1).split(" ") if part]
    if len(parts) == 1:
        return _parse_fraction(parts[0])
    if len(parts) == 2:
        try:
            whole = float(parts[0])
        except ValueError:
            return None
        fraction = _parse_fraction(parts[1])
        if fraction is None or not math.isfinite(whole):
            return None
        return whole + fraction
    return None


def diameter_to_cm(token: object, settings: Optional["SteelLayoutSettings"] = None) -> float:
    """Diámetro nominal en cm. Nunca falla: tokens ilegibles caen a 3/4"."""
    key = normalize_diameter_key(token)
    table = settings.rebar_diameters_cm if settings is not None else DEFAULT_REBAR_DIAMETERS_CM
    from_table = table.get(key)
    if from_table is not None and math.isfinite(from_table) and from_table > 0:
        return float(from_table)

    inches = parse_inches(key)
    if inches is not None and math.isfinite(inches) and inches > 0:
        return inches * INCH_TO_CM
    return DEFAULT_REBAR_DIAMETERS_CM[DEFAULT_DIAMETER_KEY]


def min_clear_spacing_cm(db_cm: float, settings: Optional["SteelLayoutSettings"] = None) -> float:
    dag_cm = settings.dag_cm if settings is not None else DEFAULT_DAG_CM
    use_practical = settings.use_practical_min if settings is not None else True
    practical_min = settings.practical_min_cm if settings is not None else DEFAULT_PRACTICAL_MIN_CM

    base = max(db_cm, ABSOLUTE_MIN_SPACING_CM, 1.3 * dag_cm)
    if use_practical:
        return max(base, practical_min)
    return base


def resolve_column_range(b_cm: float, settings: Optional["SteelLayoutSettings"] = None) -> Tuple[int, int]:
    if settings is not None:
        rules = [(r.b_min_cm, r.b_max_cm, r.min_cols, r.max_cols) for r in settings.col_rules]
    else:
        rules = DEFAULT_COL_RULES

    for b_min, b_max, min_cols, max_cols in rules:
        if not (math.isfinite(b_min) and math.isfinite(b_max)):
            continue
        if b_min <= b_cm <= b_max:
            lo = max(2, int(math.floor(min_cols or 2)))
            hi = max(lo, int(math.floor(max_cols or lo)))
            return lo, hi
    return DEFAULT_COLUMN_RANGE


def stirrup_wrap_thickness_cm(
    stirrups: Optional["StirrupsSection"],
    settings: Optional["SteelLayoutSettings"] = None,
) -> float:
    """Espesor total de estribos concéntricos que el acero longitudinal debe librar."""
    if stirrups is None or stirrups.qty <= 0:
        return 0.0
    db_cm = diameter_to_cm(stirrups.diameter, settings)
    return stirrups.qty * db_cm


def bar_area_cm2(token: object) -> float:
    """Área de una barra; los diámetros fuera de la tabla no suman (0.0)."""
    return REBAR_AREA_CM2.get(normalize_diameter_key(token), 0.0)


def snap_to_grid_m(value_m: float, step_m: float = 0.05) -> float:
    snapped = math.floor(value_m / step_m + 0.5) * step_m
    return math.floor(snapped * 100 + 0.5) / 100


__all__ = [
    "DEFAULT_COL_RULES",
    "DEFAULT_COLUMN_RANGE",
    "DEFAULT_DIAMETER_KEY",
    "DEFAULT_REBAR_DIAMETERS_CM",
    "DEFAULT_STIRRUP_DIAMETER_KEY",
    "REBAR_AREA_CM2",
    "bar_area_cm2",
    "diameter_to_cm",
    "min_clear_spacing_cm",
    "normalize_diameter_key",
    "parse_inches",
    "resolve_column_range",
    "snap_to_grid_m",
    "stirrup_wrap_thickness_cm",
]
