"""Longitudes de gancho y anclaje por diámetro (tabla de norma, en cm)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Mapping, Optional

from steel_detailing.modules.rebar.diameters import DEFAULT_DIAMETER_KEY, normalize_diameter_key
from steel_detailing.schemas.enums import Face

TerminationKind = Literal["hook", "anchorage"]


@dataclass(frozen=True, slots=True)
class CodeLengthRow:
    ldg_cm: float
    ld_inf_cm: float
    ld_sup_cm: float


DEFAULT_CODE_LENGTHS_CM: Dict[str, CodeLengthRow] = {
    "3/8": CodeLengthRow(ldg_cm=28, ld_inf_cm=60, ld_sup_cm=75),
    "1/2": CodeLengthRow(ldg_cm=38, ld_inf_cm=80, ld_sup_cm=100),
    "5/8": CodeLengthRow(ldg_cm=47, ld_inf_cm=95, ld_sup_cm=120),
    "3/4": CodeLengthRow(ldg_cm=56, ld_inf_cm=115, ld_sup_cm=145),
    "1": CodeLengthRow(ldg_cm=56, ld_inf_cm=115, ld_sup_cm=145),
    "1-3/8": CodeLengthRow(ldg_cm=77, ld_inf_cm=155, ld_sup_cm=200),
}

CodeLengthTable = Mapping[str, CodeLengthRow]


def length_from_table_m(
    diameter: str,
    kind: TerminationKind,
    face: Face,
    table: Optional[CodeLengthTable] = None,
) -> float:
    """Gancho -> ldg; anclaje recto -> ld_sup (cara superior) o ld_inf (inferior)."""
    rows = table if table is not None else DEFAULT_CODE_LENGTHS_CM
    key = normalize_diameter_key(diameter)
    row = rows.get(key) or rows.get(DEFAULT_DIAMETER_KEY) or DEFAULT_CODE_LENGTHS_CM[DEFAULT_DIAMETER_KEY]
    if kind == "hook":
        cm = row.ldg_cm
    elif face == Face.TOP:
        cm = row.ld_sup_cm
    else:
        cm = row.ld_inf_cm
    return cm / 100.0


__all__ = [
    "CodeLengthRow",
    "CodeLengthTable",
    "DEFAULT_CODE_LENGTHS_CM",
    "TerminationKind",
    "length_from_table_m",
]
