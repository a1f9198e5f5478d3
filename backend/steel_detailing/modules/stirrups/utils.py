"""Especificaciones de estribos a lo largo del tramo.

Se aceptan dos formatos de texto:

* ABCR: ``A=0.05 b,B=8,0.10 c,C=5,0.15 R=0.25``. El primer estribo va a A de
  la cara; el bloque b tiene b estribos (incluido el primero) a B; el bloque c
  tiene c estribos a C y el resto va a R hasta el centro.
* Tokens antiguos: ``1@.05, 8@.10, rto@.25``. Un número suelto equivale a
  ``rto@<número>`` y lo que esté antes de ``:`` se ignora.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence, Tuple

from steel_detailing.schemas.development import StirrupsDistribution
from steel_detailing.schemas.steel_layout import StirrupBlock

_EPS = 1e-6
_NUMBER = r"([0-9]+(?:[.,][0-9]+)?|\.[0-9]+)"

_A_RE = re.compile(rf"\bA\s*=\s*{_NUMBER}\s*m?\b", re.IGNORECASE)
_R_RE = re.compile(rf"\bR\s*=\s*{_NUMBER}\s*m?\b", re.IGNORECASE)
_B_RE = re.compile(rf"\bb\s*,\s*B\s*=\s*(\d+)\s*,\s*{_NUMBER}\s*m?\b", re.IGNORECASE)
_C_RE = re.compile(rf"\bc\s*,\s*C\s*=\s*(\d+)\s*,\s*{_NUMBER}\s*m?\b", re.IGNORECASE)
_TOKEN_RE = re.compile(r"(rto|resto|\d+)\s*@\s*(\d+\.\d+|\d+|\.\d+)", re.IGNORECASE)
_BARE_NUMBER_RE = re.compile(r"^(\d+(?:\.\d+)?|\.\d+)\s*m?$", re.IGNORECASE)

DesignMode = Literal["sismico", "gravedad"]
Side = Literal["left", "right", "center"]


@dataclass(frozen=True, slots=True)
class StirrupToken:
    kind: Literal["count", "rest"]
    spacing_m: float
    count: int = 1


@dataclass(frozen=True, slots=True)
class StirrupsABCR:
    A_m: float = 0.0
    b_n: int = 0
    B_m: float = 0.0
    c_n: int = 0
    C_m: float = 0.0
    R_m: float = 0.0

    def format(self) -> str:
        return (
            f"A={max(0.0, self.A_m):.2f} b,B={max(0, self.b_n)},{max(0.0, self.B_m):.3f} "
            f"c,C={max(0, self.c_n)},{max(0.0, self.C_m):.3f} R={max(0.0, self.R_m):.3f}"
        )


# Sísmico por altura de viga: (h_m, b_n, B_m, R_m) con A = 0.05 m.
# En gravedad sólo va el primer estribo a A y el resto a R.
STIRRUP_DEFAULTS_BY_HEIGHT: List[Tuple[float, int, float, float]] = [
    (0.400, 9, 0.100, 0.200),
    (0.425, 9, 0.100, 0.200),
    (0.450, 9, 0.100, 0.200),
    (0.475, 9, 0.100, 0.200),
    (0.500, 9, 0.100, 0.220),
    (0.525, 9, 0.100, 0.225),
    (0.550, 9, 0.125, 0.250),
    (0.575, 10, 0.125, 0.250),
    (0.600, 10, 0.125, 0.250),
    (0.625, 10, 0.125, 0.250),
    (0.650, 9, 0.150, 0.300),
    (0.675, 10, 0.150, 0.300),
    (0.700, 10, 0.150, 0.300),
    (0.725, 10, 0.150, 0.300),
    (0.750, 9, 0.175, 0.350),
    (0.775, 10, 0.175, 0.350),
    (0.800, 10, 0.175, 0.350),
    (0.825, 10, 0.175, 0.350),
    (0.850, 10, 0.175, 0.350),
    (0.875, 11, 0.175, 0.350),
    (0.900, 11, 0.175, 0.350),
    (0.925, 11, 0.175, 0.350),
    (0.950, 12, 0.175, 0.350),
    (0.975, 12, 0.175, 0.350),
    (1.000, 12, 0.175, 0.350),
]
DEFAULT_FIRST_STIRRUP_M = 0.05


def _to_float(raw: Optional[str]) -> float:
    if raw is None:
        return 0.0
    try:
        value = float(raw.strip().replace(",", "."))
    except ValueError:
        return 0.0
    return max(0.0, value) if math.isfinite(value) else 0.0


def parse_stirrups_abcr(text: Optional[str]) -> Optional[StirrupsABCR]:
    """``None`` si el texto no trae ninguna de las claves A, b,B, c,C o R."""
    source = str(text or "")
    if not source.strip():
        return None

    match_a = _A_RE.search(source)
    match_r = _R_RE.search(source)
    match_b = _B_RE.search(source)
    match_c = _C_RE.search(source)
    if not (match_a or match_r or match_b or match_c):
        return None

    return StirrupsABCR(
        A_m=_to_float(match_a.group(1)) if match_a else 0.0,
        b_n=int(match_b.group(1)) if match_b else 0,
        B_m=_to_float(match_b.group(2)) if match_b else 0.0,
        c_n=int(match_c.group(1)) if match_c else 0,
        C_m=_to_float(match_c.group(2)) if match_c else 0.0,
        R_m=_to_float(match_r.group(1)) if match_r else 0.0,
    )


def parse_stirrups_spec(text: Optional[str]) -> List[StirrupToken]:
    source = str(text or "")
    if not source.strip():
        return []
    if ":" in source:
        source = source.split(":", 1)[1]

    abcr = parse_stirrups_abcr(source)
    if abcr is not None:
        tokens: List[StirrupToken] = []
        if abcr.A_m > 0:
            tokens.append(StirrupToken("count", abcr.A_m, 1))
        if abcr.b_n > 1 and abcr.B_m > 0:
            tokens.append(StirrupToken("count", abcr.B_m, abcr.b_n - 1))
        if abcr.c_n > 0 and abcr.C_m > 0:
            tokens.append(StirrupToken("count", abcr.C_m, abcr.c_n))
        if abcr.R_m > 0:
            tokens.append(StirrupToken("rest", abcr.R_m))
        return tokens

    tokens = []
    for part in (piece.strip() for piece in source.split(",")):
        if not part:
            continue
        bare = _BARE_NUMBER_RE.match(part)
        if bare and "@" not in part:
            spacing = float(bare.group(1))
            if spacing > 0:
                tokens.append(StirrupToken("rest", spacing))
            continue

        match = _TOKEN_RE.search(part)
        if not match:
            continue
        spacing = float(match.group(2))
        if spacing <= 0:
            continue
        label = match.group(1).lower()
        if label in ("rto", "resto"):
            tokens.append(StirrupToken("rest", spacing))
        elif int(label) > 0:
            tokens.append(StirrupToken("count", spacing, int(label)))
    return tokens


def abcr_from_tokens(tokens: Sequence[StirrupToken]) -> Optional[StirrupsABCR]:
    """Migra ``1@A, N@B, rto@R`` a ABCR; otras formas no se migran."""
    if not tokens:
        return None
    first = tokens[0]
    if first.kind != "count" or first.count != 1:
        return None

    index = 1
    b_n, B_m = 1, 0.0
    if index < len(tokens) and tokens[index].kind == "count":
        b_n = 1 + max(0, tokens[index].count)
        B_m = max(0.0, tokens[index].spacing_m)
        index += 1

    R_m = 0.0
    for token in tokens[index:]:
        if token.kind == "rest":
            R_m = max(0.0, token.spacing_m)
            break
    return StirrupsABCR(A_m=first.spacing_m, b_n=b_n, B_m=B_m, R_m=R_m)


def default_abcr_for_height(h_m: float, mode: DesignMode = "sismico") -> StirrupsABCR:
    height = h_m if math.isfinite(h_m) else 0.5
    row = min(STIRRUP_DEFAULTS_BY_HEIGHT, key=lambda item: abs(item[0] - height))
    _, b_n, B_m, R_m = row
    if mode == "gravedad":
        return StirrupsABCR(A_m=DEFAULT_FIRST_STIRRUP_M, b_n=1, R_m=R_m)
    return StirrupsABCR(A_m=DEFAULT_FIRST_STIRRUP_M, b_n=b_n, B_m=B_m, R_m=R_m)


def rest_spacing_from_spec(text: Optional[str]) -> Optional[float]:
    abcr = parse_stirrups_abcr(text)
    if abcr is not None and abcr.R_m > 0:
        return abcr.R_m
    for token in reversed(parse_stirrups_spec(text)):
        if token.kind == "rest" and token.spacing_m > 0:
            return token.spacing_m
    return None


def _within(x: float, end_x: float, direction: int) -> bool:
    return x <= end_x + _EPS if direction > 0 else x >= end_x - _EPS


def _run(start: float, spacing: float, count: int, end_x: float, direction: int) -> List[float]:
    positions: List[float] = []
    for k in range(count):
        x = start + direction * spacing * k
        if not _within(x, end_x, direction):
            break
        positions.append(x)
    return positions


def _rest_count(start: float, spacing: float, end_x: float) -> int:
    return int(math.floor(abs(end_x - start) / spacing + 1e-12)) + 1


def stirrup_positions_from_tokens(
    tokens: Sequence[StirrupToken],
    face_x: float,
    end_x: float,
    direction: int,
) -> List[float]:
    """Posiciones desde ``face_x`` hacia ``end_x``; un segmento que no entra se salta."""
    cursor = face_x
    positions: List[float] = []
    for token in tokens:
        if token.spacing_m <= 0:
            continue
        base = cursor + direction * token.spacing_m
        if not _within(base, end_x, direction):
            continue
        if token.kind == "rest":
            positions.extend(_run(base, token.spacing_m, _rest_count(base, token.spacing_m, end_x), end_x, direction))
            break
        run = _run(base, token.spacing_m, max(1, token.count), end_x, direction)
        positions.extend(run)
        if run:
            cursor = run[-1]
    return positions


def stirrup_blocks_from_spec(
    text: Optional[str],
    face_x: float,
    end_x: float,
    direction: int,
    side: Side = "left",
) -> List[StirrupBlock]:
    abcr = parse_stirrups_abcr(text)
    if abcr is None:
        return _legacy_blocks(parse_stirrups_spec(text), face_x, end_x, direction, side)

    blocks: List[StirrupBlock] = []
    cursor = face_x

    if abcr.A_m > 0 and abcr.b_n > 0:
        first = cursor + direction * abcr.A_m
        if _within(first, end_x, direction):
            positions = [first]
            if abcr.b_n > 1 and abcr.B_m > 0:
                positions.extend(_run(first + direction * abcr.B_m, abcr.B_m, abcr.b_n - 1, end_x, direction))
            cursor = positions[-1]
            blocks.append(StirrupBlock(key="b", side=side, positions_m=positions))

    # Si el primero de c no entra se pasa directo a R.
    if abcr.c_n > 0 and abcr.C_m > 0:
        base = cursor + direction * abcr.C_m
        if _within(base, end_x, direction):
            positions = _run(base, abcr.C_m, abcr.c_n, end_x, direction)
            cursor = positions[-1]
            blocks.append(StirrupBlock(key="c", side=side, positions_m=positions))

    if abcr.R_m > 0:
        base = cursor + direction * abcr.R_m
        if _within(base, end_x, direction):
            positions = _run(base, abcr.R_m, _rest_count(base, abcr.R_m, end_x), end_x, direction)
            blocks.append(StirrupBlock(key="r", side=side, positions_m=positions))
    return blocks


def _legacy_blocks(
    tokens: Sequence[StirrupToken],
    face_x: float,
    end_x: float,
    direction: int,
    side: Side,
) -> List[StirrupBlock]:
    blocks: List[StirrupBlock] = []
    cursor = face_x
    for index, token in enumerate(tokens, start=1):
        if token.spacing_m <= 0:
            continue
        base = cursor + direction * token.spacing_m
        if not _within(base, end_x, direction):
            continue
        if token.kind == "rest":
            positions = _run(base, token.spacing_m, _rest_count(base, token.spacing_m, end_x), end_x, direction)
            if positions:
                blocks.append(StirrupBlock(key="r", side=side, positions_m=positions))
            break
        positions = _run(base, token.spacing_m, max(1, token.count), end_x, direction)
        if positions:
            cursor = positions[-1]
            blocks.append(StirrupBlock(key=f"seg{index}", side=side, positions_m=positions))
    return blocks


def _first_spec(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value and value.strip():
            return value.strip()
    return None


def resolve_end_specs(distribution: StirrupsDistribution) -> Tuple[Optional[str], Optional[str]]:
    """Especificación que arranca desde la cara izquierda y desde la derecha."""
    left = distribution.left_spec
    center = distribution.center_spec
    right = distribution.right_spec

    if distribution.case_type == "asim_ambos":
        left_spec = _first_spec(left, center)
        return left_spec, _first_spec(right, center, left_spec)

    if distribution.case_type == "asim_uno":
        special = _first_spec(left)
        rest = _first_spec(center, special)
        if distribution.single_end == "right":
            return rest, special
        return special, rest

    left_spec = _first_spec(left, center, right)
    return left_spec, _first_spec(right, left_spec)


__all__ = [
    "DEFAULT_FIRST_STIRRUP_M",
    "STIRRUP_DEFAULTS_BY_HEIGHT",
    "StirrupToken",
    "StirrupsABCR",
    "abcr_from_tokens",
    "default_abcr_for_height",
    "parse_stirrups_abcr",
    "parse_stirrups_spec",
    "resolve_end_specs",
    "rest_spacing_from_spec",
    "stirrup_blocks_from_spec",
    "stirrup_positions_from_tokens",
]
