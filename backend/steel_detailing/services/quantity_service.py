"""Cuantías de acero longitudinal en cortes del tramo (E.060, flexión simple)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from steel_detailing.core.config import settings
from steel_detailing.core.logging import get_logger
from steel_detailing.modules.rebar import bar_area_cm2
from steel_detailing.schemas import Development, Face, FaceQuantities, SectionQuantities, Span
from steel_detailing.services.cutoff_service import active_cutoff_intervals_at

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class QuantityLimits:
    fc_kgcm2: float = 210.0
    fy_kgcm2: float = 4200.0

    @property
    def beta1(self) -> float:
        if self.fc_kgcm2 <= 280:
            return 0.85
        return max(0.65, 0.85 - 0.05 * (self.fc_kgcm2 - 280) / 70)

    @property
    def rho_min(self) -> float:
        return 14 / self.fy_kgcm2

    @property
    def rho_balanced(self) -> float:
        return 0.85 * self.beta1 * (self.fc_kgcm2 / self.fy_kgcm2) * (6000 / (6000 + self.fy_kgcm2))

    @property
    def rho_max(self) -> float:
        return 0.75 * self.rho_balanced


def default_limits() -> QuantityLimits:
    return QuantityLimits(fc_kgcm2=settings.QUANTITY_FC_KGCM2, fy_kgcm2=settings.QUANTITY_FY_KGCM2)


def installed_area_cm2(development: Development, span: Span, face: Face, x_m: float) -> float:
    """Acero corrido más los bastones que cruzan el corte, cada uno con su diámetro."""
    steel = span.steel(face)
    area = max(0, steel.qty) * bar_area_cm2(steel.diameter)
    side = span.bastones_side(face)
    for interval, count in active_cutoff_intervals_at(development, span, face, x_m):
        diameter = side.zone(interval.zone).line_diameter(interval.line)
        area += count * bar_area_cm2(diameter)
    return area


def _face_quantities(
    face: Face,
    installed: float,
    required: float,
    bd: float,
    limits: QuantityLimits,
) -> FaceQuantities:
    rho_installed = installed / bd
    rho_required = required / bd
    return FaceQuantities(
        face=face,
        As_installed_cm2=installed,
        As_required_cm2=required,
        rho_installed=rho_installed,
        rho_required=rho_required,
        ok=limits.rho_min <= rho_installed <= limits.rho_max and rho_installed >= rho_required,
        margin_cm2=installed - required,
        margin_rho=rho_installed - rho_required,
    )


def compute_section_quantities(
    development: Development,
    span_index: int,
    x_m: float,
    limits: Optional[QuantityLimits] = None,
) -> Optional[SectionQuantities]:
    """Cuantías en el corte ``x_m`` (desde el inicio del tramo).

    d se toma como h - recubrimiento. Devuelve ``None`` si b·d no es positivo.
    """
    limits = limits or default_limits()
    span = development.spans[span_index]
    x = min(span.L, max(0.0, x_m))

    b_cm = max(0.0, span.b * 100)
    d_cm = max(0.0, (span.h - development.recubrimiento) * 100)
    bd = b_cm * d_cm
    if bd <= 0:
        logger.info("Tramo %d sin sección útil para cuantías (b=%.1fcm d=%.1fcm)", span_index + 1, b_cm, d_cm)
        return None

    As_min = limits.rho_min * bd
    As_max = limits.rho_max * bd

    faces = {}
    for face in (Face.TOP, Face.BOTTOM):
        required = span.required_area_cm2(face)
        faces[face] = _face_quantities(
            face,
            installed_area_cm2(development, span, face, x),
            As_min if required is None else required,
            bd,
            limits,
        )

    return SectionQuantities(
        span_index=span_index,
        x_m=x,
        b_cm=b_cm,
        d_cm=d_cm,
        As_min_cm2=As_min,
        As_max_cm2=As_max,
        rho_min=limits.rho_min,
        rho_max=limits.rho_max,
        top=faces[Face.TOP],
        bottom=faces[Face.BOTTOM],
    )


def quantity_cuts_m(span: Span) -> List[float]:
    """Cortes típicos: apoyo izquierdo (L/6), centro (L/2) y apoyo derecho (5L/6)."""
    if span.L <= 1e-6:
        return []
    return [span.L / 6, span.L / 2, span.L - span.L / 6]


def compute_span_quantities(
    development: Development,
    span_index: int,
    limits: Optional[QuantityLimits] = None,
) -> List[SectionQuantities]:
    results = []
    for x in quantity_cuts_m(development.spans[span_index]):
        quantities = compute_section_quantities(development, span_index, x, limits)
        if quantities is not None:
            results.append(quantities)
    return results


def compute_development_quantities(
    development: Development,
    limits: Optional[QuantityLimits] = None,
) -> List[SectionQuantities]:
    limits = limits or default_limits()
    results: List[SectionQuantities] = []
    for span_index in range(len(development.spans)):
        results.extend(compute_span_quantities(development, span_index, limits))
    return results


__all__ = [
    "QuantityLimits",
    "compute_development_quantities",
    "compute_section_quantities",
    "compute_span_quantities",
    "default_limits",
    "installed_area_cm2",
    "quantity_cuts_m",
]
