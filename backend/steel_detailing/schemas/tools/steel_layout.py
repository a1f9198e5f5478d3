from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from steel_detailing.schemas.development import (
    Development,
    FaceOverride,
    SteelLayoutSettings,
    SteelMeta,
    StirrupsSection,
)
from steel_detailing.schemas.enums import BarGroup, Face
from steel_detailing.schemas.steel_layout import ActiveCutoffs, CutoffDemand


class CodeLengthRead(BaseModel):
    ldg_cm: float = Field(..., description="Longitud de gancho")
    ld_inf_cm: float = Field(..., description="Anclaje recto, cara inferior")
    ld_sup_cm: float = Field(..., description="Anclaje recto, cara superior")


class ColumnRuleRead(BaseModel):
    b_min_cm: float
    b_max_cm: float
    min_cols: int
    max_cols: int


class SteelLayoutPresetResponse(BaseModel):
    diameter_options: List[str]
    rebar_diameters_cm: Dict[str, float]
    col_rules: List[ColumnRuleRead]
    code_lengths_cm: Dict[str, CodeLengthRead]
    hook_leg_m: float
    baston_lc_m: float
    cover_m: float


class DiameterRequest(BaseModel):
    token: str = Field(..., description="Diámetro en pulgadas: '3/4', '1 3/8', '0.75'...")
    settings: Optional[SteelLayoutSettings] = None


class DiameterResponse(BaseModel):
    token: str
    key: str
    diameter_cm: float
    s_min_cm: float


class FaceLayoutRequest(BaseModel):
    """Sección aislada; dimensiones en cm."""

    face: Face = Face.BOTTOM
    b_cm: float = Field(..., gt=0)
    h_cm: float = Field(..., gt=0)
    cover_cm: float = Field(4.0, ge=0)
    main_steel: SteelMeta
    cutoff_demand: Optional[CutoffDemand] = None
    settings: Optional[SteelLayoutSettings] = None
    overrides: Optional[FaceOverride] = None
    stirrups: Optional[StirrupsSection] = None


class SpanLayoutRequest(BaseModel):
    development: Development
    span_index: int = Field(..., ge=0)
    face: Face


class CutoffDemandRequest(SpanLayoutRequest):
    x_m: Optional[float] = Field(None, description="Corte a evaluar, desde el inicio del tramo (m)")


class CutoffDemandResponse(BaseModel):
    demand: CutoffDemand
    active: Optional[ActiveCutoffs] = None


class SectionQuantitiesRequest(BaseModel):
    development: Development
    span_index: Optional[int] = Field(None, ge=0, description="Sin tramo se evalúan todos")
    x_m: Optional[float] = Field(None, description="Sin corte se usan L/6, L/2 y 5L/6")


class SpanStirrupsRequest(BaseModel):
    development: Development
    span_index: Optional[int] = Field(None, ge=0, description="Sin tramo se distribuyen todos")


class ConnectivityRequest(BaseModel):
    development: Development
    node_index: int = Field(..., ge=0)
    face: Face
    end: Literal[1, 2]
    group: BarGroup = BarGroup.MAIN


__all__ = [
    "CodeLengthRead",
    "ColumnRuleRead",
    "ConnectivityRequest",
    "CutoffDemandRequest",
    "CutoffDemandResponse",
    "DiameterRequest",
    "DiameterResponse",
    "FaceLayoutRequest",
    "SectionQuantitiesRequest",
    "SpanLayoutRequest",
    "SpanStirrupsRequest",
    "SteelLayoutPresetResponse",
]
