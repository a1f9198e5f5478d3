from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from steel_detailing.schemas.enums import BarGroup, Face, SteelKind


class BarPoint(BaseModel):
    """Centro de barra en la sección: y desde la base, z desde el eje de simetría."""

    y_cm: float
    z_cm: float


class LayoutDiagnostics(BaseModel):
    main_qty: int = Field(..., description="Barras de acero corrido ubicadas")
    l1_requested: int = Field(0, description="Bastones L1 solicitados por la demanda")
    l1_placed: int = Field(0, description="Bastones L1 efectivamente ubicados")
    l2_requested: int = Field(0, description="Bastones L2 solicitados por la demanda")
    l2_placed: int = Field(0, description="Bastones L2 efectivamente ubicados")
    stirrups_thickness_cm: float = Field(0.0, description="Espesor total de estribos concéntricos")
    cover_effective_cm: float = Field(..., description="Recubrimiento + estribos")
    usable_width_cm: float = Field(..., description="Ancho útil entre centros de barras extremas")

    @property
    def shortfall(self) -> int:
        return (self.l1_requested - self.l1_placed) + (self.l2_requested - self.l2_placed)


class FaceLayout(BaseModel):
    ok: Literal[True] = True
    face: Face
    rows: int
    cols: int
    s_min_cm: float
    dx_cm: float
    db_governing_cm: float
    main_db_cm: float
    cutoff_db_cm: float
    main_bars: List[BarPoint] = Field(default_factory=list)
    l1_bars: List[BarPoint] = Field(default_factory=list)
    l2_bars: List[BarPoint] = Field(default_factory=list)
    diagnostics: LayoutDiagnostics

    @property
    def cutoff_pool(self) -> List[BarPoint]:
        return [*self.l1_bars, *self.l2_bars]


class LayoutFailure(BaseModel):
    ok: Literal[False] = False
    code: Literal["empty", "invalid_geometry", "no_usable_width", "infeasible"]
    reason: str = Field(..., min_length=1)
    debug: Dict[str, Any] = Field(default_factory=dict)


class CutoffDemand(BaseModel):
    l1_peak: int = 0
    l2_peak: int = 0
    total_peak: int = 0
    governing_diameter_cm: float = 0.0

    @property
    def requested(self) -> int:
        return self.l1_peak + self.l2_peak


class ActiveCutoffs(BaseModel):
    x_m: float
    l1: int = 0
    l2: int = 0


class ConnectivityResult(BaseModel):
    node_index: int
    face: Face
    end: Literal[1, 2]
    group: BarGroup
    kind: SteelKind
    active: bool = Field(True, description="False si la línea de bastón no existe en esa zona")
    diameter: Optional[str] = None
    anchor_x_m: Optional[float] = Field(None, description="Extremo de la barra en el tramo")
    terminal_x_m: Optional[float] = Field(None, description="Extremo lejano del tramo de gancho/anclaje")
    length_m: Optional[float] = None
    leg_dy_m: Optional[float] = Field(None, description="Pata del gancho (negativa = hacia abajo)")
    to_face_applied: bool = False

    def points(self, y_m: float) -> List[Tuple[float, float]]:
        """Polilínea del remate para una barra a la altura ``y_m``."""
        if self.anchor_x_m is None or self.terminal_x_m is None:
            return []
        pts = [(self.anchor_x_m, y_m), (self.terminal_x_m, y_m)]
        if self.leg_dy_m is not None:
            pts.append((self.terminal_x_m, y_m + self.leg_dy_m))
        return pts


class NodeSlot(BaseModel):
    node_index: int
    end: Literal[1, 2]
    label: str


class SpanFaceDetailing(BaseModel):
    span_index: int
    face: Face
    demand: CutoffDemand
    layout: FaceLayout | LayoutFailure


class StirrupBlock(BaseModel):
    """Grupo de estribos de una misma especificación (b, c, r, segN o mid)."""

    key: str
    side: Literal["left", "right", "center"]
    positions_m: List[float] = Field(default_factory=list)


class SpanStirrups(BaseModel):
    span_index: int
    x_start_m: float = Field(..., description="Cara izquierda del tramo (cara inferior)")
    x_end_m: float = Field(..., description="Cara derecha del tramo (cara inferior)")
    diameter: Optional[str] = None
    left_spec: Optional[str] = None
    right_spec: Optional[str] = None
    blocks: List[StirrupBlock] = Field(default_factory=list)

    @property
    def positions_m(self) -> List[float]:
        return sorted(x for block in self.blocks for x in block.positions_m)

    @property
    def count(self) -> int:
        return sum(len(block.positions_m) for block in self.blocks)


class FaceQuantities(BaseModel):
    face: Face
    As_installed_cm2: float = Field(..., description="Acero corrido más bastones activos en el corte")
    As_required_cm2: float = Field(..., description="Dato del tramo o, sin dato, As mín")
    rho_installed: float
    rho_required: float
    ok: bool = Field(..., description="rho_min <= rho <= rho_max y rho >= rho requerida")
    margin_cm2: float
    margin_rho: float


class SectionQuantities(BaseModel):
    span_index: int
    x_m: float = Field(..., description="Posición del corte desde el inicio del tramo")
    b_cm: float
    d_cm: float
    As_min_cm2: float
    As_max_cm2: float
    rho_min: float
    rho_max: float
    top: FaceQuantities
    bottom: FaceQuantities


class DevelopmentDetailing(BaseModel):
    name: str
    node_origins_m: List[float]
    sections: List[SpanFaceDetailing]
    connections: List[ConnectivityResult]
    stirrups: List[SpanStirrups] = Field(default_factory=list)
    quantities: List[SectionQuantities] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


__all__ = [
    "ActiveCutoffs",
    "BarPoint",
    "ConnectivityResult",
    "CutoffDemand",
    "DevelopmentDetailing",
    "FaceQuantities",
    "FaceLayout",
    "LayoutDiagnostics",
    "LayoutFailure",
    "NodeSlot",
    "SectionQuantities",
    "SpanFaceDetailing",
    "SpanStirrups",
    "StirrupBlock",
]
