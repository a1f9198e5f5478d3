"""Instantánea de un desarrollo de viga (tramos, nodos y ajustes de layout).

Estos modelos se validan una sola vez al entrar al motor. Aceptan también las
claves planas antiguas del editor (``steel_top_1_kind``, ``enabled``/``qty``...)
y las traducen al esquema por línea/extremo.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field, field_validator, model_validator

from steel_detailing.core.config import settings as app_settings
from steel_detailing.modules.rebar.diameters import (
    DEFAULT_COL_RULES,
    DEFAULT_DAG_CM,
    DEFAULT_DIAMETER_KEY,
    DEFAULT_PRACTICAL_MIN_CM,
    DEFAULT_REBAR_DIAMETERS_CM,
    DEFAULT_STIRRUP_DIAMETER_KEY,
    normalize_diameter_key,
)
from steel_detailing.schemas.enums import BarGroup, Face, SteelKind, SupportType, Zone

_VALID_KINDS = {kind.value for kind in SteelKind}


def _coerce_diameter(value: Any) -> str:
    raw = "" if value is None else str(value)
    key = normalize_diameter_key(raw.strip().lstrip("∅Ø"))
    return key or DEFAULT_DIAMETER_KEY


DiameterToken = Annotated[str, BeforeValidator(_coerce_diameter)]


def _finite_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _positive_or_none(value: Any) -> Optional[float]:
    number = _finite_or_none(value)
    return number if number is not None and number > 0 else None


def _clamp_qty(value: Any, default: int = 1) -> int:
    number = _finite_or_none(value)
    if number is None:
        return default
    return max(1, min(3, int(math.floor(number + 0.5))))


def _non_negative(value: Any, default: float) -> float:
    number = _finite_or_none(value)
    if number is None:
        return default
    return max(0.0, number)


class SteelMeta(BaseModel):
    qty: int = Field(0, ge=0)
    diameter: DiameterToken = DEFAULT_DIAMETER_KEY

    @field_validator("qty", mode="before")
    @classmethod
    def floor_qty(cls, value: Any) -> int:
        number = _finite_or_none(value)
        if number is None:
            return 0
        return max(0, int(math.floor(number)))


class StirrupsSection(BaseModel):
    """Estribos en sección; ``qty`` es la cantidad de lazos concéntricos."""

    shape: Literal["rect"] = "rect"
    diameter: DiameterToken = DEFAULT_STIRRUP_DIAMETER_KEY
    qty: int = Field(1, ge=0)

    @field_validator("shape", mode="before")
    @classmethod
    def only_rect(cls, value: Any) -> str:
        return "rect"

    @field_validator("qty", mode="before")
    @classmethod
    def floor_qty(cls, value: Any) -> int:
        number = _finite_or_none(value)
        if number is None:
            return 1
        return max(0, int(math.floor(number)))


class StirrupsDistribution(BaseModel):
    """Distribución de estribos a lo largo del tramo.

    Cada especificación acepta el formato ABCR (``A=0.05 b,B=8,0.10 R=0.25``)
    o el antiguo por tokens (``1@.05, 8@.10, rto@.25``).
    """

    case_type: Literal["simetrica", "asim_ambos", "asim_uno"] = "simetrica"
    design_mode: Literal["sismico", "gravedad"] = "sismico"
    diameter: DiameterToken = DEFAULT_STIRRUP_DIAMETER_KEY
    left_spec: Optional[str] = None
    center_spec: Optional[str] = None
    right_spec: Optional[str] = None
    single_end: Optional[Literal["left", "right"]] = None

    @field_validator("case_type", mode="before")
    @classmethod
    def normalize_case_type(cls, value: Any) -> str:
        text = str(value or "").strip().lower()
        return text if text in ("simetrica", "asim_ambos", "asim_uno") else "simetrica"

    @field_validator("design_mode", mode="before")
    @classmethod
    def normalize_design_mode(cls, value: Any) -> str:
        return "gravedad" if str(value or "").strip().lower() == "gravedad" else "sismico"

    @field_validator("single_end", mode="before")
    @classmethod
    def normalize_single_end(cls, value: Any) -> Optional[str]:
        text = str(value or "").strip().lower()
        return text if text in ("left", "right") else None

    @field_validator("left_spec", "center_spec", "right_spec", mode="before")
    @classmethod
    def blank_spec_is_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None


class BastonCfg(BaseModel):
    l1_enabled: bool = False
    l1_qty: int = Field(1, ge=1, le=3)
    l1_diameter: DiameterToken = DEFAULT_DIAMETER_KEY

    l2_enabled: bool = False
    l2_qty: int = Field(1, ge=1, le=3)
    l2_diameter: DiameterToken = DEFAULT_DIAMETER_KEY

    # Zona 2 usa L1_m/L2_m (desde cada apoyo); zonas 1 y 3 usan L3_m.
    L1_m: Optional[float] = None
    L2_m: Optional[float] = None
    L3_m: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def allow_legacy_schema(cls, data: Any) -> Any:
        """Replica ``enabled``/``qty``/``diameter`` antiguos en ambas líneas."""
        if not isinstance(data, dict):
            return data

        legacy_enabled = data.get("enabled")
        legacy_qty = data.get("qty")
        legacy_diameter = data.get("diameter")

        normalized: Dict[str, Any] = {}
        for line in ("l1", "l2"):
            enabled = data.get(f"{line}_enabled")
            if enabled is None:
                enabled = legacy_enabled
            normalized[f"{line}_enabled"] = bool(enabled or False)

            qty = data.get(f"{line}_qty")
            normalized[f"{line}_qty"] = _clamp_qty(qty if qty is not None else legacy_qty)

            diameter = data.get(f"{line}_diameter")
            if diameter is None:
                diameter = legacy_diameter
            normalized[f"{line}_diameter"] = diameter if diameter is not None else DEFAULT_DIAMETER_KEY

        for field in ("L1_m", "L2_m", "L3_m"):
            normalized[field] = _positive_or_none(data.get(field))
        return normalized

    @property
    def any_enabled(self) -> bool:
        return self.l1_enabled or self.l2_enabled

    def line_enabled(self, group: BarGroup) -> bool:
        return self.l1_enabled if group == BarGroup.L1 else self.l2_enabled

    def line_qty(self, group: BarGroup) -> int:
        return self.l1_qty if group == BarGroup.L1 else self.l2_qty

    def line_diameter(self, group: BarGroup) -> str:
        return self.l1_diameter if group == BarGroup.L1 else self.l2_diameter


class BastonesSideCfg(BaseModel):
    z1: BastonCfg = Field(default_factory=BastonCfg)
    z2: BastonCfg = Field(default_factory=BastonCfg)
    z3: BastonCfg = Field(default_factory=BastonCfg)

    def zone(self, zone: Zone) -> BastonCfg:
        return getattr(self, zone.value)


class BastonesCfg(BaseModel):
    top: BastonesSideCfg = Field(default_factory=BastonesSideCfg)
    bottom: BastonesSideCfg = Field(default_factory=BastonesSideCfg)


class FaceOverride(BaseModel):
    mode: Literal["auto", "manual"] = "auto"
    rows_override: Optional[int] = None
    cols_override: Optional[int] = None

    @field_validator("rows_override", "cols_override", mode="before")
    @classmethod
    def positive_or_none(cls, value: Any) -> Optional[int]:
        number = _positive_or_none(value)
        return int(math.floor(number)) if number is not None else None


class LayoutOverrides(BaseModel):
    top: FaceOverride = Field(default_factory=FaceOverride)
    bottom: FaceOverride = Field(default_factory=FaceOverride)


class Span(BaseModel):
    L: float = 0.0
    h: float = 0.5
    b: float = 0.3

    steel_top: SteelMeta = Field(default_factory=SteelMeta)
    steel_bottom: SteelMeta = Field(default_factory=SteelMeta)
    stirrups_section: StirrupsSection = Field(default_factory=StirrupsSection)
    stirrups: Optional[StirrupsDistribution] = None
    steel_layout: LayoutOverrides = Field(default_factory=LayoutOverrides)
    bastones: BastonesCfg = Field(default_factory=BastonesCfg)

    # Acero requerido por el análisis (cm2); sin dato se compara contra As mín.
    As_requerida_top: Optional[float] = Field(
        None,
        validation_alias=AliasChoices(
            "As_requerida_top", "as_requerida_top", "As_req_top", "as_req_top", "As_req_top_cm2", "as_req_top_cm2"
        ),
    )
    As_requerida_bottom: Optional[float] = Field(
        None,
        validation_alias=AliasChoices(
            "As_requerida_bottom",
            "as_requerida_bottom",
            "As_req_bottom",
            "as_req_bottom",
            "As_req_bottom_cm2",
            "as_req_bottom_cm2",
        ),
    )

    @field_validator("L", mode="before")
    @classmethod
    def clamp_length(cls, value: Any) -> float:
        return _non_negative(value, 0.0)

    @field_validator("h", mode="before")
    @classmethod
    def clamp_height(cls, value: Any) -> float:
        return _non_negative(value, 0.5)

    @field_validator("b", mode="before")
    @classmethod
    def clamp_width(cls, value: Any) -> float:
        return _non_negative(value, 0.3)

    @field_validator("As_requerida_top", "As_requerida_bottom", mode="before")
    @classmethod
    def required_area(cls, value: Any) -> Optional[float]:
        number = _finite_or_none(value)
        return number if number is not None and number >= 0 else None

    def steel(self, face: Face) -> SteelMeta:
        return self.steel_top if face == Face.TOP else self.steel_bottom

    def bastones_side(self, face: Face) -> BastonesSideCfg:
        return self.bastones.top if face == Face.TOP else self.bastones.bottom

    def layout_override(self, face: Face) -> FaceOverride:
        return self.steel_layout.top if face == Face.TOP else self.steel_layout.bottom

    def required_area_cm2(self, face: Face) -> Optional[float]:
        return self.As_requerida_top if face == Face.TOP else self.As_requerida_bottom


class EndConnection(BaseModel):
    kind: SteelKind = SteelKind.CONTINUOUS
    to_face: bool = False
    anchorage_length_m: Optional[float] = None

    @field_validator("anchorage_length_m", mode="before")
    @classmethod
    def positive_length(cls, value: Any) -> Optional[float]:
        return _positive_or_none(value)


class NodeEnd(BaseModel):
    """Decisiones de un extremo del nodo (1 = tramo izquierdo, 2 = tramo derecho)."""

    main: EndConnection = Field(default_factory=EndConnection)
    l1: EndConnection = Field(default_factory=EndConnection)
    l2: EndConnection = Field(default_factory=EndConnection)

    def connection(self, group: BarGroup) -> EndConnection:
        return getattr(self, group.value)


def _legacy_kind(value: Any) -> Optional[str]:
    if isinstance(value, SteelKind):
        return value.value
    return value if value in _VALID_KINDS else None


class Node(BaseModel):
    a1: float = 0.0
    a2: float = 0.0
    b1: float = 0.0
    b2: float = 0.0
    support_type: Optional[SupportType] = None

    top_1: NodeEnd = Field(default_factory=NodeEnd)
    top_2: NodeEnd = Field(default_factory=NodeEnd)
    bottom_1: NodeEnd = Field(default_factory=NodeEnd)
    bottom_2: NodeEnd = Field(default_factory=NodeEnd)

    @field_validator("a1", "a2", "b1", "b2", mode="before")
    @classmethod
    def clamp_offsets(cls, value: Any) -> float:
        return _non_negative(value, 0.0)

    @model_validator(mode="before")
    @classmethod
    def allow_legacy_schema(cls, data: Any) -> Any:
        """Convierte las claves planas del editor (``steel_top_1_kind``...)."""
        if not isinstance(data, dict):
            return data

        converted = dict(data)
        for face in ("top", "bottom"):
            if data.get(f"steel_{face}_hook"):
                face_kind: Optional[str] = SteelKind.HOOK.value
            elif data.get(f"steel_{face}_development"):
                face_kind = SteelKind.DEVELOPMENT.value
            else:
                face_kind = None

            for end in (1, 2):
                key = f"{face}_{end}"
                if key in data:
                    continue

                main: Dict[str, Any] = {}
                kind = _legacy_kind(data.get(f"steel_{face}_{end}_kind")) or face_kind
                if kind:
                    main["kind"] = kind
                to_face = data.get(f"steel_{face}_{end}_to_face")
                if to_face is not None:
                    main["to_face"] = bool(to_face)
                anchorage = data.get(f"steel_{face}_{end}_anchorage_length")
                if anchorage is not None:
                    main["anchorage_length_m"] = anchorage

                entry: Dict[str, Any] = {"main": main}
                for line in (1, 2):
                    connection: Dict[str, Any] = {}
                    line_kind = _legacy_kind(data.get(f"baston_{face}_{end}_l{line}_kind")) or _legacy_kind(
                        data.get(f"baston_{face}_{end}_kind")
                    )
                    if line_kind:
                        connection["kind"] = line_kind
                    line_to_face = data.get(f"baston_{face}_{end}_l{line}_to_face")
                    if not isinstance(line_to_face, bool):
                        line_to_face = data.get(f"baston_{face}_{end}_to_face")
                    if isinstance(line_to_face, bool):
                        connection["to_face"] = line_to_face
                    entry[f"l{line}"] = connection
                converted[key] = entry
        return converted

    def end(self, face: Face, end: int) -> NodeEnd:
        return getattr(self, f"{face.value}_{end}")

    @property
    def column_length_m(self) -> float:
        return abs(self.b2 - self.b1)


class ColumnRule(BaseModel):
    b_min_cm: float
    b_max_cm: float
    min_cols: int = 2
    max_cols: int = 2


def _default_col_rules() -> List[ColumnRule]:
    return [
        ColumnRule(b_min_cm=b_min, b_max_cm=b_max, min_cols=lo, max_cols=hi)
        for b_min, b_max, lo, hi in DEFAULT_COL_RULES
    ]


class SteelLayoutSettings(BaseModel):
    dag_cm: float = DEFAULT_DAG_CM
    use_practical_min: bool = True
    practical_min_cm: float = DEFAULT_PRACTICAL_MIN_CM
    max_rows_per_face: int = Field(3, ge=1, le=3)
    col_rules: List[ColumnRule] = Field(default_factory=_default_col_rules)
    rebar_diameters_cm: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_REBAR_DIAMETERS_CM))

    @field_validator("dag_cm", mode="before")
    @classmethod
    def positive_dag(cls, value: Any) -> float:
        return _positive_or_none(value) or DEFAULT_DAG_CM

    @field_validator("practical_min_cm", mode="before")
    @classmethod
    def practical_min(cls, value: Any) -> float:
        number = _finite_or_none(value)
        return number if number is not None else DEFAULT_PRACTICAL_MIN_CM

    @field_validator("max_rows_per_face", mode="before")
    @classmethod
    def clamp_rows(cls, value: Any) -> int:
        number = _finite_or_none(value)
        if number is None:
            return 3
        return max(1, min(3, int(math.floor(number))))

    @field_validator("rebar_diameters_cm", mode="before")
    @classmethod
    def normalize_table(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return dict(DEFAULT_REBAR_DIAMETERS_CM)
        table: Dict[str, float] = {}
        for key, raw in value.items():
            number = _positive_or_none(raw)
            if number is not None:
                table[normalize_diameter_key(key)] = number
        return table


class Development(BaseModel):
    name: str = "DESARROLLO 01"
    spans: List[Span] = Field(default_factory=list)
    nodes: List[Node] = Field(default_factory=list)

    unit_scale: float = Field(default_factory=lambda: app_settings.DEFAULT_UNIT_SCALE)
    x0: float = 0.0
    recubrimiento: float = Field(default_factory=lambda: app_settings.DEFAULT_COVER_M)
    baston_Lc: float = Field(default_factory=lambda: app_settings.DEFAULT_BASTON_LC_M)
    steel_layout_settings: SteelLayoutSettings = Field(default_factory=SteelLayoutSettings)

    @field_validator("recubrimiento", mode="before")
    @classmethod
    def clamp_cover(cls, value: Any) -> float:
        return _non_negative(value, app_settings.DEFAULT_COVER_M)

    @field_validator("baston_Lc", mode="before")
    @classmethod
    def clamp_lc(cls, value: Any) -> float:
        return _non_negative(value, app_settings.DEFAULT_BASTON_LC_M)

    @field_validator("unit_scale", mode="before")
    @classmethod
    def positive_scale(cls, value: Any) -> float:
        return _positive_or_none(value) or app_settings.DEFAULT_UNIT_SCALE

    @model_validator(mode="after")
    def check_node_count(self) -> "Development":
        if not self.spans and not self.nodes:
            return self
        if len(self.nodes) != len(self.spans) + 1:
            raise ValueError(
                f"Un desarrollo con {len(self.spans)} tramos requiere {len(self.spans) + 1} nodos "
                f"(recibidos {len(self.nodes)})"
            )
        return self

    def is_internal_node(self, node_index: int) -> bool:
        return 0 < node_index < len(self.nodes) - 1


__all__ = [
    "BastonCfg",
    "BastonesCfg",
    "BastonesSideCfg",
    "ColumnRule",
    "Development",
    "DiameterToken",
    "EndConnection",
    "FaceOverride",
    "LayoutOverrides",
    "Node",
    "NodeEnd",
    "Span",
    "SteelLayoutSettings",
    "SteelMeta",
    "StirrupsSection",
]
