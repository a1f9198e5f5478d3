from .enums import BarGroup, Face, SteelKind, SupportType, Zone
from .development import (
    BastonCfg,
    BastonesCfg,
    BastonesSideCfg,
    ColumnRule,
    Development,
    EndConnection,
    FaceOverride,
    LayoutOverrides,
    Node,
    NodeEnd,
    Span,
    SteelLayoutSettings,
    SteelMeta,
    StirrupsDistribution,
    StirrupsSection,
)
from .steel_layout import (
    ActiveCutoffs,
    BarPoint,
    ConnectivityResult,
    CutoffDemand,
    DevelopmentDetailing,
    FaceLayout,
    FaceQuantities,
    LayoutDiagnostics,
    LayoutFailure,
    NodeSlot,
    SectionQuantities,
    SpanFaceDetailing,
    SpanStirrups,
    StirrupBlock,
)

__all__ = [
    "ActiveCutoffs",
    "BarGroup",
    "BarPoint",
    "BastonCfg",
    "BastonesCfg",
    "BastonesSideCfg",
    "ColumnRule",
    "ConnectivityResult",
    "CutoffDemand",
    "Development",
    "DevelopmentDetailing",
    "EndConnection",
    "Face",
    "FaceLayout",
    "FaceOverride",
    "FaceQuantities",
    "LayoutDiagnostics",
    "LayoutFailure",
    "LayoutOverrides",
    "Node",
    "NodeEnd",
    "NodeSlot",
    "SectionQuantities",
    "Span",
    "SpanFaceDetailing",
    "SpanStirrups",
    "SteelKind",
    "SteelLayoutSettings",
    "SteelMeta",
    "StirrupBlock",
    "StirrupsDistribution",
    "StirrupsSection",
    "SupportType",
    "Zone",
]
