from typing import Any, Dict, List, Tuple, Union

from steel_detailing.core.logging import get_logger
from steel_detailing.modules.rebar import build_node_slots, compute_node_origins
from steel_detailing.schemas import (
    BarGroup,
    ConnectivityResult,
    Development,
    DevelopmentDetailing,
    Face,
    FaceLayout,
    LayoutFailure,
    SpanFaceDetailing,
)
from steel_detailing.services.connectivity_service import resolve_connectivity
from steel_detailing.services.cutoff_service import compute_cutoff_demand
from steel_detailing.services.layout_service import compute_span_face_layout
from steel_detailing.services.quantity_service import compute_development_quantities
from steel_detailing.services.stirrups_service import compute_development_stirrups

logger = get_logger(__name__)


class DetailingDebugger:
    """Pequeño ayudante para exponer el avance del cálculo en los logs."""

    def __init__(self, name: str = "detailing") -> None:
        self.step = 0
        self.name = name.upper()

    def log(self, message: str, **context: Any) -> None:
        self.step += 1
        context_str = " ".join(
            f"{key}={value}" for key, value in context.items() if value is not None
        )
        if context_str:
            logger.info("%s[%02d] %s | %s", self.name, self.step, message, context_str)
        else:
            logger.info("%s[%02d] %s", self.name, self.step, message)

    def warn(self, message: str) -> None:
        logger.warning("%s[WRN] %s", self.name, message)


class DevelopmentDetailingService:
    """Arma secciones y conexiones de todo un desarrollo de viga."""

    faces = (Face.TOP, Face.BOTTOM)
    groups = (BarGroup.MAIN, BarGroup.L1, BarGroup.L2)

    def compute(self, development: Development) -> DevelopmentDetailing:
        debugger = DetailingDebugger("desarrollo")
        debugger.log(
            "Inicio",
            nombre=development.name,
            tramos=len(development.spans),
            nodos=len(development.nodes),
        )

        origins = compute_node_origins(development)
        warnings: List[str] = []

        sections: List[SpanFaceDetailing] = []
        layouts: Dict[Tuple[int, Face], Union[FaceLayout, LayoutFailure]] = {}
        for span_index, span in enumerate(development.spans):
            for face in self.faces:
                demand = compute_cutoff_demand(development, span, face)
                layout = compute_span_face_layout(development, span_index, face, demand)
                layouts[(span_index, face)] = layout
                if isinstance(layout, LayoutFailure):
                    # Sin acero corrido no hay nada que advertir.
                    if layout.code != "empty":
                        warnings.append(f"Tramo {span_index + 1} ({face.value}): {layout.reason}")
                elif layout.diagnostics.shortfall > 0:
                    warnings.append(
                        f"Tramo {span_index + 1} ({face.value}): "
                        f"{layout.diagnostics.shortfall} bastones sin espacio en la sección"
                    )
                sections.append(SpanFaceDetailing(span_index=span_index, face=face, demand=demand, layout=layout))
        debugger.log("Secciones calculadas", secciones=len(sections), advertencias=len(warnings) or None)

        connections: List[ConnectivityResult] = []
        for slot in build_node_slots(len(development.nodes)) if development.spans else []:
            for face in self.faces:
                for group in self.groups:
                    span_index = slot.node_index - 1 if slot.end == 1 else slot.node_index
                    result = resolve_connectivity(
                        development,
                        slot.node_index,
                        face,
                        slot.end,
                        group,
                        layout=layouts.get((span_index, face)),
                    )
                    if result is not None and result.active:
                        connections.append(result)
        debugger.log("Conexiones resueltas", conexiones=len(connections))

        stirrups = compute_development_stirrups(development)
        quantities = compute_development_quantities(development)
        debugger.log(
            "Estribos y cuantías",
            estribos=sum(item.count for item in stirrups),
            cortes=len(quantities),
        )

        for message in warnings:
            debugger.warn(message)

        return DevelopmentDetailing(
            name=development.name,
            node_origins_m=origins,
            sections=sections,
            connections=connections,
            stirrups=stirrups,
            quantities=quantities,
            warnings=warnings,
        )


__all__ = ["DetailingDebugger", "DevelopmentDetailingService"]
