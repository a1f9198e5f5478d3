import logging
from typing import List, Union

from fastapi import APIRouter, HTTPException, status

from steel_detailing.core.config import settings
from steel_detailing.core.errors import ContractViolationError
from steel_detailing.modules.rebar import (
    DEFAULT_CODE_LENGTHS_CM,
    diameter_to_cm,
    min_clear_spacing_cm,
    normalize_diameter_key,
)
from steel_detailing.schemas import (
    ConnectivityResult,
    Development,
    DevelopmentDetailing,
    FaceLayout,
    LayoutFailure,
    SectionQuantities,
    SpanStirrups,
    SteelLayoutSettings,
)
from steel_detailing.schemas.tools.steel_layout import (
    CodeLengthRead,
    ColumnRuleRead,
    ConnectivityRequest,
    CutoffDemandRequest,
    CutoffDemandResponse,
    DiameterRequest,
    DiameterResponse,
    FaceLayoutRequest,
    SectionQuantitiesRequest,
    SpanLayoutRequest,
    SpanStirrupsRequest,
    SteelLayoutPresetResponse,
)
from steel_detailing.services import (
    DevelopmentDetailingService,
    active_cutoffs_at,
    apply_basic_preference,
    compute_cutoff_demand,
    compute_development_quantities,
    compute_development_stirrups,
    compute_face_layout,
    compute_section_quantities,
    compute_span_face_layout,
    compute_span_quantities,
    compute_span_stirrups,
    resolve_connectivity,
)

router = APIRouter(prefix="/tools/steel-layout", tags=["tools: acero en sección"])

detailing_service = DevelopmentDetailingService()
logger = logging.getLogger(__name__)

LayoutResult = Union[FaceLayout, LayoutFailure]


def _check_span_index(development: Development, span_index: int) -> None:
    if span_index >= len(development.spans):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tramo {span_index} no encontrado (hay {len(development.spans)})",
        )


@router.get("/presets", response_model=SteelLayoutPresetResponse)
def get_presets():
    defaults = SteelLayoutSettings()
    return SteelLayoutPresetResponse(
        diameter_options=list(DEFAULT_CODE_LENGTHS_CM.keys()),
        rebar_diameters_cm=defaults.rebar_diameters_cm,
        col_rules=[ColumnRuleRead(**rule.model_dump()) for rule in defaults.col_rules],
        code_lengths_cm={
            key: CodeLengthRead(ldg_cm=row.ldg_cm, ld_inf_cm=row.ld_inf_cm, ld_sup_cm=row.ld_sup_cm)
            for key, row in DEFAULT_CODE_LENGTHS_CM.items()
        },
        hook_leg_m=settings.HOOK_LEG_M,
        baston_lc_m=settings.DEFAULT_BASTON_LC_M,
        cover_m=settings.DEFAULT_COVER_M,
    )


@router.post("/diameter", response_model=DiameterResponse)
def resolve_diameter(request: DiameterRequest):
    diameter_cm = diameter_to_cm(request.token, request.settings)
    return DiameterResponse(
        token=request.token,
        key=normalize_diameter_key(request.token),
        diameter_cm=diameter_cm,
        s_min_cm=min_clear_spacing_cm(diameter_cm, request.settings),
    )


@router.post("/face-layout", response_model=LayoutResult)
def compute_section_layout(request: FaceLayoutRequest):
    return compute_face_layout(
        request.face,
        request.b_cm,
        request.h_cm,
        request.cover_cm,
        request.main_steel,
        request.cutoff_demand,
        settings=request.settings,
        overrides=request.overrides,
        stirrups=request.stirrups,
    )


@router.post("/span-layout", response_model=LayoutResult)
def compute_span_layout(request: SpanLayoutRequest):
    _check_span_index(request.development, request.span_index)
    return compute_span_face_layout(request.development, request.span_index, request.face)


@router.post("/cutoff-demand", response_model=CutoffDemandResponse)
def compute_span_cutoff_demand(request: CutoffDemandRequest):
    _check_span_index(request.development, request.span_index)
    span = request.development.spans[request.span_index]
    demand = compute_cutoff_demand(request.development, span, request.face)
    active = None
    if request.x_m is not None:
        layout = compute_span_face_layout(request.development, request.span_index, request.face, demand)
        pool = layout if isinstance(layout, FaceLayout) else None
        active = active_cutoffs_at(request.development, span, request.face, request.x_m, pool=pool)
    return CutoffDemandResponse(demand=demand, active=active)


@router.post("/connectivity", response_model=ConnectivityResult)
def compute_node_connectivity(request: ConnectivityRequest):
    try:
        result = resolve_connectivity(
            request.development,
            request.node_index,
            request.face,
            request.end,
            request.group,
        )
    except ContractViolationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Nodo {request.node_index} sin extremo {request.end}",
        )
    return result


@router.post("/section-quantities", response_model=List[SectionQuantities])
def compute_quantities(request: SectionQuantitiesRequest):
    development = request.development
    if request.span_index is None:
        return compute_development_quantities(development)

    _check_span_index(development, request.span_index)
    if request.x_m is None:
        return compute_span_quantities(development, request.span_index)
    quantities = compute_section_quantities(development, request.span_index, request.x_m)
    return [quantities] if quantities is not None else []


@router.post("/stirrups", response_model=List[SpanStirrups])
def compute_stirrups(request: SpanStirrupsRequest):
    if request.span_index is None:
        return compute_development_stirrups(request.development)
    _check_span_index(request.development, request.span_index)
    return [compute_span_stirrups(request.development, request.span_index)]


@router.post("/development", response_model=DevelopmentDetailing)
def compute_development(development: Development):
    try:
        logger.info("Calculando desarrollo %s", development.name)
        return detailing_service.compute(development)
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("Error en compute_development: %s", exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error interno al calcular el desarrollo: {exc}",
        ) from exc


@router.post("/preferences/basic", response_model=Development)
def apply_basic(development: Development):
    return apply_basic_preference(development)
