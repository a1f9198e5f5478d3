from .connectivity_service import resolve_connectivity, set_node_steel_kind
from .cutoff_service import active_cutoffs_at, compute_cutoff_demand
from .development_service import DevelopmentDetailingService
from .layout_service import compute_face_layout, compute_span_face_layout
from .preference_service import apply_basic_preference, node_steel_length_m
from .quantity_service import compute_development_quantities, compute_section_quantities, compute_span_quantities
from .stirrups_service import compute_development_stirrups, compute_span_stirrups

__all__ = [
    "DevelopmentDetailingService",
    "active_cutoffs_at",
    "apply_basic_preference",
    "compute_cutoff_demand",
    "compute_development_quantities",
    "compute_development_stirrups",
    "compute_face_layout",
    "compute_section_quantities",
    "compute_span_face_layout",
    "compute_span_quantities",
    "compute_span_stirrups",
    "node_steel_length_m",
    "resolve_connectivity",
    "set_node_steel_kind",
]
