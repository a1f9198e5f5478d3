"""Utilidades para la distribución de estribos a lo largo del tramo."""

from .utils import (
    STIRRUP_DEFAULTS_BY_HEIGHT,
    StirrupToken,
    StirrupsABCR,
    abcr_from_tokens,
    default_abcr_for_height,
    parse_stirrups_abcr,
    parse_stirrups_spec,
    resolve_end_specs,
    rest_spacing_from_spec,
    stirrup_blocks_from_spec,
    stirrup_positions_from_tokens,
)

__all__ = [
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
