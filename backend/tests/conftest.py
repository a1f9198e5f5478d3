from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from steel_detailing.schemas import Development


def span_data(L: float = 5.0, top_qty: int = 2, bottom_qty: int = 2, diameter: str = "5/8", **extra: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "L": L,
        "h": 0.5,
        "b": 0.3,
        "steel_top": {"qty": top_qty, "diameter": diameter},
        "steel_bottom": {"qty": bottom_qty, "diameter": diameter},
    }
    data.update(extra)
    return data


def node_data(a1: float = 0.0, a2: float = 0.0, b1: float = 0.0, b2: float = 0.0, **extra: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {"a1": a1, "a2": a2, "b1": b1, "b2": b2}
    data.update(extra)
    return data


def build_development(spans: List[Dict[str, Any]], nodes: Optional[List[Dict[str, Any]]] = None, **extra: Any) -> Development:
    if nodes is None:
        nodes = [node_data() for _ in range(len(spans) + 1)]
    return Development.model_validate({"spans": spans, "nodes": nodes, **extra})


@pytest.fixture
def single_span() -> Development:
    """Tramo de 6 m, 0.30 x 0.50, 2 Ø5/8" arriba, sin bastones."""
    return build_development([span_data(L=6.0, bottom_qty=0)])


@pytest.fixture
def two_spans() -> Development:
    # Columnas de 0.30 m en los extremos y nodo interno con caras en 0.30 / 0.60.
    return build_development(
        [span_data(), span_data()],
        [
            node_data(a2=0.3, b2=0.3),
            node_data(a1=0.3, a2=0.6, b1=0.3, b2=0.6),
            node_data(b2=0.3, a2=0.3),
        ],
    )
