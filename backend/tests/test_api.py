from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import node_data, span_data
from steel_detailing.main import app

client = TestClient(app)

BASE = "/api/v1/tools/steel-layout"


def _development(**extra):
    data = {
        "spans": [span_data(), span_data()],
        "nodes": [node_data(a2=0.3, b2=0.3), node_data(a1=0.3, a2=0.6, b1=0.3, b2=0.6), node_data(a2=0.3, b2=0.3)],
    }
    data.update(extra)
    return data


def test_presets() -> None:
    response = client.get(f"{BASE}/presets")

    assert response.status_code == 200
    body = response.json()
    assert body["hook_leg_m"] == pytest.approx(0.15)
    assert body["code_lengths_cm"]["5/8"]["ldg_cm"] == pytest.approx(47)
    assert body["col_rules"][0]["max_cols"] == 2


def test_diameter() -> None:
    response = client.post(f"{BASE}/diameter", json={"token": "1 3/8"})

    assert response.status_code == 200
    body = response.json()
    assert body["key"] == "1-3/8"
    assert body["diameter_cm"] == pytest.approx(3.4925)
    assert body["s_min_cm"] == pytest.approx(4.0)


def test_face_layout() -> None:
    payload = {"face": "bottom", "b_cm": 30, "h_cm": 50, "cover_cm": 4, "main_steel": {"qty": 3, "diameter": "5/8"}}
    response = client.post(f"{BASE}/face-layout", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["cols"] == 3
    assert len(body["main_bars"]) == 3


def test_face_layout_failure_is_not_an_http_error() -> None:
    payload = {"b_cm": 15, "h_cm": 50, "main_steel": {"qty": 5, "diameter": "1"}, "stirrups": {"qty": 1}}
    response = client.post(f"{BASE}/face-layout", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is False
    assert body["code"] == "infeasible"
    assert body["reason"]


def test_span_layout_unknown_span() -> None:
    response = client.post(f"{BASE}/span-layout", json={"development": _development(), "span_index": 5, "face": "top"})

    assert response.status_code == 404


def test_cutoff_demand_with_cut() -> None:
    dev = _development()
    dev["spans"][0]["bastones"] = {"top": {"z1": {"l1_enabled": True, "l1_qty": 2}}}
    payload = {"development": dev, "span_index": 0, "face": "top", "x_m": 0.5}
    response = client.post(f"{BASE}/cutoff-demand", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["demand"]["l1_peak"] == 2
    assert body["active"]["l1"] == 2


def test_cutoff_demand_cut_at_touching_zones() -> None:
    dev = _development()
    dev["spans"][0]["bastones"] = {
        "top": {
            "z1": {"l1_enabled": True, "l1_qty": 2, "L3_m": 2.0},
            "z2": {"l1_enabled": True, "l1_qty": 1, "L1_m": 2.0},
        }
    }
    payload = {"development": dev, "span_index": 0, "face": "top", "x_m": 2.0}
    response = client.post(f"{BASE}/cutoff-demand", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["demand"]["l1_peak"] == 2
    assert body["active"]["l1"] == 2


def test_connectivity() -> None:
    dev = _development()
    dev["nodes"][0]["steel_top_2_kind"] = "hook"
    dev["nodes"][0]["steel_top_2_to_face"] = True
    payload = {"development": dev, "node_index": 0, "face": "top", "end": 2, "group": "main"}
    response = client.post(f"{BASE}/connectivity", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["kind"] == "hook"
    assert body["terminal_x_m"] == pytest.approx(0.04)


def test_connectivity_contract_violation() -> None:
    payload = {"development": _development(), "node_index": 0, "face": "top", "end": 1}
    response = client.post(f"{BASE}/connectivity", json=payload)

    assert response.status_code == 422


def test_development_and_preference() -> None:
    dev = _development()
    for span in dev["spans"]:
        span["steel_top"] = {"qty": 0}
        span["steel_bottom"] = {"qty": 0}

    preferred = client.post(f"{BASE}/preferences/basic", json=dev)
    assert preferred.status_code == 200
    preferred_body = preferred.json()
    assert preferred_body["spans"][0]["steel_top"] == {"qty": 2, "diameter": "5/8"}
    assert preferred_body["nodes"][0]["top_2"]["main"]["kind"] == "hook"

    detailing = client.post(f"{BASE}/development", json=preferred_body)
    assert detailing.status_code == 200
    body = detailing.json()
    assert len(body["sections"]) == 4
    assert body["warnings"] == []


def test_invalid_development_is_rejected() -> None:
    response = client.post(f"{BASE}/development", json={"spans": [span_data()], "nodes": []})

    assert response.status_code == 422


def test_section_quantities_default_cuts() -> None:
    payload = {"development": _development(), "span_index": 1}
    response = client.post(f"{BASE}/section-quantities", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert [cut["x_m"] for cut in body] == pytest.approx([5 / 6, 2.5, 5 - 5 / 6])
    assert body[0]["top"]["As_installed_cm2"] == pytest.approx(2 * 1.979)
    assert body[0]["top"]["ok"] is False


def test_section_quantities_single_cut_and_all_spans() -> None:
    dev = _development()
    dev["spans"][0]["As_requerida_bottom"] = 3.0
    single = client.post(f"{BASE}/section-quantities", json={"development": dev, "span_index": 0, "x_m": 1.0})

    assert single.status_code == 200
    assert len(single.json()) == 1
    assert single.json()[0]["bottom"]["As_required_cm2"] == pytest.approx(3.0)

    everything = client.post(f"{BASE}/section-quantities", json={"development": dev})
    assert len(everything.json()) == 6

    missing = client.post(f"{BASE}/section-quantities", json={"development": dev, "span_index": 4})
    assert missing.status_code == 404


def test_stirrups() -> None:
    dev = _development()
    dev["spans"][0]["stirrups"] = {"left_spec": "1@.05, 4@.10, rto@.20"}
    response = client.post(f"{BASE}/stirrups", json={"development": dev})

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 2
    assert body[0]["x_start_m"] == pytest.approx(0.3)
    assert [block["key"] for block in body[0]["blocks"]][:3] == ["seg1", "seg2", "r"]
    assert body[1]["blocks"] == []
