from __future__ import annotations

from pathlib import Path

import pytest

from formula_deps.model import Document, document_from_dict
from formula_deps.tracing import ConnectorStyle

BUDGET = {
    "name": "Budget",
    "root": {
        "id": "ID_1",
        "text": "Budget",
        "children": [
            {"id": "ID_2", "text": "=ID_3['Rate'] * ID_4", "attributes": {"Label": "Tax"}},
            {
                "id": "ID_3",
                "text": "Rates",
                "attributes": {"Rate": 0.2, "Margin": "=node['Rate'] + 0.05"},
            },
            {
                "id": "ID_4",
                "text": "=ID_5['Hours'] * ID_5['Wage']",
                "children": [
                    {"id": "ID_5", "text": "Staff", "attributes": {"Hours": 160, "Wage": 25}},
                ],
            },
            {"id": "ID_6", "text": "=ID_2 + ID_4"},
        ],
    },
}

RATE = {
    "name": "Rate",
    "root": {
        "id": "ID_root",
        "children": [
            {"id": "ID_N1", "text": "=ID_N2['Rate'] * 2"},
            {"id": "ID_N2", "text": "Rates", "attributes": {"Rate": 0.5}},
        ],
    },
}


@pytest.fixture
def budget() -> Document:
    """Document with node and attribute formulas across several levels."""
    return document_from_dict(BUDGET)


@pytest.fixture
def rate_document() -> Document:
    """N1's formula references attribute Rate of N2."""
    return document_from_dict(RATE)


@pytest.fixture
def style() -> ConnectorStyle:
    return ConnectorStyle(color="#00ff00", width=3)


@pytest.fixture
def budget_file(tmp_path: Path) -> Path:
    import yaml

    path = tmp_path / "budget.yaml"
    path.write_text(yaml.safe_dump(BUDGET, sort_keys=False), encoding="utf-8")
    return path
