from __future__ import annotations

import json

from adapters.json_exporter import export_json
from core.domain.common import Page, Pagination
from core.domain.parcels import Zone


def test_export_models_by_alias(tmp_path):
    page = Page[Zone](items=[Zone(id="z1", name="Nord", tenant_id="t1")], pagination=Pagination(total=1))

    out = export_json({"zones": page, "note": "é"}, tmp_path / "out" / "zones.json")

    text = out.read_text(encoding="utf-8")
    data = json.loads(text)
    assert data["note"] == "é"
    assert "é" in text
    assert data["zones"]["items"][0]["tenantId"] == "t1"
    assert list(data) == ["note", "zones"]
