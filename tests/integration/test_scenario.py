"""
End-to-end scenario through the HTTP API with no provider keys.

Idea -> classification -> five perspectives -> think forward on one ->
quintessence on the new level -> reset.
"""

import pytest


@pytest.mark.integration
def test_reference_scenario(client, sample_idea):
    sid = client.post("/api/sessions").get_json()["id"]

    started = client.post(f"/api/sessions/{sid}/start", json={"idea": sample_idea}).get_json()
    assert started["classification"] == {
        "language": "de",
        "sophistication_level": "basic",
        "category": "Philosophy",
    }
    roots = [n for n in started["nodes"] if n["level"] == 0]
    assert [n["perspective_name"] for n in roots] == ["Kant", "Heidegger", "Hegel", "Nagarjuna", "Wissenschaft"]
    assert all(n["provider"] is None and n["content"] for n in roots)

    kant = roots[0]["id"]
    expanded = client.post(f"/api/sessions/{sid}/think-forward", json={"node_id": kant}).get_json()
    level_one = [n for n in expanded["nodes"] if n["level"] == 1]
    assert len(level_one) == 5
    assert all(n["parent_id"] == kant for n in level_one)
    parent = next(n for n in expanded["nodes"] if n["id"] == kant)
    assert sorted(parent["child_ids"]) == sorted(n["id"] for n in level_one)

    synthesized = client.post(f"/api/sessions/{sid}/quintessence").get_json()
    quintessence = next(n for n in synthesized["nodes"] if n["kind"] == "quintessence")
    assert quintessence["level"] == 1
    assert quintessence["parent_id"] == kant
    assert quintessence["title"] == "Quintessenz"

    reset = client.post(f"/api/sessions/{sid}/reset").get_json()
    assert reset["nodes"] == []
