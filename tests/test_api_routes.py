ANSWER = "Here are some ideas:\n1. Alpha\n2. Beta & Co\n> 指令：pick one\n3. Gamma"
CONTEXT = {"currentConversationId": "c-1", "currentConversationInputs": {"text": "earlier"}}


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_extract_options_endpoint(client):
    resp = client.post("/v1/api/options/extract", json={"content": ANSWER})
    assert resp.status_code == 200
    assert resp.json() == {
        "ok": True,
        "options": [{"index": "1", "text": "Alpha"}, {"index": "2", "text": "Beta & Co"}],
    }


def test_extract_options_from_agent_thoughts(client):
    body = {"content": "", "agentThoughts": [{"thought": "1. From"}, {"thought": " agent\n"}]}
    resp = client.post("/v1/api/options/extract", json=body)
    assert resp.json()["options"] == [{"index": "1", "text": "From agent"}]


def test_extract_without_options_is_ok(client):
    resp = client.post("/v1/api/options/extract", json={"content": "no list here"})
    assert resp.status_code == 200
    assert resp.json()["options"] == []


def test_handoff_redirects_to_destination(client):
    body = {"content": ANSWER, "optionIndex": 2, "context": CONTEXT}
    resp = client.post("/v1/api/handoff", json=body, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "http://testserver/workflow/kepu?autoFillText=earlier%0ABeta%20%26%20Co"


def test_handoff_json_mode(client):
    body = {"optionText": "Custom pick", "context": {"newConversationInputs": {}}}
    resp = client.post("/v1/api/handoff?mode=json", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is True
    assert data["location"] == "http://testserver/workflow/kepu?autoFillText=%0ACustom%20pick"
    assert data["notices"][0]["type"] == "info"


def test_handoff_without_context_is_rejected(client):
    resp = client.post("/v1/api/handoff", json={"content": ANSWER, "optionIndex": "1"}, follow_redirects=False)
    assert resp.status_code == 422
    data = resp.json()
    assert data["ok"] is False
    assert data["error"] == "missing_context"
    assert data["notices"] == [{"type": "error", "message": "Unable to read form data"}]


def test_handoff_without_context_wins_over_unknown_option(client):
    resp = client.post("/v1/api/handoff", json={"content": "1. A", "optionIndex": "7"}, follow_redirects=False)
    assert resp.status_code == 422
    data = resp.json()
    assert data["error"] == "missing_context"
    assert data["notices"] == [{"type": "error", "message": "Unable to read form data"}]


def test_handoff_unknown_option(client):
    body = {"content": ANSWER, "optionIndex": "3", "context": CONTEXT}
    resp = client.post("/v1/api/handoff", json=body, follow_redirects=False)
    assert resp.status_code == 400
    assert resp.json()["error"] == "unknown_option"


def test_handoff_requires_a_choice(client):
    resp = client.post("/v1/api/handoff", json={"content": ANSWER, "context": CONTEXT})
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_autofill_merges_into_best_field(client):
    body = {
        "promptVariables": [
            {"key": "qty", "name": "qty", "type": "number"},
            {"key": "notes", "name": "Notes", "type": "paragraph"},
        ],
        "inputs": {"qty": "3", "notes": ""},
    }
    resp = client.post("/v1/api/autofill?autoFillText=earlier%0ABeta%20%26%20Co", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["applied"] is True
    assert data["targetKey"] == "notes"
    assert data["inputs"] == {"qty": "3", "notes": "earlier\nBeta & Co"}
    assert data["notices"] == []


def test_autofill_bad_payload_is_reported_not_fatal(client):
    body = {"fields": [{"key": "notes", "name": "Notes", "type": "paragraph"}], "inputs": {"notes": "mine"}}
    resp = client.post("/v1/api/autofill?autoFillText=%FF", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["applied"] is False
    assert data["inputs"] == {"notes": "mine"}
    assert data["notices"][0]["type"] == "error"


def test_autofill_empty_form(client):
    resp = client.post("/v1/api/autofill?autoFillText=x", json={"fields": [], "inputs": {"a": 1}})
    data = resp.json()
    assert data["applied"] is False
    assert data["targetKey"] is None
    assert data["inputs"] == {"a": 1}


def test_autofill_rejects_unknown_field_kind(client):
    body = {"fields": [{"key": "x", "type": "checkbox"}], "inputs": {}}
    resp = client.post("/v1/api/autofill?autoFillText=x", json=body)
    assert resp.status_code == 422


def test_legacy_prefix_is_served(client):
    resp = client.post("/api/options/extract", json={"content": "1. One"})
    assert resp.status_code == 200
    assert resp.json()["options"] == [{"index": "1", "text": "One"}]


def test_http_log_line_redacts_handoff_text(caplog):
    import json
    import logging

    from fastapi.testclient import TestClient

    from option_handoff.api.main import create_app
    from option_handoff.config import HandoffSettings

    app = create_app(HandoffSettings(http_log=True, http_log_headers=True))
    with caplog.at_level(logging.INFO, logger="option_handoff.http"):
        TestClient(app).post("/v1/api/autofill?autoFillText=secret%20note", json={"fields": [], "inputs": {}})
    lines = [r.getMessage() for r in caplog.records if r.name == "option_handoff.http"]
    assert lines
    record = json.loads(lines[-1])
    assert record["query"] == "autoFillText=***"
    assert record["status"] == 200
    assert record["path"] == "/v1/api/autofill"
