import pytest

from app.modules.generation.errors import ModelInvocationFailed
from tests.fixtures.sample_data import SOURCE

pytestmark = pytest.mark.integration


def _create_tutor(client):
    r = client.post(
        "/v1/tutors", json={"title": "Biology", "description": "Cells", "source": SOURCE}
    )
    assert r.status_code == 201
    return r.json()["id"]


def test_create_and_list_tutors(client):
    tutor_id = _create_tutor(client)
    assert [t["id"] for t in client.get("/v1/tutors").json()] == [tutor_id]


def test_chat_streams_and_saves_the_conversation(client, model):
    model.chunks = ["Hel", "lo, ", "world"]
    tutor_id = _create_tutor(client)

    r = client.post(
        f"/v1/tutors/{tutor_id}/chat",
        json={"messages": [{"role": "user", "content": "Say hello"}]},
    )
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text == "Hello, world"

    messages = client.get(f"/v1/tutors/{tutor_id}/messages").json()
    assert [(m["role"], m["content"]) for m in messages] == [
        ("user", "Say hello"),
        ("assistant", "Hello, world"),
    ]


def test_chat_without_messages_is_a_bad_request(client, model):
    tutor_id = _create_tutor(client)
    r = client.post(f"/v1/tutors/{tutor_id}/chat", json={})
    assert r.status_code == 400
    assert r.json()["error"]["category"] == "invalid-payload"
    assert model.stream_calls == []


def test_chat_with_unknown_tutor(client):
    r = client.post(
        "/v1/tutors/999/chat", json={"messages": [{"role": "user", "content": "Hi"}]}
    )
    assert r.status_code == 404
    assert client.get("/v1/tutors/999/messages").status_code == 404


def test_model_failure_before_output_is_a_typed_error(client, model):
    model.error = ModelInvocationFailed()
    tutor_id = _create_tutor(client)

    r = client.post(
        f"/v1/tutors/{tutor_id}/chat",
        json={"messages": [{"role": "user", "content": "Say hello"}]},
    )
    assert r.status_code == 502
    assert r.json()["error"]["category"] == "generation-failed"

    roles = [m["role"] for m in client.get(f"/v1/tutors/{tutor_id}/messages").json()]
    assert roles == ["user"]
