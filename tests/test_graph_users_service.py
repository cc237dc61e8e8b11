import json

import httpx
import pytest

from teams_timesheet.config import Settings
from teams_timesheet.services.graph_users_service import GraphRequestError, GraphUsersService

GRAPH = "https://graph.microsoft.com/v1.0"


def _service(handler, batch_size=20):
    client = httpx.Client(base_url=GRAPH, transport=httpx.MockTransport(handler))
    return GraphUsersService("token", settings=Settings(graph_batch_size=batch_size), client=client)


def _batch_handler(calls, status_for=lambda user_id: 200):
    def handler(request):
        assert request.url.path == "/v1.0/$batch"
        assert request.headers["Authorization"] == "Bearer token"
        payload = json.loads(request.content)
        calls.append(payload["requests"])
        responses = []
        for step in reversed(payload["requests"]):
            user_id = step["url"].rsplit("/", 1)[-1]
            status = status_for(user_id)
            body = {"id": user_id, "displayName": f"User {user_id}"} if status == 200 else {"error": {"code": "x"}}
            responses.append({"id": step["id"], "status": status, "body": body})
        return httpx.Response(200, json={"responses": responses})

    return handler


def test_access_token_is_required():
    with pytest.raises(ValueError):
        GraphUsersService("")


def test_get_users_sends_one_batch_per_chunk():
    calls = []
    service = _service(_batch_handler(calls))
    user_ids = [f"u{i}" for i in range(45)]

    profiles = service.get_users(user_ids)

    assert [len(requests) for requests in calls] == [20, 20, 5]
    assert set(profiles) == set(user_ids)
    assert profiles["u7"]["displayName"] == "User u7"


def test_get_users_raises_for_unknown_user():
    service = _service(_batch_handler([], status_for=lambda user_id: 404 if user_id == "gone" else 200))

    with pytest.raises(GraphRequestError) as excinfo:
        service.get_users(["a", "gone", "b"])

    assert (excinfo.value.user_id, excinfo.value.status) == ("gone", 404)


def test_get_users_raises_on_failed_step():
    service = _service(_batch_handler([], status_for=lambda user_id: 403 if user_id == "secret" else 200))

    with pytest.raises(GraphRequestError) as excinfo:
        service.get_users(["a", "secret"])

    assert excinfo.value.user_id == "secret"
    assert excinfo.value.status == 403


def test_get_users_raises_when_batch_call_fails():
    service = _service(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(httpx.HTTPStatusError):
        service.get_users(["a"])


def test_get_users_requires_ids():
    service = _service(lambda request: httpx.Response(200, json={"responses": []}))

    with pytest.raises(ValueError):
        service.get_users(None)
    assert service.get_users([]) == {}


def test_get_my_reportees_follows_next_link():
    next_link = f"{GRAPH}/me/directReports?$skiptoken=page2"
    seen = []

    def handler(request):
        seen.append(request.url)
        if "skiptoken" in str(request.url):
            return httpx.Response(200, json={"value": [{"id": "3", "displayName": "Carol"}]})
        return httpx.Response(200, json={
            "value": [{"id": "1", "displayName": "Alice"}, {"id": "2", "displayName": "Bob"}],
            "@odata.nextLink": next_link,
        })

    reportees = _service(handler).get_my_reportees()

    assert [r["id"] for r in reportees] == ["1", "2", "3"]
    assert seen[0].params["$select"] == "id,displayName,userPrincipalName"
    assert len(seen) == 2


def test_get_my_reportees_filters_by_search_text():
    seen = []

    def handler(request):
        seen.append(request.url)
        return httpx.Response(200, json={"value": []})

    _service(handler).get_my_reportees("O'Brien")

    assert seen[0].params["$filter"] == "startsWith(displayName,'O''Brien') or startsWith(mail,'O''Brien')"


def test_get_manager():
    def handler(request):
        assert request.url.path == "/v1.0/me/manager"
        return httpx.Response(200, json={"id": "m1", "displayName": "Megan"})

    assert _service(handler).get_manager()["displayName"] == "Megan"
