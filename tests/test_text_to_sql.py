from unittest.mock import MagicMock

import pytest

from sqlanalyst.config import Settings
from sqlanalyst.errors import ResponseError
from sqlanalyst.models.domain import QueryRequest
from sqlanalyst.services.text_to_sql import TextToSqlClient


def test_client_sends_bearer_token_and_json_body():
    client = TextToSqlClient("https://text2sql.example.test/sql", "secret", timeout=5)
    resp = MagicMock(status_code=201)
    resp.json.return_value = {"sql": "SELECT 1"}
    client.session.post = MagicMock(return_value=resp)

    request = QueryRequest(prompt="how many users?", connection_id="conn-9")
    assert client._post(request) == {"sql": "SELECT 1"}

    assert client.session.headers["Authorization"] == "Bearer secret"
    assert client.session.headers["Content-Type"] == "application/json"
    client.session.post.assert_called_once_with(
        "https://text2sql.example.test/sql",
        json={"prompt": "how many users?", "type": "postgres", "connectionID": "conn-9"},
        timeout=5,
    )


def test_redirect_status_is_not_success():
    client = TextToSqlClient("https://text2sql.example.test/sql", "secret")
    client.session.post = MagicMock(return_value=MagicMock(status_code=302, text=""))
    with pytest.raises(ResponseError) as exc_info:
        client._post(QueryRequest(prompt="q", connection_id="c"))
    assert exc_info.value.status_code == 302


def test_query_request_is_immutable():
    request = QueryRequest(prompt="q", connection_id="c")
    with pytest.raises(Exception):
        request.prompt = "changed"


def test_analysis_endpoint_routes_through_relay():
    settings = Settings(
        text_to_sql_url="https://text2sql.example.test/sql",
        cors_relay_url="https://relay.example.test/",
    )
    assert settings.analysis_endpoint == "https://relay.example.test/https://text2sql.example.test/sql"

    direct = Settings(text_to_sql_url="https://text2sql.example.test/sql", cors_relay_url=None)
    assert direct.analysis_endpoint == "https://text2sql.example.test/sql"
