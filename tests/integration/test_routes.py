"""
模型列表、服务说明与CORS预检测试
"""

import pytest
from fastapi.testclient import TestClient

from poe_proxy.api.routes import build_model_list
from poe_proxy.main import create_app
from tests.fixtures import FakePoeUpstream, empty_config, make_config


class TestRoutes:
    @pytest.fixture
    def upstream(self):
        return FakePoeUpstream()

    @pytest.fixture
    def client(self, upstream):
        config = make_config(modelMapping={"gpt-4": "upstream-gpt4"})
        app = create_app(config, transport=upstream.transport)
        with TestClient(app) as client:
            yield client

    def test_list_models(self, client, upstream):
        response = client.get("/v1/models")

        assert response.status_code == 200
        data = response.json()
        assert data["object"] == "list"
        assert [model["id"] for model in data["data"]] == ["gpt-4", "dall-e-3"]
        for model in data["data"]:
            assert model["object"] == "model"
            assert model["owned_by"] == "proxy"
            assert isinstance(model["created"], int)
        assert response.headers["access-control-allow-origin"] == "*"
        assert upstream.call_count == 0

    def test_list_models_with_empty_config(self):
        with TestClient(create_app(empty_config())) as client:
            ids = [model["id"] for model in client.get("/v1/models").json()["data"]]
        assert ids == ["dall-e-3"]

    def test_build_model_list_deduplicates(self):
        model_list = build_model_list({"dall-e-3": "DALL-E-3", "a": "b"}, created=1)
        assert [card.id for card in model_list.data] == ["dall-e-3", "a"]

    @pytest.mark.parametrize(
        "path", ["/v1/chat/completions", "/v1/images/generations", "/anything", "/"]
    )
    def test_options_preflight(self, client, path):
        response = client.options(path)

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "authorization, content-type"

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/"),
            ("GET", "/health"),
            ("GET", "/v1/chat/completions"),
            ("POST", "/v1/models"),
            ("DELETE", "/v1/images/generations"),
            ("POST", "/v1/embeddings"),
        ],
    )
    def test_unknown_routes_describe_service(self, client, upstream, method, path):
        response = client.request(method, path)

        assert response.status_code == 200
        assert response.json() == {
            "message": "OpenAI兼容代理服务",
            "endpoints": ["/v1/chat/completions", "/v1/images/generations", "/v1/models"],
        }
        assert response.headers["access-control-allow-origin"] == "*"
        assert upstream.call_count == 0
