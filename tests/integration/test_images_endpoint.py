"""
/v1/images/generations 端点集成测试
"""

import httpx
import pytest
from fastapi.testclient import TestClient
from loguru import logger

from poe_proxy.main import create_app
from tests.fixtures import FakePoeUpstream, chat_completion_body, empty_config, make_config

AUTH = {"Authorization": "Bearer poe-key"}
IMAGE_URL = "https://pfst.cf2.poecdn.net/base/image/cat.png"


def image_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=chat_completion_body(f"![image]({IMAGE_URL})"))


class TestImageGenerationEndpoint:
    """图片生成端点测试"""

    @pytest.fixture
    def upstream(self):
        return FakePoeUpstream(image_response)

    @pytest.fixture
    def client(self, upstream):
        app = create_app(make_config(), transport=upstream.transport)
        with TestClient(app) as client:
            yield client

    def test_successful_generation(self, client, upstream):
        response = client.post(
            "/v1/images/generations",
            json={"prompt": "a cat", "size": "1024x1024"},
            headers=AUTH,
        )

        assert response.status_code == 200
        data = response.json()
        assert isinstance(data["created"], int)
        assert data["data"] == [{"revised_prompt": "成功生成图片！", "url": IMAGE_URL}]
        assert response.headers["access-control-allow-origin"] == "*"

    def test_square_payload(self, client, upstream):
        client.post("/v1/images/generations", json={"prompt": "a cat"}, headers=AUTH)

        assert upstream.requests[0].headers["authorization"] == "Bearer poe-key"
        assert upstream.last_payload() == {
            "model": "dall-e-3",
            "messages": [{"role": "user", "content": "a cat"}],
            "max_tokens": 1000,
            "size": "1024x1024",
        }

    @pytest.mark.parametrize("size,aspect", [("1792x1024", "7:4"), ("1024x1792", "4:7")])
    def test_aspect_payload(self, client, upstream, size, aspect):
        response = client.post(
            "/v1/images/generations",
            json={"prompt": "a cat", "size": size, "quality": "hd", "style": "natural"},
            headers=AUTH,
        )

        assert response.status_code == 200
        payload = upstream.last_payload()
        assert payload["size"] == "1024x1024"
        assert payload["quality"] == "hd"
        assert payload["style"] == "natural"
        assert payload["extra_body"] == {"aspect": aspect}

    @pytest.mark.parametrize("size", ["512x512", "256x256", "1024x1025", 512, ["1024x1024"]])
    def test_invalid_size(self, client, upstream, size):
        response = client.post(
            "/v1/images/generations", json={"prompt": "a cat", "size": size}, headers=AUTH
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["type"] == "invalid_request_error"
        assert error["param"] == "size"
        assert error["code"] == "invalid_size"
        assert str(size) in error["message"]
        assert upstream.call_count == 0

    def test_missing_token_checked_first(self, client, upstream):
        response = client.post(
            "/v1/images/generations", json={"prompt": "a cat", "size": "512x512"}
        )

        assert response.status_code == 401
        assert upstream.call_count == 0

    def test_missing_prompt(self, client, upstream):
        response = client.post("/v1/images/generations", json={"size": "1024x1024"}, headers=AUTH)

        assert response.status_code == 400
        assert response.json()["error"]["param"] == "prompt"
        assert upstream.call_count == 0

    @pytest.mark.parametrize(
        "status,error_type",
        [(402, "insufficient_credits"), (403, "moderation_error"), (429, "rate_limit_error")],
    )
    def test_upstream_error(self, client, upstream, status, error_type):
        upstream.responder = lambda request: httpx.Response(
            status, json={"error": {"message": "upstream says no"}}
        )

        response = client.post("/v1/images/generations", json={"prompt": "a cat"}, headers=AUTH)

        assert response.status_code == status
        assert response.json() == {
            "error": {"message": "upstream says no", "type": error_type}
        }

    def test_upstream_error_without_envelope(self, client, upstream):
        upstream.responder = lambda request: httpx.Response(500, content=b"<html>oops</html>")

        response = client.post("/v1/images/generations", json={"prompt": "a cat"}, headers=AUTH)

        assert response.status_code == 500
        assert response.json() == {
            "error": {"message": "Upstream API error", "type": "unknown_error"}
        }

    def test_network_error(self, client, upstream):
        def fail(request):
            raise httpx.ReadTimeout("timed out")

        upstream.responder = fail
        response = client.post("/v1/images/generations", json={"prompt": "a cat"}, headers=AUTH)

        assert response.status_code == 408
        assert response.json()["error"]["type"] == "timeout_error"

    def test_no_url_in_content(self, client, upstream):
        upstream.responder = lambda request: httpx.Response(
            200, json=chat_completion_body("I cannot draw that.")
        )

        response = client.post("/v1/images/generations", json={"prompt": "a cat"}, headers=AUTH)

        assert response.status_code == 200
        assert response.json()["data"][0]["url"] == ""


class TestImageGenerationWithoutAspectConfig:
    """未配置 aspect 时宽高比不会被转发"""

    def test_aspect_is_dropped(self):
        upstream = FakePoeUpstream(image_response)
        app = create_app(empty_config(), transport=upstream.transport)

        with TestClient(app) as client:
            response = client.post(
                "/v1/images/generations",
                json={"prompt": "a cat", "size": "1792x1024"},
                headers=AUTH,
            )

        assert response.status_code == 200
        assert "extra_body" not in upstream.last_payload()

    def test_dropped_aspect_is_logged(self):
        upstream = FakePoeUpstream(image_response)
        app = create_app(empty_config(), transport=upstream.transport)
        warnings = []

        with TestClient(app) as client:
            sink_id = logger.add(
                lambda m: warnings.append(m.record["message"]), level="WARNING"
            )
            try:
                client.post(
                    "/v1/images/generations",
                    json={"prompt": "a cat", "size": "1024x1792"},
                    headers=AUTH,
                )
            finally:
                logger.remove(sink_id)

        assert any(
            "aspect=4:7" in message and "extraBodyParams" in message for message in warnings
        )

    def test_square_image_logs_no_aspect_warning(self):
        upstream = FakePoeUpstream(image_response)
        app = create_app(empty_config(), transport=upstream.transport)
        warnings = []

        with TestClient(app) as client:
            sink_id = logger.add(
                lambda m: warnings.append(m.record["message"]), level="WARNING"
            )
            try:
                client.post("/v1/images/generations", json={"prompt": "a cat"}, headers=AUTH)
            finally:
                logger.remove(sink_id)

        assert not any("aspect" in message for message in warnings)
