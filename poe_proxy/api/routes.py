"""模型列表与服务说明"""

import time

from fastapi import APIRouter, Request

from poe_proxy.core.converters.image_converter import IMAGE_MODEL
from poe_proxy.models.openai import ModelCard, ModelList, ServiceInfo

router = APIRouter()

SERVICE_MESSAGE = "OpenAI兼容代理服务"
ENDPOINTS = ["/v1/chat/completions", "/v1/images/generations", "/v1/models"]


def build_model_list(model_aliases, created: int | None = None) -> ModelList:
    """由模型别名生成模型列表，固定追加 dall-e-3"""
    created = created if created is not None else int(time.time())
    model_ids = dict.fromkeys([*model_aliases, IMAGE_MODEL])
    return ModelList(data=[ModelCard(id=model_id, created=created) for model_id in model_ids])


@router.get("/v1/models")
async def list_models(request: Request) -> ModelList:
    """列出对外可用的模型（别名，而不是上游模型名）"""
    return build_model_list(request.app.state.config.model_mapping)


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"],
    include_in_schema=False,
)
async def service_info(path: str) -> ServiceInfo:
    """未匹配的路由返回服务说明，而不是404"""
    return ServiceInfo(message=SERVICE_MESSAGE, endpoints=ENDPOINTS)
