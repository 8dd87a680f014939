"""OpenAI API 数据模型定义"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ChatCompletionRequest(BaseModel):
    """OpenAI 聊天补全请求

    只对转换逻辑需要读取的字段做类型约束，其余标准字段原样保留。
    未识别的字段保存在 model_extra 中，由转换器按 extraBodyParams 处理。
    """

    model_config = ConfigDict(extra="allow", protected_namespaces=())

    model: str | None = Field(None, description="对外模型名（可能是别名）")
    messages: Any = Field(None, description="对话消息列表")
    max_tokens: Any = Field(None, description="最大输出token数量")
    max_completion_tokens: Any = Field(None, description="最大完成token数量（新格式）")
    stream: Any = Field(None, description="是否使用流式响应")
    stream_options: Any = Field(None, description="流式响应选项")
    top_p: Any = Field(None, description="top-p采样参数")
    stop: Any = Field(None, description="停止序列")
    temperature: float | None = Field(
        None, allow_inf_nan=False, description="采样温度，转发前截断到[0, 2]"
    )
    n: Any = Field(None, description="生成的消息数量")
    presence_penalty: Any = Field(None, description="存在惩罚")
    frequency_penalty: Any = Field(None, description="频率惩罚")
    logit_bias: Any = Field(None, description="logit偏差")
    user: Any = Field(None, description="用户信息")
    functions: Any = Field(None, description="旧版函数定义")
    function_call: Any = Field(None, description="旧版函数调用配置")
    tools: Any = Field(None, description="可用工具定义")
    tool_choice: Any = Field(None, description="工具选择配置")
    response_format: Any = Field(None, description="响应格式配置")
    seed: Any = Field(None, description="随机种子")
    prompt: Any = Field(None, description="图片提示词")
    size: Any = Field(None, description="图片尺寸")
    quality: Any = Field(None, description="图片质量")
    style: Any = Field(None, description="图片风格")
    extra_body: dict[str, Any] | None = Field(None, description="调用方显式提供的额外参数")

    def supplied_params(self) -> dict[str, Any]:
        """调用方实际传入的全部字段（含未识别的附加字段）

        以"是否传入"判断而不是以取值判断，显式传入的 null 也算已传入。
        """
        declared = type(self).model_fields
        params = {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name in declared
        }
        params.update(self.model_extra or {})
        return params


class ImageGenerationRequest(BaseModel):
    """OpenAI 图片生成请求"""

    model_config = ConfigDict(extra="allow", protected_namespaces=())

    prompt: str = Field(description="图片描述")
    size: Any = Field(None, description="图片尺寸，默认1024x1024，不支持的取值由转换器拒绝")
    quality: Any = Field(None, description="图片质量")
    style: Any = Field(None, description="图片风格")
    model: Any = Field(None, description="忽略，上游固定使用dall-e-3")
    n: Any = Field(None, description="忽略，上游每次只生成一张")
    response_format: Any = Field(None, description="忽略，始终返回url")


class ImageData(BaseModel):
    """生成的单张图片"""

    revised_prompt: str = Field(description="修订后的提示词（固定文本）")
    url: str = Field(description="图片URL，未能提取时为空字符串")


class ImageGenerationResponse(BaseModel):
    """OpenAI 图片生成响应"""

    created: int = Field(description="创建时间戳（秒）")
    data: list[ImageData] = Field(description="图片列表")


class ModelCard(BaseModel):
    """模型列表中的单个模型"""

    id: str = Field(description="模型ID")
    object: Literal["model"] = Field("model", description="对象类型")
    created: int = Field(description="创建时间戳")
    owned_by: str = Field("proxy", description="模型归属")


class ModelList(BaseModel):
    """模型列表响应"""

    object: Literal["list"] = Field("list", description="对象类型")
    data: list[ModelCard] = Field(description="模型列表")


class ServiceInfo(BaseModel):
    """服务能力说明"""

    message: str = Field(description="服务说明")
    endpoints: list[str] = Field(description="支持的端点")


class OpenAIErrorDetail(BaseModel):
    """OpenAI错误详情"""

    message: str = Field(description="错误消息")
    type: str = Field(description="错误类型")
    param: str | None = Field(None, description="相关参数")
    code: str | None = Field(None, description="错误代码")


class OpenAIErrorResponse(BaseModel):
    """OpenAI错误响应模型"""

    error: OpenAIErrorDetail = Field(description="错误详情")
