"""DeepSeek Provider 适配器。

DeepSeek 提供 OpenAI 兼容的 chat/completions 端点：
- URL: {base_url}/chat/completions
- 认证: Authorization: Bearer <api_key>

本模块负责：

1. 接收统一的 ChatRequest。
2. 转换为 DeepSeek 的 HTTP 请求格式（含 response_format 约束）。
3. 调用 HTTP 接口并处理网络/API 异常。
4. 将响应 JSON 解析为统一的 ChatResult。
"""

from typing import Any, Dict

import httpx

from order_agent.domain.models import (
    ChatRequest,
    ChatResult,
    ChatMessage,
    ChatChoice,
    ChatUsage,
)
from order_agent.domain.exceptions import NetworkError, ApiError, RateLimitError, ValidationError
from order_agent.providers.registry import ModelConfig, get_provider_config


class DeepSeekClient:
    """DeepSeek 客户端实现。"""

    name = "deepseek"

    def __init__(self, settings):
        # Settings 里包含 base_url、api_key、超时等配置
        self._settings = settings

    def chat(self, req: ChatRequest) -> ChatResult:
        """执行一次非流式对话调用。

        步骤：
        1. 读取模型配置（logical model -> provider model）。
        2. 构造 HTTP 请求 payload。
        3. 发送请求并捕获网络错误/限流/服务端错误。
        4. 使用统一的解析函数构造 ChatResult。
        """

        if not getattr(self._settings, "deepseek_api_key", None):
            raise ValidationError(code="MISSING_API_KEY", message="DEEPSEEK_API_KEY not set", http_status=500)
        provider_cfg = get_provider_config(self.name)
        model_cfg = provider_cfg.model(req.model)
        payload = self._build_payload(req, model_cfg)
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                base = getattr(self._settings, "deepseek_base_url", None) or provider_cfg.base_url
                resp = client.post(
                    f"{base.rstrip('/')}/chat/completions",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self._settings.deepseek_api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e), http_status=502)
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message="DeepSeek rate limit", http_status=502)
        if resp.status_code >= 400:
            # 上游状态码放在 extra 里，对外统一按网关错误处理
            raise ApiError(
                code="API_ERROR",
                message=resp.text,
                http_status=502,
                upstream_status=resp.status_code,
            )
        data = resp.json()
        return self._parse_response(data, req)

    def _build_payload(self, req: ChatRequest, model_cfg: ModelConfig) -> dict:
        """将 ChatRequest 转成 DeepSeek 所需的请求 JSON。"""

        payload: Dict[str, Any] = {
            "model": model_cfg.provider_model,
            "messages": [self._message_to_payload(m) for m in req.messages],
            "temperature": model_cfg.default_temperature if req.temperature is None else req.temperature,
            "max_tokens": req.max_tokens or model_cfg.max_tokens,
            "top_p": req.top_p,
        }
        if req.response_format:
            payload["response_format"] = {"type": req.response_format}
        return payload

    def _parse_response(self, data: dict, req: ChatRequest) -> ChatResult:
        """将 DeepSeek 的原始响应 JSON 解析为统一的 ChatResult。"""

        choices: list[ChatChoice] = []
        for i, ch in enumerate(data.get("choices", [])):
            msg = ch.get("message") or {}
            cm = ChatMessage(
                role=msg.get("role") or "assistant",
                content=msg.get("content") or "",
            )
            choices.append(ChatChoice(index=ch.get("index", i), message=cm, finish_reason=ch.get("finish_reason")))
        usage_raw = data.get("usage") or {}
        usage = ChatUsage(
            prompt_tokens=usage_raw.get("prompt_tokens", 0),
            completion_tokens=usage_raw.get("completion_tokens", 0),
            total_tokens=usage_raw.get("total_tokens", 0),
        )
        return ChatResult(provider=self.name, model=req.model, choices=choices, usage=usage, raw=data)

    @staticmethod
    def _message_to_payload(message: ChatMessage) -> Dict[str, Any]:
        return {"role": message.role, "content": message.content}
