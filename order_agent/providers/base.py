"""Provider 抽象接口。

上层链路不直接依赖具体厂商的 HTTP SDK，而是依赖此协议：
给定一段对话历史，返回模型生成的文本（封装在 ChatResult 中）。
"""

from typing import Protocol
from order_agent.domain.models import ChatRequest, ChatResult


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志/统计。
    - chat(req): 执行一次非流式对话调用，返回统一的 ChatResult。
    """

    name: str

    def chat(self, req: ChatRequest) -> ChatResult:
        ...
