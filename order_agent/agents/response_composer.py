import json
from typing import Any, Dict, Optional

from order_agent.config.settings import settings
from order_agent.domain.exceptions import BusinessError, CompositionError
from order_agent.domain.models import ChatMessage, ChatRequest
from order_agent.infrastructure.logging.logger import logger
from order_agent.prompts import load_system_prompt
from order_agent.providers.base import ProviderClient


class ResponseComposer:
    """根据用户原始问题和操作结果生成面向用户的自然语言回复。

    每次调用都构造全新的两条消息对话，不保留历史；
    模型输出原样返回，不做校验或重试。
    """

    def __init__(
        self,
        provider_client: ProviderClient,
        model: Optional[str] = None,
        locale: Optional[str] = None,
    ):
        self._provider_client = provider_client
        self._model = model or settings.compose_model
        self._locale = locale or settings.prompt_locale

    def build_messages(self, user_input: str, result: Dict[str, Any]) -> list[ChatMessage]:
        return [
            ChatMessage(role="system", content=load_system_prompt("compose", self._locale)),
            ChatMessage(
                role="user",
                content=f"用户问题: {user_input}\n系统结果: {json.dumps(result, ensure_ascii=False)}",
            ),
        ]

    def compose(self, user_input: str, result: Dict[str, Any]) -> str:
        req = ChatRequest(
            provider=self._provider_client.name,
            model=self._model,
            messages=self.build_messages(user_input, result),
        )
        try:
            reply = self._provider_client.chat(req).text
        except BusinessError as e:
            raise CompositionError(e.message, cause=e.code) from e
        except Exception as e:
            raise CompositionError(str(e)) from e
        logger.info("compose.done", extra={"extra": {"reply": reply}})
        return reply
