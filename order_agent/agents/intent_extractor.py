"""意图抽取。

把用户输入追加到会话历史，请求模型按 function_call 协议输出 JSON，
再经 sanitizer 清洗解析为 payload。payload 是否可执行由 Dispatcher 判断。
"""

from typing import Any, Dict, Optional

from order_agent.agents.sanitizer import parse_payload
from order_agent.config.settings import settings
from order_agent.domain.conversation import ConversationStore
from order_agent.domain.models import ChatRequest
from order_agent.infrastructure.logging.logger import logger
from order_agent.prompts import load_system_prompt
from order_agent.providers.base import ProviderClient
from order_agent.tools.definitions import render_operations


DEFAULT_SESSION = "default"


def build_intent_prompt(locale: str) -> str:
    # 模板里有 JSON 示例的花括号，不能用 str.format
    return load_system_prompt("intent", locale).replace("{operations}", render_operations())


class IntentExtractor:
    def __init__(
        self,
        provider_client: ProviderClient,
        store: ConversationStore,
        model: Optional[str] = None,
        locale: Optional[str] = None,
    ):
        self._provider_client = provider_client
        self._store = store
        self._model = model or settings.intent_model
        self._locale = locale or settings.prompt_locale

    def extract(self, user_input: str, session_id: Optional[str] = None) -> Dict[str, Any]:
        """返回模型给出的 payload。

        会话锁只保护“追加 user 消息 + 截取历史快照”，模型调用在锁外进行，
        同一会话的并发请求不会互相等待模型返回；后到的请求看到的历史里
        可能包含先到请求的 user 消息。

        Raises:
            ExtractionError: 模型无输出、输出中没有 JSON 或 JSON 非法。
            BusinessError: Provider 调用失败（网络、限流、API 错误）。
        """

        conv = self._store.get_or_create(session_id or DEFAULT_SESSION)
        with conv.lock:
            if conv.ensure_system_prompt(build_intent_prompt(self._locale)):
                logger.info("intent.system_prompt_inserted", extra={"extra": {"session_id": conv.id}})
            conv.add_user(user_input)
            req = ChatRequest(
                provider=self._provider_client.name,
                model=self._model,
                messages=conv.history(),
                response_format="json_object",
            )
        result = self._provider_client.chat(req)

        raw = result.text
        logger.info(
            "intent.raw_response",
            extra={"extra": {"session_id": conv.id, "history": len(req.messages), "raw": raw}},
        )
        return parse_payload(raw)
