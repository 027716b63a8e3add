import pytest

from order_agent.agents.intent_extractor import IntentExtractor
from order_agent.domain.exceptions import ExtractionError, NetworkError
from order_agent.domain.models import ChatChoice, ChatMessage, ChatResult
from order_agent.infrastructure.storage.memory_store import InMemoryConversationStore
from order_agent.tools.definitions import OPERATION_DEFS


class FakeProvider:
    name = "fake"

    def __init__(self, *replies):
        self._replies = list(replies)
        self.requests = []

    def chat(self, req):
        # 保存消息快照，之后的追加不影响断言
        self.requests.append((req, list(req.messages)))
        content = self._replies.pop(0) if self._replies else "{}"
        msg = ChatMessage(role="assistant", content=content)
        return ChatResult(provider="fake", model=req.model, choices=[ChatChoice(index=0, message=msg)], raw={})


CHECK = '{"function_call":{"name":"check_shipping","arguments":{"order_id":"123"}}}'


def test_extract_returns_payload_and_uses_json_mode():
    provider = FakeProvider(CHECK)
    extractor = IntentExtractor(provider, InMemoryConversationStore())
    payload = extractor.extract("查订单 123 状态")
    assert payload["function_call"]["name"] == "check_shipping"
    req, messages = provider.requests[0]
    assert req.response_format == "json_object"
    assert req.model == "intent-extract"
    assert [m.role for m in messages] == ["system", "user"]
    assert "check_shipping" in messages[0].content
    assert "change_shipping_address" in messages[0].content
    assert messages[1].content == "查订单 123 状态"


def test_system_prompt_inserted_once_and_history_grows():
    provider = FakeProvider(CHECK, CHECK, CHECK)
    store = InMemoryConversationStore(max_messages=50)
    extractor = IntentExtractor(provider, store)
    for text in ["a", "b", "c"]:
        extractor.extract(text)
    _, messages = provider.requests[-1]
    assert [m.role for m in messages] == ["system", "user", "user", "user"]
    assert sum(1 for m in messages if m.role == "system") == 1


def test_history_capped_keeps_system_prompt():
    provider = FakeProvider(*[CHECK] * 5)
    extractor = IntentExtractor(provider, InMemoryConversationStore(max_messages=3))
    for text in ["1", "2", "3", "4", "5"]:
        extractor.extract(text)
    _, messages = provider.requests[-1]
    assert messages[0].role == "system"
    assert [m.content for m in messages[1:]] == ["4", "5"]


def test_sessions_are_isolated():
    provider = FakeProvider(CHECK, CHECK)
    extractor = IntentExtractor(provider, InMemoryConversationStore())
    extractor.extract("from alice", session_id="alice")
    extractor.extract("from bob", session_id="bob")
    _, messages = provider.requests[-1]
    assert [m.content for m in messages[1:]] == ["from bob"]


def test_fenced_output_parsed():
    provider = FakeProvider(f"```json\n{CHECK}\n```")
    payload = IntentExtractor(provider, InMemoryConversationStore()).extract("查订单 123")
    assert payload["function_call"]["arguments"] == {"order_id": "123"}


def test_prose_output_raises_extraction_error():
    provider = FakeProvider("我不太明白您的意思")
    with pytest.raises(ExtractionError) as ei:
        IntentExtractor(provider, InMemoryConversationStore()).extract("你好")
    assert ei.value.raw == "我不太明白您的意思"


def test_provider_failure_propagates():
    class BrokenProvider:
        name = "broken"

        def chat(self, req):
            raise NetworkError(code="NETWORK_ERROR", message="down", http_status=502)

    with pytest.raises(NetworkError):
        IntentExtractor(BrokenProvider(), InMemoryConversationStore()).extract("查订单 123")


def test_system_prompt_lists_every_operation_definition():
    provider = FakeProvider(CHECK)
    IntentExtractor(provider, InMemoryConversationStore()).extract("查订单 123 状态")
    system = provider.requests[0][1][0].content
    assert "{operations}" not in system
    for tool_def in OPERATION_DEFS.values():
        assert f"- {tool_def.name}：{tool_def.description}" in system
        for param in tool_def.params.values():
            assert f"{param.name}（{param.description}）" in system


def test_provider_called_without_holding_session_lock():
    store = InMemoryConversationStore()
    seen = []

    class LockCheckingProvider(FakeProvider):
        def chat(self, req):
            seen.append(store.get("default").lock.locked())
            return super().chat(req)

    IntentExtractor(LockCheckingProvider(CHECK), store).extract("查订单 123 状态")
    assert seen == [False]
