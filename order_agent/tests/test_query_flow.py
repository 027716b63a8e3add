import pytest

from order_agent.domain.exceptions import CompositionError, ExtractionError, MissingArgument, UnsupportedOperation
from order_agent.domain.models import ChatChoice, ChatMessage, ChatResult
from order_agent.flows import runner as runner_module
from order_agent.flows.graph import CLARIFICATION_MESSAGE
from order_agent.infrastructure.storage.memory_store import InMemoryConversationStore
from order_agent.infrastructure.storage.order_store import InMemoryOrderStore


_INITIAL_ORDER_STORE = runner_module.get_order_store()


class ScriptedProvider:
    """按模型区分：意图抽取依次返回 intents，回复生成固定返回 reply。"""

    name = "fake"

    def __init__(self, *intents, reply="好的，已为您处理。"):
        self._intents = list(intents)
        self.reply = reply
        self.compose_calls = 0

    def chat(self, req):
        if req.model == "reply-compose":
            self.compose_calls += 1
            if isinstance(self.reply, Exception):
                raise self.reply
            content = self.reply
        else:
            content = self._intents.pop(0)
        msg = ChatMessage(role="assistant", content=content)
        return ChatResult(provider="fake", model=req.model, choices=[ChatChoice(index=0, message=msg)], raw={})


@pytest.fixture
def store():
    return InMemoryOrderStore({
        "123": {"status": "Shipped", "address": "123 Main St"},
        "456": {"status": "Processing", "address": "456 Elm St"},
    })


def _configure(provider, store):
    runner_module.configure(
        provider_client=provider,
        order_store=store,
        conversation_store=InMemoryConversationStore(),
    )


def test_check_shipping_end_to_end(store):
    provider = ScriptedProvider('{"function_call":{"name":"check_shipping","arguments":{"order_id":"123"}}}')
    _configure(provider, store)
    outcome = runner_module.run_query("查订单 123 状态")
    assert outcome.data == {"success": True, "status": "Shipped", "address": "123 Main St"}
    assert outcome.message == "好的，已为您处理。"
    assert outcome.to_dict() == {"data": outcome.data, "message": outcome.message}
    assert provider.compose_calls == 1


def test_change_address_end_to_end(store):
    provider = ScriptedProvider(
        '```json\n{"function_call":{"name":"change_shipping_address",'
        '"arguments":{"order_id":"456","new_address":"789 Oak St"}}}\n```'
    )
    _configure(provider, store)
    outcome = runner_module.run_query("修改订单 456 地址到 789 Oak St")
    assert outcome.data == {"success": True, "new_address": "789 Oak St"}
    assert store.check_shipping("456").address == "789 Oak St"


def test_no_intent_clarifies_without_compose(store):
    provider = ScriptedProvider("{}")
    _configure(provider, store)
    outcome = runner_module.run_query("今天天气怎么样")
    assert outcome.data is None
    assert outcome.message == CLARIFICATION_MESSAGE
    assert outcome.to_dict() == {"message": CLARIFICATION_MESSAGE}
    assert provider.compose_calls == 0


def test_missing_argument_stops_before_compose(store):
    provider = ScriptedProvider('{"function_call":{"name":"change_shipping_address","arguments":{"order_id":"456"}}}')
    _configure(provider, store)
    with pytest.raises(MissingArgument):
        runner_module.run_query("修改订单 456 地址")
    assert provider.compose_calls == 0
    assert store.check_shipping("456").address == "456 Elm St"


def test_unsupported_operation_stops_before_compose(store):
    provider = ScriptedProvider('{"function_call":{"name":"cancel_order","arguments":{"order_id":"123"}}}')
    _configure(provider, store)
    with pytest.raises(UnsupportedOperation):
        runner_module.run_query("取消订单 123")
    assert provider.compose_calls == 0


def test_extraction_error_propagates(store):
    _configure(ScriptedProvider("sorry, no json here"), store)
    with pytest.raises(ExtractionError):
        runner_module.run_query("???")


def test_composition_error_propagates(store):
    provider = ScriptedProvider(
        '{"function_call":{"name":"check_shipping","arguments":{"order_id":"123"}}}',
        reply=RuntimeError("model down"),
    )
    _configure(provider, store)
    with pytest.raises(CompositionError):
        runner_module.run_query("查订单 123 状态")


def test_configure_accepts_empty_store():
    empty = InMemoryOrderStore({})
    runner_module.configure(order_store=empty)
    assert runner_module.get_order_store() is empty


def test_configure_is_restored_between_tests():
    # 前面的用例都调用过 configure，autouse fixture 应已还原模块级单例
    assert runner_module.get_order_store() is _INITIAL_ORDER_STORE
