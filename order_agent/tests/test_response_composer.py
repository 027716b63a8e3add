import json

import pytest

from order_agent.agents.response_composer import ResponseComposer
from order_agent.domain.exceptions import ApiError, CompositionError
from order_agent.domain.models import ChatChoice, ChatMessage, ChatResult


class FakeProvider:
    name = "fake"

    def __init__(self, reply="您的订单 123 已发货，收货地址是 123 Main St。"):
        self.reply = reply
        self.requests = []

    def chat(self, req):
        self.requests.append(req)
        msg = ChatMessage(role="assistant", content=self.reply)
        return ChatResult(provider="fake", model=req.model, choices=[ChatChoice(index=0, message=msg)], raw={})


RESULT = {"success": True, "status": "Shipped", "address": "123 Main St"}


def test_compose_builds_fresh_two_message_conversation():
    provider = FakeProvider()
    composer = ResponseComposer(provider)
    composer.compose("查订单 123 状态", RESULT)
    composer.compose("再查一次", RESULT)
    for req in provider.requests:
        assert [m.role for m in req.messages] == ["system", "user"]
        assert req.response_format is None
        assert req.model == "reply-compose"
    user_msg = provider.requests[0].messages[1].content
    assert "查订单 123 状态" in user_msg
    assert json.dumps(RESULT, ensure_ascii=False) in user_msg
    assert "JSON" in provider.requests[0].messages[0].content


def test_compose_returns_text_as_is():
    provider = FakeProvider(reply='{"not": "checked"}')
    assert ResponseComposer(provider).compose("q", RESULT) == '{"not": "checked"}'


def test_provider_failure_becomes_composition_error():
    class BrokenProvider:
        name = "broken"

        def chat(self, req):
            raise ApiError(code="API_ERROR", message="boom", http_status=502)

    with pytest.raises(CompositionError) as ei:
        ResponseComposer(BrokenProvider()).compose("q", RESULT)
    assert ei.value.code == "COMPOSITION_ERROR"
    assert ei.value.extra["cause"] == "API_ERROR"
    assert isinstance(ei.value.__cause__, ApiError)


def test_unexpected_failure_becomes_composition_error():
    class BrokenProvider:
        name = "broken"

        def chat(self, req):
            raise RuntimeError("socket closed")

    with pytest.raises(CompositionError):
        ResponseComposer(BrokenProvider()).compose("q", RESULT)
