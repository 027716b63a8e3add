import pytest

from order_agent.flows import runner as runner_module


@pytest.fixture(autouse=True)
def restore_pipeline(monkeypatch):
    """runner.configure() 会替换模块级单例，测试结束后还原。"""

    for name in ("_order_store", "_conversation_store", "_provider", "_graph"):
        monkeypatch.setattr(runner_module, name, getattr(runner_module, name))
