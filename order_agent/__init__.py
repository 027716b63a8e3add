"""Order Agent 顶层包。

该包把客服的自由文本问题通过 LLM 函数调用协议转换为订单操作：
配置加载、领域模型、Provider 适配、意图抽取与清洗、操作分发、
自然语言回复生成，以及对外的 HTTP 服务。
"""

from order_agent.flows import QueryOutcome, run_query

__all__ = ["QueryOutcome", "run_query"]
