"""High-level entry point for the query pipeline."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import uuid4

from order_agent.agents.intent_extractor import IntentExtractor
from order_agent.agents.response_composer import ResponseComposer
from order_agent.flows.graph import build_graph
from order_agent.flows.state import QueryState
from order_agent.infrastructure.logging.logger import logger
from order_agent.infrastructure.storage.memory_store import InMemoryConversationStore
from order_agent.infrastructure.storage.order_store import InMemoryOrderStore
from order_agent.providers import create_provider
from order_agent.providers.base import ProviderClient
from order_agent.tools.dispatcher import Dispatcher


@dataclass
class QueryOutcome:
    """一次查询的结果。data 为 None 表示没有识别出可执行意图。"""

    message: str
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.data is None:
            return {"message": self.message}
        return {"data": self.data, "message": self.message}


_order_store = InMemoryOrderStore()
_conversation_store = InMemoryConversationStore()
_provider: ProviderClient = create_provider()
_graph = build_graph(
    IntentExtractor(_provider, _conversation_store),
    Dispatcher(_order_store),
    ResponseComposer(_provider),
)


def run_query(message: str, *, session_id: Optional[str] = None) -> QueryOutcome:
    """Execute the pipeline for one user message.

    Args:
        message: 用户输入
        session_id: 意图抽取会话 id，不传时使用进程级默认会话

    Raises:
        MissingArgument / UnsupportedOperation: 意图校验失败，调用方应返回 400。
        ExtractionError / CompositionError / Provider 异常: 请求失败。
    """

    trace_id = f"tr-{uuid4().hex}"
    start_time = time.time()
    state: QueryState = {
        "message": message,
        "session_id": session_id,
        "trace_id": trace_id,
        "payload": {},
        "result": None,
        "reply": None,
        "clarified": False,
    }
    try:
        result = _graph.invoke(state)
    except Exception as e:
        level = logging.WARNING if getattr(e, "http_status", 500) < 500 else logging.ERROR
        logger.log(
            level,
            f"Query failed: {e}",
            extra={"extra": {"trace_id": trace_id, "session_id": session_id, "error": str(e)}},
        )
        raise
    logger.info(
        "Completed query",
        extra={"extra": {
            "trace_id": trace_id,
            "clarified": result.get("clarified", False),
            "elapsed_seconds": round(time.time() - start_time, 2),
        }},
    )
    return QueryOutcome(message=result.get("reply") or "", data=result.get("result"))


def get_order_store() -> InMemoryOrderStore:
    return _order_store


def configure(
    *,
    provider_client: Optional[ProviderClient] = None,
    order_store: Optional[InMemoryOrderStore] = None,
    conversation_store: Optional[InMemoryConversationStore] = None,
) -> None:
    """Replace pipeline collaborators and rebuild the graph."""

    global _order_store, _conversation_store, _provider, _graph
    _order_store = order_store if order_store is not None else _order_store
    _conversation_store = conversation_store if conversation_store is not None else _conversation_store
    _provider = provider_client if provider_client is not None else _provider
    _graph = build_graph(
        IntentExtractor(_provider, _conversation_store),
        Dispatcher(_order_store),
        ResponseComposer(_provider),
    )
