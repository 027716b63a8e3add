"""LangGraph construction and node implementations.

extract -> dispatch -> compose | clarify -> END

Dispatch rejections (MissingArgument / UnsupportedOperation) raise out of
the graph, so compose never runs on a rejected intent.
"""

from __future__ import annotations

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from order_agent.agents.intent_extractor import IntentExtractor
from order_agent.agents.response_composer import ResponseComposer
from order_agent.flows.state import QueryState
from order_agent.infrastructure.logging.logger import logger
from order_agent.tools.dispatcher import NO_INTENT, Dispatcher

CLARIFICATION_MESSAGE = "请更明确地说明需求，例如：'查询订单 123 状态' 或 '修改订单 456 地址到新地址'"


def extract_node(state: QueryState, extractor: IntentExtractor) -> QueryState:
    logger.info("extract_node.start", extra={"extra": {"trace_id": state.get("trace_id")}})
    state["payload"] = extractor.extract(state["message"], state.get("session_id"))
    return state


def dispatch_node(state: QueryState, dispatcher: Dispatcher) -> QueryState:
    outcome = dispatcher.dispatch(state["payload"])
    if outcome is NO_INTENT:
        state["result"] = None
        return state
    state["result"] = outcome.to_dict()
    logger.info(
        "dispatch_node.end",
        extra={"extra": {"trace_id": state.get("trace_id"), "success": state["result"].get("success")}},
    )
    return state


def compose_node(state: QueryState, composer: ResponseComposer) -> QueryState:
    state["reply"] = composer.compose(state["message"], state["result"])
    return state


def clarify_node(state: QueryState) -> QueryState:
    state["reply"] = CLARIFICATION_MESSAGE
    state["clarified"] = True
    logger.info("clarify_node.no_intent", extra={"extra": {"trace_id": state.get("trace_id")}})
    return state


def dispatch_router(state: QueryState) -> str:
    if state.get("result") is None:
        return "clarify"
    return "compose"


def build_graph(
    extractor: IntentExtractor,
    dispatcher: Dispatcher,
    composer: ResponseComposer,
) -> CompiledStateGraph:
    graph = StateGraph(QueryState)
    graph.add_node("extract", lambda s: extract_node(s, extractor))
    graph.add_node("dispatch", lambda s: dispatch_node(s, dispatcher))
    graph.add_node("compose", lambda s: compose_node(s, composer))
    graph.add_node("clarify", clarify_node)
    graph.set_entry_point("extract")
    graph.add_edge("extract", "dispatch")
    graph.add_conditional_edges("dispatch", dispatch_router, {"compose": "compose", "clarify": "clarify"})
    graph.add_edge("compose", END)
    graph.add_edge("clarify", END)
    return graph.compile()
