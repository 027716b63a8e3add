"""State definition for the query pipeline graph."""

from __future__ import annotations

from typing import Any, Dict, Optional, TypedDict


class QueryState(TypedDict, total=False):
    """State shared across LangGraph nodes."""

    message: str
    session_id: Optional[str]
    trace_id: str
    payload: Dict[str, Any]
    result: Optional[Dict[str, Any]]
    reply: Optional[str]
    clarified: bool
