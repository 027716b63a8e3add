"""Query pipeline: intent extraction -> dispatch -> reply composition."""

from order_agent.flows.runner import QueryOutcome, configure, run_query

__all__ = ["QueryOutcome", "configure", "run_query"]
