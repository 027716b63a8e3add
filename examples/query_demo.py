"""Minimal demonstration of the order query pipeline."""

from order_agent.flows import run_query

if __name__ == "__main__":
    question = "查订单 123 状态"
    outcome = run_query(question)
    print("User:", question)
    print("Data:", outcome.data)
    print("Agent:", outcome.message)
