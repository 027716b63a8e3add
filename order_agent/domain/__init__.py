"""领域层模型与协议。

包含：
- models: 统一的 ChatMessage / ChatRequest / ChatResult 模型。
- conversation: 意图抽取会话与 ConversationStore 抽象。
- orders: 订单实体与操作结果（ShippingInfo / AddressChanged / OrderNotFound）。
- exceptions: 业务异常类型定义。
"""
