"""可调用操作的数据结构定义。

这些 dataclass 描述了“函数调用”的 schema，既用于：
- 渲染进意图抽取的 system prompt，向 LLM 说明可用操作（render_operations）。
- 在 Dispatcher 中校验并执行模型给出的调用（ToolCall）。

支持的操作是一个封闭枚举 Operation，每个枚举值在 OPERATION_DEFS
中都必须有对应的参数定义。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from order_agent.domain.exceptions import ValidationError


class Operation(str, Enum):
    CHECK_SHIPPING = "check_shipping"
    CHANGE_SHIPPING_ADDRESS = "change_shipping_address"

    @classmethod
    def parse(cls, name: object) -> Optional["Operation"]:
        if not isinstance(name, str):
            return None
        try:
            return cls(name.strip())
        except ValueError:
            return None


@dataclass
class ToolParam:
    """单个操作参数的定义。"""

    name: str
    description: str
    required: bool = True


@dataclass
class ToolDef:
    """一个可供 LLM 调用的操作定义。"""

    operation: Operation
    description: str
    params: Dict[str, ToolParam]

    @property
    def name(self) -> str:
        return self.operation.value

    @property
    def required_params(self) -> List[str]:
        return [p.name for p in self.params.values() if p.required]


@dataclass
class ToolCall:
    """校验通过的一次调用请求，arguments 已规整为字符串。"""

    operation: Operation
    arguments: Dict[str, str] = field(default_factory=dict)


OPERATION_DEFS: Dict[Operation, ToolDef] = {
    Operation.CHECK_SHIPPING: ToolDef(
        operation=Operation.CHECK_SHIPPING,
        description="查询订单的物流状态和收货地址",
        params={
            "order_id": ToolParam(name="order_id", description="订单号"),
        },
    ),
    Operation.CHANGE_SHIPPING_ADDRESS: ToolDef(
        operation=Operation.CHANGE_SHIPPING_ADDRESS,
        description="修改订单的收货地址",
        params={
            "order_id": ToolParam(name="order_id", description="订单号"),
            "new_address": ToolParam(name="new_address", description="新的收货地址"),
        },
    ),
}

if set(OPERATION_DEFS) != set(Operation):
    raise ValidationError(
        code="INVALID_OPERATION_DEFS",
        message=f"Operations without ToolDef: {sorted(o.value for o in set(Operation) - set(OPERATION_DEFS))}",
        http_status=500,
    )


def render_operations() -> str:
    """按 OPERATION_DEFS 生成 prompt 中的操作清单，每个操作一行。"""

    lines = []
    for tool_def in OPERATION_DEFS.values():
        params = "、".join(f"{p.name}（{p.description}）" for p in tool_def.params.values())
        lines.append(f"- {tool_def.name}：{tool_def.description}，参数 {params}。")
    return "\n".join(lines)
