"""意图分发。

把抽取出的意图 payload 校验为 ToolCall，再调用订单存储的对应操作。
状态只有两步：待校验 -> 已分发 / 已拒绝，不做重试。
"""

import json
from typing import Any, Callable, Dict, Mapping, Optional, Union

from order_agent.domain.exceptions import MissingArgument, UnsupportedOperation
from order_agent.domain.orders import OperationResult
from order_agent.infrastructure.logging.logger import logger
from order_agent.infrastructure.storage.order_store import InMemoryOrderStore
from .definitions import OPERATION_DEFS, Operation, ToolCall


class NoIntent:
    """模型输出里没有 function_call，上层应提示用户补充说明。"""

    _instance: Optional["NoIntent"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_INTENT"


NO_INTENT = NoIntent()

Handler = Callable[[Dict[str, str]], OperationResult]
DispatchOutcome = Union[OperationResult, NoIntent]


class Dispatcher:
    def __init__(self, store: InMemoryOrderStore):
        self._handlers: Dict[Operation, Handler] = {
            Operation.CHECK_SHIPPING: lambda args: store.check_shipping(args["order_id"]),
            Operation.CHANGE_SHIPPING_ADDRESS: lambda args: store.change_address(
                args["order_id"], args["new_address"]
            ),
        }

    def parse(self, payload: Mapping[str, Any]) -> Optional[ToolCall]:
        """校验 payload，返回 ToolCall；没有 function_call 时返回 None。

        Raises:
            UnsupportedOperation: 函数名缺失或不在支持列表中。
            MissingArgument: 缺少必填参数。
        """

        call = payload.get("function_call") if isinstance(payload, Mapping) else None
        if not call:
            return None
        if not isinstance(call, Mapping):
            raise UnsupportedOperation(call)
        operation = Operation.parse(call.get("name"))
        if operation is None:
            raise UnsupportedOperation(call.get("name"))

        raw_args = self._parse_arguments(call.get("arguments"))
        tool_def = OPERATION_DEFS[operation]
        arguments: Dict[str, str] = {}
        missing = []
        for param in tool_def.params.values():
            value = self._coerce_value(raw_args.get(param.name))
            if value is None:
                if param.required:
                    missing.append(param.name)
                continue
            arguments[param.name] = value
        if missing:
            raise MissingArgument(operation.value, missing)
        return ToolCall(operation=operation, arguments=arguments)

    def dispatch(self, payload: Mapping[str, Any]) -> DispatchOutcome:
        try:
            call = self.parse(payload)
        except (UnsupportedOperation, MissingArgument) as e:
            logger.warning("dispatch.rejected", extra={"extra": {"code": e.code, **e.extra}})
            raise
        if call is None:
            logger.info("dispatch.no_intent")
            return NO_INTENT
        result = self.execute(call)
        logger.info(
            "dispatch.done",
            extra={"extra": {"operation": call.operation.value, "result": result.to_dict()}},
        )
        return result

    def execute(self, call: ToolCall) -> OperationResult:
        return self._handlers[call.operation](call.arguments)

    @staticmethod
    def _parse_arguments(raw: Any) -> Dict[str, Any]:
        """解析 arguments 字段。

        部分模型会把 arguments 作为 JSON 字符串返回，这里做一层
        json.loads 尝试；无法解析时视为没有参数。
        """

        if isinstance(raw, Mapping):
            return dict(raw)
        if isinstance(raw, str):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                return {}
            return parsed if isinstance(parsed, dict) else {}
        return {}

    @staticmethod
    def _coerce_value(value: Any) -> Optional[str]:
        # 模型偶尔会把订单号输出成数字
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, (int, float)):
            value = str(value)
        if not isinstance(value, str):
            return None
        value = value.strip()
        return value or None
