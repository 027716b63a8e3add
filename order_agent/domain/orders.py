"""订单领域模型与操作结果。

操作结果是带标签的联合类型：成功分支携带各操作自己的字段，
失败分支携带错误原因。所有结果都可以通过 to_dict() 无损转成 JSON。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union


ORDER_NOT_FOUND = "Order not found"


class OrderStatus(str, Enum):
    """订单业务状态。"""

    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


@dataclass
class Order:
    order_id: str
    status: OrderStatus
    address: str


@dataclass(frozen=True)
class ShippingInfo:
    """check_shipping 成功结果。"""

    status: OrderStatus
    address: str

    def to_dict(self) -> Dict[str, Any]:
        return {"success": True, "status": self.status.value, "address": self.address}


@dataclass(frozen=True)
class AddressChanged:
    """change_shipping_address 成功结果。"""

    new_address: str

    def to_dict(self) -> Dict[str, Any]:
        return {"success": True, "new_address": self.new_address}


@dataclass(frozen=True)
class OrderNotFound:
    """订单不存在。这是业务结果，不是异常。"""

    error: str = ORDER_NOT_FOUND

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error}


OperationResult = Union[ShippingInfo, AddressChanged, OrderNotFound]
