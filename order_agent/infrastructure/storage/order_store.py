"""进程内订单存储。

订单在进程启动时由 seed 数据载入，之后只会修改地址字段，
不会在运行时新增或删除。进程重启后所有修改丢失。
"""

from threading import Lock
from typing import Dict, Mapping, Optional

from order_agent.config.settings import settings
from order_agent.domain.exceptions import ValidationError
from order_agent.domain.orders import (
    AddressChanged,
    Order,
    OrderNotFound,
    OrderStatus,
    ShippingInfo,
)


class InMemoryOrderStore:
    def __init__(self, seed: Optional[Mapping[str, Mapping[str, str]]] = None):
        raw = settings.seed_orders if seed is None else seed
        self._orders: Dict[str, Order] = {}
        for order_id, record in raw.items():
            self._orders[str(order_id)] = self._build_order(str(order_id), record)
        # 订单不会在运行时新增，锁随 seed 一次性建好，保证“查找 + 修改 + 生成结果”是原子的
        self._locks: Dict[str, Lock] = {order_id: Lock() for order_id in self._orders}

    def get_order(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def check_shipping(self, order_id: str) -> ShippingInfo | OrderNotFound:
        order = self.get_order(order_id)
        if order is None:
            return OrderNotFound()
        return ShippingInfo(status=order.status, address=order.address)

    def change_address(self, order_id: str, new_address: str) -> AddressChanged | OrderNotFound:
        lock = self._locks.get(order_id)
        if lock is None:
            return OrderNotFound()
        with lock:
            order = self._orders[order_id]
            order.address = new_address
            return AddressChanged(new_address=order.address)

    def __len__(self) -> int:
        return len(self._orders)

    @staticmethod
    def _build_order(order_id: str, record: Mapping[str, str]) -> Order:
        try:
            status = OrderStatus(record["status"])
            address = str(record["address"])
        except (KeyError, ValueError) as e:
            raise ValidationError(
                code="INVALID_SEED_ORDER",
                message=f"Invalid seed order {order_id!r}: {e}",
                http_status=500,
            )
        return Order(order_id=order_id, status=status, address=address)
