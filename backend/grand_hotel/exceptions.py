"""
预订引擎异常体系
所有业务异常均继承 ValueError，路由层统一转换为 HTTP 错误
"""
from typing import Optional


class ReservationError(ValueError):
    """预订引擎异常基类"""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        super().__init__(message)


class ValidationError(ReservationError):
    """输入校验失败（姓名为空、日期区间无效等）"""


class NotFoundError(ReservationError):
    """预订或房间不存在"""


class ConflictError(ReservationError):
    """房间在所选日期已被占用"""


class StateError(ReservationError):
    """
    非法状态转换

    Attributes:
        current_status: 转换被拒绝时预订的当前状态
    """

    def __init__(self, message: str, current_status=None):
        super().__init__(message)
        self.current_status = current_status


class PaymentError(ReservationError):
    """支付结算失败，预订未创建"""


class PersistenceError(ReservationError):
    """预订文件读写失败"""


__all__ = [
    "ReservationError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "StateError",
    "PaymentError",
    "PersistenceError",
]
