"""
依赖注入
路由通过 get_hotel_service 获取会话服务，测试时可通过 dependency_overrides 替换
"""
from typing import Optional
from fastapi import HTTPException, status

from grand_hotel.exceptions import (
    ReservationError, ValidationError, NotFoundError,
    ConflictError, StateError, PaymentError
)
from grand_hotel.services.hotel_service import HotelService

_hotel_service: Optional[HotelService] = None


def set_hotel_service(service: Optional[HotelService]) -> None:
    """设置进程级会话服务（应用启动时调用）"""
    global _hotel_service
    _hotel_service = service


def get_hotel_service() -> HotelService:
    """依赖注入：获取会话服务"""
    if _hotel_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="预订服务尚未初始化"
        )
    return _hotel_service


_STATUS_CODES = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StateError, status.HTTP_409_CONFLICT),
    (PaymentError, status.HTTP_402_PAYMENT_REQUIRED),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
]


def to_http_exception(error: ReservationError) -> HTTPException:
    """业务异常转换为 HTTP 异常"""
    for error_cls, status_code in _STATUS_CODES:
        if isinstance(error, error_cls):
            return HTTPException(status_code=status_code, detail=error.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
