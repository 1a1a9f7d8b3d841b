"""
预订管理路由
"""
from fastapi import APIRouter, Depends
from grand_hotel.dependencies import get_hotel_service, to_http_exception
from grand_hotel.exceptions import ReservationError
from grand_hotel.models.schemas import (
    ReservationCreate, BookingResponse, BookingListResponse,
    LedgerSummaryResponse, OperationResponse
)
from grand_hotel.services.hotel_service import HotelService, OperationResult

router = APIRouter(prefix="/reservations", tags=["预订管理"])


def to_operation_response(service: HotelService, result: OperationResult) -> OperationResponse:
    """变更结果转换为响应"""
    booking = result.booking
    return OperationResponse(
        message=result.message,
        booking_id=booking.booking_id if booking else None,
        status=booking.status if booking else None,
        amount=result.amount,
        warning=result.warning,
        booking=BookingResponse(**service.get_booking_detail(booking)) if booking else None
    )


@router.get("", response_model=BookingListResponse)
def list_reservations(service: HotelService = Depends(get_hotel_service)):
    """获取全部预订及汇总"""
    bookings, summary = service.list_all()
    return BookingListResponse(
        bookings=[BookingResponse(**service.get_booking_detail(b)) for b in bookings],
        summary=LedgerSummaryResponse(
            total=summary.total,
            confirmed=summary.confirmed,
            checked_in=summary.checked_in,
            checked_out=summary.checked_out,
            cancelled=summary.cancelled,
            revenue=summary.revenue
        )
    )


@router.get("/{booking_id}", response_model=BookingResponse)
def get_reservation(booking_id: str, service: HotelService = Depends(get_hotel_service)):
    """获取预订详情"""
    try:
        booking = service.get_booking(booking_id)
    except ReservationError as e:
        raise to_http_exception(e)
    return BookingResponse(**service.get_booking_detail(booking))


@router.post("", response_model=OperationResponse)
def create_reservation(
    data: ReservationCreate,
    service: HotelService = Depends(get_hotel_service)
):
    """创建预订"""
    try:
        result = service.create_reservation(data)
    except ReservationError as e:
        raise to_http_exception(e)
    return to_operation_response(service, result)


@router.post("/{booking_id}/cancel", response_model=OperationResponse)
def cancel_reservation(booking_id: str, service: HotelService = Depends(get_hotel_service)):
    """取消预订"""
    try:
        result = service.cancel(booking_id)
    except ReservationError as e:
        raise to_http_exception(e)
    return to_operation_response(service, result)
