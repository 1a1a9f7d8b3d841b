"""
入住管理路由
"""
from fastapi import APIRouter, Depends
from grand_hotel.dependencies import get_hotel_service, to_http_exception
from grand_hotel.exceptions import ReservationError
from grand_hotel.models.schemas import OperationResponse
from grand_hotel.routers.reservations import to_operation_response
from grand_hotel.services.hotel_service import HotelService

router = APIRouter(prefix="/checkin", tags=["入住管理"])


@router.post("/{booking_id}", response_model=OperationResponse)
def check_in(booking_id: str, service: HotelService = Depends(get_hotel_service)):
    """办理入住"""
    try:
        result = service.check_in(booking_id)
    except ReservationError as e:
        raise to_http_exception(e)
    return to_operation_response(service, result)
