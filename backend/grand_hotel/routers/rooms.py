"""
房间管理路由
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query
from grand_hotel.dependencies import get_hotel_service, to_http_exception
from grand_hotel.exceptions import ReservationError
from grand_hotel.models.ontology import RoomCategory
from grand_hotel.models.schemas import (
    RoomResponse, RoomCategoryResponse, AvailableRoomResponse
)
from grand_hotel.services.hotel_service import HotelService

router = APIRouter(prefix="/rooms", tags=["房间管理"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    category: Optional[RoomCategory] = None,
    service: HotelService = Depends(get_hotel_service)
):
    """获取房间列表"""
    return [
        RoomResponse(
            room_number=r.room_number,
            category=r.category,
            category_name=r.category.info.display_name,
            floor=r.floor,
            price_per_night=r.price_per_night,
            available=r.available
        )
        for r in service.list_rooms(category)
    ]


@router.get("/categories", response_model=List[RoomCategoryResponse])
def list_categories(service: HotelService = Depends(get_hotel_service)):
    """房型与价格信息"""
    return [RoomCategoryResponse(**c) for c in service.categories()]


@router.get("/available", response_model=List[AvailableRoomResponse])
def search_available_rooms(
    check_in: date = Query(...),
    check_out: date = Query(...),
    category: Optional[RoomCategory] = None,
    service: HotelService = Depends(get_hotel_service)
):
    """查询可订房间"""
    try:
        results = service.search(check_in, check_out, category)
    except ReservationError as e:
        raise to_http_exception(e)
    return [
        AvailableRoomResponse(
            room_number=a.room.room_number,
            category=a.room.category,
            category_name=a.room.category.info.display_name,
            floor=a.room.floor,
            nights=a.nights,
            nightly_rate=a.nightly_rate,
            total_cost=a.total_cost
        )
        for a in results
    ]
