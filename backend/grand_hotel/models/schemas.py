"""
Pydantic 模式定义
用于服务边界和 API 请求/响应验证
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from grand_hotel.models.ontology import RoomCategory, BookingStatus, PaymentMethod


# ============== 房间 Schemas ==============

class RoomCategoryResponse(BaseModel):
    category: RoomCategory
    display_name: str
    description: str
    price_per_night: Decimal
    room_count: int = 0


class RoomResponse(BaseModel):
    room_number: str
    category: RoomCategory
    category_name: str
    floor: int
    price_per_night: Decimal
    available: bool


class AvailableRoomResponse(BaseModel):
    room_number: str
    category: RoomCategory
    category_name: str
    floor: int
    nights: int
    nightly_rate: Decimal
    total_cost: Decimal


# ============== 预订 Schemas ==============

class PaymentDetails(BaseModel):
    """
    模拟支付所需的附加信息
    仅在支付时使用，不做保存
    """
    card_number: Optional[str] = Field(None, max_length=32)
    expiry: Optional[str] = Field(None, max_length=7)
    cvv: Optional[str] = Field(None, max_length=4)
    transaction_reference: Optional[str] = Field(None, max_length=64)


class ReservationCreate(BaseModel):
    guest_name: str = Field(..., max_length=100)
    guest_phone: str = Field(default="", max_length=30)
    guest_email: str = Field(default="", max_length=100)
    check_in_date: date
    check_out_date: date
    room_number: str = Field(..., max_length=10)
    payment_method: PaymentMethod
    payment_details: Optional[PaymentDetails] = None

    @field_validator("guest_name", "guest_phone", "guest_email")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip() if v else v

    @field_validator("room_number")
    @classmethod
    def normalize_room_number(cls, v: str) -> str:
        return v.strip().upper()


class PaymentResponse(BaseModel):
    payment_id: str
    method: PaymentMethod
    amount: Decimal
    successful: bool
    paid_at: datetime


class BookingResponse(BaseModel):
    booking_id: str
    status: BookingStatus
    created_at: datetime
    guest_id: str
    guest_name: str
    guest_phone: str
    guest_email: str
    room_number: str
    room_category: RoomCategory
    room_description: str
    check_in_date: date
    check_out_date: date
    nights: int
    rate_per_night: Decimal
    total_cost: Decimal
    payment: Optional[PaymentResponse] = None


class LedgerSummaryResponse(BaseModel):
    total: int
    confirmed: int
    checked_in: int
    checked_out: int
    cancelled: int
    revenue: Decimal


class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    summary: LedgerSummaryResponse


class OperationResponse(BaseModel):
    """变更操作结果；warning 表示操作已生效但保存失败"""
    message: str
    booking_id: Optional[str] = None
    status: Optional[BookingStatus] = None
    amount: Optional[Decimal] = None
    warning: Optional[str] = None
    booking: Optional[BookingResponse] = None
