"""
酒店前台服务 - 会话边界
组合房间目录、客人登记簿、支付记录、预订台账与 CSV 存储
每次变更操作后立即保存；保存失败只作为警告返回，内存状态仍然有效
"""
from typing import List, Optional, Tuple, Dict, Any
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
import logging

from grand_hotel.config import Settings
from grand_hotel.database import BookingCsvStore
from grand_hotel.exceptions import PersistenceError
from grand_hotel.models.ontology import Booking, Room, RoomCategory
from grand_hotel.models.schemas import ReservationCreate
from grand_hotel.services.billing_service import PaymentRecorder, PaymentProcessor
from grand_hotel.services.guest_service import GuestRegistry
from grand_hotel.services.reservation_service import (
    BookingLedger, AvailableRoom, LedgerSummary
)
from grand_hotel.services.room_service import RoomCatalog

logger = logging.getLogger(__name__)


@dataclass
class HotelContext:
    """会话上下文：启动时创建，显式传递给所有操作"""
    settings: Settings
    catalog: RoomCatalog
    guests: GuestRegistry
    payments: PaymentRecorder
    ledger: BookingLedger
    store: BookingCsvStore

    @classmethod
    def build(
        cls,
        settings: Optional[Settings] = None,
        processor: Optional[PaymentProcessor] = None
    ) -> "HotelContext":
        settings = settings or Settings()
        catalog = RoomCatalog()
        guests = GuestRegistry()
        payments = PaymentRecorder(
            processor=processor,
            processing_delay=settings.PAYMENT_PROCESSING_DELAY
        )
        ledger = BookingLedger(catalog, guests, payments, settings=settings)
        store = BookingCsvStore(settings.BOOKINGS_FILE)
        return cls(
            settings=settings,
            catalog=catalog,
            guests=guests,
            payments=payments,
            ledger=ledger,
            store=store
        )


@dataclass
class OperationResult:
    """
    变更操作结果

    Attributes:
        message: 结果说明
        booking: 涉及的预订
        amount: 金额（退房为最终费用，取消为退款）
        warning: 保存失败时的警告
    """
    message: str
    booking: Optional[Booking] = None
    amount: Optional[Decimal] = None
    warning: Optional[str] = None


def normalize_booking_id(booking_id: str) -> str:
    return (booking_id or "").strip().upper()


class HotelService:
    """酒店前台服务"""

    def __init__(self, context: HotelContext):
        self.context = context

    @property
    def ledger(self) -> BookingLedger:
        return self.context.ledger

    # ============== 启动 ==============

    def initialize(self) -> OperationResult:
        """初始化房间目录并加载已保存的预订"""
        self.context.catalog.seed()
        try:
            loaded = self.context.store.load(self.ledger)
        except PersistenceError as e:
            logger.warning(f"Could not load bookings: {e}")
            return OperationResult(message="已加载 0 条预订", warning=str(e))
        return OperationResult(message=f"已加载 {loaded} 条预订")

    def save(self) -> Optional[str]:
        """
        保存全部预订

        Returns:
            保存失败时返回警告信息
        """
        try:
            self.context.store.save(self.ledger.all_bookings())
        except PersistenceError as e:
            logger.warning(f"Could not save bookings: {e}")
            return str(e)
        return None

    # ============== 房间查询 ==============

    def list_rooms(self, category: Optional[RoomCategory] = None) -> List[Room]:
        """获取房间列表"""
        return self.context.catalog.rooms_by_category(category)

    def categories(self) -> List[Dict[str, Any]]:
        """房型与价格信息"""
        return [
            {
                "category": category,
                "display_name": info.display_name,
                "description": info.description,
                "price_per_night": info.price_per_night,
                "room_count": len(self.context.catalog.rooms_by_category(category)),
            }
            for category, info in self.context.catalog.categories()
        ]

    def search(
        self,
        check_in: date,
        check_out: date,
        category: Optional[RoomCategory] = None
    ) -> List[AvailableRoom]:
        """查询可订房间"""
        return self.ledger.search_available_rooms(check_in, check_out, category)

    # ============== 预订操作 ==============

    def create_reservation(self, data: ReservationCreate) -> OperationResult:
        """创建预订（含模拟支付）"""
        booking = self.ledger.create_booking(
            guest_name=data.guest_name,
            guest_phone=data.guest_phone,
            guest_email=data.guest_email,
            check_in=data.check_in_date,
            check_out=data.check_out_date,
            room_number=data.room_number,
            payment_method=data.payment_method,
            payment_details=data.payment_details.model_dump() if data.payment_details else None
        )
        return OperationResult(
            message="预订已确认",
            booking=booking,
            amount=booking.total_cost,
            warning=self.save()
        )

    def get_booking(self, booking_id: str) -> Booking:
        """获取单个预订"""
        return self.ledger.require_booking(normalize_booking_id(booking_id))

    def cancel(self, booking_id: str, today: Optional[date] = None) -> OperationResult:
        """取消预订"""
        booking_id = normalize_booking_id(booking_id)
        refund = self.ledger.cancel(booking_id, today)
        return OperationResult(
            message="预订已取消",
            booking=self.ledger.get_booking(booking_id),
            amount=refund,
            warning=self.save()
        )

    def check_in(self, booking_id: str) -> OperationResult:
        """办理入住"""
        booking = self.ledger.check_in(normalize_booking_id(booking_id))
        return OperationResult(
            message="入住成功",
            booking=booking,
            warning=self.save()
        )

    def check_out(self, booking_id: str) -> OperationResult:
        """办理退房"""
        booking_id = normalize_booking_id(booking_id)
        final_cost = self.ledger.check_out(booking_id)
        return OperationResult(
            message="退房成功",
            booking=self.ledger.get_booking(booking_id),
            amount=final_cost,
            warning=self.save()
        )

    def list_all(self) -> Tuple[List[Booking], LedgerSummary]:
        """获取全部预订及汇总"""
        return self.ledger.all_bookings(), self.ledger.summary()

    # ============== 详情 ==============

    def get_booking_detail(self, booking: Booking) -> Dict[str, Any]:
        """获取预订详情（包含关联信息）"""
        payment = None
        if booking.payment:
            payment = {
                "payment_id": booking.payment.payment_id,
                "method": booking.payment.method,
                "amount": booking.payment.amount,
                "successful": booking.payment.successful,
                "paid_at": booking.payment.paid_at,
            }
        return {
            "booking_id": booking.booking_id,
            "status": booking.status,
            "created_at": booking.created_at,
            "guest_id": booking.guest.guest_id,
            "guest_name": booking.guest.name,
            "guest_phone": booking.guest.phone,
            "guest_email": booking.guest.email,
            "room_number": booking.room.room_number,
            "room_category": booking.room.category,
            "room_description": booking.room.category.info.description,
            "check_in_date": booking.check_in,
            "check_out_date": booking.check_out,
            "nights": booking.nights,
            "rate_per_night": booking.room.price_per_night,
            "total_cost": booking.total_cost,
            "payment": payment,
        }
