"""
预订服务 - 本体操作层
管理 Booking 对象（预订台账，核心状态机）

操作流程统一为：校验 -> 计算 -> 变更
所有校验在第一次变更之前完成，失败时台账保持不变
持久化由上层 HotelService 在每次变更后执行
"""
from typing import List, Optional, Dict, Any
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
import logging

from grand_hotel.config import Settings
from grand_hotel.engine.state_machine import (
    BOOKING_STATE_MACHINE, StateMachine,
    TRIGGER_CHECK_IN, TRIGGER_CHECK_OUT, TRIGGER_CANCEL,
)
from grand_hotel.exceptions import (
    ValidationError, NotFoundError, ConflictError, StateError, PaymentError
)
from grand_hotel.models.ontology import (
    Booking, BookingStatus, Room, RoomCategory, PaymentMethod
)
from grand_hotel.services.billing_service import PaymentRecorder
from grand_hotel.services.guest_service import GuestRegistry
from grand_hotel.services.room_service import RoomCatalog
from grand_hotel.services.sequence import IdSequence

logger = logging.getLogger(__name__)

BOOKING_ID_PREFIX = "BK"
BOOKING_ID_WIDTH = 5

CENT = Decimal("0.01")


@dataclass
class AvailableRoom:
    """可订房间查询结果"""
    room: Room
    nights: int
    nightly_rate: Decimal
    total_cost: Decimal


@dataclass
class LedgerSummary:
    """台账汇总（营收不含已取消预订）"""
    total: int
    confirmed: int
    checked_in: int
    checked_out: int
    cancelled: int
    revenue: Decimal


def validate_stay_dates(check_in: date, check_out: date) -> int:
    """
    校验入住/离店日期

    Returns:
        入住晚数
    """
    if check_in is None or check_out is None:
        raise ValidationError("入住和离店日期不能为空")
    if check_out <= check_in:
        raise ValidationError("离店日期必须晚于入住日期")
    return (check_out - check_in).days


class BookingLedger:
    """预订台账"""

    def __init__(
        self,
        catalog: RoomCatalog,
        guests: GuestRegistry,
        payments: PaymentRecorder,
        settings: Optional[Settings] = None,
        state_machine: StateMachine = BOOKING_STATE_MACHINE,
        sequence: Optional[IdSequence] = None
    ):
        self.catalog = catalog
        self.guests = guests
        self.payments = payments
        self._settings = settings or Settings()
        self._state_machine = state_machine
        self.sequence = sequence or IdSequence(BOOKING_ID_PREFIX, BOOKING_ID_WIDTH)
        self._bookings: Dict[str, Booking] = {}

    # ============== 查询 ==============

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        """获取单个预订"""
        return self._bookings.get(booking_id)

    def require_booking(self, booking_id: str) -> Booking:
        """获取单个预订，不存在时抛出异常"""
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError(f"预订 {booking_id} 不存在")
        return booking

    def require_room(self, room_number: str) -> Room:
        room = self.catalog.find_room(room_number)
        if room is None:
            raise NotFoundError(f"房间 {room_number} 不存在")
        return room

    def all_bookings(self) -> List[Booking]:
        """获取所有预订（包括已取消和已退房）"""
        return list(self._bookings.values())

    def __len__(self) -> int:
        return len(self._bookings)

    # ============== 可订查询 / 冲突检测 ==============

    def is_room_available(self, room: Room, check_in: date, check_out: date) -> bool:
        """
        房间在 [check_in, check_out) 内是否可订

        只有已确认和已入住的预订占用日期
        """
        for booking in self._bookings.values():
            if (booking.room.room_number == room.room_number
                    and booking.is_active
                    and booking.overlaps_with(check_in, check_out)):
                return False
        return True

    def search_available_rooms(
        self,
        check_in: date,
        check_out: date,
        category: Optional[RoomCategory] = None
    ) -> List[AvailableRoom]:
        """查询可订房间，房型筛选与日期冲突检测相互独立"""
        nights = validate_stay_dates(check_in, check_out)

        result = []
        for room in self.catalog.rooms_by_category(category):
            if not self.is_room_available(room, check_in, check_out):
                continue
            result.append(AvailableRoom(
                room=room,
                nights=nights,
                nightly_rate=room.price_per_night,
                total_cost=nights * room.price_per_night
            ))
        return result

    def quote(self, room_number: str, check_in: date, check_out: date) -> Decimal:
        """计算指定房间和日期的总价"""
        nights = validate_stay_dates(check_in, check_out)
        return nights * self.require_room(room_number).price_per_night

    # ============== 创建预订 ==============

    def create_booking(
        self,
        guest_name: str,
        guest_phone: str,
        guest_email: str,
        check_in: date,
        check_out: date,
        room_number: str,
        payment_method: PaymentMethod,
        payment_details: Optional[Dict[str, Any]] = None
    ) -> Booking:
        """
        创建预订

        业务规则：
        1. 客人姓名必填，离店日期必须晚于入住日期
        2. 房间必须存在且所选日期无冲突
        3. 支付结算成功后才创建客人和预订
        4. 新预订状态为已确认，不改变房间占用状态

        payment_details（卡号、交易流水号等）仅用于模拟支付，不做保存
        """
        name = (guest_name or "").strip()
        if not name:
            raise ValidationError("客人姓名不能为空")

        nights = validate_stay_dates(check_in, check_out)
        room = self.require_room(room_number)

        if not self.is_room_available(room, check_in, check_out):
            raise ConflictError(f"房间 {room.room_number} 在所选日期不可预订")

        total_cost = nights * room.price_per_night

        payment = self.payments.record(total_cost, payment_method)
        if not self.payments.settle(payment):
            raise PaymentError("支付失败，预订未创建")

        guest = self.guests.create(name, (guest_phone or "").strip(), (guest_email or "").strip())

        booking = Booking(
            booking_id=self.sequence.next_id(),
            guest=guest,
            room=room,
            check_in=check_in,
            check_out=check_out,
            status=BookingStatus(self._state_machine.initial_state),
            payment=payment
        )
        self._bookings[booking.booking_id] = booking

        logger.info(
            f"Booking {booking.booking_id} created: room {room.room_number} "
            f"{check_in} -> {check_out} ({nights} nights, total {total_cost})"
        )
        return booking

    # ============== 状态转换 ==============

    def _transition(self, booking: Booking, trigger: str, error_message: str) -> BookingStatus:
        """校验并计算目标状态（不修改预订）"""
        target = self._state_machine.next_state(booking.status.value, trigger)
        if target is None:
            raise StateError(
                f"{error_message}，当前状态为 {booking.status.name}",
                current_status=booking.status
            )
        return BookingStatus(target)

    def _apply(self, booking: Booking, target: BookingStatus, trigger: str) -> None:
        previous = booking.status
        booking.status = target
        logger.info(
            f"Booking {booking.booking_id} transition: {previous.name} -> {target.name} "
            f"(trigger: {trigger})"
        )

    def check_in(self, booking_id: str) -> Booking:
        """
        办理入住

        仅已确认的预订可以入住，房间标记为占用
        """
        booking = self.require_booking(booking_id)
        target = self._transition(booking, TRIGGER_CHECK_IN, "无法入住")

        self._apply(booking, target, TRIGGER_CHECK_IN)
        self.catalog.set_available(booking.room, False)
        return booking

    def check_out(self, booking_id: str) -> Decimal:
        """
        办理退房

        仅已入住的预订可以退房，房间无其他在住预订时释放

        Returns:
            最终费用
        """
        booking = self.require_booking(booking_id)
        target = self._transition(booking, TRIGGER_CHECK_OUT, "无法退房")

        self._apply(booking, target, TRIGGER_CHECK_OUT)
        self._refresh_occupancy(booking.room)
        return booking.total_cost

    def compute_refund(self, booking: Booking, today: Optional[date] = None) -> Decimal:
        """
        计算取消退款

        入住日期距今超过 FULL_REFUND_MIN_DAYS_AHEAD 天全额退款，
        否则按 LATE_CANCEL_REFUND_RATE 退款
        """
        today = today or date.today()
        threshold = today + timedelta(days=self._settings.FULL_REFUND_MIN_DAYS_AHEAD)
        if booking.check_in > threshold:
            refund = booking.total_cost
        else:
            refund = booking.total_cost * Decimal(str(self._settings.LATE_CANCEL_REFUND_RATE))
        return refund.quantize(CENT, rounding=ROUND_HALF_UP)

    def cancel(self, booking_id: str, today: Optional[date] = None) -> Decimal:
        """
        取消预订

        已取消和已退房的预订不可取消；预订保留在台账中

        Returns:
            退款金额
        """
        booking = self.require_booking(booking_id)
        target = self._transition(booking, TRIGGER_CANCEL, "无法取消")
        refund = self.compute_refund(booking, today)

        self._apply(booking, target, TRIGGER_CANCEL)
        self._refresh_occupancy(booking.room)
        logger.info(f"Booking {booking.booking_id} refund: {refund}")
        return refund

    # ============== 汇总 ==============

    def summary(self) -> LedgerSummary:
        """台账汇总"""
        bookings = self._bookings.values()

        def count(status: BookingStatus) -> int:
            return sum(1 for b in bookings if b.status == status)

        revenue = sum(
            (b.total_cost for b in bookings if b.status != BookingStatus.CANCELLED),
            Decimal("0.00")
        )
        return LedgerSummary(
            total=len(self._bookings),
            confirmed=count(BookingStatus.CONFIRMED),
            checked_in=count(BookingStatus.CHECKED_IN),
            checked_out=count(BookingStatus.CHECKED_OUT),
            cancelled=count(BookingStatus.CANCELLED),
            revenue=revenue
        )

    # ============== 加载支持 ==============

    def restore(self, booking: Booking) -> None:
        """按编号放入台账（重复加载时覆盖，不产生重复记录）"""
        self._bookings[booking.booking_id] = booking

    def reconcile_sequence(self) -> int:
        """按已有预订编号对齐计数器"""
        return self.sequence.reconcile(self._bookings.keys())

    def _is_occupied(self, room: Room) -> bool:
        return any(
            b.room.room_number == room.room_number and b.status == BookingStatus.CHECKED_IN
            for b in self._bookings.values()
        )

    def _refresh_occupancy(self, room: Room) -> None:
        """按该房间已入住的预订重新计算占用状态"""
        self.catalog.set_available(room, not self._is_occupied(room))

    def reconcile_occupancy(self) -> None:
        """根据已入住的预订重新计算房间占用状态"""
        for room in self.catalog.all_rooms():
            self._refresh_occupancy(room)
