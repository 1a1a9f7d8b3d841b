"""
数据持久化层 - CSV 平面文件
每条预订一行，包含独立重建所需的全部冗余字段（客人、房间号、支付）
文件可被用户手工编辑，加载时跳过格式错误的行而不是报错
预订的 created_at 和支付的 paid_at 不写入文件，加载时重置为当前时间
"""
from typing import List, Optional, Iterable, TYPE_CHECKING
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
import csv
import logging

from grand_hotel.exceptions import PersistenceError
from grand_hotel.models.ontology import Booking, BookingStatus, PaymentMethod

if TYPE_CHECKING:
    from grand_hotel.services.reservation_service import BookingLedger

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "bookingId", "guestId", "guestName", "guestPhone", "guestEmail",
    "roomNumber", "checkIn", "checkOut", "status",
    "paymentId", "paymentMethod", "amount", "paymentSuccess",
]


class MalformedRowError(ValueError):
    """单行数据格式错误（加载时跳过）"""


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def booking_to_row(booking: Booking) -> List[str]:
    """将预订序列化为一行"""
    guest = booking.guest
    payment = booking.payment
    return [
        booking.booking_id,
        guest.guest_id,
        guest.name,
        guest.phone,
        guest.email,
        booking.room.room_number,
        booking.check_in.isoformat(),
        booking.check_out.isoformat(),
        booking.status.name,
        payment.payment_id if payment else "",
        payment.method.name if payment else "",
        f"{payment.amount:.2f}" if payment else "",
        _format_bool(payment.successful) if payment else "",
    ]


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise MalformedRowError(f"invalid date '{value}'") from e


def _parse_enum(enum_cls, value: str):
    try:
        return enum_cls[value.strip()]
    except KeyError as e:
        raise MalformedRowError(f"invalid {enum_cls.__name__} '{value}'") from e


def _parse_amount(value: str) -> Decimal:
    try:
        amount = Decimal(value.strip())
    except InvalidOperation as e:
        raise MalformedRowError(f"invalid amount '{value}'") from e
    if not amount.is_finite() or amount < 0:
        raise MalformedRowError(f"invalid amount '{value}'")
    return amount


class BookingCsvStore:
    """预订 CSV 存储"""

    def __init__(self, path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    # ============== 写入 ==============

    def save(self, bookings: Iterable[Booking]) -> int:
        """
        写入全部预订（包括已取消和已退房）

        Returns:
            写入行数
        """
        count = 0
        try:
            if self.path.parent and not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(CSV_HEADER)
                for booking in bookings:
                    writer.writerow(booking_to_row(booking))
                    count += 1
        except OSError as e:
            raise PersistenceError(f"无法保存预订数据: {e}") from e

        logger.debug(f"Saved {count} bookings to {self.path}")
        return count

    # ============== 读取 ==============

    def read_rows(self) -> List[List[str]]:
        """读取数据行（不含表头），文件不存在时返回空列表"""
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", newline="", encoding="utf-8") as f:
                reader = csv.reader(f)
                next(reader, None)  # 跳过表头
                return [row for row in reader]
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise PersistenceError(f"无法读取预订数据: {e}") from e

    def _restore_row(self, row: List[str], ledger: "BookingLedger") -> Optional[Booking]:
        """
        按一行数据重建预订

        房间不存在时返回 None；格式错误时抛出 MalformedRowError
        """
        if len(row) < len(CSV_HEADER):
            raise MalformedRowError(f"expected {len(CSV_HEADER)} columns, got {len(row)}")

        (booking_id, guest_id, name, phone, email, room_number,
         check_in_raw, check_out_raw, status_raw,
         payment_id, method_raw, amount_raw, success_raw) = row[:len(CSV_HEADER)]

        if not booking_id or not guest_id:
            raise MalformedRowError("missing booking or guest id")

        check_in = _parse_date(check_in_raw)
        check_out = _parse_date(check_out_raw)
        if check_out <= check_in:
            raise MalformedRowError(f"non-positive stay {check_in_raw} -> {check_out_raw}")
        status = _parse_enum(BookingStatus, status_raw)

        payment = None
        if payment_id:
            payment = ledger.payments.restore(
                payment_id=payment_id,
                amount=_parse_amount(amount_raw),
                method=_parse_enum(PaymentMethod, method_raw),
                successful=success_raw.strip().lower() == "true"
            )

        room = ledger.catalog.find_room(room_number)
        if room is None:
            return None

        guest = ledger.guests.get_or_create(guest_id, name, phone, email)
        return Booking(
            booking_id=booking_id,
            guest=guest,
            room=room,
            check_in=check_in,
            check_out=check_out,
            status=status,
            payment=payment
        )

    def load(self, ledger: "BookingLedger") -> int:
        """
        从文件重建台账

        1. 逐行重建预订，跳过格式错误或房间已不存在的行
        2. 客人按编号去重
        3. 对齐预订、客人、支付编号计数器
        4. 根据已入住预订重新计算房间占用状态

        Returns:
            加载的预订数量
        """
        rows = self.read_rows()
        loaded = 0

        for line_no, row in enumerate(rows, start=2):
            if not row:
                continue
            try:
                booking = self._restore_row(row, ledger)
            except MalformedRowError as e:
                logger.warning(f"Skipping malformed row {line_no} in {self.path}: {e}")
                continue
            if booking is None:
                logger.debug(f"Skipping row {line_no}: room '{row[5]}' not in catalog")
                continue

            ledger.restore(booking)
            loaded += 1

        # 计数器对齐：从已存在编号的最大后缀之后继续
        ledger.reconcile_sequence()
        ledger.guests.reconcile_sequence()
        ledger.payments.reconcile_sequence(
            b.payment.payment_id for b in ledger.all_bookings() if b.payment
        )
        ledger.reconcile_occupancy()

        logger.info(f"Loaded {loaded} booking(s) from {self.path}")
        return loaded
