"""
本体对象定义 (Ontology Objects)
房间、客人、支付、预订四类核心实体
实体为进程内对象，持久化由 grand_hotel.database 负责
"""
from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Dict


# ============== 枚举定义 ==============

class RoomCategory(str, Enum):
    """房型枚举（固定三种）"""
    STANDARD = "standard"    # 标准间
    DELUXE = "deluxe"        # 豪华间
    SUITE = "suite"          # 套房

    @property
    def info(self) -> "CategoryInfo":
        """房型附带的价格与描述"""
        return ROOM_CATEGORY_INFO[self]

    @property
    def price_per_night(self) -> Decimal:
        return ROOM_CATEGORY_INFO[self].price_per_night


class BookingStatus(str, Enum):
    """预订状态枚举"""
    CONFIRMED = "confirmed"      # 已确认
    CHECKED_IN = "checked_in"    # 已入住
    CHECKED_OUT = "checked_out"  # 已退房
    CANCELLED = "cancelled"      # 已取消


class PaymentMethod(str, Enum):
    """支付方式"""
    CREDIT_CARD = "credit_card"  # 信用卡
    CASH = "cash"                # 现金
    ONLINE = "online"            # 在线转账


# 占用日期的预订状态（参与冲突检测）
ACTIVE_BOOKING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN})


@dataclass(frozen=True)
class CategoryInfo:
    """房型值对象：每晚价格、显示名称、描述"""
    price_per_night: Decimal
    display_name: str
    description: str


ROOM_CATEGORY_INFO: Dict[RoomCategory, CategoryInfo] = {
    RoomCategory.STANDARD: CategoryInfo(Decimal("80.00"), "Standard", "Queen bed, TV, Wi-Fi"),
    RoomCategory.DELUXE: CategoryInfo(Decimal("150.00"), "Deluxe", "King bed, Mini-bar, City view"),
    RoomCategory.SUITE: CategoryInfo(Decimal("300.00"), "Suite", "Living area, Jacuzzi, Panoramic view"),
}


# ============== 本体对象定义 ==============

@dataclass
class Room:
    """
    房间对象
    available 只表示当前是否有客人在住，不代表未来日期是否可订
    """
    room_number: str
    category: RoomCategory
    floor: int
    available: bool = True

    @property
    def price_per_night(self) -> Decimal:
        return self.category.price_per_night


@dataclass(frozen=True)
class Guest:
    """客人对象（创建后不可修改）"""
    guest_id: str
    name: str
    phone: str
    email: str


@dataclass
class Payment:
    """
    支付对象
    successful 为 False 时不能视为已完成的交易
    """
    payment_id: str
    amount: Decimal
    method: PaymentMethod
    paid_at: datetime = field(default_factory=datetime.now)
    successful: bool = False


@dataclass
class Booking:
    """
    预订对象 - 聚合根
    持有客人和房间的引用，独占其支付记录
    """
    booking_id: str
    guest: Guest
    room: Room
    check_in: date
    check_out: date
    status: BookingStatus = BookingStatus.CONFIRMED
    payment: Optional[Payment] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def nights(self) -> int:
        """入住晚数（按自然日计算）"""
        return (self.check_out - self.check_in).days

    @property
    def total_cost(self) -> Decimal:
        """总价 = 晚数 × 每晚价格"""
        return self.nights * self.room.price_per_night

    def overlaps_with(self, check_in: date, check_out: date) -> bool:
        """半开区间重叠判断，退房日等于他人入住日不算冲突"""
        return not (check_out <= self.check_in or check_in >= self.check_out)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_BOOKING_STATUSES
