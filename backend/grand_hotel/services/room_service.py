"""
房间服务 - 本体操作层
管理 Room 对象（房间目录启动时初始化一次，运行期间不增减）
"""
from typing import List, Optional, Dict, Tuple
import logging

from grand_hotel.models.ontology import Room, RoomCategory, CategoryInfo

logger = logging.getLogger(__name__)


# 默认房间布局：(楼层, 房型, 房间数)，房间号 = 楼层 + 两位序号
DEFAULT_ROOM_LAYOUT: List[Tuple[int, RoomCategory, int]] = [
    (1, RoomCategory.STANDARD, 10),   # 101-110
    (2, RoomCategory.DELUXE, 8),      # 201-208
    (3, RoomCategory.SUITE, 4),       # 301-304
]

# 房型筛选代码
CATEGORY_FILTER_CODES: Dict[str, RoomCategory] = {
    "S": RoomCategory.STANDARD,
    "D": RoomCategory.DELUXE,
    "U": RoomCategory.SUITE,
}


def parse_category_filter(code: Optional[str]) -> Optional[RoomCategory]:
    """
    解析房型筛选代码

    S=标准间 D=豪华间 U=套房，其余（包括 A 和空值）表示不筛选

    Returns:
        对应房型，不筛选时返回 None
    """
    if not code:
        return None
    return CATEGORY_FILTER_CODES.get(code.strip().upper())


class RoomCatalog:
    """房间目录"""

    def __init__(self):
        self._rooms: Dict[str, Room] = {}

    # ============== 初始化 ==============

    def seed(self, layout: Optional[List[Tuple[int, RoomCategory, int]]] = None) -> int:
        """
        按布局初始化房间

        目录已有房间时不做任何操作

        Returns:
            新增房间数量
        """
        if self._rooms:
            return 0

        created = 0
        for floor, category, count in layout or DEFAULT_ROOM_LAYOUT:
            for i in range(1, count + 1):
                self._add_room(Room(
                    room_number=f"{floor}{i:02d}",
                    category=category,
                    floor=floor
                ))
                created += 1

        logger.info(f"Room catalog seeded with {created} rooms")
        return created

    def _add_room(self, room: Room) -> None:
        if room.room_number in self._rooms:
            raise ValueError(f"房间号 '{room.room_number}' 已存在")
        self._rooms[room.room_number] = room

    # ============== 查询 ==============

    def find_room(self, room_number: str) -> Optional[Room]:
        """根据房间号获取房间"""
        return self._rooms.get(room_number)

    def all_rooms(self) -> List[Room]:
        """获取所有房间（按初始化顺序）"""
        return list(self._rooms.values())

    def rooms_by_category(self, category: Optional[RoomCategory] = None) -> List[Room]:
        """按房型获取房间，category 为空时返回全部"""
        if category is None:
            return self.all_rooms()
        return [r for r in self._rooms.values() if r.category == category]

    def categories(self) -> List[Tuple[RoomCategory, CategoryInfo]]:
        """房型与价格信息"""
        return [(category, category.info) for category in RoomCategory]

    def __len__(self) -> int:
        return len(self._rooms)

    # ============== 状态变更（仅供预订台账调用） ==============

    def set_available(self, room: Room, available: bool) -> None:
        """设置房间当前占用状态"""
        if room.available != available:
            logger.info(
                f"Room {room.room_number} availability: {room.available} -> {available}"
            )
        room.available = available
