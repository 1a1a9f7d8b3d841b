"""
客人服务 - 本体操作层
管理 Guest 对象：会话期间只增不改，重新加载时按编号去重
"""
from typing import List, Optional, Dict
import logging

from grand_hotel.models.ontology import Guest
from grand_hotel.services.sequence import IdSequence

logger = logging.getLogger(__name__)

GUEST_ID_PREFIX = "G"
GUEST_ID_WIDTH = 4


class GuestRegistry:
    """客人登记簿"""

    def __init__(self, sequence: Optional[IdSequence] = None):
        self._guests: Dict[str, Guest] = {}
        self.sequence = sequence or IdSequence(GUEST_ID_PREFIX, GUEST_ID_WIDTH)

    def lookup(self, guest_id: str) -> Optional[Guest]:
        """获取单个客人"""
        return self._guests.get(guest_id)

    def all_guests(self) -> List[Guest]:
        """获取所有客人"""
        return list(self._guests.values())

    def create(self, name: str, phone: str, email: str) -> Guest:
        """创建客人（新预订使用，分配新编号）"""
        guest = Guest(
            guest_id=self.sequence.next_id(),
            name=name,
            phone=phone,
            email=email
        )
        self._guests[guest.guest_id] = guest
        logger.info(f"Guest {guest.guest_id} registered")
        return guest

    def get_or_create(self, guest_id: str, name: str, phone: str, email: str) -> Guest:
        """
        获取或创建客人（加载数据时使用）

        编号已存在时返回已有客人并忽略传入的字段
        """
        guest = self._guests.get(guest_id)
        if guest is None:
            guest = Guest(guest_id=guest_id, name=name, phone=phone, email=email)
            self._guests[guest_id] = guest
        return guest

    def reconcile_sequence(self) -> int:
        """按已登记客人编号对齐计数器"""
        return self.sequence.reconcile(self._guests.keys())

    def __len__(self) -> int:
        return len(self._guests)
