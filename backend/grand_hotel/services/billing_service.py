"""
账单服务 - 本体操作层
管理 Payment 对象：模拟支付，两阶段（记录 -> 结算）
不对接真实支付网关
"""
from typing import Callable, Optional, Iterable
from decimal import Decimal
import logging
import time

from grand_hotel.exceptions import ValidationError, StateError
from grand_hotel.models.ontology import Payment, PaymentMethod
from grand_hotel.services.sequence import IdSequence

logger = logging.getLogger(__name__)

PAYMENT_ID_PREFIX = "PAY"
PAYMENT_ID_WIDTH = 5

PaymentProcessor = Callable[[Payment], bool]


def approve_all(payment: Payment) -> bool:
    """默认的模拟支付处理器：总是成功"""
    return True


class PaymentRecorder:
    """支付记录服务"""

    def __init__(
        self,
        processor: Optional[PaymentProcessor] = None,
        processing_delay: float = 0.0,
        sequence: Optional[IdSequence] = None
    ):
        # 支持依赖注入支付处理器，便于测试失败场景
        self._processor = processor or approve_all
        self._processing_delay = processing_delay
        self.sequence = sequence or IdSequence(PAYMENT_ID_PREFIX, PAYMENT_ID_WIDTH)

    def record(self, amount: Decimal, method: PaymentMethod) -> Payment:
        """创建待结算的支付记录"""
        if amount <= 0:
            raise ValidationError("支付金额必须大于 0")

        payment = Payment(
            payment_id=self.sequence.next_id(),
            amount=amount,
            method=method
        )
        logger.info(f"Payment {payment.payment_id} recorded: {amount} via {method.name}")
        return payment

    def settle(self, payment: Payment) -> bool:
        """
        结算支付（模拟外部确认）

        阻塞执行，不可取消

        Returns:
            True 如果结算成功
        """
        if payment.successful:
            raise StateError(f"支付 {payment.payment_id} 已结算", current_status="settled")

        if self._processing_delay > 0:
            time.sleep(self._processing_delay)

        if not self._processor(payment):
            logger.warning(f"Payment {payment.payment_id} settlement failed")
            return False

        payment.successful = True
        logger.info(f"Payment {payment.payment_id} settled via {payment.method.name}")
        return True

    def restore(self, payment_id: str, amount: Decimal, method: PaymentMethod,
                successful: bool) -> Payment:
        """按存储内容重建支付记录（不重新结算）"""
        return Payment(
            payment_id=payment_id,
            amount=amount,
            method=method,
            successful=successful
        )

    def reconcile_sequence(self, payment_ids: Iterable[str]) -> int:
        """按已存在的支付编号对齐计数器"""
        return self.sequence.reconcile(payment_ids)
