"""
应用配置
从环境变量 / .env 读取配置
"""
import logging
from decimal import Decimal
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """应用设置"""

    # 应用基础配置
    APP_NAME: str = "Grand Hotel Reservations"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 持久化配置
    BOOKINGS_FILE: str = "bookings_data.csv"

    # 模拟支付处理耗时（秒）
    PAYMENT_PROCESSING_DELAY: float = 0.6

    # 退款规则：入住日期距今超过 N 天全额退款，否则按比例退款
    FULL_REFUND_MIN_DAYS_AHEAD: int = 2
    LATE_CANCEL_REFUND_RATE: Decimal = Decimal("0.5")

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


# 全局设置实例
settings = Settings()
