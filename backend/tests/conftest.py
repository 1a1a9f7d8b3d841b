"""
Pytest 配置和共享 fixtures
"""
import pytest
from datetime import date
from fastapi.testclient import TestClient

from grand_hotel.config import Settings
from grand_hotel.dependencies import get_hotel_service
from grand_hotel.main import app
from grand_hotel.models.ontology import PaymentMethod
from grand_hotel.services.hotel_service import HotelContext, HotelService


@pytest.fixture(scope="function")
def test_settings(tmp_path):
    """测试配置：临时数据文件、无支付延迟"""
    return Settings(
        BOOKINGS_FILE=str(tmp_path / "bookings_data.csv"),
        PAYMENT_PROCESSING_DELAY=0,
    )


@pytest.fixture(scope="function")
def context(test_settings):
    """已初始化房间目录的会话上下文"""
    ctx = HotelContext.build(test_settings)
    ctx.catalog.seed()
    return ctx


@pytest.fixture
def ledger(context):
    return context.ledger


@pytest.fixture
def hotel_service(context):
    return HotelService(context)


@pytest.fixture(scope="function")
def client(hotel_service):
    """创建测试客户端（不触发应用生命周期，使用隔离的会话服务）"""
    app.dependency_overrides[get_hotel_service] = lambda: hotel_service
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============== 实体相关 Fixtures ==============

@pytest.fixture
def make_booking(ledger):
    """创建预订的工厂函数"""
    def _make(room_number="101", check_in=date(2024, 6, 1), check_out=date(2024, 6, 4),
              name="张三", method=PaymentMethod.CREDIT_CARD):
        return ledger.create_booking(
            guest_name=name,
            guest_phone="13800138000",
            guest_email="zhangsan@example.com",
            check_in=check_in,
            check_out=check_out,
            room_number=room_number,
            payment_method=method,
        )
    return _make
