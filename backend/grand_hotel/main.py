"""
Grand Hotel 预订系统主应用入口
"""
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from grand_hotel.config import settings, setup_logging
from grand_hotel.dependencies import set_hotel_service
from grand_hotel.routers import rooms, reservations, checkin, checkout
from grand_hotel.services.hotel_service import HotelContext, HotelService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 启动时执行
    setup_logging(settings.LOG_LEVEL)

    # 初始化房间目录并加载预订数据
    service = HotelService(HotelContext.build(settings))
    result = service.initialize()
    if result.warning:
        logger.warning(f"Startup load warning: {result.warning}")
    logger.info(result.message)
    set_hotel_service(service)

    yield

    # 关闭时保存
    warning = service.save()
    if warning:
        logger.warning(f"Shutdown save warning: {warning}")
    set_hotel_service(None)


# 创建应用
app = FastAPI(
    title=settings.APP_NAME,
    description="酒店客房库存与预订管理",
    version="1.0.0",
    lifespan=lifespan
)

# 注册路由
app.include_router(rooms.router)
app.include_router(reservations.router)
app.include_router(checkin.router)
app.include_router(checkout.router)


@app.get("/")
def root():
    """根路径"""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0"
    }


@app.get("/health")
def health_check():
    """健康检查"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("grand_hotel.main:app", host="127.0.0.1", port=8000, reload=settings.DEBUG)
