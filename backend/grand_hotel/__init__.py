"""
Grand Hotel 预订引擎
房间库存、预订状态机、日期冲突检测、模拟支付与 CSV 持久化
"""
__version__ = "1.0.0"
