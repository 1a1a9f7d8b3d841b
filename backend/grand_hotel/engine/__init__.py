"""
grand_hotel/engine/__init__.py

状态机引擎入口
"""
from grand_hotel.engine.state_machine import (
    StateTransition,
    StateMachineConfig,
    StateMachine,
    BOOKING_STATE_MACHINE,
)

__all__ = [
    "StateTransition",
    "StateMachineConfig",
    "StateMachine",
    "BOOKING_STATE_MACHINE",
]
