"""
grand_hotel/engine/state_machine.py

状态机引擎 - 定义合法的状态转换
状态机本身不保存实体状态，由调用方传入当前状态进行校验
"""
from typing import Dict, List, Optional, FrozenSet
from dataclasses import dataclass, field
import logging

from grand_hotel.models.ontology import BookingStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateTransition:
    """
    状态转换定义

    Attributes:
        from_state: 源状态
        to_state: 目标状态
        trigger: 触发动作
    """

    from_state: str
    to_state: str
    trigger: str


@dataclass
class StateMachineConfig:
    """
    状态机配置

    Attributes:
        name: 状态机名称
        states: 所有状态的列表
        transitions: 转换列表
        initial_state: 初始状态
        final_states: 终态集合，终态没有任何出边
    """

    name: str
    states: List[str]
    transitions: List[StateTransition]
    initial_state: str
    final_states: FrozenSet[str] = field(default_factory=frozenset)


class StateMachine:
    """
    状态机引擎

    Example:
        >>> machine = StateMachine(BOOKING_STATE_MACHINE_CONFIG)
        >>> machine.next_state("confirmed", "check_in")
        'checked_in'
        >>> machine.next_state("cancelled", "check_in") is None
        True
    """

    def __init__(self, config: StateMachineConfig):
        self._config = config
        self._transition_map: Dict[str, Dict[str, StateTransition]] = {}

        # 构建转换映射: (from_state, trigger) -> transition
        for t in config.transitions:
            if t.from_state in config.final_states:
                raise ValueError(f"Final state '{t.from_state}' cannot have outgoing transitions")
            self._transition_map.setdefault(t.from_state, {})[t.trigger] = t

    @property
    def initial_state(self) -> str:
        return self._config.initial_state

    def is_final(self, state: str) -> bool:
        """是否为终态"""
        return state in self._config.final_states

    def next_state(self, current_state: str, trigger: str) -> Optional[str]:
        """
        计算触发动作后的目标状态

        Args:
            current_state: 当前状态
            trigger: 触发动作

        Returns:
            目标状态，转换不合法时返回 None
        """
        transition = self._transition_map.get(current_state, {}).get(trigger)
        if transition is None:
            logger.debug(
                f"Invalid transition: {self._config.name} '{current_state}' (trigger: {trigger})"
            )
            return None
        return transition.to_state

    def can_trigger(self, current_state: str, trigger: str) -> bool:
        """检查当前状态下是否允许该触发动作"""
        return self.next_state(current_state, trigger) is not None

    def triggers_from(self, current_state: str) -> List[str]:
        """列出当前状态可用的触发动作"""
        return list(self._transition_map.get(current_state, {}).keys())


# ============== 预订状态机 ==============

TRIGGER_CHECK_IN = "check_in"
TRIGGER_CHECK_OUT = "check_out"
TRIGGER_CANCEL = "cancel"

BOOKING_STATE_MACHINE_CONFIG = StateMachineConfig(
    name="Booking",
    states=[s.value for s in BookingStatus],
    transitions=[
        StateTransition(BookingStatus.CONFIRMED.value, BookingStatus.CHECKED_IN.value, TRIGGER_CHECK_IN),
        StateTransition(BookingStatus.CHECKED_IN.value, BookingStatus.CHECKED_OUT.value, TRIGGER_CHECK_OUT),
        StateTransition(BookingStatus.CONFIRMED.value, BookingStatus.CANCELLED.value, TRIGGER_CANCEL),
        # 在住期间也可取消
        StateTransition(BookingStatus.CHECKED_IN.value, BookingStatus.CANCELLED.value, TRIGGER_CANCEL),
    ],
    initial_state=BookingStatus.CONFIRMED.value,
    final_states=frozenset({BookingStatus.CHECKED_OUT.value, BookingStatus.CANCELLED.value}),
)

BOOKING_STATE_MACHINE = StateMachine(BOOKING_STATE_MACHINE_CONFIG)


# 导出
__all__ = [
    "StateTransition",
    "StateMachineConfig",
    "StateMachine",
    "BOOKING_STATE_MACHINE_CONFIG",
    "BOOKING_STATE_MACHINE",
    "TRIGGER_CHECK_IN",
    "TRIGGER_CHECK_OUT",
    "TRIGGER_CANCEL",
]
