# retro_8085/core/events.py
"""
状態変化の通知

CPU の状態が変化したときに購読者へ通知する仕組みを提供します。
購読はイベント種別ごとに行い、レジスタとフラグは対象を指定して絞り込めます。
"""
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple

# (key, callback)。key が None の購読は全ての対象の変化を受け取ります。
_Subscription = Tuple[Optional[Any], Callable[..., None]]


# @intent:responsibility 通知されるイベントの種類を定義します。
class CpuEvent(Enum):
    PC_CHANGED = auto()  # callback(pc)
    SP_CHANGED = auto()  # callback(sp)
    INTERRUPT_MASK_CHANGED = auto()  # callback(mask)
    REGISTER_CHANGED = auto()  # callback(register, value)
    FLAG_CHANGED = auto()  # callback(flag, value)
    HALTED = auto()  # callback()


# @intent:responsibility イベントごとの購読者リストを保持し、発行時に同期的に呼び出します。
class EventHub:
    """
    状態変化の購読と発行を管理します。
    コールバックは発行したスレッドで同期的に呼ばれ、例外はそのまま呼び出し元へ伝わります。
    """

    def __init__(self):
        self._subscriptions: Dict[CpuEvent, List[_Subscription]] = {event: [] for event in CpuEvent}

    # @intent:responsibility コールバックを登録します。
    # @intent:pre-condition key は REGISTER_CHANGED なら Register、FLAG_CHANGED なら Flag を指定します。
    def subscribe(self, event: CpuEvent, callback: Callable[..., None], key: Optional[Any] = None) -> None:
        self._subscriptions[event].append((key, callback))

    # @intent:responsibility 登録済みのコールバックを解除します。未登録の場合は何もしません。
    def unsubscribe(self, event: CpuEvent, callback: Callable[..., None], key: Optional[Any] = None) -> None:
        subscriptions = self._subscriptions[event]
        if (key, callback) in subscriptions:
            subscriptions.remove((key, callback))

    def emit(self, event: CpuEvent, *args: Any, key: Optional[Any] = None) -> None:
        """
        event の購読者を登録順に呼び出します。
        key 付きの購読は、発行時の key と一致する場合のみ呼ばれます。
        """
        for subscribed_key, callback in list(self._subscriptions[event]):
            if subscribed_key is None or subscribed_key == key:
                callback(*args)
