"""
通知通道

替代全局静态监听器列表：每个通道归属一个引擎实例，支持订阅与取消订阅。
"""
from __future__ import annotations

from typing import Callable, List

from ...core.logger import logger

Listener = Callable[..., None]


class EventChannel:
    """简单的同步发布/订阅通道"""

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: List[Listener] = []
        self._log = logger.bind(module="EventChannel")

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """注册监听器，返回取消订阅函数"""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)

    def publish(self, *args) -> None:
        # 拷贝一份，允许监听器在回调中取消订阅
        for listener in list(self._listeners):
            try:
                listener(*args)
            except Exception as e:
                self._log.error("通知 {} 的监听器失败: {}", self.name, e)


__all__ = ["EventChannel", "Listener"]
