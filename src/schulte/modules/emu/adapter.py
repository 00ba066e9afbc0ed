"""
设备适配器：封装 ADB，对外暴露节点树快照与点击操作

接口：
- ensure_connected() -> bool
- snapshot() -> UiElement
- press(x, y, dur_ms)
- tap(x, y)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ...core.logger import logger
from ..tree.hierarchy import SnapshotUnavailable, parse_hierarchy
from ..tree.types import UiElement
from .adb import Adb, AdbError


@dataclass
class DeviceConfig:
    adb_path: str
    adb_addr: str
    timeout_sec: float = 10.0
    dump_timeout_sec: float = 15.0

    @classmethod
    def from_settings(cls, cfg: Any) -> "DeviceConfig":
        return cls(
            adb_path=cfg.adb_path,
            adb_addr=cfg.adb_addr,
            timeout_sec=cfg.adb_timeout_sec,
            dump_timeout_sec=cfg.dump_timeout_sec,
        )


class DeviceAdapter:
    def __init__(self, cfg: DeviceConfig) -> None:
        self.cfg = cfg
        self.adb = Adb(cfg.adb_path)
        self._log = logger.bind(module="DeviceAdapter", device=cfg.adb_addr)

    def ensure_connected(self) -> bool:
        # 网络地址需要先 adb connect；USB 序列号直接看 devices 列表
        try:
            if ":" in self.cfg.adb_addr:
                self.adb.connect(self.cfg.adb_addr, timeout=self.cfg.timeout_sec)
            connected = self.cfg.adb_addr in self.adb.devices(timeout=self.cfg.timeout_sec)
        except AdbError as e:
            self._log.warning("连接设备失败: {}", e)
            return False
        if not connected:
            self._log.warning("设备未就绪: {}", self.cfg.adb_addr)
        return connected

    def snapshot(self) -> UiElement:
        try:
            raw = self.adb.dump_hierarchy(self.cfg.adb_addr, timeout=self.cfg.dump_timeout_sec)
        except AdbError as e:
            raise SnapshotUnavailable(str(e)) from e
        return parse_hierarchy(raw)

    def press(self, x: int, y: int, dur_ms: int) -> None:
        self.adb.press(self.cfg.adb_addr, x, y, dur_ms, timeout=self.cfg.timeout_sec)

    def tap(self, x: int, y: int) -> None:
        self.adb.tap(self.cfg.adb_addr, x, y, timeout=self.cfg.timeout_sec)
