"""
ADB 适配封装

基于 Settings 的 adb_path，提供基础操作：
- connect(addr)
- devices()
- dump_hierarchy(addr) -> 原始 XML 输出
- tap(addr, x, y)
- press(addr, x, y, dur_ms)  # 单点按压，等价于原地 swipe
"""
from __future__ import annotations

import subprocess
from typing import List


class AdbError(RuntimeError):
    pass


class Adb:
    def __init__(self, adb_path: str = "adb") -> None:
        self.adb = adb_path

    def _run(self, args: List[str], timeout: float = 10.0) -> subprocess.CompletedProcess:
        try:
            cp = subprocess.run(
                [self.adb, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            raise AdbError(f"找不到 ADB 可执行文件: {self.adb}") from e
        except subprocess.TimeoutExpired as e:
            raise AdbError(f"ADB 命令超时: {' '.join(args)}") from e
        return cp

    def connect(self, addr: str, timeout: float = 10.0) -> bool:
        cp = self._run(["connect", addr], timeout=timeout)
        out = (cp.stdout or b"").decode(errors="ignore").lower()
        return cp.returncode == 0 and ("connected" in out or "already" in out)

    def devices(self, timeout: float = 10.0) -> List[str]:
        cp = self._run(["devices"], timeout=timeout)
        out = (cp.stdout or b"").decode(errors="ignore").splitlines()
        result = []
        for line in out:
            line = line.strip()
            if not line or line.lower().startswith("list of devices"):
                continue
            parts = line.split()
            if len(parts) >= 2 and parts[1] == "device":
                result.append(parts[0])
        return result

    def dump_hierarchy(self, addr: str, timeout: float = 15.0) -> bytes:
        """uiautomator dump 到 /dev/tty，直接从 exec-out 读取 XML"""
        cp = self._run(
            ["-s", addr, "exec-out", "uiautomator", "dump", "/dev/tty"],
            timeout=timeout,
        )
        if cp.returncode != 0:
            raise AdbError((cp.stderr or b"").decode(errors="ignore") or "uiautomator dump 失败")
        return cp.stdout or b""

    def tap(self, addr: str, x: int, y: int, timeout: float = 10.0) -> None:
        cp = self._run(["-s", addr, "shell", "input", "tap", str(x), str(y)], timeout=timeout)
        if cp.returncode != 0:
            raise AdbError((cp.stderr or b"").decode(errors="ignore"))

    def press(self, addr: str, x: int, y: int, dur_ms: int = 50, timeout: float = 10.0) -> None:
        # 起点终点相同的 swipe 即为指定时长的单点按压
        cp = self._run(
            ["-s", addr, "shell", "input", "swipe", str(x), str(y), str(x), str(y), str(dur_ms)],
            timeout=timeout,
        )
        if cp.returncode != 0:
            raise AdbError((cp.stderr or b"").decode(errors="ignore"))
