"""
核心配置模块
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    CANDIDATE_PAUSE_MS,
    DEFAULT_DELAY_MS,
    GESTURE_SETTLE_TIMEOUT_MS,
    GESTURE_TIMEOUT_MS,
    GRID_SIZE,
    MAX_SCAN_DEPTH,
    MISS_RETRY_MS,
    RESTART_COOLDOWN_MS,
    SNAPSHOT_RETRY_MS,
    TAP_DURATION_MS,
)


class Settings(BaseSettings):
    """系统配置"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # 设备
    adb_path: str = Field(default="adb")
    adb_addr: str = Field(default="127.0.0.1:5555")
    adb_timeout_sec: float = Field(default=10.0)
    dump_timeout_sec: float = Field(default=15.0)

    # 方格任务
    grid_size: int = Field(default=GRID_SIZE)
    search_delay_ms: int = Field(default=DEFAULT_DELAY_MS)
    jitter_enabled: bool = Field(default=False)
    snapshot_retry_ms: int = Field(default=SNAPSHOT_RETRY_MS)
    miss_retry_ms: int = Field(default=MISS_RETRY_MS)
    restart_cooldown_ms: int = Field(default=RESTART_COOLDOWN_MS)

    # 手势
    tap_duration_ms: int = Field(default=TAP_DURATION_MS)
    gesture_timeout_ms: int = Field(default=GESTURE_TIMEOUT_MS)
    candidate_pause_ms: int = Field(default=CANDIDATE_PAUSE_MS)
    gesture_settle_timeout_ms: int = Field(default=GESTURE_SETTLE_TIMEOUT_MS)

    # 节点树
    max_scan_depth: int = Field(default=MAX_SCAN_DEPTH)

    # Web服务
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=9001)

    # 日志
    log_level: str = Field(default="INFO")
    log_path: str = Field(default="./logs")
    log_retention_days: int = Field(default=3)
    log_rotation: str = Field(default="00:00")
    log_console_enabled: bool = Field(default=True)
    log_enqueue_enabled: bool = Field(default=False)
    log_file_format: str = Field(default="text")  # text|json

    # 线程池（0 表示自动）
    io_thread_pool_size: int = Field(default=0)


# 全局配置实例
settings = Settings()
