"""
常量和枚举定义
"""
from enum import Enum


class SessionStatus(str, Enum):
    """会话状态"""
    IDLE = "idle"            # 空闲（初始 / 已停止）
    SCANNING = "scanning"    # 扫描节点树中
    AWAITING = "awaiting"    # 等待点击手势完成
    COMPLETED = "completed"  # 本轮完成，冷却后自动重启


class GestureOutcome(str, Enum):
    """单次手势尝试结果"""
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    DISPATCH_REJECTED = "dispatch_rejected"


# 方格数字总数（1-50）
GRID_SIZE = 50

# 搜索延迟（毫秒），悬浮窗滑块范围
DELAY_MIN_MS = 50
DELAY_MAX_MS = 999
DEFAULT_DELAY_MS = 50

# 误差模式：实际延迟落在 [interval, interval * (1 + JITTER_FACTOR))
JITTER_FACTOR = 0.8

# 调度重试 / 冷却（毫秒）
SNAPSHOT_RETRY_MS = 200
MISS_RETRY_MS = 100
RESTART_COOLDOWN_MS = 3000

# 手势参数（毫秒）
TAP_DURATION_MS = 50
GESTURE_TIMEOUT_MS = 500
CANDIDATE_PAUSE_MS = 100
# 超时后等待仍在途手势落地的上限，略大于 ADB 命令超时
GESTURE_SETTLE_TIMEOUT_MS = 12000

# 节点树遍历深度上限
MAX_SCAN_DEPTH = 64

# 向上检查 "level" 文本的祖先层数
LEVEL_ANCESTOR_DEPTH = 3
LEVEL_KEYWORD = "level"
