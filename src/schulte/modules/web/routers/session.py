"""
会话控制 API

悬浮窗的 Web 等价物：开始/停止、搜索延迟、随机误差、框选区域。
"""
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from ....core.logger import logger
from ...engine.service import AutomationEngine


router = APIRouter(prefix="/api/session", tags=["session"])


class DelayUpdate(BaseModel):
    interval_ms: int
    jitter_enabled: Optional[bool] = None


class SelectionUpdate(BaseModel):
    left: int
    top: int
    right: int
    bottom: int


class SessionStatusResponse(BaseModel):
    running: bool
    status: str
    target_index: int
    grid_size: int
    interval_ms: int
    jitter_enabled: bool
    selection: Optional[List[int]] = None
    completed_cycles: int


def get_engine(request: Request) -> AutomationEngine:
    """从应用状态取引擎句柄，设备未连接时返回 503"""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="设备未连接，引擎不可用")
    return engine


def _status(engine: AutomationEngine) -> SessionStatusResponse:
    return SessionStatusResponse(**engine.snapshot())


@router.get("/status")
async def get_status(engine: AutomationEngine = Depends(get_engine)) -> SessionStatusResponse:
    """获取当前会话状态"""
    return _status(engine)


@router.post("/start")
async def start_session(engine: AutomationEngine = Depends(get_engine)):
    """开始任务，已在运行时不做任何事"""
    started = engine.start()
    logger.info(f"API 请求开始任务: started={started}")
    return {"started": started, **_status(engine).model_dump()}


@router.post("/stop")
async def stop_session(engine: AutomationEngine = Depends(get_engine)):
    """停止任务"""
    engine.stop()
    logger.info("API 请求停止任务")
    return {"stopped": True, **_status(engine).model_dump()}


@router.put("/delay")
async def update_delay(payload: DelayUpdate, engine: AutomationEngine = Depends(get_engine)):
    """设置搜索延迟（自动钳制到 50-999ms）"""
    interval = engine.set_interval(payload.interval_ms)
    if payload.jitter_enabled is not None:
        engine.set_jitter(payload.jitter_enabled)
    return {"interval_ms": interval, "jitter_enabled": engine.delay.jitter_enabled}


@router.put("/selection")
async def update_selection(payload: SelectionUpdate, engine: AutomationEngine = Depends(get_engine)):
    """设置框选区域"""
    try:
        rect = engine.set_selection(payload.left, payload.top, payload.right, payload.bottom)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"selection": list(rect.as_tuple())}


@router.delete("/selection")
async def clear_selection(engine: AutomationEngine = Depends(get_engine)):
    """清除框选区域"""
    engine.clear_selection()
    return {"selection": None}
