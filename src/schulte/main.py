"""
主程序入口
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .core.logger import logger
from .core.config import settings
from .core.thread_pool import device_io_pool_stats, shutdown_pools
from .modules.engine.service import connect_adb_engine
from .modules.web import register_routers

# 创建FastAPI应用
app = FastAPI(
    title="舒尔特方格自动点击",
    description="扫描节点树并按顺序点击数字方格",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:9000",
        "http://127.0.0.1:9000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_routers(app)
app.state.engine = None


@app.on_event("startup")
async def startup():
    """应用启动事件：连接设备并创建引擎"""
    logger.info("应用启动中...")
    engine = connect_adb_engine(settings)
    if not await engine.provider.ensure_connected():
        logger.warning(f"设备 {settings.adb_addr} 未就绪，扫描会持续重试直到可以获取节点树")
    engine.on_session_completed.subscribe(lambda: logger.info("舒尔特方格完成！准备重新开始"))
    app.state.engine = engine
    logger.info(f"应用启动完成，监听 {settings.api_host}:{settings.api_port}")


@app.on_event("shutdown")
async def shutdown():
    """应用关闭事件：停止任务并释放引擎"""
    logger.info("应用关闭中...")
    engine = app.state.engine
    if engine is not None:
        engine.close()
        app.state.engine = None
    shutdown_pools()
    logger.info("应用关闭完成")


@app.get("/")
async def root():
    """根路径"""
    return {"message": "舒尔特方格自动点击 API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """健康检查"""
    engine = app.state.engine
    return {
        "status": "healthy",
        "engine": engine is not None,
        "device_io": device_io_pool_stats(),
    }
