"""
启动入口。
设置 cwd → 确保 src 在 PYTHONPATH → 启动 FastAPI 控制服务。
"""
import argparse
import os
import sys
from pathlib import Path


def _get_app_dir() -> Path:
    """获取应用所在目录。"""
    return Path(__file__).resolve().parent


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="舒尔特方格自动点击控制服务")
    parser.add_argument("--host", default=None, help="监听地址，默认读取 API_HOST")
    parser.add_argument("--port", type=int, default=None, help="监听端口，默认读取 API_PORT")
    parser.add_argument("--device", default=None, help="设备地址，默认读取 ADB_ADDR")
    return parser.parse_args()


def main():
    args = parse_args()
    app_dir = _get_app_dir()

    # 设置 cwd 到应用目录，保证 .env / logs 等相对路径有效
    os.chdir(app_dir)

    # 开发模式下确保 src 在 PYTHONPATH
    src_dir = str(app_dir / "src")
    if src_dir not in sys.path:
        sys.path.insert(0, src_dir)

    # 命令行参数优先于 .env，需在导入配置前写入环境变量
    if args.device:
        os.environ["ADB_ADDR"] = args.device

    import uvicorn
    from schulte.core.config import settings

    host = args.host or settings.api_host
    port = args.port or settings.api_port
    print(f"[Schulte] 正在启动服务 http://{host}:{port} ，设备 {settings.adb_addr} ...")

    uvicorn.run("schulte.main:app", host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
