#!/usr/bin/env python
"""
快捷启动脚本 - 直接运行 FastAPI 应用
使用方法: python run.py
环境变量: PORT (默认 3000), HOST (默认 0.0.0.0), RELOAD (默认 false)
"""
import os
import socket
import sys


def is_port_in_use(port: int) -> bool:
    """检查端口是否被占用"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind(("", port))
            return False
        except OSError:
            return True


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 3000))
    host = os.getenv("HOST", "0.0.0.0")
    reload = os.getenv("RELOAD", "false").lower() == "true"

    if is_port_in_use(port):
        print(f"❌ Port {port} is already in use. Use a different port: PORT=3001 python {__file__}")
        sys.exit(1)

    print("=" * 60)
    print("🚀 Document Similarity Analyzer")
    print("=" * 60)
    print(f"📍 Server: http://{host}:{port}")
    print(f"📊 POST /api/analyze - sentence-level similarity (multipart upload)")
    print(f"❤️  GET  /health      - health check")
    print(f"📚 API Docs: http://localhost:{port}/docs")
    print("=" * 60)

    try:
        uvicorn.run(
            "docsim.main:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\n👋 Server stopped")
