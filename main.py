#!/usr/bin/env python3
"""
Poe OpenAI Proxy 启动脚本

使用 JSON 配置文件中的 host、port 和 workers 启动服务器。
配置文件路径优先级：
1. 命令行 --config 参数
2. 环境变量 CONFIG_PATH
3. ./config/settings.json (默认)

模板见 ./config/example.json
"""

import argparse
import os
import sys
from pathlib import Path

import uvicorn

from poe_proxy.config.settings import DEFAULT_CONFIG_PATH, Config


def main():
    """主启动函数"""
    parser = argparse.ArgumentParser(description="启动 Poe OpenAI Proxy")
    parser.add_argument(
        "--config",
        type=str,
        help=f"JSON 配置文件路径 (默认为 {DEFAULT_CONFIG_PATH})",
    )
    args = parser.parse_args()

    # 确保从项目根目录启动
    project_root = Path(__file__).parent
    os.chdir(project_root)

    config_path = args.config or os.getenv("CONFIG_PATH", DEFAULT_CONFIG_PATH)
    # worker 进程通过环境变量读取同一份配置
    os.environ["CONFIG_PATH"] = config_path

    try:
        config = Config.from_file(config_path)
        host, port = config.server.host, config.server.port

        print("🚀 启动 Poe OpenAI Proxy...")
        print(f"   配置文件: {config_path}")
        print(f"   监听地址: {host}:{port}")
        print(f"   上游地址: {config.upstream.url}")
        print()
        print("📋 重要端点:")
        print(f"   聊天补全: http://{host}:{port}/v1/chat/completions")
        print(f"   图片生成: http://{host}:{port}/v1/images/generations")
        print(f"   模型列表: http://{host}:{port}/v1/models")
        print()

        uvicorn.run(
            "poe_proxy.main:app",
            host=host,
            port=port,
            workers=config.server.workers,
            timeout_keep_alive=60,
            log_level=config.logging.level.lower(),
        )

    except Exception as e:
        print(f"❌ 启动失败: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
