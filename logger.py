# -*- coding: utf-8 -*-
"""
日志输出：终端 + 日志文件
"""

import sys
from pathlib import Path

# 项目根目录
RootDir = Path(__file__).parent

# 日志目录（跨平台）
if sys.platform == "win32":
    LogDir = RootDir / "Logs"
else:
    LogDir = Path.home() / "Library/Logs/LiteIPTV"
LogFile = LogDir / "LiteIPTV.log"


def InitLog():
    """初始化日志目录并清空日志文件"""
    LogFile.parent.mkdir(parents=True, exist_ok=True)
    LogFile.write_text("", encoding="utf-8")


def Log(msg):
    """输出日志到终端和日志文件"""
    print(msg, flush=True)
    LogFile.parent.mkdir(parents=True, exist_ok=True)
    with open(LogFile, "a", encoding="utf-8") as f:
        f.write(msg + "\n")
