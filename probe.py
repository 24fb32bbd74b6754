# -*- coding: utf-8 -*-
"""
单个直播源测速：一次 GET，记录首包延迟，顺带从首个数据块中读取分辨率
"""

import asyncio
import re
import time
from dataclasses import dataclass
from typing import Optional

import aiohttp

from models import Error, Offline, Online

DefaultTimeoutMs = 6000

ResolutionPattern = re.compile(r"RESOLUTION=(\d+)x(\d+)")

# 超时、连接失败、非法地址，一律记为 error
TransportErrors = (aiohttp.ClientError, asyncio.TimeoutError, ValueError, OSError)


@dataclass
class ProbeResult:
    status: str
    latency: Optional[int] = None
    resolution: Optional[str] = None


def ParseResolution(content):
    """从 m3u8 内容中解析最高分辨率，返回高度值（如 1080, 720），没有则为 0"""
    maxHeight = 0
    for match in ResolutionPattern.finditer(content):
        maxHeight = max(maxHeight, int(match.group(2)))
    return maxHeight


def ResolutionLabel(height):
    """高度 -> 标签"""
    if height >= 1080:
        return "1080P"
    if height >= 720:
        return "720P"
    return f"{height}P"


async def SniffResolution(resp):
    """只读第一个数据块，失败不影响在线状态"""
    try:
        chunk = await resp.content.readany()
    except TransportErrors:
        return None
    if not chunk:
        return None

    height = ParseResolution(chunk.decode("utf-8", errors="replace"))
    if height <= 0:
        return None
    return ResolutionLabel(height)


async def ProbeUrl(url, timeoutMs=DefaultTimeoutMs):
    """测试单个 URL，返回 ProbeResult，不抛异常"""
    try:
        connector = aiohttp.TCPConnector()
        startTime = time.time()
        async with aiohttp.ClientSession(connector=connector, trust_env=False) as session:
            timeout = aiohttp.ClientTimeout(total=timeoutMs / 1000)
            async with session.get(url, timeout=timeout, ssl=False) as resp:
                latency = round((time.time() - startTime) * 1000)
                if not 200 <= resp.status < 300:
                    return ProbeResult(Offline)
                resolution = await SniffResolution(resp)
                return ProbeResult(Online, latency, resolution)
    except TransportErrors:
        return ProbeResult(Error)
