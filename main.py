#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
LiteIPTV Monitor - 多源直播列表聚合与测速
抓取多个上游播放列表，合并同名频道，测速后为每个频道选出最优源
"""

import asyncio
import json
from datetime import datetime
from urllib.parse import urlparse

import aiohttp

from logger import InitLog, Log, RootDir
from models import China, PlaylistDocument, PlaylistPreset, Online
from playlist import Aggregate, CatalogStats
from probe import DefaultTimeoutMs, TransportErrors
from scheduler import DefaultBatchSize, ProbeScheduler

ConfigFile = RootDir / "config.json"


def LoadConfig(path=None):
    """加载配置文件"""
    path = path or ConfigFile
    if not path.exists():
        Log(f"错误: 未找到 {path.name}")
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def LoadPresets(cfg):
    """读取上游源列表"""
    presets = []
    for item in cfg.get("上游源", []):
        url = item.get("地址")
        if not url:
            continue
        presets.append(PlaylistPreset(
            name=item.get("名称") or GetSourceName(url),
            url=url,
            category=item.get("分类", China),
        ))
    return presets


def GetSourceName(url):
    """从 URL 提取源名称"""
    parsed = urlparse(url)
    host = parsed.hostname or ""
    # GitHub 链接显示用户名
    if "githubusercontent.com" in host or "github.com" in host:
        parts = parsed.path.split("/")
        if len(parts) >= 2 and parts[1]:
            return parts[1]
    # 其他链接显示域名
    if host:
        return host.replace("www.", "")
    return url[:30]


async def FetchSource(preset, maxRetry=3, retryDelay=3, timeout=30):
    """抓取单个上游源，失败时重试，返回 PlaylistDocument 或 None"""
    for attempt in range(maxRetry):
        try:
            connector = aiohttp.TCPConnector()
            async with aiohttp.ClientSession(connector=connector, trust_env=False) as session:
                async with session.get(preset.url, timeout=aiohttp.ClientTimeout(total=timeout), ssl=False) as resp:
                    if resp.status == 200:
                        content = await resp.text(errors="replace")
                        if content:
                            Log(f"已抓取 {preset.name}")
                            return PlaylistDocument(content=content, category=preset.category, name=preset.name)
        except TransportErrors as e:
            Log(f"抓取出错 {preset.name}: {type(e).__name__}")
        if attempt < maxRetry - 1:
            await asyncio.sleep(retryDelay)

    Log(f"抓取失败 {preset.name}: {maxRetry} 次尝试均失败")
    return None


async def FetchAllSources(presets, maxRetry=3, retryDelay=3, timeout=30):
    """并行抓取所有上游源，按配置顺序返回成功的文档"""
    tasks = [FetchSource(preset, maxRetry, retryDelay, timeout) for preset in presets]
    results = await asyncio.gather(*tasks)
    return [doc for doc in results if doc is not None]


def ExportM3U(channels, path):
    """把在线的最优源写成 m3u，内容相同则跳过，返回是否写入"""
    lines = ["#EXTM3U"]
    count = 0
    for ch in channels:
        best = ch.bestSource
        if best is None or best.status != Online:
            continue
        lines.append(f'#EXTINF:-1 tvg-name="{ch.name}" group-title="{ch.group}",{ch.name}')
        lines.append(best.url)
        count += 1

    if count == 0:
        Log(f"跳过 {path.name}: 无可用源")
        return False

    content = "\n".join(lines) + "\n"
    if path.exists() and path.read_text(encoding="utf-8") == content:
        Log(f"{path.name} 无变化")
        return False
    path.write_text(content, encoding="utf-8")
    Log(f"已生成 {path.name}: {count} 个频道")
    return True


def LogProgress(scheduler):
    """测速进度输出"""
    if scheduler.isChecking:
        Log(f"测速进度: {scheduler.checkedCount}/{scheduler.totalToCheck} ({scheduler.progress:.0f}%)")


async def RunOnce(cfg):
    """执行一次抓取、聚合、测速、导出"""
    Log(f"=== LiteIPTV 开始: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} ===")

    # 读取配置
    settings = cfg.get("设置", {})
    maxRetry = settings.get("抓取重试次数", 3)
    retryDelay = settings.get("抓取重试间隔秒", 3)
    fetchTimeout = settings.get("抓取超时秒", 30)
    timeoutMs = settings.get("测速超时毫秒", DefaultTimeoutMs)
    batchSize = settings.get("批量大小", DefaultBatchSize)
    outputFile = settings.get("输出文件", "iptv.m3u")

    # 并行抓取所有上游源
    Log("--- 抓取上游源 ---")
    presets = LoadPresets(cfg)
    documents = await FetchAllSources(presets, maxRetry, retryDelay, fetchTimeout)
    Log(f"抓取成功: {len(documents)}/{len(presets)} 个上游源")

    # 合并频道
    Log("--- 聚合频道 ---")
    catalog = Aggregate(documents)
    stats = CatalogStats(catalog)
    Log(f"共 {stats['totalChannels']} 个频道, {stats['totalSources']} 个源")

    # 测速
    Log("--- 测速 ---")
    scheduler = ProbeScheduler(timeoutMs=timeoutMs, batchSize=batchSize)
    scheduler.AddListener(LogProgress)
    await scheduler.Check(catalog)

    stats = CatalogStats(catalog)
    Log(f"有效源: {stats['onlineSources']}/{stats['totalSources']}, 平均延迟 {stats['avgLatency']}ms")

    ExportM3U(catalog, RootDir / outputFile)

    Log(f"=== LiteIPTV 结束: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} ===")
    return catalog


async def Main():
    """主函数 - 单次执行模式"""
    InitLog()

    cfg = LoadConfig()
    if not cfg:
        return

    try:
        await RunOnce(cfg)
    except Exception as e:
        Log(f"执行出错: {e}")


if __name__ == "__main__":
    asyncio.run(Main())
