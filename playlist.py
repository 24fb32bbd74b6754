# -*- coding: utf-8 -*-
"""
播放列表解析与频道聚合
支持 m3u（#EXTINF + URL）和 txt（名称,URL）两种格式，可混用
"""

import re

from pypinyin import lazy_pinyin

from logger import Log
from models import Catalog, Channel, DefaultGroup, Online, Source
from normalize import IsUsableKey, NormalizeName

ExtinfPrefix = "#EXTINF:"
GroupPattern = re.compile(r'group-title="([^"]*)"')
TvgNamePattern = re.compile(r'tvg-name="([^"]*)"')

# 可识别的直播地址前缀
UrlPrefixes = ("http", "rtmp", "p2p")
# m3u 裸 URL 行只认 http / rtmp
BareUrlPrefixes = ("http", "rtmp")

# 汉字开头的名称排在其他名称之前
HanPattern = re.compile(r"[\u3400-\u4dbf\u4e00-\u9fff]")

# 卫视
SatelliteMarker = "卫视"


def IsStreamUrl(text, prefixes=UrlPrefixes):
    return text.startswith(prefixes)


def StartsWithHan(name):
    return bool(HanPattern.match(name))


def ParseExtinf(line):
    """解析 #EXTINF 行，返回 (name, group)，优先使用 tvg-name"""
    groupMatch = GroupPattern.search(line)
    group = groupMatch.group(1) if groupMatch else DefaultGroup

    trailingName = line.split(",")[-1].strip() if "," in line else ""
    tvgMatch = TvgNamePattern.search(line)
    name = tvgMatch.group(1).strip() if tvgMatch else ""
    if not name:
        name = trailingName
    return name, group


def ParsePlaylist(document):
    """逐行解析一份播放列表，产出 (name, group, url)，无法识别的行直接跳过"""
    pendingName = ""
    pendingGroup = ""

    for line in document.content.split("\n"):
        line = line.strip()
        if not line:
            continue

        # m3u 元数据行
        if line.startswith(ExtinfPrefix):
            pendingName, pendingGroup = ParseExtinf(line)
            continue

        if line.startswith("#"):
            continue

        # txt 格式：名称,URL
        if "," in line:
            parts = line.split(",")
            possibleUrl = parts[-1].strip()
            if IsStreamUrl(possibleUrl):
                name = ",".join(parts[:-1]).strip()
                # 重置 m3u 状态，避免被后面的裸 URL 行误用
                pendingName = ""
                pendingGroup = ""
                yield name, DefaultGroup, possibleUrl
            continue

        # m3u URL 行，沿用最近的 #EXTINF（不清空，个别列表一个 EXTINF 跟多个 URL）
        if IsStreamUrl(line, BareUrlPrefixes) and pendingName:
            yield pendingName, pendingGroup, line


def SortKey(channel):
    """CCTV 优先，其次卫视，其余汉字名在前、按拼音排序"""
    if "CCTV" in channel.name.upper():
        rank = 0
    elif SatelliteMarker in channel.name:
        rank = 1
    else:
        rank = 2
    pinyin = "".join(lazy_pinyin(channel.name)).lower()
    return rank, not StartsWithHan(channel.name), pinyin, channel.name


def Aggregate(documents):
    """合并多个播放列表为频道目录，同名频道合并、同地址去重"""
    channelMap = {}
    skipped = 0

    for document in documents:
        for name, group, url in ParsePlaylist(document):
            cleanName = name.strip()
            key = NormalizeName(cleanName)
            if not IsUsableKey(key):
                skipped += 1
                continue

            channel = channelMap.get(key)
            if channel is None:
                # 先出现的播放列表决定名称、分组和分类
                channel = Channel(
                    name=cleanName,
                    key=key,
                    group=group or DefaultGroup,
                    category=document.category,
                )
                channelMap[key] = channel

            if not channel.HasUrl(url):
                channel.sources.append(Source(url=url))

    channels = sorted(channelMap.values(), key=SortKey)
    if skipped:
        Log(f"跳过无效频道名: {skipped} 条")
    return Catalog(channels)


def CatalogStats(channels):
    """统计频道数、源数、有效源数、平均延迟"""
    totalSources = 0
    onlineSources = 0
    totalLatency = 0
    latencyCount = 0
    channelCount = 0

    for ch in channels:
        channelCount += 1
        totalSources += len(ch.sources)
        for src in ch.sources:
            if src.status != Online:
                continue
            onlineSources += 1
            if src.latency:
                totalLatency += src.latency
                latencyCount += 1

    return {
        "totalChannels": channelCount,
        "totalSources": totalSources,
        "onlineSources": onlineSources,
        "avgLatency": round(totalLatency / latencyCount) if latencyCount else 0,
    }
