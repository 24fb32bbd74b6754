# -*- coding: utf-8 -*-
"""
频道名规范化：把不同写法的频道名映射为同一个 key
"""

import re

# 括号内的注释（编码、IP 版本等），不属于频道身份
BracketPatterns = [
    re.compile(r"\[.*?\]"),
    re.compile(r"（.*?）"),
    re.compile(r"\(.*?\)"),
]

# CCTV1 / CCTV 1 / CCTV-1 -> CCTV-1，CCTV5+ -> CCTV-5+
CctvPattern = re.compile(r"CCTV[\s\-_]*(\d+)(\+)?")

# 画质、编码、网络等噪声词（大写后比较）
NoiseWords = [
    "HD", "FHD", "SD", "UHD",
    "HEVC", "H.265", "H265", "H.264", "H264",
    "IPTV", "LIVE", "直播",
    "高清", "超清", "标清", "频道",
    "TEST", "测试",
    "IPV6", "IPV4",
    "1080P", "720P", "4K", "8K",
    "50FPS", "60FPS",
    "电信", "联通", "移动", "酒店",
]
# 长词先删，避免 "FHD" 被 "HD" 截成 "F"
NoiseWords.sort(key=len, reverse=True)

TrailingSeparators = re.compile(r"[-_]+$")
Whitespace = re.compile(r"\s+")

# key 至少两个字符才参与合并
MinKeyLength = 2


def NormalizeName(name):
    """频道名 -> 规范化 key，可能为空"""
    n = name.upper()

    for pattern in BracketPatterns:
        n = pattern.sub("", n)

    n = CctvPattern.sub(lambda m: f"CCTV-{m.group(1)}{m.group(2) or ''}", n)

    for word in NoiseWords:
        n = n.replace(word, "")

    n = Whitespace.sub("", n)
    n = TrailingSeparators.sub("", n)
    return n.strip()


def IsUsableKey(key):
    """过短的 key 太模糊，宁可不合并"""
    return bool(key) and len(key) >= MinKeyLength
