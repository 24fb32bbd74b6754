# -*- coding: utf-8 -*-
"""
数据结构：信号源、频道、播放列表文档、频道目录
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional

# 信号源状态
Idle = "idle"
Checking = "checking"
Online = "online"
Offline = "offline"
Error = "error"

# 频道分类（继承自所属播放列表）
China = "China"
International = "International"
OtherCategory = "Other"

DefaultGroup = "Other"


def NewId():
    """生成不重复的标识"""
    return uuid.uuid4().hex


@dataclass
class Source:
    """频道的一个候选直播地址"""
    url: str
    id: str = field(default_factory=NewId)
    status: str = Idle
    latency: Optional[int] = None  # 毫秒，仅 online 时有值
    resolution: Optional[str] = None  # 如 "1080P"


@dataclass
class Channel:
    """去重后的频道，sources 的顺序即排名"""
    name: str
    key: str = ""  # 规范化名称
    group: str = DefaultGroup
    category: str = OtherCategory
    sources: list[Source] = field(default_factory=list)
    id: str = field(default_factory=NewId)
    ranked: bool = field(default=False, init=False, repr=False)

    @property
    def bestSource(self) -> Optional[Source]:
        # 排名后的第一个源，未测速前为空
        if self.ranked and self.sources:
            return self.sources[0]
        return None

    def FindSource(self, sourceId):
        for src in self.sources:
            if src.id == sourceId:
                return src
        return None

    def HasUrl(self, url):
        return any(src.url == url for src in self.sources)


@dataclass
class PlaylistDocument:
    """一份抓取到的播放列表原文，解析后即丢弃"""
    content: str
    category: str = OtherCategory
    name: str = ""


@dataclass
class PlaylistPreset:
    """配置中的上游源"""
    name: str
    url: str
    category: str = China


class Catalog:
    """频道目录：按展示顺序保存频道，可按 id 或规范化名称查找"""

    def __init__(self, channels=()):
        self.channels = list(channels)
        self._byId = {ch.id: ch for ch in self.channels}
        self._byKey = {ch.key: ch for ch in self.channels}

    def __iter__(self):
        return iter(self.channels)

    def __len__(self):
        return len(self.channels)

    def __getitem__(self, index):
        return self.channels[index]

    def Get(self, channelId):
        return self._byId.get(channelId)

    def FindByKey(self, key):
        return self._byKey.get(key)
