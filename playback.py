# -*- coding: utf-8 -*-
"""
播放器对接：选出要播放的源，接收播放器的 ready / error 事件
播放失败只影响当前这次播放，不改频道目录
"""

from dataclasses import dataclass
from typing import Optional

from logger import Log
from models import Online

# 播放状态
Idle = "idle"
Loading = "loading"
Playing = "playing"
Failed = "failed"


@dataclass
class PlayTarget:
    url: str
    name: str
    resolution: Optional[str] = None
    latency: Optional[int] = None


def TargetFromSource(source, channelName):
    return PlayTarget(
        url=source.url,
        name=channelName,
        resolution=source.resolution,
        latency=source.latency,
    )


def PickPlayTarget(channel):
    """优先在线的最优源，否则退回第一个源"""
    best = channel.bestSource
    if best is not None and best.status == Online:
        return TargetFromSource(best, channel.name)
    if channel.sources:
        return TargetFromSource(channel.sources[0], channel.name)
    return None


class PlaybackSession:
    """当前播放尝试的状态"""

    def __init__(self):
        self.target = None
        self.state = Idle
        self.error = None

    def Play(self, target):
        self.target = target
        self.state = Loading
        self.error = None
        Log(f"播放: {target.name} {target.url}")

    def OnReady(self, target=None):
        if not self._IsCurrent(target):
            return
        self.state = Playing

    def OnError(self, reason="", target=None):
        if not self._IsCurrent(target):
            return
        self.state = Failed
        self.error = reason or "无法播放"
        Log(f"播放失败: {self.target.name} ({self.error})")

    def Stop(self):
        self.target = None
        self.state = Idle
        self.error = None

    def _IsCurrent(self, target):
        # 旧的播放尝试发来的事件忽略
        if self.target is None:
            return False
        return target is None or target is self.target
