# -*- coding: utf-8 -*-
"""
批量测速调度

一次只允许一轮测速。任务按 (频道, 源) 展开后分批执行：批内并发，
整批完成后再开始下一批，所以同时在跑的探测不超过一批的宽度。
每批结束后统一回写结果、重新给该频道的源排名、推进进度。
"""

import asyncio
from dataclasses import dataclass

from logger import Log
from models import Channel, Checking, Error, Online
from probe import DefaultTimeoutMs, ProbeUrl

DefaultBatchSize = 12

OnlineBase = 100000
ErrorScore = 50000
CheckingScore = 100


@dataclass
class ProbeTask:
    channel: Channel
    sourceId: str
    url: str


def ScoreSource(src):
    """分数越高越好：在线按延迟，error（可能只是跨域）高于 offline"""
    if src.status == Online:
        return OnlineBase - (src.latency or 0)
    if src.status == Error:
        return ErrorScore
    if src.status == Checking:
        return CheckingScore
    return 0


def RankSources(channel):
    """按分数重排，sort 稳定，同分保持原顺序"""
    channel.sources.sort(key=ScoreSource, reverse=True)
    channel.ranked = True


class ProbeScheduler:
    """测速调度器，进度通过监听函数通知观察者"""

    # 整个进程同一时间只跑一轮测速
    _running = False

    def __init__(self, timeoutMs=DefaultTimeoutMs, batchSize=DefaultBatchSize, probe=ProbeUrl):
        self.timeoutMs = timeoutMs
        self.batchSize = max(1, int(batchSize))
        self.probe = probe
        self.totalToCheck = 0
        self.checkedCount = 0
        self.progress = 0.0
        self._listeners = []

    @property
    def isChecking(self):
        return ProbeScheduler._running

    def AddListener(self, callback):
        """callback(scheduler)，开始、每批结束、全部结束时调用"""
        self._listeners.append(callback)

    def _Notify(self):
        for callback in self._listeners:
            callback(self)

    def BuildTasks(self, channels):
        """展开任务，并立即把目标源标记为 checking"""
        tasks = []
        for ch in channels:
            for src in ch.sources:
                tasks.append(ProbeTask(ch, src.id, src.url))
                src.status = Checking
                src.latency = None
        return tasks

    def _ApplyBatch(self, batch, results):
        """回写一批结果并重新排名，中间没有 await"""
        touched = {}
        for task, result in zip(batch, results):
            src = task.channel.FindSource(task.sourceId)
            if src is None:
                continue
            src.status = result.status
            src.latency = result.latency
            src.resolution = result.resolution
            touched[task.channel.id] = task.channel

        for ch in touched.values():
            RankSources(ch)

        self.checkedCount += len(results)
        self.progress = self.checkedCount / self.totalToCheck * 100

    async def Check(self, channels):
        """对给定频道执行一轮测速，已在测速或目标为空时返回 False"""
        channels = list(channels)
        if self.isChecking or not channels:
            return False

        ProbeScheduler._running = True
        try:
            tasks = self.BuildTasks(channels)
            self.totalToCheck = len(tasks)
            self.checkedCount = 0
            self.progress = 0.0
            self._Notify()

            for i in range(0, len(tasks), self.batchSize):
                batch = tasks[i:i + self.batchSize]
                results = await asyncio.gather(*(self.probe(task.url, self.timeoutMs) for task in batch))
                self._ApplyBatch(batch, results)
                self._Notify()
        finally:
            ProbeScheduler._running = False

        if not tasks:
            self.progress = 100.0
        online = sum(1 for ch in channels for src in ch.sources if src.status == Online)
        Log(f"测速完成: {online}/{self.totalToCheck} 个源在线")
        self._Notify()
        return True
