"""
批量解析服务

逐个解析模组列表中的查询，查询之间固定间隔以遵守上游速率限制，
支持协作式取消。
"""

import asyncio
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from loguru import logger

from modscout.models import ResolutionOutcome, ResolutionStatus, ResolveContext

DEFAULT_BATCH_DELAY = 0.3

# (当前序号, 总数, 结果)
ResultCallback = Callable[[int, int, ResolutionOutcome], None]


@dataclass
class BatchReport:
    """批量解析报告"""

    outcomes: List[ResolutionOutcome] = field(default_factory=list)
    total: int = 0
    cancelled: bool = False

    def counts(self) -> Dict[ResolutionStatus, int]:
        """按状态统计"""
        counter = Counter(outcome.status for outcome in self.outcomes)
        return {status: counter.get(status, 0) for status in ResolutionStatus}

    def found(self) -> List[ResolutionOutcome]:
        """所有找到模组的结果"""
        return [o for o in self.outcomes if o.status is ResolutionStatus.FOUND]


class BatchImporter:
    """批量解析器"""

    def __init__(self, orchestrator, delay: float = DEFAULT_BATCH_DELAY):
        """
        Args:
            orchestrator: 提供 async resolve(query, context) 的协调器
            delay: 两个查询之间的等待秒数
        """
        self.orchestrator = orchestrator
        self.delay = delay

    async def run(
        self,
        queries: Iterable[str],
        context: ResolveContext,
        cancel_event: Optional[asyncio.Event] = None,
        on_result: Optional[ResultCallback] = None,
    ) -> BatchReport:
        """
        顺序解析所有查询

        Args:
            queries: 查询列表
            context: 解析上下文
            cancel_event: 设置后在下一个查询开始前停止，已有结果保留
            on_result: 每个查询完成后的回调

        Returns:
            BatchReport
        """
        queries = list(queries)
        report = BatchReport(total=len(queries))
        logger.info(f"开始批量解析 {len(queries)} 个模组...")

        for index, query in enumerate(queries):
            if cancel_event is not None and cancel_event.is_set():
                report.cancelled = True
                logger.warning(f"批量解析已取消，已完成 {index}/{len(queries)}")
                break

            outcome = await self.orchestrator.resolve(query, context)
            report.outcomes.append(outcome)
            logger.debug(f"[{index + 1}/{len(queries)}] {query}: {outcome.status.value}")
            if on_result is not None:
                on_result(index + 1, len(queries), outcome)

            if index < len(queries) - 1 and self.delay > 0:
                await asyncio.sleep(self.delay)

        counts = report.counts()
        logger.info(
            f"批量解析结束: {counts[ResolutionStatus.FOUND]} 找到, "
            f"{counts[ResolutionStatus.VERSION_MISMATCH]} 版本不匹配, "
            f"{counts[ResolutionStatus.NOT_FOUND]} 未找到, "
            f"{counts[ResolutionStatus.ERROR]} 错误"
        )
        return report
