import asyncio
import unittest
from unittest.mock import AsyncMock, patch

from modscout.models import ResolutionOutcome, ResolutionStatus, ResolveContext
from modscout.services.batch import BatchImporter
from tests.fakes import make_mod


class ScriptedOrchestrator:
    """按查询返回预设结果，记录调用顺序"""

    def __init__(self):
        self.queries = []

    async def resolve(self, query, context):
        self.queries.append(query)
        if query == "broken":
            return ResolutionOutcome.error(query, "boom")
        if query == "missing":
            return ResolutionOutcome.not_found(query, "nope")
        return ResolutionOutcome.found(query, make_mod(query, query))


class TestBatchImporter(unittest.IsolatedAsyncioTestCase):
    async def test_sequential_with_delay_between_queries(self):
        orchestrator = ScriptedOrchestrator()
        importer = BatchImporter(orchestrator, delay=0.3)
        with patch("modscout.services.batch.asyncio.sleep", new=AsyncMock()) as sleep:
            report = await importer.run(["a", "b", "c"], ResolveContext())

        self.assertEqual(orchestrator.queries, ["a", "b", "c"])
        self.assertEqual([o.query for o in report.outcomes], ["a", "b", "c"])
        # 最后一个查询之后不再等待
        self.assertEqual(sleep.await_count, 2)
        sleep.assert_awaited_with(0.3)

    async def test_continues_past_errors(self):
        importer = BatchImporter(ScriptedOrchestrator(), delay=0)
        report = await importer.run(["broken", "missing", "sodium"], ResolveContext())

        counts = report.counts()
        self.assertEqual(counts[ResolutionStatus.ERROR], 1)
        self.assertEqual(counts[ResolutionStatus.NOT_FOUND], 1)
        self.assertEqual(counts[ResolutionStatus.FOUND], 1)
        self.assertEqual(counts[ResolutionStatus.VERSION_MISMATCH], 0)
        self.assertEqual([o.query for o in report.found()], ["sodium"])
        self.assertFalse(report.cancelled)

    async def test_cancellation_keeps_produced_results(self):
        orchestrator = ScriptedOrchestrator()
        cancel = asyncio.Event()
        progress = []

        def on_result(index, total, outcome):
            progress.append((index, total))
            cancel.set()

        report = await BatchImporter(orchestrator, delay=0).run(
            ["a", "b", "c"], ResolveContext(), cancel_event=cancel, on_result=on_result
        )
        self.assertTrue(report.cancelled)
        self.assertEqual(report.total, 3)
        self.assertEqual([o.query for o in report.outcomes], ["a"])
        self.assertEqual(orchestrator.queries, ["a"])
        self.assertEqual(progress, [(1, 3)])

    async def test_empty_batch(self):
        report = await BatchImporter(ScriptedOrchestrator()).run([], ResolveContext())
        self.assertEqual(report.outcomes, [])


if __name__ == "__main__":
    unittest.main()
