"""
StateSynchronizer tests against an in-memory board controller.

Run with ``python -m unittest test_synchronizer.py``.
"""

import asyncio
import unittest
from typing import List

import httpx

from fake_board_controller import FakeBoardController, make_payload
from hexboard import RuleFlag, SizeMode, StateSynchronizer
from hexboard.core.types import NO_TOKEN_TEXT
from hexboard.rendering import BoardView, RenderFrame


class RecordingView(BoardView):
    def __init__(self) -> None:
        self.frames: List[RenderFrame] = []

    def apply(self, frame: RenderFrame) -> None:
        self.frames.append(frame)


class BrokenView(BoardView):
    def __init__(self) -> None:
        self.attempts = 0

    def apply(self, frame: RenderFrame) -> None:
        self.attempts += 1
        raise RuntimeError("display unplugged")


class SynchronizerTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.remote = FakeBoardController()
        self.client = self.remote.client()
        self.view = RecordingView()
        self.sync = StateSynchronizer(self.client, self.view, poll_interval=0.01)

    async def asyncTearDown(self) -> None:
        await self.sync.stop()
        await self.client.close()


class TestPolling(SynchronizerTestCase):
    async def test_poll_adopts_snapshot_and_renders_once(self) -> None:
        self.assertTrue(await self.sync.poll_once())

        self.assertIsNotNone(self.sync.snapshot)
        self.assertEqual(self.sync.render_count, 1)
        self.assertEqual(len(self.view.frames), 1)

        frame = self.view.frames[0]
        self.assertIs(frame.snapshot, self.sync.snapshot)
        self.assertEqual(frame.board.cells[0].display_text, NO_TOKEN_TEXT)
        self.assertFalse(any(cell.highlighted for cell in frame.board.cells))

    async def test_unchanged_snapshot_still_renders_identically(self) -> None:
        await self.sync.poll_once()
        await self.sync.poll_once()

        self.assertEqual(self.sync.render_count, 2)
        self.assertEqual(self.view.frames[0].to_dict(), self.view.frames[1].to_dict())

    async def test_transport_failures_keep_previous_state(self) -> None:
        await self.sync.poll_once()
        before = self.sync.snapshot

        self.remote.unreachable.add("/getboard")
        self.assertFalse(await self.sync.poll_once())

        self.remote.unreachable.clear()
        self.remote.overrides["/getboard"] = lambda request: httpx.Response(500, text="busy")
        self.assertFalse(await self.sync.poll_once())

        self.assertIs(self.sync.snapshot, before)
        self.assertEqual(self.sync.render_count, 1)

    async def test_malformed_snapshots_change_nothing(self) -> None:
        await self.sync.poll_once()
        before = self.sync.snapshot

        bodies = [
            httpx.Response(200, text=""),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={k: v for k, v in make_payload(selectedNumber=6).items() if k != "numbers"}),
            httpx.Response(200, json=make_payload(extension=True, numbers=[0] * 19)),
            httpx.Response(200, json=make_payload(manualDice="yes")),
            httpx.Response(200, json=make_payload(selectedNumber="6")),
            httpx.Response(200, json=make_payload(numbers=[str(n) for n in make_payload()["numbers"]])),
        ]
        for body in bodies:
            self.remote.overrides["/getboard"] = lambda request, body=body: body
            self.assertFalse(await self.sync.poll_once())

        self.assertIs(self.sync.snapshot, before)
        self.assertEqual(self.sync.snapshot.session.selected_value, 0)
        self.assertEqual(self.sync.render_count, 1)

    async def test_poll_task_runs_until_stopped(self) -> None:
        self.sync.start()
        self.assertTrue(self.sync.running)
        await asyncio.sleep(0.08)
        await self.sync.stop()

        self.assertFalse(self.sync.running)
        renders = self.sync.render_count
        self.assertGreaterEqual(renders, 2)

        await asyncio.sleep(0.03)
        self.assertEqual(self.sync.render_count, renders)

    async def test_poll_task_survives_failures(self) -> None:
        self.remote.unreachable.add("/getboard")
        self.sync.start()
        await asyncio.sleep(0.04)
        self.assertIsNone(self.sync.snapshot)
        self.assertTrue(self.sync.running)

        self.remote.unreachable.clear()
        await asyncio.sleep(0.04)
        self.assertIsNotNone(self.sync.snapshot)
        self.assertGreater(self.remote.paths().count("/getboard"), 2)

    async def test_rejects_non_positive_interval(self) -> None:
        with self.assertRaises(ValueError):
            StateSynchronizer(self.client, self.view, poll_interval=0)


class TestActions(SynchronizerTestCase):
    async def test_start_and_end_session(self) -> None:
        await self.sync.poll_once()

        self.assertTrue(await self.sync.start_session())
        self.assertTrue(self.sync.snapshot.session.active)
        controls = self.view.frames[-1].controls
        self.assertTrue(controls.roll_control_visible)
        self.assertFalse(controls.mode_controls_enabled)

        await self.sync.select_number(6)
        self.assertTrue(await self.sync.end_session())
        self.assertFalse(self.sync.snapshot.session.active)
        self.assertEqual(self.sync.snapshot.session.selected_value, 0)
        self.assertTrue(self.view.frames[-1].controls.mode_controls_enabled)

    async def test_select_number_highlights_matching_tiles(self) -> None:
        await self.sync.poll_once()

        self.assertTrue(await self.sync.select_number(6))
        request = self.remote.requests[-1]
        self.assertEqual(request.url.path, "/selectNumber")
        self.assertEqual(request.url.params["value"], "6")

        frame = self.view.frames[-1]
        self.assertEqual(frame.snapshot.session.selected_value, 6)
        for cell in frame.board.cells:
            self.assertEqual(cell.highlighted, cell.display_text == "6")
        self.assertEqual([s.value for s in frame.board.selectors if s.highlighted], [6])

    async def test_robber_selection_highlights_everything(self) -> None:
        await self.sync.poll_once()
        await self.sync.select_number(7)

        frame = self.view.frames[-1]
        self.assertTrue(all(cell.highlighted for cell in frame.board.cells))
        self.assertEqual([s.value for s in frame.board.selectors if s.highlighted], [7])

    async def test_select_number_validates_locally(self) -> None:
        await self.sync.poll_once()
        requests = len(self.remote.requests)

        with self.assertRaises(ValueError):
            await self.sync.select_number(13)
        self.assertEqual(len(self.remote.requests), requests)

    async def test_number_result_before_first_snapshot_is_discarded(self) -> None:
        self.assertFalse(await self.sync.roll_dice())
        self.assertIsNone(self.sync.snapshot)
        self.assertEqual(self.sync.render_count, 0)

    async def test_roll_and_refresh_number(self) -> None:
        await self.sync.poll_once()
        board = self.sync.snapshot.board

        self.remote.next_roll = 11
        self.assertTrue(await self.sync.roll_dice())
        self.assertEqual(self.sync.snapshot.session.selected_value, 11)
        self.assertEqual(self.sync.snapshot.board, board)

        self.remote.state["selectedNumber"] = 4
        self.assertTrue(await self.sync.refresh_selected_number())
        self.assertEqual(self.sync.snapshot.session.selected_value, 4)
        self.assertEqual(self.remote.paths()[-1], "/getnumber")

    async def test_bad_number_response_is_discarded(self) -> None:
        await self.sync.poll_once()
        before = self.sync.snapshot

        self.remote.overrides["/rollDice"] = lambda request: httpx.Response(200, text="thirteen")
        self.assertFalse(await self.sync.roll_dice())
        self.remote.overrides["/rollDice"] = lambda request: httpx.Response(200, text="13")
        self.assertFalse(await self.sync.roll_dice())

        self.assertIs(self.sync.snapshot, before)

    async def test_set_extended_mode(self) -> None:
        await self.sync.poll_once()

        self.assertTrue(await self.sync.set_extended())
        snapshot = self.sync.snapshot
        self.assertIs(snapshot.board.size_mode, SizeMode.EXTENDED)
        self.assertEqual(
            [row.offset for row in self.view.frames[-1].board.rows],
            ["left", "left", "left", "right", "right", "right"],
        )

        self.assertTrue(await self.sync.set_standard())
        self.assertIs(self.sync.snapshot.board.size_mode, SizeMode.STANDARD)

    async def test_contradicting_mode_response_is_discarded(self) -> None:
        await self.sync.poll_once()
        before = self.sync.snapshot
        renders = self.sync.render_count

        # Stale answer still reporting the standard board
        self.remote.overrides["/setextension"] = lambda request: httpx.Response(
            200, json=make_payload(extension=False, selectedNumber=5)
        )
        self.assertFalse(await self.sync.set_extended())

        self.assertIs(self.sync.snapshot, before)
        self.assertIs(self.sync.snapshot.board.size_mode, SizeMode.STANDARD)
        self.assertEqual(self.sync.render_count, renders)

    async def test_contradicting_standard_response_is_discarded(self) -> None:
        await self.sync.set_extended()
        before = self.sync.snapshot
        renders = self.sync.render_count

        self.remote.overrides["/setclassic"] = lambda request: httpx.Response(
            200, json=make_payload(extension=True, selectedNumber=5)
        )
        self.assertFalse(await self.sync.set_standard())

        self.assertIs(self.sync.snapshot, before)
        self.assertIs(self.sync.snapshot.board.size_mode, SizeMode.EXTENDED)
        self.assertEqual(self.sync.render_count, renders)
        self.assertEqual(self.remote.paths()[-1], "/setclassic")

    async def test_failed_action_is_abandoned(self) -> None:
        await self.sync.poll_once()
        before = self.sync.snapshot
        self.remote.unreachable.update({"/startgame", "/setextension", "/selectNumber"})

        self.assertFalse(await self.sync.start_session())
        self.assertFalse(await self.sync.set_extended())
        self.assertFalse(await self.sync.select_number(8))

        self.assertIs(self.sync.snapshot, before)
        self.assertEqual(self.remote.paths().count("/startgame"), 1)

    async def test_rule_flag_is_a_proposal(self) -> None:
        await self.sync.poll_once()
        before = self.sync.snapshot

        self.assertTrue(await self.sync.set_rule_flag(RuleFlag.MANUAL_DICE, True))
        request = self.remote.requests[-1]
        self.assertEqual(request.url.path, "/manualDice")
        self.assertEqual(request.url.params["value"], "1")

        # Nothing local changes until the remote's next snapshot
        self.assertIs(self.sync.snapshot, before)
        self.assertFalse(self.view.frames[-1].controls.rule_toggles_checked["manualDice"])

        await self.sync.poll_once()
        self.assertTrue(self.view.frames[-1].controls.rule_toggles_checked["manualDice"])

        self.remote.unreachable.add("/twoTwelveCanTouch")
        self.assertFalse(await self.sync.set_rule_flag(RuleFlag.TWO_TWELVE_CAN_TOUCH, False))


class TestRenderFailures(SynchronizerTestCase):
    async def asyncSetUp(self) -> None:
        await super().asyncSetUp()
        self.view = BrokenView()
        self.sync = StateSynchronizer(self.client, self.view, poll_interval=0.01)

    async def test_action_survives_view_failure(self) -> None:
        with self.assertLogs("hexboard.sync", level="ERROR"):
            self.assertTrue(await self.sync.start_session())

        self.assertTrue(self.sync.snapshot.session.active)
        self.assertEqual(self.sync.render_count, 1)

    async def test_number_action_survives_view_failure(self) -> None:
        with self.assertLogs("hexboard.sync", level="ERROR"):
            await self.sync.poll_once()
            self.assertTrue(await self.sync.select_number(9))

        self.assertEqual(self.sync.snapshot.session.selected_value, 9)
        self.assertEqual(self.view.attempts, 2)


class TestConcurrency(SynchronizerTestCase):
    async def test_last_completed_response_wins(self) -> None:
        release = asyncio.Event()
        default_start = self.remote._start_game

        async def slow_start(request):
            await release.wait()
            return default_start(request)

        self.remote.overrides["/startgame"] = slow_start

        action = asyncio.create_task(self.sync.start_session())
        await asyncio.sleep(0)
        self.assertTrue(await self.sync.poll_once())
        self.assertFalse(self.sync.snapshot.session.active)

        release.set()
        self.assertTrue(await action)
        self.assertTrue(self.sync.snapshot.session.active)

        # A poll issued before the action landed would be corrected by the next one
        self.assertTrue(await self.sync.poll_once())
        self.assertTrue(self.sync.snapshot.session.active)
        self.assertEqual(self.sync.render_count, 3)


if __name__ == "__main__":
    unittest.main()
