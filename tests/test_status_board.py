"""Tests for the shared status collection."""
import asyncio
import warnings

import pytest

from batch_uploader.models import FileDescriptor, UploadState, UploadStatus
from batch_uploader.orchestrator import StatusBoard


def pending(*names):
    return UploadStatus.pending(tuple(FileDescriptor(n, 10, "text/plain") for n in names))


@pytest.fixture
def board():
    board = StatusBoard()
    board.reset([pending("a"), pending("b"), pending("c")])
    return board


class TestStatusBoard:
    @pytest.mark.asyncio
    async def test_update_replaces_only_matching_id(self, board):
        before = board.snapshot()
        uploading = before[1].transition(UploadState.UPLOADING, "Sending 1 files...")

        assert await board.update(uploading) is True

        after = board.snapshot()
        assert after[0] is before[0]
        assert after[1] == uploading
        assert after[2] is before[2]
        assert len(board) == 3

    @pytest.mark.asyncio
    async def test_replaying_terminal_update_is_noop(self, board):
        seen = []
        board.on_status(seen.append)
        done = board.get("a").transition(UploadState.SUCCESS, "Upload finished. Backend response: OK")

        assert await board.update(done) is True
        snapshot = board.snapshot()
        assert await board.update(done) is False
        assert await board.update(done) is False

        assert board.snapshot() == snapshot
        assert seen == [done]

    @pytest.mark.asyncio
    async def test_terminal_state_is_final(self, board):
        uploading = board.get("a").transition(UploadState.UPLOADING, "Sending 1 files...")
        await board.update(uploading)
        await board.update(uploading.transition(UploadState.ERROR, "Upload failed: boom"))

        late = uploading.transition(UploadState.SUCCESS, "late")
        assert await board.update(late) is False
        assert board.get("a").status == UploadState.ERROR

    @pytest.mark.asyncio
    async def test_unknown_id_ignored(self, board):
        assert await board.update(pending("zzz")) is False
        assert board.get("zzz") is None
        assert len(board) == 3

    @pytest.mark.asyncio
    async def test_concurrent_updates_are_not_lost(self):
        board = StatusBoard()
        statuses = [pending(f"f{i}") for i in range(50)]
        board.reset(statuses)

        async def run(status):
            uploading = status.transition(UploadState.UPLOADING, "Sending 1 files...")
            await board.update(uploading)
            await asyncio.sleep(0)
            await board.update(uploading.transition(UploadState.SUCCESS, "ok"))

        await asyncio.gather(*(run(s) for s in statuses))

        assert board.all_settled
        assert all(s.status == UploadState.SUCCESS for s in board.snapshot())
        assert [s.id for s in board.snapshot()] == [s.id for s in statuses]

    @pytest.mark.asyncio
    async def test_seed_notifies_reset_listeners(self):
        board = StatusBoard()
        received = []
        board.on_reset(received.append)

        await board.seed([pending("a")])

        assert len(received) == 1
        assert [s.id for s in received[0]] == ["a"]

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_update(self, board):
        def broken(status):
            raise RuntimeError("render crashed")

        board.on_status(broken)
        uploading = board.get("b").transition(UploadState.UPLOADING, "Sending 1 files...")
        assert await board.update(uploading) is True
        assert board.get("b") == uploading

    @pytest.mark.asyncio
    async def test_async_listener(self, board):
        seen = []

        async def listener(status):
            seen.append(status.id)

        board.on_status(listener)
        await board.update(board.get("c").transition(UploadState.UPLOADING, "x"))
        assert seen == ["c"]

    @pytest.mark.asyncio
    async def test_async_listener_dispatch_emits_no_deprecation_warning(self, board):
        seen = []

        async def listener(status):
            seen.append(status.id)

        board.on_status(listener)
        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            await board.update(board.get("a").transition(UploadState.UPLOADING, "x"))
        assert seen == ["a"]

    def test_reset_rejects_duplicate_ids(self):
        board = StatusBoard()
        with pytest.raises(ValueError, match="Duplicate"):
            board.reset([pending("a"), pending("a")])
