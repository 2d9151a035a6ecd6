"""Tests for Qt engine bridge worker."""

from __future__ import annotations

import random

import pytest
from PyQt6.QtTest import QSignalSpy

from gambit.core.move_generator import MoveGenerator
from gambit.core.position import Position
from gambit.engine.greedy import GreedyEngine
from gambit.engine.qt_bridge import EngineWorker
from gambit.engine.search import CancelCheck, SearchLimits, SearchResult

pytestmark = pytest.mark.usefixtures("qapp")


class _CancellingEngine:
    def __init__(self, worker: EngineWorker) -> None:
        self._worker = worker

    def search(
        self,
        position: Position,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del is_cancelled
        legal = MoveGenerator(position).generate_legal_moves()
        self._worker.cancel()
        return SearchResult(best_move=legal[0], score=0, depth=1, nodes=1)


class _NoMoveEngine:
    def search(
        self,
        _position: Position,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del is_cancelled
        return SearchResult(best_move=None, score=0, depth=0, nodes=0)


class _FailingEngine:
    def search(
        self,
        _position: Position,
        _limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        del is_cancelled
        raise RuntimeError("boom")


class TestEngineWorker:
    def test_emits_best_move(self) -> None:
        position = Position.initial()
        worker = EngineWorker(GreedyEngine(random.Random(0)))

        best_moves = QSignalSpy(worker.best_move_ready)
        worker.request_move(position, 3)

        assert len(best_moves) == 1
        assert best_moves[0][0] == 3
        assert best_moves[0][1] in MoveGenerator(position).generate_legal_moves()

    def test_emits_cancelled_when_search_is_cancelled(self) -> None:
        position = Position.initial()
        worker = EngineWorker(GreedyEngine())
        worker.set_engine(_CancellingEngine(worker))

        cancelled = QSignalSpy(worker.search_cancelled)
        best_moves = QSignalSpy(worker.best_move_ready)

        worker.request_move(position, 7)

        assert len(cancelled) == 1
        assert cancelled[0][0] == 7
        assert len(best_moves) == 0

    def test_emits_no_move_when_search_returns_none(self) -> None:
        position = Position.initial()
        worker = EngineWorker(_NoMoveEngine())

        no_move = QSignalSpy(worker.search_no_move)
        best_moves = QSignalSpy(worker.best_move_ready)
        errors = QSignalSpy(worker.search_error)

        worker.request_move(position, 11)

        assert len(no_move) == 1
        assert no_move[0][0] == 11
        assert len(best_moves) == 0
        assert len(errors) == 0

    def test_emits_error_when_search_raises(self) -> None:
        worker = EngineWorker(_FailingEngine())
        errors = QSignalSpy(worker.search_error)

        worker.request_move(Position.initial(), 5)

        assert len(errors) == 1
        assert errors[0][0] == 5
        assert errors[0][1] == "boom"

    def test_rejects_non_position(self) -> None:
        worker = EngineWorker(GreedyEngine())
        errors = QSignalSpy(worker.search_error)

        worker.request_move("not a position", 2)

        assert len(errors) == 1
        assert errors[0][0] == 2

    def test_set_limits_ignores_other_objects(self) -> None:
        worker = EngineWorker(GreedyEngine(), SearchLimits(max_depth=3))
        worker.set_limits(SearchLimits(max_depth=4))
        worker.set_limits("bogus")
        assert worker._limits == SearchLimits(max_depth=4)
