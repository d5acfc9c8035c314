"""
Hoversort — Column Sort Engine Tests
State machine, cursor bounds, convergence, restore, alpha forcing,
status signaling and per-instance independence.

Run with: pytest tests/test_engine.py -v
"""

import math
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.engine import ColumnSortEngine, EngineStateError, Status
from core.pixel import PixelBuffer, DimensionMismatch
from core.surface import ArraySurface
from effects.pixelsort import get_sort_key


def _gray_row(values):
    """(1, W, 4) single-row frame of gray pixels."""
    frame = np.zeros((1, len(values), 4), dtype=np.uint8)
    for c in range(3):
        frame[0, :, c] = values
    frame[0, :, 3] = 255
    return frame


def _columns_sorted(engine, upto):
    key = get_sort_key(engine.sort_by)
    keys = key(engine.display.array[:, :upto])
    return (np.diff(keys, axis=0) >= 0).all()


# ---------------------------------------------------------------------------
# CONSTRUCTION / INITIALIZE
# ---------------------------------------------------------------------------

class TestInitialize:

    def test_initial_state(self, make_engine, small_frame):
        engine = make_engine(small_frame)
        assert engine.cursor == 0
        assert engine.hovering is False
        assert engine.is_idle
        assert engine.display.same_pixels(engine.original)
        np.testing.assert_array_equal(engine.original.array, small_frame)

    def test_renders_once_on_initialize(self, make_engine, small_frame):
        engine = make_engine(small_frame)
        assert engine.surface.draw_count == 1
        np.testing.assert_array_equal(engine.surface.frame, small_frame)

    def test_original_is_frozen_private_copy(self, small_buffer):
        engine = ColumnSortEngine()
        engine.initialize(small_buffer)
        assert engine.original.frozen
        assert engine.original is not small_buffer
        assert not small_buffer.frozen
        assert not engine.display.frozen

    def test_initialize_without_image_raises(self):
        with pytest.raises(EngineStateError):
            ColumnSortEngine().initialize(None)

    def test_use_before_initialize_raises(self):
        engine = ColumnSortEngine()
        assert not engine.initialized
        assert engine.width == 0
        with pytest.raises(EngineStateError):
            engine.tick()
        with pytest.raises(EngineStateError):
            engine.on_hover_start()
        with pytest.raises(EngineStateError):
            engine.on_hover_end()

    @pytest.mark.parametrize("step", [0, -1, 1.5, True, "4"])
    def test_invalid_step_size(self, step):
        with pytest.raises(ValueError):
            ColumnSortEngine(step_size=step)

    def test_unknown_sort_key(self):
        with pytest.raises(ValueError):
            ColumnSortEngine(sort_by="hue")

    def test_surface_optional(self, small_buffer):
        engine = ColumnSortEngine(step_size=8)
        engine.initialize(small_buffer)
        engine.on_hover_start()
        assert engine.tick() is True
        assert engine.cursor == 8


# ---------------------------------------------------------------------------
# HOVER EVENTS
# ---------------------------------------------------------------------------

class TestHoverEvents:

    def test_hover_start_activates(self, make_engine):
        engine = make_engine()
        engine.on_hover_start()
        assert engine.hovering
        assert engine.is_active
        assert engine.status is Status.ACTIVE

    def test_idempotent_reset(self, make_engine):
        engine = make_engine(step_size=5)
        engine.on_hover_start()
        for _ in range(3):
            engine.tick()
        assert engine.cursor == 15
        for _ in range(4):
            engine.on_hover_start()
            assert engine.cursor == 0
            assert engine.display.same_pixels(engine.original)

    def test_hover_start_discards_partial_restore(self, make_engine):
        engine = make_engine(step_size=4)
        engine.on_hover_start()
        for _ in range(5):
            engine.tick()
        engine.on_hover_end()
        engine.tick()
        assert engine.cursor == 16
        engine.on_hover_start()
        assert engine.cursor == 0
        assert engine.display.same_pixels(engine.original)

    def test_hover_start_then_end_before_any_tick(self, make_engine):
        engine = make_engine()
        before = engine.display.array.copy()
        engine.on_hover_start()
        engine.on_hover_end()
        assert engine.cursor == 0
        np.testing.assert_array_equal(engine.display.array, before)
        assert engine.is_idle
        assert engine.tick() is False
        assert engine.is_idle

    def test_hover_end_with_work_activates(self, make_engine):
        engine = make_engine()
        engine.on_hover_start()
        engine.tick()
        engine.tick()
        assert engine.is_active
        engine.on_hover_end()
        assert not engine.hovering
        assert engine.is_active


# ---------------------------------------------------------------------------
# TICK — SORTING
# ---------------------------------------------------------------------------

class TestSorting:

    def test_scenario_single_row(self):
        values = [9, 1, 8, 2, 7, 3, 3, 3, 3, 3]
        engine = ColumnSortEngine(step_size=5)
        engine.initialize(PixelBuffer(_gray_row(values)))
        engine.on_hover_start()
        assert engine.tick() is True
        assert engine.cursor == 5
        # H=1: each column is a single pixel, so sorting leaves it in place
        np.testing.assert_array_equal(engine.display.array[0, :5, 0], [9, 1, 8, 2, 7])

    def test_sorts_within_each_column_only(self):
        frame = np.zeros((3, 2, 4), dtype=np.uint8)
        frame[:, 0, :3] = [[200], [10], [100]]
        frame[:, 1, :3] = [[5], [250], [50]]
        engine = ColumnSortEngine(step_size=2)
        engine.initialize(PixelBuffer(frame))
        engine.on_hover_start()
        engine.tick()
        np.testing.assert_array_equal(engine.display.array[:, 0, 0], [10, 100, 200])
        np.testing.assert_array_equal(engine.display.array[:, 1, 0], [5, 50, 250])

    def test_tick_touches_only_its_range(self, make_engine):
        engine = make_engine(step_size=4)
        engine.on_hover_start()
        engine.tick()
        engine.tick()
        np.testing.assert_array_equal(engine.display.array[:, 8:], engine.original.array[:, 8:])
        assert _columns_sorted(engine, 8)

    def test_cursor_strictly_increases_while_hovering(self, make_engine):
        engine = make_engine(step_size=3)
        engine.on_hover_start()
        previous = engine.cursor
        while engine.cursor < engine.width:
            engine.tick()
            assert previous < engine.cursor <= engine.width
            previous = engine.cursor

    @pytest.mark.parametrize("step", [1, 3, 4, 7, 32, 100])
    def test_convergence(self, make_engine, step):
        engine = make_engine(step_size=step)
        engine.on_hover_start()
        limit = math.ceil(engine.width / step)
        assert engine.ticks_to_settle == limit
        ticks = 0
        while engine.is_active:
            engine.tick()
            ticks += 1
        assert ticks == limit
        assert engine.cursor == engine.width
        assert _columns_sorted(engine, engine.width)

    def test_alpha_forced_on_sorted_columns(self, make_engine, small_frame):
        assert (small_frame[:, :, 3] != 255).any()
        engine = make_engine(small_frame, step_size=6)
        engine.on_hover_start()
        engine.tick()
        assert (engine.display.array[:, :6, 3] == 255).all()
        engine.tick()
        assert (engine.display.array[:, :12, 3] == 255).all()

    def test_original_never_mutated(self, make_engine, small_frame):
        engine = make_engine(small_frame.copy(), step_size=5)
        engine.on_hover_start()
        while engine.is_active:
            engine.tick()
        np.testing.assert_array_equal(engine.original.array, small_frame)

    def test_luminance_key(self, make_engine, gradient_frame):
        engine = make_engine(gradient_frame, step_size=8, sort_by="luminance")
        engine.on_hover_start()
        while engine.is_active:
            engine.tick()
        assert _columns_sorted(engine, engine.width)
        # Gradient columns start bright at the top, so sorting flips them
        np.testing.assert_array_equal(
            engine.display.array[:, :, :3], gradient_frame[::-1, :, :3]
        )

    def test_settled_tick_is_noop(self, make_engine):
        engine = make_engine(step_size=100)
        engine.on_hover_start()
        engine.tick()
        assert engine.is_idle
        snapshot = engine.display.array.copy()
        assert engine.tick() is False
        assert engine.cursor == engine.width
        np.testing.assert_array_equal(engine.display.array, snapshot)


# ---------------------------------------------------------------------------
# TICK — RESTORING
# ---------------------------------------------------------------------------

class TestRestoring:

    @pytest.mark.parametrize("step", [1, 4, 5, 9, 32])
    def test_full_restore(self, make_engine, step):
        engine = make_engine(step_size=step)
        engine.on_hover_start()
        while engine.is_active:
            engine.tick()
        engine.on_hover_end()
        limit = math.ceil(engine.width / step)
        assert engine.ticks_to_settle == limit
        ticks = 0
        while engine.is_active:
            engine.tick()
            ticks += 1
        assert ticks == limit
        assert engine.cursor == 0
        assert engine.display.same_pixels(engine.original)

    def test_cursor_strictly_decreases(self, make_engine):
        engine = make_engine(step_size=5)
        engine.on_hover_start()
        while engine.is_active:
            engine.tick()
        engine.on_hover_end()
        previous = engine.cursor
        while engine.cursor > 0:
            engine.tick()
            assert 0 <= engine.cursor < previous
            previous = engine.cursor

    def test_restore_walks_back_from_cursor(self, make_engine):
        engine = make_engine(step_size=4)
        engine.on_hover_start()
        for _ in range(3):
            engine.tick()
        engine.on_hover_end()
        engine.tick()
        assert engine.cursor == 8
        np.testing.assert_array_equal(engine.display.array[:, 8:], engine.original.array[:, 8:])
        assert (engine.display.array[:, :8, 3] == 255).all()

    def test_restore_block_clamped_at_left_edge(self, make_engine):
        # cursor=3, step=5: only columns [0, 3) are copied back
        engine = make_engine(step_size=5)
        engine.on_hover_start()
        engine.tick()
        engine.on_hover_end()
        engine._cursor = 3
        engine.tick()
        assert engine.cursor == 0
        assert engine.surface.last_span == (0, 3)
        assert engine.is_idle

    def test_partial_sort_then_unhover(self, make_engine):
        engine = make_engine(step_size=7)
        engine.on_hover_start()
        engine.tick()
        engine.tick()
        engine.on_hover_end()
        while engine.is_active:
            engine.tick()
        assert engine.cursor == 0
        assert engine.display.same_pixels(engine.original)


# ---------------------------------------------------------------------------
# INVARIANTS UNDER MIXED EVENT SEQUENCES
# ---------------------------------------------------------------------------

class TestInvariants:

    def test_cursor_bounded_for_random_sequences(self, make_engine):
        rng = np.random.default_rng(7)
        engine = make_engine(step_size=3)
        for _ in range(400):
            op = rng.integers(0, 10)
            if op == 0:
                engine.on_hover_start()
            elif op == 1:
                engine.on_hover_end()
            else:
                before = engine.cursor
                engine.tick()
                if engine.hovering and before < engine.width:
                    assert engine.cursor > before
                elif not engine.hovering and before > 0:
                    assert engine.cursor < before
                else:
                    assert engine.cursor == before
            assert 0 <= engine.cursor <= engine.width
            assert engine.display.size == engine.original.size
            # Columns right of the cursor always show the original image
            np.testing.assert_array_equal(
                engine.display.array[:, engine.cursor:],
                engine.original.array[:, engine.cursor:],
            )

    def test_dimension_mismatch_detected(self, make_engine):
        engine = make_engine()
        engine._display = PixelBuffer.blank(3, 3)
        with pytest.raises(DimensionMismatch):
            engine.tick()

    def test_instances_are_independent(self, make_engine, small_frame, gradient_frame):
        a = make_engine(small_frame, step_size=4)
        b = make_engine(gradient_frame, step_size=4)
        a.on_hover_start()
        a.tick()
        assert b.cursor == 0
        assert b.is_idle
        assert b.display.same_pixels(b.original)
        b.on_hover_start()
        b.on_hover_end()
        assert a.cursor == 4
        assert a.hovering


# ---------------------------------------------------------------------------
# STATUS SIGNALING & RENDERING
# ---------------------------------------------------------------------------

class TestStatusSignals:

    def test_listener_sees_transitions(self, make_engine):
        engine = make_engine(step_size=16)
        seen = []
        engine.subscribe(lambda e, status: seen.append(status))
        engine.on_hover_start()
        engine.tick()
        engine.tick()
        engine.on_hover_end()
        engine.tick()
        engine.tick()
        assert seen == [Status.ACTIVE, Status.IDLE, Status.ACTIVE, Status.IDLE]

    def test_no_duplicate_notifications(self, make_engine):
        engine = make_engine()
        seen = []
        engine.subscribe(lambda e, status: seen.append(status))
        engine.on_hover_start()
        engine.on_hover_start()
        assert seen == [Status.ACTIVE]

    def test_unsubscribe(self, make_engine):
        engine = make_engine()
        seen = []
        callback = lambda e, status: seen.append(status)
        engine.subscribe(callback)
        engine.subscribe(callback)
        engine.unsubscribe(callback)
        engine.on_hover_start()
        assert seen == []

    def test_every_mutation_is_flushed(self, make_engine):
        engine = make_engine(step_size=5)
        engine.on_hover_start()
        while engine.is_active:
            engine.tick()
            np.testing.assert_array_equal(engine.surface.frame, engine.display.array)
            assert engine.surface.dirty is None
        engine.on_hover_end()
        while engine.is_active:
            engine.tick()
            np.testing.assert_array_equal(engine.surface.frame, engine.display.array)

    def test_flush_span_matches_tick_range(self, make_engine):
        engine = make_engine(step_size=5)
        engine.on_hover_start()
        engine.tick()
        assert engine.surface.last_span == (0, 5)
        engine.tick()
        assert engine.surface.last_span == (5, 10)

    def test_idle_tick_does_not_draw(self, make_engine):
        engine = make_engine()
        count = engine.surface.draw_count
        engine.tick()
        assert engine.surface.draw_count == count

    def test_repr(self, make_engine):
        assert "cursor=0" in repr(make_engine())
