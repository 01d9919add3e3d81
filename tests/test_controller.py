"""
Tests for OverrideController.

Covers the override state machine, stepping commands, the store's override
slot, the splice on resume, diff requests and lifecycle.
"""

import pytest

from staterecorder import Binding, ObservableStore, OverrideController, RecorderConfig, install, recorder_config


class TestOverrideMode:
    """Live <-> Overriding transitions."""

    def test_start_stop_on_singleton(self, store, controller, push):
        """Pause on the seed record, divert one update, then splice it back."""
        seed = controller.timeline.primary[0]

        controller.start_override()
        assert controller.is_overriding is True
        assert controller.current_index == 0
        # Singleton buffer: both step directions disabled
        assert controller.can_step_backward is True
        assert controller.can_step_forward is True

        [update] = push(1)
        assert controller.timeline.pending == [update]
        assert controller.timeline.primary == [seed]

        controller.stop_override()
        assert controller.timeline.primary == [seed, update]
        assert controller.timeline.pending == []
        assert controller.is_overriding is False

    def test_start_override_points_at_newest(self, six_records):
        six_records.start_override()
        assert six_records.current_index == 5
        assert six_records.current_record is six_records.timeline.primary[-1]

    def test_redundant_commands_are_noops(self, six_records):
        six_records.stop_override()
        assert not six_records.is_overriding

        six_records.set_index(2)
        six_records.start_override()
        assert six_records.current_index == 2

    def test_stepping_while_live_enters_override(self, six_records):
        six_records.step_backward()
        assert six_records.is_overriding
        assert six_records.current_index == 4

    def test_diverted_updates_follow_primary_after_resume(self, store, six_records, push):
        before = list(six_records.timeline.primary)
        six_records.set_index(2)
        diverted = push(3)

        assert six_records.record_count == 6
        assert six_records.pending_count == 3

        six_records.stop_override()
        assert six_records.timeline.primary == before + diverted
        assert six_records.pending_count == 0


class TestStepping:
    """Step, long step and progress commands."""

    def test_long_step_backward_from_end(self, six_records):
        six_records.start_override()
        six_records.long_step_backward()
        assert six_records.current_index == 0

    def test_long_step_forward_clamps(self, six_records):
        six_records.set_index(3)
        six_records.long_step_forward()
        assert six_records.current_index == 5

    def test_step_boundaries(self, six_records):
        six_records.set_index(0)
        six_records.step_backward()
        assert six_records.current_index == 0
        assert six_records.can_step_backward is True

        six_records.set_index(5)
        six_records.step_forward()
        assert six_records.current_index == 5
        assert six_records.can_step_forward is True

    def test_set_progress(self, six_records):
        six_records.set_progress(0.4)
        assert six_records.current_index == 2
        assert six_records.progress == pytest.approx(0.4)

    def test_configured_step_sizes(self, store, push):
        recorder = OverrideController(store, config=RecorderConfig(step_size=2, long_step_size=3))
        recorder.attach()
        push(9)

        recorder.step_backward()
        assert recorder.current_index == 7
        recorder.long_step_backward()
        assert recorder.current_index == 4


class TestOverrideSlot:
    """What the store renders."""

    def test_store_renders_cursor_record(self, store, six_records):
        six_records.set_index(2)
        assert store.state == {"count": 2}
        assert store.live_state == {"count": 5}

        six_records.step_forward()
        assert store.state == {"count": 3}

    def test_store_keeps_historical_view_while_updates_arrive(self, store, six_records, push):
        six_records.set_index(1)
        push(2)
        assert store.state == {"count": 1}
        assert store.live_state == {"count": 7}

    def test_resume_clears_slot(self, store, six_records):
        six_records.set_index(1)
        six_records.stop_override()
        assert store.state_override is None
        assert store.state == {"count": 5}


class TestDiff:
    """request_diff presents the transition just before the cursor."""

    def test_diff_uses_preceding_record(self, store, push):
        calls = []
        recorder = OverrideController(store, diff_callback=lambda previous, current: calls.append((previous, current)))
        recorder.attach()
        push(5)

        recorder.set_index(3)
        recorder.request_diff()
        assert calls == [({"count": 1}, {"count": 2})]

    def test_diff_at_first_record_is_noop(self, store, push):
        calls = []
        recorder = OverrideController(store, diff_callback=lambda previous, current: calls.append((previous, current)))
        recorder.attach()
        push(2)

        recorder.set_index(0)
        recorder.request_diff()
        assert calls == []

    def test_default_diff_prints_both_states(self, store, push, capsys):
        recorder = OverrideController(store)
        recorder.attach()
        push(2)

        recorder.start_override()
        recorder.request_diff()
        out = capsys.readouterr().out
        assert "previous {'count': 0}" in out
        assert "current {'count': 1}" in out

    def test_diff_while_live_is_noop(self, store, push):
        calls = []
        recorder = OverrideController(store, diff_callback=lambda previous, current: calls.append((previous, current)))
        recorder.attach()
        push(1)

        recorder.request_diff()
        assert calls == []

    def test_default_diff_uses_explicit_width(self, store, capsys):
        recorder = OverrideController(store, config=RecorderConfig(diff_width=20))
        recorder.attach()
        store.set_state({"alpha": 1, "beta": 2, "gamma": 3})
        store.set_state({})

        recorder.start_override()
        recorder.request_diff()
        out = capsys.readouterr().out
        assert "current {'alpha': 1,\n 'beta': 2,\n 'gamma': 3}" in out

    def test_default_diff_keeps_width_from_install_scope(self, store, capsys):
        with recorder_config(diff_width=20):
            overlay = install(store)
        store.set_state({"alpha": 1, "beta": 2, "gamma": 3})
        store.set_state({})

        overlay.controller.start_override()
        overlay.controller.request_diff()
        out = capsys.readouterr().out
        assert "current {'alpha': 1,\n 'beta': 2,\n 'gamma': 3}" in out

    def test_failing_diff_callback_does_not_propagate(self, store, push, caplog):
        def explode(previous, current):
            raise RuntimeError("boom")

        recorder = OverrideController(store, diff_callback=explode)
        recorder.attach()
        push(1)
        recorder.start_override()
        recorder.request_diff()
        assert recorder.record_count == 2
        assert "Diff callback failed: boom" in caplog.text


class TestLifecycle:
    """attach/detach and mode listeners."""

    def test_attach_seeds_from_store(self, store):
        store.set_state({"count": 41})
        recorder = OverrideController(store)
        recorder.attach()

        assert recorder.record_count == 1
        assert recorder.current_record.current_state == {"count": 41}
        assert store.subscriber_count == 1

    def test_double_attach_is_noop(self, store, controller):
        controller.attach()
        assert controller.record_count == 1
        assert store.subscriber_count == 1

    def test_detach_unsubscribes_and_returns_live(self, store, six_records, push):
        six_records.set_index(1)
        push(1)
        six_records.detach()

        assert store.subscriber_count == 0
        assert store.state_override is None
        assert six_records.record_count == 7

        push(1)
        assert six_records.record_count == 7

    def test_mode_listeners(self, six_records):
        seen = []
        six_records.add_mode_listener(seen.append)

        six_records.start_override()
        six_records.step_backward()
        six_records.stop_override()
        assert seen == [True, False]

        six_records.remove_mode_listener(seen.append)
        six_records.start_override()
        assert seen == [True, False]

    def test_failing_mode_listener_is_logged(self, six_records, caplog):
        def explode(is_overriding):
            raise RuntimeError("listener down")

        six_records.add_mode_listener(explode)
        six_records.start_override()
        assert six_records.is_overriding
        assert "Mode listener failed" in caplog.text

    def test_initially_paused_binding_starts_overriding(self, store):
        paused = Binding(True)
        recorder = OverrideController(store, paused=paused)
        recorder.attach()
        assert recorder.is_overriding
