"""Tests for the booking status machine."""

from datetime import timedelta

import pytest

from gigdesk.errors import ErrorCode, InvalidTransitionError
from gigdesk.scheduling.state_machine import BookingStateMachine, BookingTrigger
from gigdesk.schemas.booking_schema import BookingStatus
from tests.conftest import FrozenClock


@pytest.fixture
def state_machine():
    return BookingStateMachine(clock=FrozenClock())


class TestInitialStatus:
    def test_starts_pending(self, state_machine):
        assert state_machine.current_status == BookingStatus.PENDING

    def test_initial_history_has_one_entry(self, state_machine):
        history = state_machine.get_history()
        assert len(history) == 1
        assert history[0].trigger is None

    def test_not_terminal_at_start(self, state_machine):
        assert not state_machine.is_terminal()

    def test_valid_triggers_from_pending(self, state_machine):
        assert set(state_machine.get_valid_triggers()) == {
            BookingTrigger.CONFIRM,
            BookingTrigger.REJECT,
            BookingTrigger.CLIENT_CANCEL,
        }


class TestFreelancerResponse:
    def test_confirm(self, state_machine):
        assert state_machine.transition(BookingTrigger.CONFIRM) == BookingStatus.CONFIRMED

    def test_reject_cancels(self, state_machine):
        assert state_machine.transition(BookingTrigger.REJECT) == BookingStatus.CANCELLED
        assert state_machine.is_terminal()

    def test_client_cancel(self, state_machine):
        assert state_machine.transition(BookingTrigger.CLIENT_CANCEL) == BookingStatus.CANCELLED

    def test_confirm_then_complete(self, state_machine):
        state_machine.transition(BookingTrigger.CONFIRM)
        assert state_machine.transition(BookingTrigger.COMPLETE) == BookingStatus.COMPLETED
        assert state_machine.is_terminal()


class TestInvalidTransitions:
    def test_complete_from_pending(self, state_machine):
        with pytest.raises(InvalidTransitionError):
            state_machine.transition(BookingTrigger.COMPLETE)

    def test_confirm_twice(self, state_machine):
        state_machine.transition(BookingTrigger.CONFIRM)
        with pytest.raises(InvalidTransitionError, match="confirmed"):
            state_machine.transition(BookingTrigger.CONFIRM)

    def test_reject_after_confirm(self, state_machine):
        state_machine.transition(BookingTrigger.CONFIRM)
        with pytest.raises(InvalidTransitionError):
            state_machine.transition(BookingTrigger.REJECT)

    def test_nothing_leaves_cancelled(self, state_machine):
        state_machine.transition(BookingTrigger.REJECT)
        assert state_machine.get_valid_triggers() == []
        for trigger in BookingTrigger:
            assert not state_machine.can_transition(trigger)

    def test_failed_transition_keeps_status(self, state_machine):
        with pytest.raises(InvalidTransitionError):
            state_machine.transition(BookingTrigger.COMPLETE)
        assert state_machine.current_status == BookingStatus.PENDING
        assert len(state_machine.get_history()) == 1

    def test_error_lists_valid_actions(self, state_machine):
        state_machine.transition(BookingTrigger.CONFIRM)
        with pytest.raises(InvalidTransitionError) as exc_info:
            state_machine.transition(BookingTrigger.REJECT)
        assert "complete" in exc_info.value.message
        assert exc_info.value.code == ErrorCode.INVALID_TRANSITION
        assert exc_info.value.field == "status"


class TestTransitionTable:
    def test_table_lists_every_edge(self):
        edges = {
            (t.from_status, t.trigger, t.to_status) for t in BookingStateMachine.TRANSITIONS
        }
        assert edges == {
            (BookingStatus.PENDING, BookingTrigger.CONFIRM, BookingStatus.CONFIRMED),
            (BookingStatus.PENDING, BookingTrigger.REJECT, BookingStatus.CANCELLED),
            (BookingStatus.PENDING, BookingTrigger.CLIENT_CANCEL, BookingStatus.CANCELLED),
            (BookingStatus.CONFIRMED, BookingTrigger.COMPLETE, BookingStatus.COMPLETED),
        }


class TestHistory:
    def test_status_trace(self, state_machine):
        state_machine.transition(BookingTrigger.CONFIRM)
        state_machine.transition(BookingTrigger.COMPLETE)
        assert state_machine.get_status_trace() == ["pending", "confirmed", "completed"]

    def test_entries_use_clock(self):
        clock = FrozenClock()
        machine = BookingStateMachine(clock=clock)
        later = clock.advance(hours=2)
        machine.transition(BookingTrigger.CONFIRM)
        history = machine.get_history()
        assert history[0].entered_at == later - timedelta(hours=2)
        assert history[1].entered_at == later
        assert history[1].trigger == BookingTrigger.CONFIRM

    def test_history_is_a_copy(self, state_machine):
        state_machine.get_history().clear()
        assert len(state_machine.get_history()) == 1
