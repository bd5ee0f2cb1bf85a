from gigdesk.scheduling.engine import BookingDecision, BookingEngine
from gigdesk.scheduling.ledger import AvailabilityLedger
from gigdesk.scheduling.state_machine import BookingStateMachine, BookingTrigger
from gigdesk.scheduling.time_slots import CandidateStartTimes, candidate_start_times

__all__ = [
    "AvailabilityLedger",
    "BookingEngine",
    "BookingDecision",
    "BookingStateMachine",
    "BookingTrigger",
    "CandidateStartTimes",
    "candidate_start_times",
]
