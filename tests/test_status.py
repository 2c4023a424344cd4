import pytest

from hospital.exceptions import InvalidStatus
from hospital.status import AppointmentStatus, check_transition, is_terminal, parse_status


def test_pending_can_complete_or_cancel():
    assert check_transition(AppointmentStatus.PENDING, AppointmentStatus.COMPLETED) is AppointmentStatus.COMPLETED
    assert check_transition(AppointmentStatus.PENDING, "canceled") is AppointmentStatus.CANCELED


def test_completed_back_to_pending_fails():
    with pytest.raises(InvalidStatus):
        check_transition(AppointmentStatus.COMPLETED, AppointmentStatus.PENDING)


@pytest.mark.parametrize("terminal", [AppointmentStatus.CANCELED, AppointmentStatus.COMPLETED])
def test_no_transition_out_of_terminal_states(terminal):
    assert is_terminal(terminal)
    for target in AppointmentStatus:
        if target is terminal:
            continue
        with pytest.raises(InvalidStatus):
            check_transition(terminal, target)


def test_reasserting_current_status_is_allowed():
    assert check_transition(AppointmentStatus.CANCELED, "CANCELED") is AppointmentStatus.CANCELED


@pytest.mark.parametrize("value", ["DONE", "", "pending!", 3, None])
def test_unknown_status_value_rejected(value):
    with pytest.raises(InvalidStatus):
        parse_status(value)


def test_parse_status_accepts_enum_and_names():
    assert parse_status(AppointmentStatus.PENDING) is AppointmentStatus.PENDING
    assert parse_status(" completed ") is AppointmentStatus.COMPLETED
