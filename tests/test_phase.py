import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import voteflow.phase
from voteflow.phase import Phase, WrongPhase


ORDER = [
    Phase.REGISTRATION_OPEN,
    Phase.PROPOSALS_OPEN,
    Phase.PROPOSALS_CLOSED,
    Phase.VOTING_OPEN,
    Phase.VOTING_CLOSED,
    Phase.TALLIED,
]


def test_numeric_identifiers():
    assert [int(phase) for phase in ORDER] == list(range(6))
    assert list(Phase) == ORDER


def test_initial_terminal():
    assert voteflow.phase.INITIAL_PHASE is Phase.REGISTRATION_OPEN
    assert Phase.TALLIED.is_terminal
    assert not any(phase.is_terminal for phase in ORDER[:-1])


def test_table_is_forward_chain():
    steps = list(voteflow.phase.TRANSITIONS.values())
    assert steps == list(zip(ORDER[:-1], ORDER[1:]))


@pytest.mark.parametrize('operation', list(voteflow.phase.TRANSITIONS))
@pytest.mark.parametrize('current', ORDER)
def test_transition(operation, current):
    predecessor, successor = voteflow.phase.TRANSITIONS[operation]
    if current is predecessor:
        assert voteflow.phase.transition(operation, current) is successor
        assert successor == current + 1
    else:
        with pytest.raises(WrongPhase) as excinfo:
            voteflow.phase.transition(operation, current)
        assert excinfo.value.expected is predecessor
        assert excinfo.value.actual is current


def test_unknown_operation():
    with pytest.raises(ValueError):
        voteflow.phase.transition('reopen_registration', Phase.TALLIED)


def test_wrong_phase_names_expected():
    err = WrongPhase(Phase.VOTING_OPEN, 1)
    assert err.actual is Phase.PROPOSALS_OPEN
    assert 'voting open' in str(err)
    assert 'proposals open' in str(err)


def test_require():
    voteflow.phase.require(Phase.VOTING_OPEN, Phase.VOTING_OPEN)
    with pytest.raises(WrongPhase):
        voteflow.phase.require(Phase.VOTING_OPEN, Phase.VOTING_CLOSED)
