import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import voteflow.errors
import voteflow.participant
from voteflow.participant import (
    Participant, Roll, NotAdministrator, NotAParticipant, AlreadyRegistered,
    AlreadyVoted,
)


def test_unknown_account_record():
    roll = Roll('admin')
    assert roll.get('nobody') == Participant(False, False, 0)
    assert roll.get('nobody') is voteflow.participant.UNREGISTERED
    assert 'nobody' not in roll
    assert len(roll) == 0


def test_roles():
    roll = Roll('admin')
    roll.register('alice')
    assert roll.is_administrator('admin')
    assert not roll.is_administrator('alice')
    assert roll.is_participant('alice')
    assert not roll.is_participant('admin')
    roll.require_administrator('admin')
    roll.require_participant('alice')
    with pytest.raises(NotAdministrator):
        roll.require_administrator('alice')
    with pytest.raises(NotAParticipant):
        roll.require_participant('admin')


def test_register_once():
    roll = Roll(0)
    roll.check_registrable(1)
    roll.register(1)
    assert roll.get(1).is_registered
    with pytest.raises(AlreadyRegistered) as excinfo:
        roll.check_registrable(1)
    assert excinfo.value.account == 1


def test_record_vote():
    roll = Roll('admin')
    roll.register('alice')
    roll.register('bob')
    roll.check_can_vote('alice')
    roll.record_vote('alice', 2)
    assert roll.get('alice') == Participant(True, True, 2)
    assert roll.n_voted == 1
    with pytest.raises(AlreadyVoted) as excinfo:
        roll.check_can_vote('alice')
    assert excinfo.value.proposal_index == 2


def test_records_are_copies():
    roll = Roll('admin')
    roll.register('alice')
    records = roll.records()
    records['mallory'] = Participant(True)
    assert 'mallory' not in roll


def test_record_immutable():
    record = Participant(True)
    with pytest.raises(AttributeError):
        record.has_voted = True


@pytest.mark.parametrize(('error', 'base'), [
    (NotAdministrator('x'), voteflow.errors.AuthorizationError),
    (NotAParticipant('x'), voteflow.errors.AuthorizationError),
    (AlreadyRegistered('x'), voteflow.errors.ValidationError),
    (AlreadyVoted('x', 0), voteflow.errors.ValidationError),
])
def test_error_taxonomy(error, base):
    assert isinstance(error, base)
    assert isinstance(error, voteflow.errors.ElectionError)
    assert "'x'" in str(error)
