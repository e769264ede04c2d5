import sys
import os
import logging

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
from voteflow.event import (
    EventLog, ParticipantRegistered, PhaseChanged, ProposalSubmitted, VoteCast,
)


def test_event_args():
    assert ParticipantRegistered('alice').args == ('alice',)
    assert PhaseChanged(0, 1).args == (0, 1)
    assert ProposalSubmitted(3).args == (3,)
    assert VoteCast('bob', 2).args == ('bob', 2)


def test_event_str():
    assert str(VoteCast('bob', 2)) == "VoteCast('bob', 2)"
    assert str(PhaseChanged(4, 5)) == 'PhaseChanged(4, 5)'


def test_log_append_only():
    log = EventLog()
    log.emit(PhaseChanged(0, 1))
    log.emit(ProposalSubmitted(1))
    assert len(log) == 2
    assert log[0] == PhaseChanged(0, 1)
    assert list(log) == [PhaseChanged(0, 1), ProposalSubmitted(1)]
    assert log.of_type(ProposalSubmitted) == [ProposalSubmitted(1)]


def test_subscribers():
    log = EventLog()
    received = []
    log.subscribe(received.append)
    log.emit(ProposalSubmitted(1))
    log.unsubscribe(received.append)
    log.emit(ProposalSubmitted(2))
    assert received == [ProposalSubmitted(1)]
    assert len(log) == 2


def test_unsubscribe_unknown():
    with pytest.raises(ValueError):
        EventLog().unsubscribe(print)


def test_failing_subscriber_isolated(caplog):
    log = EventLog()
    received = []

    def broken(event):
        raise RuntimeError('observer down')

    log.subscribe(broken)
    log.subscribe(received.append)
    with caplog.at_level(logging.ERROR, logger='voteflow.event'):
        log.emit(VoteCast('alice', 0))
    assert received == [VoteCast('alice', 0)]
    assert len(log) == 1
    assert 'observer down' in caplog.text


def test_nested_emit_delivered_after_outer_event():
    log = EventLog()
    received = []

    def reemitting(event):
        if event == PhaseChanged(3, 4):
            log.emit(PhaseChanged(4, 5))

    log.subscribe(reemitting)
    log.subscribe(received.append)
    log.emit(PhaseChanged(3, 4))
    assert received == [PhaseChanged(3, 4), PhaseChanged(4, 5)]
    assert list(log) == received


def test_delivery_resumes_after_failing_subscriber():
    log = EventLog()
    received = []

    def broken(event):
        raise RuntimeError('observer down')

    log.subscribe(broken)
    log.subscribe(received.append)
    log.emit(ProposalSubmitted(1))
    log.emit(ProposalSubmitted(2))
    assert received == [ProposalSubmitted(1), ProposalSubmitted(2)]
