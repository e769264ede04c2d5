import sys
import os
import io

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import voteflow.io.script
from voteflow.election import Election
from voteflow.event import PhaseChanged, VoteCast
from voteflow.io.script import Call, ScriptParseError
from voteflow.participant import NotAParticipant
from voteflow.phase import Phase

SCRIPT = '''
# registration
admin register alice
admin register bob
admin register carol
admin open_proposals
alice submit Proposal A
admin close_proposals
admin open_voting
alice vote 1
bob vote 1
carol vote 0
admin close_voting
admin tally
'''


def test_loads():
    calls = voteflow.io.script.loads(SCRIPT)
    assert len(calls) == 12
    assert calls[0] == Call('admin', 'register', 'alice', 3)
    assert calls[4] == Call('alice', 'submit', 'Proposal A', 7)
    assert calls[6].argument is None
    assert calls[7] == Call('alice', 'vote', 1, 10)
    assert calls[7].method_name == 'cast_vote'


def test_load_file():
    calls = voteflow.io.script.load(io.StringIO(SCRIPT))
    assert calls == voteflow.io.script.loads(SCRIPT)


def test_apply_end_to_end():
    election = Election('admin')
    results = [
        call.apply(election) for call in voteflow.io.script.loads(SCRIPT)
    ]
    assert results[4] == 1
    assert results[-1] == 1
    assert election.phase is Phase.TALLIED
    assert election.winning_proposal_index == 1


def test_apply_read():
    election = Election('admin')
    voteflow.io.script.loads('admin register alice')[0].apply(election)
    record = Call('alice', 'participant', 'alice').apply(election)
    assert record.is_registered
    with pytest.raises(NotAParticipant):
        Call('bob', 'proposal', 0).apply(election)


@pytest.mark.parametrize('text', [
    'admin',
    'admin reopen',
    'admin tally now',
    'alice vote',
    'alice vote first',
    'alice submit',
])
def test_parse_errors(text):
    with pytest.raises(ScriptParseError) as excinfo:
        voteflow.io.script.loads('# header\n' + text)
    assert excinfo.value.line_no == 2
    assert str(excinfo.value).startswith('line 2: ')


def test_dumps_events():
    text = voteflow.io.script.dumps([PhaseChanged(0, 1), VoteCast('bob', 2)])
    assert text == "PhaseChanged(0, 1)\nVoteCast('bob', 2)\n"


def test_dump_events():
    out = io.StringIO()
    voteflow.io.script.dump(out, [PhaseChanged(3, 4)])
    assert out.getvalue() == 'PhaseChanged(3, 4)\n'


def test_call_str():
    assert str(Call('alice', 'vote', 1)) == 'alice vote 1'
    assert str(Call('admin', 'tally')) == 'admin tally'
