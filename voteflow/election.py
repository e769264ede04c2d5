'''The election state machine.

An :class:`Election` owns all election data - the participant roll, the
proposal list, the current phase and the winning proposal index - and is the
only way to change it. Every call takes the authenticated identifier of the
caller as its first argument and, before changing anything, checks in this
order:

1.  the caller's role (administrator or registered participant),
2.  the current phase of the election,
3.  the validity of the other arguments.

A call that fails any check raises the corresponding
:class:`~voteflow.errors.ElectionError` subclass and leaves the election
exactly as it was. A call that passes all checks applies all of its effects
and emits its notification to the :class:`~voteflow.event.EventLog`.

Calls are serialized by a lock held by the election for the whole
checks-then-mutate sequence, so concurrent callers never observe a partially
applied call.

For example, a complete election with a single participant::

    election = Election('admin')
    election.register_participant('admin', 'alice')
    election.open_proposals('admin')
    election.submit_proposal('alice', 'Plant more trees')   # index 1
    election.close_proposals('admin')
    election.open_voting('admin')
    election.cast_vote('alice', 1)
    election.close_voting('admin')
    election.tally('admin')                                 # returns 1
'''

import contextlib
import logging
import threading
from typing import Any, Dict, Hashable, Optional, Tuple

import voteflow.phase
import voteflow.tally
from voteflow.errors import ElectionError
from voteflow.event import (
    EventLog, ParticipantRegistered, PhaseChanged, ProposalSubmitted, VoteCast,
)
from voteflow.participant import Participant, Roll
from voteflow.persist import (
    class_path, deserialize_value, serialize_value,
)
from voteflow.phase import Phase
from voteflow.proposal import GENESIS_DESCRIPTION, Proposal, ProposalList

logger = logging.getLogger(__name__)


class Election:
    '''A single election, from participant registration to the tally.

    :param administrator: Account identifier of the administrator, the only
        account allowed to register participants and drive the phases.
    :param log: Event log to emit notifications to. A new empty log is
        created if not given.
    '''
    def __init__(self,
                 administrator: Hashable,
                 log: Optional[EventLog] = None,
                 ):
        self._lock = threading.RLock()
        self._roll = Roll(administrator)
        self._proposals = ProposalList()
        self._phase = voteflow.phase.INITIAL_PHASE
        self._winning_proposal_index = 0
        self._evaluator = voteflow.tally.FirstMaximum()
        self.events = log if log is not None else EventLog()

    @property
    def administrator(self) -> Hashable:
        return self._roll.administrator

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def winning_proposal_index(self) -> int:
        '''Index of the winning proposal; 0 until the election is tallied.'''
        return self._winning_proposal_index

    @property
    def n_proposals(self) -> int:
        return len(self._proposals)

    @property
    def vote_counts(self) -> Tuple[int, ...]:
        '''Vote counts of the proposals by index, GENESIS first.

        Open to any caller; proposal records are read through
        :meth:`get_proposal`.
        '''
        with self._lock:
            return tuple(self._proposals.vote_counts())

    @property
    def n_participants(self) -> int:
        return len(self._roll)

    @contextlib.contextmanager
    def _operation(self, name: str, caller: Hashable):
        with self._lock:
            try:
                yield
            except ElectionError as err:
                logger.debug('%s by %r rejected: %s', name, caller, err)
                raise

    def register_participant(self, caller: Hashable, account: Hashable
                             ) -> None:
        '''Register an account as a participant.

        Administrator only, while the registration is open.

        :raises NotAdministrator:
        :raises WrongPhase:
        :raises AlreadyRegistered: If the account is a participant already.
        '''
        with self._operation('register_participant', caller):
            self._roll.require_administrator(caller)
            voteflow.phase.require(Phase.REGISTRATION_OPEN, self._phase)
            self._roll.check_registrable(account)
            self._roll.register(account)
            self.events.emit(ParticipantRegistered(account))

    def open_proposals(self, caller: Hashable) -> Phase:
        '''Close the registration and open the proposal submission.

        Appends the GENESIS proposal at index 0.
        '''
        with self._operation('open_proposals', caller):
            successor = self._check_transition(caller, 'open_proposals')
            self._proposals.open()
            return self._enter(successor)

    def submit_proposal(self, caller: Hashable, description: str) -> int:
        '''Submit a proposal and return its index.

        Participants only, while the proposal submission is open.

        :raises NotAParticipant:
        :raises WrongPhase:
        :raises EmptyProposal: If the description is empty.
        '''
        with self._operation('submit_proposal', caller):
            self._roll.require_participant(caller)
            voteflow.phase.require(Phase.PROPOSALS_OPEN, self._phase)
            self._proposals.check_description(description)
            index = self._proposals.add(description)
            self.events.emit(ProposalSubmitted(index))
            return index

    def close_proposals(self, caller: Hashable) -> Phase:
        with self._operation('close_proposals', caller):
            return self._enter(
                self._check_transition(caller, 'close_proposals')
            )

    def open_voting(self, caller: Hashable) -> Phase:
        with self._operation('open_voting', caller):
            return self._enter(self._check_transition(caller, 'open_voting'))

    def cast_vote(self, caller: Hashable, index: int) -> None:
        '''Vote for the proposal at the given index.

        Participants only, once each, while the voting is open.

        :raises NotAParticipant:
        :raises WrongPhase:
        :raises AlreadyVoted: If the caller has voted already.
        :raises InvalidProposal: If there is no proposal at the index.
        '''
        with self._operation('cast_vote', caller):
            self._roll.require_participant(caller)
            voteflow.phase.require(Phase.VOTING_OPEN, self._phase)
            self._roll.check_can_vote(caller)
            self._proposals.check_index(index)
            self._roll.record_vote(caller, index)
            self._proposals.add_vote(index)
            logger.info('%r voted for proposal %d', caller, index)
            self.events.emit(VoteCast(caller, index))

    def close_voting(self, caller: Hashable) -> Phase:
        with self._operation('close_voting', caller):
            return self._enter(self._check_transition(caller, 'close_voting'))

    def tally(self, caller: Hashable) -> int:
        '''Determine the winning proposal and return its index.

        The first proposal (lowest index) with the maximum number of votes
        wins. Administrator only, after the voting is closed; the election
        then ends in the tallied phase.
        '''
        with self._operation('tally', caller):
            successor = self._check_transition(caller, 'tally')
            winner = self._evaluator.evaluate(self._proposals.vote_counts())
            self._winning_proposal_index = winner
            self._enter(successor)
            return winner

    def get_participant(self, caller: Hashable, account: Hashable
                        ) -> Participant:
        '''Return the record of an account. Participants only, any phase.

        Unregistered accounts resolve to an empty record.

        :raises NotAParticipant:
        '''
        with self._operation('get_participant', caller):
            self._roll.require_participant(caller)
            return self._roll.get(account)

    def get_proposal(self, caller: Hashable, index: int) -> Proposal:
        '''Return the proposal at the index. Participants only, any phase.

        :raises NotAParticipant:
        :raises InvalidProposal:
        '''
        with self._operation('get_proposal', caller):
            self._roll.require_participant(caller)
            self._proposals.check_index(index)
            return self._proposals[index]

    def proposals(self, caller: Hashable) -> Tuple[Proposal, ...]:
        '''Return all proposals, GENESIS first. Participants only.'''
        with self._operation('proposals', caller):
            self._roll.require_participant(caller)
            return self._proposals.as_tuple()

    def winning_proposal(self, caller: Hashable) -> Proposal:
        '''Return the winning proposal record. Participants only, after tally.

        :raises NotAParticipant:
        :raises WrongPhase: If the election has not been tallied.
        '''
        with self._operation('winning_proposal', caller):
            self._roll.require_participant(caller)
            voteflow.phase.require(Phase.TALLIED, self._phase)
            return self._proposals[self._winning_proposal_index]

    def _check_transition(self, caller: Hashable, operation: str) -> Phase:
        self._roll.require_administrator(caller)
        return voteflow.phase.transition(operation, self._phase)

    def _enter(self, successor: Phase) -> Phase:
        previous = self._phase
        self._phase = successor
        logger.info('election moved from %s to %s',
                    previous.label, successor.label)
        self.events.emit(PhaseChanged(int(previous), int(successor)))
        return successor

    def to_dict(self) -> Dict[str, Any]:
        '''Snapshot the election state to a JSON-ready dictionary.

        The event log is not part of the snapshot.
        '''
        with self._lock:
            return {
                'class': class_path(type(self)),
                'administrator': serialize_value(self.administrator),
                'phase': int(self._phase),
                'winning_proposal_index': self._winning_proposal_index,
                'participants': serialize_value(self._roll.records()),
                'proposals': serialize_value(list(self._proposals)),
            }

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> 'Election':
        '''Restore an election from a snapshot created by :meth:`to_dict`.

        :raises ValueError: If the snapshot breaks an election invariant.
        '''
        election = cls(deserialize_value(params['administrator']))
        phase = Phase(params['phase'])
        records = deserialize_value(params.get('participants', {}))
        proposals = deserialize_value(params.get('proposals', []))
        winner = params.get('winning_proposal_index', 0)
        _check_snapshot(phase, records, proposals, winner)
        election._phase = phase
        election._roll = Roll(election.administrator, records)
        election._proposals = ProposalList(proposals)
        election._winning_proposal_index = winner
        return election

    def __repr__(self) -> str:
        return (
            f'<Election({self.administrator!r},{self._phase.label},'
            f'{len(self._roll)} participants,'
            f'{len(self._proposals)} proposals)>'
        )


def _check_snapshot(phase: Phase,
                    records: Dict[Hashable, Participant],
                    proposals: list,
                    winner: int,
                    ) -> None:
    if not all(isinstance(rec, Participant) for rec in records.values()):
        raise ValueError('invalid snapshot: participant records expected')
    if not all(isinstance(prop, Proposal) for prop in proposals):
        raise ValueError('invalid snapshot: proposal records expected')
    if (phase >= Phase.PROPOSALS_OPEN) != bool(proposals):
        raise ValueError(
            f'invalid snapshot: {len(proposals)} proposals in {phase.label}'
        )
    if proposals and proposals[0].description != GENESIS_DESCRIPTION:
        raise ValueError('invalid snapshot: proposal 0 must be GENESIS')
    voters = [rec for rec in records.values() if rec.has_voted]
    if voters and phase < Phase.VOTING_OPEN:
        raise ValueError(f'invalid snapshot: votes recorded in {phase.label}')
    if sum(prop.vote_count for prop in proposals) != len(voters):
        raise ValueError('invalid snapshot: vote counts do not match voters')
    for rec in voters:
        if (not rec.is_registered
                or not isinstance(rec.voted_proposal_index, int)
                or not 0 <= rec.voted_proposal_index < len(proposals)):
            raise ValueError(f'invalid snapshot: invalid vote record {rec}')
    if phase is not Phase.TALLIED and winner != 0:
        raise ValueError('invalid snapshot: winner set before tally')
    if proposals and not 0 <= winner < len(proposals):
        raise ValueError(f'invalid snapshot: winner {winner} out of range')
