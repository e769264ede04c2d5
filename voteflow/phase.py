'''Election workflow phases and the transitions between them.

An election passes through six phases in a strict forward order; it never
skips a phase and never goes back:

-   :attr:`Phase.REGISTRATION_OPEN` - the administrator registers
    participants (initial phase).
-   :attr:`Phase.PROPOSALS_OPEN` - participants submit proposals.
-   :attr:`Phase.PROPOSALS_CLOSED` - submissions are over, voting has not
    started yet.
-   :attr:`Phase.VOTING_OPEN` - participants cast their votes.
-   :attr:`Phase.VOTING_CLOSED` - votes are in, waiting for the tally.
-   :attr:`Phase.TALLIED` - the winner is known (terminal phase).

The numeric values of the phases (0 to 5) are the identifiers reported by
:class:`~voteflow.event.PhaseChanged` notifications.

The phase moves only through the operations listed in :data:`TRANSITIONS`;
any other move is rejected by :func:`transition` with :class:`WrongPhase`.
'''

import enum
from typing import Dict, Tuple

from voteflow.errors import ElectionError


class Phase(enum.IntEnum):
    '''A phase of the election workflow, in workflow order.'''
    REGISTRATION_OPEN = 0
    PROPOSALS_OPEN = 1
    PROPOSALS_CLOSED = 2
    VOTING_OPEN = 3
    VOTING_CLOSED = 4
    TALLIED = 5

    @property
    def label(self) -> str:
        '''Human-readable name of the phase, e.g. ``voting open``.'''
        return self.name.lower().replace('_', ' ')

    @property
    def is_terminal(self) -> bool:
        return self is Phase.TALLIED


INITIAL_PHASE = Phase.REGISTRATION_OPEN

TRANSITIONS: Dict[str, Tuple[Phase, Phase]] = {
    'open_proposals': (Phase.REGISTRATION_OPEN, Phase.PROPOSALS_OPEN),
    'close_proposals': (Phase.PROPOSALS_OPEN, Phase.PROPOSALS_CLOSED),
    'open_voting': (Phase.PROPOSALS_CLOSED, Phase.VOTING_OPEN),
    'close_voting': (Phase.VOTING_OPEN, Phase.VOTING_CLOSED),
    'tally': (Phase.VOTING_CLOSED, Phase.TALLIED),
}
'''Transition table: operation name -> (predecessor, successor) phase.'''


class WrongPhase(ElectionError):
    '''An operation was invoked outside the phase it requires.

    :param expected: Phase the operation requires.
    :param actual: Phase the election was in at the time of the call.
    '''
    def __init__(self, expected: Phase, actual: Phase):
        self.expected = Phase(expected)
        self.actual = Phase(actual)
        super().__init__(
            f'wrong phase: requires {self.expected.label},'
            f' election is in {self.actual.label}'
        )


def require(expected: Phase, current: Phase) -> None:
    '''Check that the election is in the expected phase.

    :raises WrongPhase: If the current phase differs.
    '''
    if current != expected:
        raise WrongPhase(expected, current)


def transition(operation: str, current: Phase) -> Phase:
    '''Return the phase the operation moves the election to.

    :param operation: Name of the transition operation, a key of
        :data:`TRANSITIONS`.
    :param current: Phase the election is currently in.
    :raises ValueError: If the operation is not a transition operation.
    :raises WrongPhase: If the election is not in the predecessor phase of
        the operation.
    '''
    try:
        predecessor, successor = TRANSITIONS[operation]
    except KeyError as e:
        raise ValueError(
            f'unknown transition operation: {operation}, known: '
            + ', '.join(TRANSITIONS.keys())
        ) from e
    require(predecessor, current)
    return successor
