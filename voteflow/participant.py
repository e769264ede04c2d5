'''Participant records, the participant roll and role checks.

Every call to an election is made by a caller identified by an account
identifier - any hashable object such as a string or an integer. Two roles
are recognized:

-   The **administrator**, a single account fixed when the election is
    created, who drives the phase transitions and registers participants.
-   **Participants**, accounts registered by the administrator, who submit
    proposals and cast one vote each.

The :class:`Roll` keeps the participant records and provides the role
predicates (:meth:`Roll.is_administrator`, :meth:`Roll.is_participant`) as
pure functions of the caller and the stored roles, together with the checks
raising :class:`NotAdministrator` and :class:`NotAParticipant`.
'''

import dataclasses
import logging
from typing import Any, Dict, Hashable, Iterator, Optional

from voteflow.errors import AuthorizationError, ValidationError
from voteflow.persist import simple_serialization

logger = logging.getLogger(__name__)


class NotAdministrator(AuthorizationError):
    '''An administrator-only operation was called by another account.

    :param account: The caller that was rejected.
    '''
    def __init__(self, account: Any):
        self.account = account
        super().__init__(f'not the administrator: {account!r}')


class NotAParticipant(AuthorizationError):
    '''A participant-only operation was called by an unregistered account.

    :param account: The caller that was rejected.
    '''
    def __init__(self, account: Any):
        self.account = account
        super().__init__(f'not a registered participant: {account!r}')


class AlreadyRegistered(ValidationError):
    '''The account to register is a participant already.

    :param account: The account that was registered before.
    '''
    def __init__(self, account: Any):
        self.account = account
        super().__init__(f'participant already registered: {account!r}')


class AlreadyVoted(ValidationError):
    '''A participant tried to vote a second time.

    :param account: The participant that has voted before.
    :param proposal_index: Index of the proposal the participant voted for.
    '''
    def __init__(self, account: Any, proposal_index: int):
        self.account = account
        self.proposal_index = proposal_index
        super().__init__(
            f'participant {account!r} already voted'
            f' for proposal {proposal_index}'
        )


@simple_serialization
@dataclasses.dataclass(frozen=True)
class Participant:
    '''A record of an account's standing in the election.

    :param is_registered: Whether the administrator registered the account.
        Once set, never unset.
    :param has_voted: Whether the participant cast their vote.
    :param voted_proposal_index: Index of the proposal voted for; only
        meaningful when `has_voted` is True.
    '''
    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_index: int = 0


UNREGISTERED = Participant()
'''The record of any account the administrator never registered.'''


class Roll:
    '''The administrator and the participant records of an election.

    The roll does not check the election phase; that is the task of the
    election. Its mutating methods (:meth:`register`, :meth:`record_vote`)
    assume that the corresponding checks (:meth:`check_registrable`,
    :meth:`check_can_vote`) were passed.

    :param administrator: Account identifier of the administrator.
    :param records: Participant records to restore the roll from.
    '''
    def __init__(self,
                 administrator: Hashable,
                 records: Optional[Dict[Hashable, Participant]] = None,
                 ):
        self.administrator = administrator
        self._records: Dict[Hashable, Participant] = dict(records or {})

    def is_administrator(self, account: Hashable) -> bool:
        return account == self.administrator

    def is_participant(self, account: Hashable) -> bool:
        return self.get(account).is_registered

    def require_administrator(self, account: Hashable) -> None:
        '''Check that the account is the administrator.

        :raises NotAdministrator: If it is not.
        '''
        if not self.is_administrator(account):
            raise NotAdministrator(account)

    def require_participant(self, account: Hashable) -> None:
        '''Check that the account is a registered participant.

        :raises NotAParticipant: If it is not.
        '''
        if not self.is_participant(account):
            raise NotAParticipant(account)

    def get(self, account: Hashable) -> Participant:
        '''Return the record of the account.

        Accounts that were never registered resolve to the empty
        :data:`UNREGISTERED` record; no record is stored for them.
        '''
        return self._records.get(account, UNREGISTERED)

    def check_registrable(self, account: Hashable) -> None:
        '''Check that the account can be registered.

        :raises AlreadyRegistered: If the account is a participant already.
        '''
        if self.is_participant(account):
            raise AlreadyRegistered(account)

    def check_can_vote(self, account: Hashable) -> None:
        '''Check that the participant has not voted yet.

        :raises AlreadyVoted: If the participant has voted.
        '''
        record = self.get(account)
        if record.has_voted:
            raise AlreadyVoted(account, record.voted_proposal_index)

    def register(self, account: Hashable) -> None:
        self._records[account] = dataclasses.replace(
            self.get(account), is_registered=True
        )
        logger.info('registered participant %r', account)

    def record_vote(self, account: Hashable, proposal_index: int) -> None:
        self._records[account] = dataclasses.replace(
            self.get(account),
            has_voted=True,
            voted_proposal_index=proposal_index,
        )

    @property
    def n_voted(self) -> int:
        '''Number of participants that have cast their vote.'''
        return sum(1 for record in self._records.values() if record.has_voted)

    def records(self) -> Dict[Hashable, Participant]:
        '''Return a copy of the stored participant records.'''
        return dict(self._records)

    def __contains__(self, account: Hashable) -> bool:
        return self.is_participant(account)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
