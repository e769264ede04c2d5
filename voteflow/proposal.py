'''Proposal records and the append-only proposal list.

Proposals are identified by their index in the list, which is their order of
submission. Index 0 is reserved: the moment the proposal submission opens,
a sentinel proposal described as ``GENESIS`` is appended, so that index 0
always resolves to a proposal (a vote for it is a valid vote for none of the
submitted proposals) and index validity reduces to ``index < len(proposals)``.

Proposal descriptions never change after submission; only the vote counts
grow, by one per vote cast.
'''

import dataclasses
import logging
from typing import Any, Iterator, List, Optional, Tuple

from voteflow.errors import ValidationError
from voteflow.persist import simple_serialization

logger = logging.getLogger(__name__)

GENESIS_DESCRIPTION = 'GENESIS'


class EmptyProposal(ValidationError):
    '''A proposal with no description was submitted.

    :param description: The rejected description.
    '''
    def __init__(self, description: Any = ''):
        self.description = description
        super().__init__(f'proposal description must be non-empty text,'
                         f' got {description!r}')


class InvalidProposal(ValidationError):
    '''A proposal index does not point into the proposal list.

    :param index: The rejected index.
    :param n_proposals: Number of proposals at the time of the call.
    '''
    def __init__(self, index: Any, n_proposals: int):
        self.index = index
        self.n_proposals = n_proposals
        message = f'proposal not found: {index!r}'
        if n_proposals:
            message += f', must be an integer in 0..{n_proposals - 1}'
        else:
            message += ', proposal submission has not opened'
        super().__init__(message)


@simple_serialization
@dataclasses.dataclass(frozen=True)
class Proposal:
    '''A proposal and the number of votes it has obtained.

    :param description: Text of the proposal.
    :param vote_count: Number of votes cast for the proposal.
    '''
    description: str
    vote_count: int = 0

    def with_vote(self) -> 'Proposal':
        '''Return the record with one more vote.'''
        return dataclasses.replace(self, vote_count=self.vote_count + 1)


class ProposalList:
    '''The ordered, append-only list of proposals of an election.

    The list is empty until :meth:`open` appends the GENESIS sentinel.

    :param proposals: Records to restore the list from, GENESIS included.
    '''
    def __init__(self, proposals: Optional[List[Proposal]] = None):
        self._proposals = list(proposals or [])

    def open(self) -> None:
        '''Append the GENESIS sentinel at index 0.'''
        if self._proposals:
            raise RuntimeError('proposal list already opened')
        self._proposals.append(Proposal(GENESIS_DESCRIPTION))

    @staticmethod
    def check_description(description: Any) -> None:
        '''Check that the description can be submitted.

        :raises EmptyProposal: If it is not a non-empty string.
        '''
        if not isinstance(description, str) or not description:
            raise EmptyProposal(description)

    def check_index(self, index: Any) -> None:
        '''Check that the index points to an existing proposal.

        :raises InvalidProposal: If it does not.
        '''
        if (
            not isinstance(index, int)
            or isinstance(index, bool)
            or not 0 <= index < len(self._proposals)
        ):
            raise InvalidProposal(index, len(self._proposals))

    def add(self, description: str) -> int:
        '''Append a proposal and return its index.'''
        self._proposals.append(Proposal(description))
        index = len(self._proposals) - 1
        logger.info('proposal %d submitted: %s', index, description)
        return index

    def add_vote(self, index: int) -> None:
        self._proposals[index] = self._proposals[index].with_vote()

    def vote_counts(self) -> List[int]:
        return [proposal.vote_count for proposal in self._proposals]

    def total_votes(self) -> int:
        return sum(self.vote_counts())

    def as_tuple(self) -> Tuple[Proposal, ...]:
        return tuple(self._proposals)

    def __getitem__(self, index: int) -> Proposal:
        return self._proposals[index]

    def __iter__(self) -> Iterator[Proposal]:
        return iter(self._proposals)

    def __len__(self) -> int:
        return len(self._proposals)
