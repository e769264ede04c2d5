'''Tally of the proposal vote counts.

The winning proposal is the one with the most votes. Ties are resolved
towards the lowest index, i.e. the proposal submitted first: the vote counts
are scanned in ascending index order while keeping a running maximum that is
only replaced by a strictly greater count. For vote counts ``[3, 5, 5, 1]``,
proposal 1 wins, not proposal 2.

When no vote has been cast at all, every proposal is tied at zero and the
GENESIS sentinel at index 0 wins.
'''

import logging
import operator
from typing import List, Sequence, Tuple


logger = logging.getLogger(__name__)


def winning_index(vote_counts: Sequence[int]) -> int:
    '''Return the index of the first proposal with the maximum count.

    :param vote_counts: Vote counts of the proposals, by proposal index.
    :returns: Index of the winner; 0 for an empty sequence.
    '''
    best_i = 0
    best_count = None
    for i, count in enumerate(vote_counts):
        if best_count is None or count > best_count:
            best_i = i
            best_count = count
    return best_i


def tied_for_first(vote_counts: Sequence[int]) -> List[int]:
    '''Return the indices of all proposals with the maximum count.'''
    if not vote_counts:
        return []
    top = max(vote_counts)
    return [i for i, count in enumerate(vote_counts) if count == top]


def standings(vote_counts: Sequence[int]) -> List[Tuple[int, int]]:
    '''Return (index, count) pairs ordered from the most votes.

    Equal counts keep the ascending index order, so the first item is always
    the winner chosen by :func:`winning_index`.
    '''
    return sorted(
        enumerate(vote_counts),
        key=operator.itemgetter(1),
        reverse=True,
    )


class FirstMaximum:
    '''Select the proposal with the most votes, earliest first on ties.

    An evaluator object wrapping :func:`winning_index` that reports ties
    it had to resolve to the log.
    '''
    def evaluate(self, vote_counts: Sequence[int]) -> int:
        '''Return the index of the winning proposal.

        :param vote_counts: Vote counts of the proposals, by proposal index.
        '''
        tied = tied_for_first(vote_counts)
        winner = winning_index(vote_counts)
        if len(tied) > 1:
            logger.info('proposals %s are tied at %d votes, electing %d',
                        tied, vote_counts[winner], winner)
        elif tied:
            logger.info('proposal %d has the most votes (%d), electing',
                        winner, vote_counts[winner])
        return winner
