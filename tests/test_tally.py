import sys
import os
import logging

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import voteflow.tally


@pytest.mark.parametrize(('counts', 'winner'), [
    ([3, 5, 5, 1], 1),
    ([0, 0, 0], 0),
    ([0, 2, 1], 1),
    ([4, 1, 4], 0),
    ([1, 2, 3, 3], 2),
    ([0], 0),
    ([], 0),
])
def test_winning_index(counts, winner):
    assert voteflow.tally.winning_index(counts) == winner
    assert voteflow.tally.FirstMaximum().evaluate(counts) == winner


def test_tied_for_first():
    assert voteflow.tally.tied_for_first([3, 5, 5, 1]) == [1, 2]
    assert voteflow.tally.tied_for_first([1]) == [0]
    assert voteflow.tally.tied_for_first([]) == []


def test_standings_stable():
    assert voteflow.tally.standings([3, 5, 5, 1]) == [
        (1, 5), (2, 5), (0, 3), (3, 1)
    ]


def test_standings_agree_with_winner():
    counts = [2, 0, 2, 7, 7, 1]
    first_index, first_count = voteflow.tally.standings(counts)[0]
    assert first_index == voteflow.tally.winning_index(counts) == 3


def test_tie_logged(caplog):
    with caplog.at_level(logging.INFO, logger='voteflow.tally'):
        voteflow.tally.FirstMaximum().evaluate([3, 5, 5, 1])
    assert 'tied' in caplog.text
