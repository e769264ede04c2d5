"""A commandline tool to replay an operation script against an election.

Runs every scripted call against a fresh election in order, reporting the
calls that were rejected, and shows the emitted notifications, the proposal
standings and the winner of the election.
"""

import argparse
import io
import json
import logging
import sys
from typing import List, Optional

import voteflow.io.script
import voteflow.persist
import voteflow.tally
from voteflow.election import Election
from voteflow.errors import ElectionError
from voteflow.io.script import Call
from voteflow.phase import Phase

argparser = argparse.ArgumentParser(
    prog='voteflow',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='file to load the operation script from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the operation script from standard input',
)
argparser.add_argument(
    '-a', '--administrator',
    default='admin',
    help='account identifier of the election administrator',
)
argparser.add_argument(
    '-s', '--snapshot',
    type=argparse.FileType('w', encoding='utf8'),
    help='write the final election state to this file as JSON',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all election log messages, rejected calls included',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any election log messages or other info',
)

logger = logging.getLogger('voteflow')


def main(input_file: Optional[io.TextIOBase] = None,
         use_stdin: bool = False,
         administrator: str = 'admin',
         snapshot: Optional[io.TextIOBase] = None,
         verbose: bool = False,
         quiet: bool = False,
         ) -> Election:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    calls = voteflow.io.script.load(input_file)
    election = Election(administrator)
    n_rejected = run_calls(election, calls)
    if not quiet:
        show_summary(election, n_rejected)
    if snapshot is not None:
        json.dump(voteflow.persist.to_dict(election), snapshot, indent=2)
    return election


def run_calls(election: Election, calls: List[Call]) -> int:
    """Apply the calls in order and return the number of rejected calls."""
    n_rejected = 0
    for call in calls:
        try:
            result = call.apply(election)
        except ElectionError as err:
            n_rejected += 1
            logger.warning('line %s: %s rejected: %s', call.line_no, call, err)
        else:
            if result is not None:
                logger.info('line %s: %s -> %s', call.line_no, call, result)
    return n_rejected


def show_summary(election: Election, n_rejected: int) -> None:
    print(f'Election is in phase: {election.phase.label}')
    print(f'{len(election.events)} notifications emitted,'
          f' {n_rejected} calls rejected')
    print()
    print(voteflow.io.script.dumps(election.events), end='')
    counts = election.vote_counts
    if counts:
        print()
        print('Standings:')
        for index, count in voteflow.tally.standings(counts):
            print(f'{index:>4}  {count:>6}')
    if election.phase is Phase.TALLIED:
        print()
        winner = election.winning_proposal_index
        print(f'Elected: proposal {winner}')


if __name__ == '__main__':
    args = argparser.parse_args()
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        main(**vars(args))
