"""A commandline tool to run a small election from a JSON election file.

Registers the voters listed in the file, casts all ballots and shows the
results, the winner and every rejected ballot.
"""

import argparse
import io
import logging
import sys
import warnings
from typing import Any, List, Optional, Tuple

import panchayat.io
from panchayat.election import Election, ResultEntry
from panchayat.region import count_votes_in_regions
from panchayat.validate import DEFAULT_MIN_AGE, create_vote_validator

argparser = argparse.ArgumentParser(
    prog='panchayat',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='election file to load',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the election file from standard input',
)
argparser.add_argument(
    '-a', '--min-age',
    type=int,
    default=DEFAULT_MIN_AGE,
    help=(
        'admit only voters of at least this age to registration (voters'
        ' under 18 are never registered)'
    ),
)
argparser.add_argument(
    '-r', '--require',
    nargs='*',
    default=[],
    help='fields every voter record must contain to be admitted',
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all log messages',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any log messages below warnings',
)


def main(input_file: Optional[io.TextIOBase],
         use_stdin: bool = False,
         min_age: int = DEFAULT_MIN_AGE,
         require: Optional[List[str]] = None,
         verbose: bool = False,
         quiet: bool = False,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    data = panchayat.io.load(input_file)
    election = Election(data.candidates)
    if not election.candidates:
        warnings.warn('no candidates: cannot run election, terminating')
        return
    n_registered = register_voters(
        election, data.voters,
        rules={'min_age': min_age, 'required_fields': require or []},
    )
    rejected = cast_ballots(election, data.ballots)
    print(f'Running an election with {len(election.candidates)} candidates')
    print(f'Registered {n_registered} of {len(data.voters)} voters')
    print(f'Accepted {election.voted_count} of {len(data.ballots)} ballots')
    print()
    print('Election result:')
    show_results(election.get_results())
    print()
    show_winner(election.get_winner())
    if rejected:
        print()
        print('Rejected ballots:')
        for voter_id, candidate_id, reason in rejected:
            print(' ' * 4 + f'{voter_id} -> {candidate_id}: {reason}')
    if data.regions is not None:
        print()
        print(f'Votes in regions: {count_votes_in_regions(data.regions)}')


def register_voters(election: Election,
                    voters: List[Any],
                    rules: dict,
                    ) -> int:
    """Register all voters admitted by the rules; return how many were."""
    validator = create_vote_validator(rules)
    n_registered = 0
    for voter in voters:
        result = validator(voter)
        if not result.valid:
            logging.warning('voter %r not admitted: %s', voter, result.reason)
        elif not election.register_voter(voter):
            logging.warning('voter %r could not be registered', voter)
        else:
            n_registered += 1
    return n_registered


def cast_ballots(election: Election,
                 ballots: List[Tuple[Any, Any]],
                 ) -> List[Tuple[Any, Any, str]]:
    """Cast all ballots; return the rejected ones with their reasons."""
    rejected = []
    for voter_id, candidate_id in ballots:
        election.cast_vote(
            voter_id, candidate_id,
            on_success=lambda receipt: logging.debug('counted %s', receipt),
            on_error=lambda reason: rejected.append(
                (voter_id, candidate_id, reason)
            ),
        )
    return rejected


def show_results(results: List[ResultEntry]) -> None:
    n_just_chars = max(len(str(entry['name'])) for entry in results)
    for i, entry in enumerate(results, start=1):
        print(
            str(i).rjust(3),
            str(entry['name']).ljust(n_just_chars),
            str(entry['party'] or '-').ljust(10),
            entry['votes'],
        )


def show_winner(winner: Optional[ResultEntry]) -> None:
    if winner is None:
        print('No winner')
    else:
        print(f'Winner: {winner["name"]} ({winner["party"]})'
              f' with {winner["votes"]} votes')


def cli(argv: Optional[List[str]] = None) -> None:
    args = argparser.parse_args(argv)
    if not args.input_file and not args.use_stdin:
        argparser.print_usage()
    else:
        main(**vars(args))


if __name__ == '__main__':
    cli()
