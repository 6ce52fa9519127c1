"""Panchayat - a library for running small in-memory elections.

A village election as modelled here consists of:

-   An election session (:mod:`election`) created for a fixed list of
    candidates. It registers voters, accepts at most one vote per registered
    voter and reports the results and the winner.
-   Voter validators (:mod:`validate`) checking voter records against
    configurable rules such as a minimum age or required fields.
-   A counter of votes over nested regions (:mod:`region`).
-   Immutable tallies (:mod:`tally`), on which the election session counts
    its votes.

The four entry points are importable directly from this package.
"""

from panchayat.candidate import Candidate, Voter
from panchayat.election import create_election
from panchayat.region import count_votes_in_regions
from panchayat.tally import tally_pure
from panchayat.validate import create_vote_validator

__all__ = [
    'Candidate',
    'Voter',
    'create_election',
    'create_vote_validator',
    'count_votes_in_regions',
    'tally_pure',
]
