'''Immutable vote tallies.

A tally maps candidate ids to the number of votes received. Tallies are never
updated in place: every counted vote produces a new tally, so any reference
to an earlier tally keeps observing the counts it was created with.
'''

import collections.abc
from typing import Any, Dict

Tally = Dict[str, int]


def tally_pure(current_tally: Any, candidate_id: str) -> Tally:
    '''Return a new tally with one more vote for the given candidate.

    :param current_tally: The tally to start from. It is not modified. Any
        value that is not a mapping is treated as an empty tally.
    :param candidate_id: Candidate to add the vote to; candidates missing
        from the tally start at zero.
    :returns: A new dictionary with all entries of the current tally and the
        candidate's count incremented by one.
    '''
    if isinstance(current_tally, collections.abc.Mapping):
        base = current_tally
    else:
        base = {}
    new_tally = dict(base)
    new_tally[candidate_id] = (base.get(candidate_id) or 0) + 1
    return new_tally
