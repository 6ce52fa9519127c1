'''In-memory election sessions.

An :class:`Election` is created for a fixed list of candidates and keeps its
own register of voters, the set of voters who have already voted and the
current tally. Its state changes only through :meth:`Election.register_voter`
and the vote casting methods; results can be read at any time without
affecting it.

Failures never raise. Registration reports a plain boolean, vote casting
reports one of the fixed rejection reasons (:data:`VOTER_NOT_REGISTERED`,
:data:`CANDIDATE_NOT_FOUND`, :data:`ALREADY_VOTED`), either through the error
callback of :meth:`Election.cast_vote` or in the :class:`VoteOutcome`
returned by :meth:`Election.attempt_vote`.
'''

import collections.abc
import functools
import logging
import operator
import threading
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from panchayat.tally import Tally, tally_pure
from panchayat.util import is_record, is_number, is_sequence, get_field

logger = logging.getLogger(__name__)

MIN_VOTING_AGE = 18

VOTER_NOT_REGISTERED = 'Voter not registered'
CANDIDATE_NOT_FOUND = 'Candidate not found'
ALREADY_VOTED = 'Voter already voted'

ResultEntry = Dict[str, Any]


class VoteOutcome(NamedTuple):
    '''Result of an attempt to cast a vote.

    :param accepted: Whether the vote was recorded.
    :param voter_id: Voter that attempted the vote.
    :param candidate_id: Candidate the vote was for.
    :param reason: Rejection reason; empty for accepted votes.
    '''
    accepted: bool
    voter_id: Any
    candidate_id: Any
    reason: str = ''

    def receipt(self) -> Dict[str, Any]:
        '''Return the payload passed to the success callback.'''
        return {'voter_id': self.voter_id, 'candidate_id': self.candidate_id}


def _is_hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _contains(container: collections.abc.Container, key: Any) -> bool:
    # unhashable ids cannot be registered so they are never found
    try:
        return key in container
    except TypeError:
        return False


class Election:
    '''An election among a fixed list of candidates.

    :param candidates: A list or tuple of candidate records (instances of
        :class:`panchayat.candidate.Candidate` or mappings with the ``id``,
        ``name`` and ``party`` keys). Any other value is treated as an empty
        list. Entries that are not records or have an unhashable id are
        skipped. If several candidates share an id, all of them appear in the
        results but votes for the id are attributed to each of them.
    '''
    def __init__(self, candidates: Any):
        if not is_sequence(candidates):
            candidates = []
        self._candidates: List[Any] = []
        for candidate in candidates:
            if is_record(candidate) and _is_hashable(get_field(candidate, 'id')):
                self._candidates.append(candidate)
            else:
                logger.warning('skipping malformed candidate: %r', candidate)
        self._candidate_map = {
            get_field(cand, 'id'): cand for cand in self._candidates
        }
        self._tally: Tally = {}
        self._registered = set()
        self._voted = set()
        self._lock = threading.RLock()
        logger.info('election created with %d candidates',
                    len(self._candidates))

    @property
    def candidates(self) -> Tuple[Any, ...]:
        '''Candidate records in their original order.'''
        return tuple(self._candidates)

    @property
    def tally(self) -> Tally:
        '''A copy of the current mapping of candidate ids to vote counts.'''
        return dict(self._tally)

    @property
    def registered_count(self) -> int:
        return len(self._registered)

    @property
    def voted_count(self) -> int:
        return len(self._voted)

    def is_registered(self, voter_id: Any) -> bool:
        return _contains(self._registered, voter_id)

    def has_voted(self, voter_id: Any) -> bool:
        return _contains(self._voted, voter_id)

    def register_voter(self, voter: Any) -> bool:
        '''Register a voter for the election.

        The voter must be a record with a string ``id`` and a numeric ``age``
        of at least :data:`MIN_VOTING_AGE`, and must not be registered yet.

        :param voter: Voter record to register.
        :returns: True if the voter was registered, False otherwise (in which
            case nothing changes).
        '''
        if not is_record(voter):
            return False
        voter_id = get_field(voter, 'id')
        age = get_field(voter, 'age')
        if not isinstance(voter_id, str) or not is_number(age):
            return False
        if age < MIN_VOTING_AGE:
            return False
        with self._lock:
            if voter_id in self._registered:
                return False
            self._registered.add(voter_id)
        logger.debug('registered voter %s', voter_id)
        return True

    def attempt_vote(self, voter_id: Any, candidate_id: Any) -> VoteOutcome:
        '''Cast a vote and report the outcome.

        The voter must be registered, the candidate must stand in the
        election and the voter must not have voted yet; these conditions are
        checked in this order and the first failing one gives the rejection
        reason. An accepted vote is added to the tally.

        :param voter_id: Id of the voter casting the vote.
        :param candidate_id: Id of the candidate voted for.
        '''
        with self._lock:
            if not _contains(self._registered, voter_id):
                reason = VOTER_NOT_REGISTERED
            elif not _contains(self._candidate_map, candidate_id):
                reason = CANDIDATE_NOT_FOUND
            elif voter_id in self._voted:
                reason = ALREADY_VOTED
            else:
                self._tally = tally_pure(self._tally, candidate_id)
                self._voted.add(voter_id)
                reason = None
        if reason is not None:
            logger.debug('vote of %s for %s rejected: %s',
                         voter_id, candidate_id, reason)
            return VoteOutcome(False, voter_id, candidate_id, reason)
        logger.debug('vote of %s for %s accepted', voter_id, candidate_id)
        return VoteOutcome(True, voter_id, candidate_id)

    def cast_vote(self,
                  voter_id: Any,
                  candidate_id: Any,
                  on_success: Callable[[Dict[str, Any]], Any],
                  on_error: Callable[[str], Any],
                  ) -> Any:
        '''Cast a vote, reporting the outcome to one of the callbacks.

        Accepted votes call ``on_success`` with a dictionary holding the
        ``voter_id`` and ``candidate_id``; rejected votes call ``on_error``
        with the rejection reason (see :meth:`attempt_vote`). The callback is
        called synchronously before this method returns.

        Both callbacks must be callable. If either is not, nothing happens
        and None is returned.

        :returns: Whatever the called callback returns.
        '''
        if not callable(on_success) or not callable(on_error):
            return None
        outcome = self.attempt_vote(voter_id, candidate_id)
        if outcome.accepted:
            return on_success(outcome.receipt())
        else:
            return on_error(outcome.reason)

    def get_results(self,
                    sort_fn: Optional[Callable[[ResultEntry, ResultEntry], Any]] = None,
                    ) -> List[ResultEntry]:
        '''Return the current results for all candidates.

        :param sort_fn: A comparator taking two result entries and returning
            a negative number, zero or a positive number if the first entry
            should come before, level with or after the second. The
            comparator must return a number; other return values such as None
            make the sort raise TypeError. Anything that is not callable is
            ignored.
        :returns: A list of dictionaries with the ``id``, ``name``, ``party``
            and ``votes`` of every candidate. Sorted by the comparator if
            given, otherwise by votes in descending order; candidates with
            equal votes keep their original order.
        '''
        tally = self._tally
        results = [
            {
                'id': get_field(cand, 'id'),
                'name': get_field(cand, 'name'),
                'party': get_field(cand, 'party'),
                'votes': tally.get(get_field(cand, 'id'), 0),
            }
            for cand in self._candidates
        ]
        if callable(sort_fn):
            return sorted(results, key=functools.cmp_to_key(sort_fn))
        return sorted(results, key=operator.itemgetter('votes'), reverse=True)

    def get_winner(self) -> Optional[ResultEntry]:
        '''Return the result entry of the candidate with the most votes.

        Ties go to the candidate listed first. Returns None if there are no
        candidates or no votes have been cast.
        '''
        results = self.get_results()
        if not results:
            return None
        top = results[0]
        if top['votes'] == 0:
            return None
        logger.info('winner: %s with %d votes', top['id'], top['votes'])
        return dict(top)

    def __repr__(self) -> str:
        return (
            f'<Election({len(self._candidates)} candidates,'
            f'{len(self._voted)}/{len(self._registered)} voted)>'
        )


def create_election(candidates: Any) -> Election:
    '''Create an election session for the given candidates.

    See :class:`Election` for details.
    '''
    return Election(candidates)
