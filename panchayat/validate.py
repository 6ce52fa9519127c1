'''Configurable voter validators.

Election rules differ between bodies: some set a higher minimum age, some
require particular details to be recorded for every voter. A validator
built by :func:`create_vote_validator` captures such rules and checks voter
records against them.

Unlike the registration check of the election session, validators explain
why a voter was rejected. They report this as a :class:`ValidationResult`;
the :meth:`VoterValidator.check` method raises :class:`VoterError` instead
for callers that prefer exceptions.
'''

import collections.abc
import logging
from numbers import Real
from typing import Any, Iterable, NamedTuple, Optional

from panchayat.persist import simple_serialization
from panchayat.util import is_record, is_number, is_sequence, has_field, get_field

logger = logging.getLogger(__name__)

DEFAULT_MIN_AGE = 18

INVALID_VOTER = 'Invalid voter object'
MISSING_FIELD = 'Missing field: {}'
AGE_BELOW_MINIMUM = 'Age below minimum requirement'


class VoterError(Exception):
    '''A voter does not satisfy the election rules.

    :param voter: Voter that was found to be invalid.
    :param reason: Description of the failed rule.
    '''
    def __init__(self, voter: Any, reason: str):
        self.voter = voter
        self.reason = reason
        super().__init__(f'invalid voter {voter!r}: {reason}')


class ValidationResult(NamedTuple):
    '''Outcome of validating a voter; the reason is empty when valid.'''
    valid: bool
    reason: str = ''


VALID = ValidationResult(True, '')


@simple_serialization
class VoterValidator:
    '''Validate voter records against a minimum age and required fields.

    Validators hold no mutable state; a single instance may be called
    repeatedly and from multiple threads.

    :param min_age: Minimum age a voter must have. None means the default
        of 18.
    :param required_fields: Names of fields that must be present on the
        voter record. Only presence is checked, not the value.
    '''
    def __init__(self,
                 min_age: Optional[Real] = None,
                 required_fields: Iterable[str] = (),
                 ):
        if min_age is None:
            min_age = DEFAULT_MIN_AGE
        elif not is_number(min_age):
            raise ValueError(f'invalid minimum age: {min_age!r}')
        self.min_age = min_age
        self.required_fields = tuple(required_fields)

    def __call__(self, voter: Any) -> ValidationResult:
        '''Validate the voter.

        The voter must be a record holding every required field (checked in
        the configured order) and a numeric age not below the minimum. The
        first failed check determines the reason.

        :param voter: Voter record to be checked.
        '''
        if not is_record(voter):
            return ValidationResult(False, INVALID_VOTER)
        for field in self.required_fields:
            if not has_field(voter, field):
                return ValidationResult(False, MISSING_FIELD.format(field))
        age = get_field(voter, 'age')
        if not is_number(age) or age < self.min_age:
            return ValidationResult(False, AGE_BELOW_MINIMUM)
        return VALID

    def is_valid(self, voter: Any) -> bool:
        '''Return True if the voter satisfies all the rules.'''
        return self(voter).valid

    def check(self, voter: Any) -> None:
        '''Check if the voter satisfies all the rules.

        :raises VoterError: If any of the rules is not satisfied.
        '''
        result = self(voter)
        if not result.valid:
            logger.debug('voter %r rejected: %s', voter, result.reason)
            raise VoterError(voter, result.reason)

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, VoterValidator)
            and self.min_age == other.min_age
            and self.required_fields == other.required_fields
        )

    def __hash__(self) -> int:
        return hash((self.min_age, self.required_fields))

    def __repr__(self) -> str:
        return (
            f'<VoterValidator(min_age={self.min_age},'
            f'required_fields={list(self.required_fields)})>'
        )


def _get_rule(rules: Any, *names: str) -> Any:
    if not isinstance(rules, collections.abc.Mapping):
        return None
    for name in names:
        if rules.get(name) is not None:
            return rules[name]
    return None


def create_vote_validator(rules: Any = None) -> VoterValidator:
    '''Create a voter validator from a rules configuration.

    :param rules: A mapping with the optional keys ``min_age`` (minimum age,
        default 18) and ``required_fields`` (sequence of field names that must
        be present on every voter, default none). The camelCase spellings
        ``minAge`` and ``requiredFields`` are accepted as well. A minimum age
        that is not a number falls back to the default and required fields
        not given as a list or tuple are ignored. Anything but a mapping in
        place of the rules counts as no rules.
    :returns: A callable validator returning a :class:`ValidationResult`.
    '''
    min_age = _get_rule(rules, 'min_age', 'minAge')
    if not is_number(min_age):
        min_age = None
    required_fields = _get_rule(rules, 'required_fields', 'requiredFields')
    if not is_sequence(required_fields):
        required_fields = ()
    return VoterValidator(min_age=min_age, required_fields=required_fields)
