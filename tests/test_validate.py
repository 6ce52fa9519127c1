import sys
import os
import json

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import panchayat.persist
import panchayat.validate
from panchayat.candidate import Voter
from panchayat.validate import ValidationResult, create_vote_validator


@pytest.fixture
def id_age_validator():
    return create_vote_validator({'minAge': 18, 'requiredFields': ['id', 'age']})


@pytest.mark.parametrize(('voter', 'expected'), [
    ({'id': 'V1'}, ValidationResult(False, 'Missing field: age')),
    ({'age': 30}, ValidationResult(False, 'Missing field: id')),
    ({}, ValidationResult(False, 'Missing field: id')),
    ({'id': 'V1', 'age': 17}, ValidationResult(False, 'Age below minimum requirement')),
    ({'id': 'V1', 'age': 18}, ValidationResult(True, '')),
    ({'id': 'V1', 'age': '30'}, ValidationResult(False, 'Age below minimum requirement')),
    ({'id': None, 'age': 40}, ValidationResult(True, '')),
    (None, ValidationResult(False, 'Invalid voter object')),
    ('V1', ValidationResult(False, 'Invalid voter object')),
    (['id', 'age'], ValidationResult(False, 'Invalid voter object')),
])
def test_validator_cases(id_age_validator, voter, expected):
    assert id_age_validator(voter) == expected


def test_validator_defaults():
    validator = create_vote_validator({})
    assert validator({'age': 18}) == ValidationResult(True, '')
    assert validator({'age': 17}).reason == 'Age below minimum requirement'
    assert validator({}).reason == 'Age below minimum requirement'


@pytest.mark.parametrize('rules', [
    None,
    'strict',
    {'min_age': None, 'required_fields': 'id'},
    {'minAge': 'old', 'requiredFields': {'id': True}},
])
def test_validator_malformed_rules(rules):
    validator = create_vote_validator(rules)
    assert validator.min_age == 18
    assert validator.required_fields == ()


def test_validator_snake_case_rules():
    validator = create_vote_validator({'min_age': 21, 'required_fields': ['name']})
    assert validator({'name': 'Mohan', 'age': 21}).valid
    assert validator({'name': 'Mohan', 'age': 20}).reason == 'Age below minimum requirement'
    assert validator({'age': 50}).reason == 'Missing field: name'


def test_validator_presence_not_truthiness():
    validator = create_vote_validator({'requiredFields': ['name']})
    assert validator({'name': '', 'age': 30}).valid
    assert validator({'name': None, 'age': 30}).valid


def test_validator_voter_object():
    validator = create_vote_validator({'requiredFields': ['id', 'name', 'age']})
    assert validator(Voter('V1', 'Mohan', 25)).valid
    assert validator(Voter('V2', 'Geeta', 16)).reason == 'Age below minimum requirement'
    strict = create_vote_validator({'requiredFields': ['village']})
    assert strict(Voter('V1', 'Mohan', 25)).reason == 'Missing field: village'


def test_validator_equal_rules():
    rules = {'minAge': 21, 'requiredFields': ['id']}
    first = create_vote_validator(rules)
    second = create_vote_validator(dict(rules))
    assert first == second
    for voter in [{'id': 'a', 'age': 21}, {'age': 40}, {'id': 'b', 'age': 3}]:
        assert first(voter) == second(voter)


def test_validator_not_affected_by_rules_change():
    rules = {'minAge': 18, 'requiredFields': ['id']}
    validator = create_vote_validator(rules)
    rules['requiredFields'].append('name')
    rules['minAge'] = 60
    assert validator({'id': 'V1', 'age': 30}).valid


def test_validator_check():
    validator = create_vote_validator({'requiredFields': ['id']})
    validator.check({'id': 'V1', 'age': 30})
    with pytest.raises(panchayat.validate.VoterError) as excinfo:
        validator.check({'age': 30})
    assert excinfo.value.reason == 'Missing field: id'
    assert not validator.is_valid({'age': 30})


def test_validator_invalid_min_age_direct():
    with pytest.raises(ValueError):
        panchayat.validate.VoterValidator(min_age='eighteen')


def test_validator_roundtrip():
    validator = create_vote_validator({'minAge': 21, 'requiredFields': ['id', 'name']})
    serial = json.dumps(panchayat.persist.to_dict(validator))
    restored = panchayat.persist.from_dict(json.loads(serial))
    assert restored == validator
    assert restored({'id': 'V1', 'age': 30}).reason == 'Missing field: name'


@pytest.mark.parametrize('definition', [
    [],
    {'min_age': 18},
    {'class': '.relative.Name'},
])
def test_from_dict_invalid(definition):
    with pytest.raises(ValueError):
        panchayat.persist.from_dict(definition)


@pytest.mark.parametrize('voter', [
    {'id': 'V1', 'age': 30},
    Voter('V1', 'Mohan', 30),
])
@pytest.mark.parametrize('field', [['id'], {'id': 1}, 5])
def test_validator_non_string_field(voter, field):
    validator = create_vote_validator({'requiredFields': [field]})
    result = validator(voter)
    assert not result.valid
    assert result.reason == f'Missing field: {field}'


def test_from_dict_foreign_class():
    with pytest.raises(ValueError):
        panchayat.persist.from_dict({'class': 'os.system', 'command': 'true'})
    with pytest.raises(ValueError):
        panchayat.persist.from_dict({'class': 'builtins.dict'})


def test_from_dict_bad_parameters():
    with pytest.raises(ValueError):
        panchayat.persist.from_dict(
            {'class': 'panchayat.validate.VoterValidator', 'maximum_age': 3}
        )
