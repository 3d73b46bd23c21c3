"""Shared fixtures for the filter tests."""

import copy

import pytest

from core.config import Config, ValidationPolicy


def make_child(child_id, **extra):
    child = {
        'id': child_id,
        'id_birth': 100,
        'name': 'Mia',
        'date_birth': '2024-03-01',
        'data_encr': {'fields-type': 'child', 'birth_date': '2024-03-01', 'vorname': 'Mia'},
    }
    child.update(extra)
    return child


def make_pregnancy(pregnancy_id, client_id=1, child_ids=(1000,), cares_after=1, cares_after_phone=1, **extra):
    pregnancy = {
        'id': pregnancy_id,
        'id_client': client_id,
        'data_encr': {'egt': '2024-01-01', 'grav': 2, 'krankenkasse': 'AOK'},
        'expected_birth_date': '2024-03-01',
        'comment': 'free text',
        'birth': {
            'id': pregnancy_id * 10,
            'id_pregnancy': pregnancy_id,
            'data_encr': {'geburts-modus': 'spontan', 'klinik': 'Klinikum'},
            'children': [make_child(cid) for cid in child_ids],
        },
        'cares_after': [
            {
                'id': pregnancy_id * 100 + i,
                'id_pregnancy': pregnancy_id,
                'address': 'Hauptstraße 1',
                'data_encr': {'stillt': True, 'kind-5-nahrung': 'pre', 'notiz': 'x'},
            }
            for i in range(cares_after)
        ],
        'cares_after_phone': [
            {'id': pregnancy_id * 1000 + i, 'id_pregnancy': pregnancy_id, 'phone': '0301234567'}
            for i in range(cares_after_phone)
        ],
    }
    pregnancy.update(extra)
    return pregnancy


def make_client(client_id, pregnancies, **extra):
    client = {'id': client_id, 'email': f'client{client_id}@example.org', 'pregnancies': pregnancies}
    client.update(extra)
    return client


@pytest.fixture
def salvage_config():
    return Config()


@pytest.fixture
def strict_config():
    return Config().with_policy(ValidationPolicy.STRICT)


@pytest.fixture
def dataset():
    """Three clients: complete, partially salvageable, empty."""
    return [
        make_client(1, [make_pregnancy(10, client_id=1)]),
        make_client(2, [
            make_pregnancy(20, client_id=2, cares_after=0),
            make_pregnancy(21, client_id=2),
        ]),
        make_client(3, []),
    ]


@pytest.fixture
def frozen(dataset):
    """Deep copy of ``dataset`` to detect mutation."""
    return copy.deepcopy(dataset)
