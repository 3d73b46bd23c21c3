"""Tests for the entity filters."""

import copy

from conftest import make_child, make_client, make_pregnancy
from core.config import Config, DataEncrConfig
from core.filters import EntityFilter
from schema.records import EntityType


def _assert_whitelist_closure(config, client):
    """Every entity and data_encr blob only carries allowed keys."""
    whitelist = config.whitelist
    assert set(client) <= set(whitelist.client)
    for pregnancy in client.get('pregnancies', []):
        assert set(pregnancy) <= set(whitelist.pregnancy)
        assert set(pregnancy.get('data_encr', {})) <= set(config.data_encr.pregnancy)
        birth = pregnancy.get('birth')
        if birth:
            assert set(birth) <= set(whitelist.birth)
            assert set(birth.get('data_encr', {})) <= set(config.data_encr.birth)
            for child in birth.get('children', []):
                assert set(child) <= set(whitelist.child)
                assert set(child.get('data_encr', {})) <= set(config.data_encr.child)
        for care in pregnancy.get('cares_after', []):
            assert set(care) <= set(whitelist.care_after)
            for key in care.get('data_encr', {}):
                assert key in config.data_encr.care_after or key.startswith('kind-')
        for phone in pregnancy.get('cares_after_phone', []):
            assert set(phone) <= set(whitelist.care_after_phone)


def test_filter_client_projects_whole_tree(salvage_config):
    client = make_client(1, [make_pregnancy(10)], first_name='Anna')

    filtered = EntityFilter(salvage_config).filter_client(client)

    assert list(filtered) == ['id', 'pregnancies']
    pregnancy = filtered['pregnancies'][0]
    assert 'comment' not in pregnancy
    assert pregnancy['data_encr'] == {'egt': '2024-01-01', 'grav': 2}
    assert pregnancy['birth']['data_encr'] == {'geburts-modus': 'spontan'}
    child = pregnancy['birth']['children'][0]
    assert 'name' not in child
    assert child['data_encr'] == {'fields-type': 'child', 'birth_date': '2024-03-01'}
    care = pregnancy['cares_after'][0]
    assert 'address' not in care
    assert care['data_encr'] == {'stillt': True, 'kind-5-nahrung': 'pre'}
    assert pregnancy['cares_after_phone'][0] == {'id': 10000, 'id_pregnancy': 10}
    _assert_whitelist_closure(salvage_config, filtered)


def test_filter_keeps_whitelist_order():
    entity_filter = EntityFilter(Config())
    child = {'data_encr': {}, 'client_id': 1, 'id': 5, 'date_birth': 'x'}

    filtered = entity_filter.filter_child(child)

    assert list(filtered) == ['id', 'date_birth', 'data_encr', 'client_id']


def test_filter_birth_none_stays_none():
    assert EntityFilter(Config()).filter_birth(None) is None


def test_filter_pregnancy_with_null_birth():
    pregnancy = make_pregnancy(10, birth=None)

    filtered = EntityFilter(Config()).filter_pregnancy(pregnancy)

    assert 'birth' in filtered
    assert filtered['birth'] is None


def test_filters_omit_missing_optional_fields():
    entity_filter = EntityFilter(Config())

    assert entity_filter.filter_pregnancy({'id': 1}) == {'id': 1}
    assert entity_filter.filter_birth({'id': 2}) == {'id': 2}
    assert entity_filter.filter_care_after({}) == {}
    assert entity_filter.filter_client({'id': 3}) == {'id': 3}


def test_malformed_shapes_pass_through():
    entity_filter = EntityFilter(Config())
    pregnancy = {'id': 1, 'data_encr': 'ciphertext', 'cares_after': 'n/a', 'birth': {'children': None}}

    filtered = entity_filter.filter_pregnancy(pregnancy)

    assert filtered['data_encr'] == 'ciphertext'
    assert filtered['cares_after'] == 'n/a'
    assert filtered['birth'] == {'children': None}
    assert entity_filter.filter_child('broken') == 'broken'


def test_list_in_entity_position_carries_nothing_through():
    entity_filter = EntityFilter(Config())
    pregnancy = make_pregnancy(10, data_encr=['egt', 'krankenkasse'])
    pregnancy['birth']['children'].append([{'name': 'Mia'}, 'secret'])
    pregnancy['cares_after_phone'].append(['0301234567'])

    filtered = entity_filter.filter_pregnancy(pregnancy)

    assert filtered['data_encr'] == {}
    assert filtered['birth']['children'][-1] == {}
    assert filtered['cares_after_phone'][-1] == {}
    assert entity_filter.filter_birth([{'id': 1}]) == {}


def test_care_after_phone_has_no_blob_processing():
    config = Config()
    phone = {'id': 1, 'data_encr': {'anything': 1}, 'is_breast_feeding': True}

    filtered = EntityFilter(config).filter_care_after_phone(phone)

    assert filtered == {'id': 1, 'is_breast_feeding': True}


def test_care_after_dynamic_patterns_follow_config():
    config = Config(data_encr=DataEncrConfig(care_after=('stillt',), care_after_dynamic_patterns=('baby-{id}-gewicht',)))
    care = {'id': 1, 'data_encr': {'stillt': 1, 'kind-5-nahrung': 2, 'baby-7-gewicht': 3}}

    filtered = EntityFilter(config).filter_care_after(care)

    assert filtered['data_encr'] == {'stillt': 1, 'baby-7-gewicht': 3}


def test_filtering_does_not_mutate_input():
    client = make_client(1, [make_pregnancy(10)])
    before = copy.deepcopy(client)

    EntityFilter(Config()).filter_client(client)

    assert client == before


def test_filtering_is_idempotent():
    entity_filter = EntityFilter(Config())
    client = make_client(1, [make_pregnancy(10, child_ids=(1, 2)), make_pregnancy(11, birth=None)])

    once = entity_filter.filter_client(client)

    assert entity_filter.filter_client(once) == once


def test_whitelist_lookup_by_entity_type():
    config = Config()
    child = make_child(1, secret='x')

    filtered = EntityFilter(config).filter_child(child)

    assert set(filtered) <= set(config.whitelist.for_entity(EntityType.CHILD))


def test_filter_clients_keeps_order_and_length():
    clients = [make_client(i, [make_pregnancy(i * 10, client_id=i)]) for i in (4, 2, 8)]

    filtered = EntityFilter(Config()).filter_clients(clients)

    assert [c['id'] for c in filtered] == [4, 2, 8]
    assert all('email' not in c for c in filtered)
