"""Tests for configuration defaults, validation and INI loading."""

import dataclasses
import os

import pytest

from core.config import (
    Config,
    DataEncrConfig,
    RequiredFieldsConfig,
    ValidationConfig,
    ValidationPolicy,
    WhitelistConfig,
)
from schema.records import EntityType


DEFAULT_INI = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'configs', 'default.ini')


def test_defaults_validate():
    config = Config()
    config.validate()

    assert config.policy is ValidationPolicy.SALVAGE
    assert config.validation.required_fields.pregnancy == ('birth', 'cares_after', 'cares_after_phone')


def test_policy_defaults_for_required_fields():
    strict = Config().with_policy(ValidationPolicy.STRICT).validation.required_fields

    assert strict.pregnancy == ('birth',)
    assert strict.pregnancy_non_empty_arrays is False
    assert strict.birth == ('children',)


def test_config_is_immutable():
    config = Config()

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.whitelist.client = ('id',)


def test_with_policy_returns_new_config():
    config = Config()

    strict = config.with_policy(ValidationPolicy.STRICT)

    assert config.policy is ValidationPolicy.SALVAGE
    assert strict.policy is ValidationPolicy.STRICT


def test_policy_from_string():
    assert ValidationPolicy.from_string(' Strict ') is ValidationPolicy.STRICT
    with pytest.raises(ValueError, match="policy must be one of"):
        ValidationPolicy.from_string('lenient')


def test_invalid_dynamic_pattern_rejected():
    config = Config(data_encr=DataEncrConfig(care_after_dynamic_patterns=('kind-nahrung',)))

    with pytest.raises(ValueError, match="exactly one"):
        config.validate()


def test_pattern_with_two_placeholders_rejected():
    config = Config(data_encr=DataEncrConfig(care_after_dynamic_patterns=('kind-{id}-{id}',)))

    with pytest.raises(ValueError):
        config.validate()


def test_empty_whitelist_rejected():
    config = Config(whitelist=WhitelistConfig(child=()))

    with pytest.raises(ValueError, match="whitelist.child"):
        config.validate()


def test_duplicate_required_field_rejected():
    config = Config().with_policy(ValidationPolicy.SALVAGE)
    config = dataclasses.replace(
        config,
        validation=dataclasses.replace(config.validation, required=RequiredFieldsConfig(client=('pregnancies', 'pregnancies'))),
    )

    with pytest.raises(ValueError, match="duplicate"):
        config.validate()


def test_data_encr_lookup_rejects_entities_without_blob():
    with pytest.raises(KeyError):
        DataEncrConfig().for_entity(EntityType.CARE_AFTER_PHONE)


def test_shipped_default_ini_matches_builtin_defaults():
    config = Config.from_ini(DEFAULT_INI)
    config.validate()

    builtin = Config()
    assert config.whitelist == builtin.whitelist
    assert config.data_encr == builtin.data_encr
    assert config.validation.required_fields == builtin.validation.required_fields
    assert config.policy is ValidationPolicy.SALVAGE


def test_from_ini_missing_file():
    with pytest.raises(FileNotFoundError):
        Config.from_ini('does/not/exist.ini')


def test_from_ini_partial_sections(tmp_path):
    path = tmp_path / 'custom.ini'
    path.write_text(
        "[validation]\n"
        "policy = strict\n"
        "\n"
        "[whitelist]\n"
        "client = id\n"
        "\n"
        "[data_encr]\n"
        "care_after_dynamic_patterns =\n",
        encoding='utf-8',
    )

    config = Config.from_ini(str(path))

    assert config.policy is ValidationPolicy.STRICT
    assert config.validation.required is None
    assert config.validation.required_fields.pregnancy == ('birth',)
    assert config.whitelist.client == ('id',)
    assert config.whitelist.pregnancy == WhitelistConfig().pregnancy
    assert config.data_encr.care_after_dynamic_patterns == ()


def test_from_ini_required_section_starts_from_policy_defaults(tmp_path):
    path = tmp_path / 'custom.ini'
    path.write_text(
        "[validation]\n"
        "policy = strict\n"
        "\n"
        "[required]\n"
        "birth = children, id\n",
        encoding='utf-8',
    )

    required = Config.from_ini(str(path)).validation.required_fields

    assert required.pregnancy == ('birth',)
    assert required.birth == ('children', 'id')
    assert required.pregnancy_non_empty_arrays is False


def test_shipped_default_ini_follows_policy_switch():
    strict = Config.from_ini(DEFAULT_INI).with_policy(ValidationPolicy.STRICT)

    required = strict.validation.required_fields
    assert required.pregnancy == ('birth',)
    assert required.pregnancy_non_empty_arrays is False


def test_with_policy_drops_tables_equal_to_old_defaults():
    salvage = Config(validation=ValidationConfig(required=RequiredFieldsConfig()))

    strict = salvage.with_policy(ValidationPolicy.STRICT)

    assert strict.validation.required is None
    assert strict.validation.required_fields == RequiredFieldsConfig.for_policy(ValidationPolicy.STRICT)


def test_with_policy_keeps_custom_required_tables():
    custom = RequiredFieldsConfig(pregnancy=('birth', 'cares_after'))
    config = Config(validation=ValidationConfig(required=custom))

    strict = config.with_policy(ValidationPolicy.STRICT)

    assert strict.validation.required == custom
