"""
Configuration management for the Pregnancy Record Filter.
Handles loading, validation, and access to the whitelist, data_encr and
required-field tables.

The configuration is built once at process start and handed explicitly to the
validator and the entity filters. All sections are frozen dataclasses holding
tuples, so a loaded configuration cannot be changed while a run is in flight;
use ``dataclasses.replace`` (or ``Config.with_policy``) to derive a variant.
"""

import configparser
import os
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from schema.records import EntityType


logger = logging.getLogger(__name__)


# Placeholder standing for "one or more decimal digits" in dynamic patterns
DYNAMIC_ID_PLACEHOLDER = "{id}"


class ValidationPolicy(Enum):
    """How failing pregnancies affect their client."""
    STRICT = "strict"    # any failing pregnancy rejects the whole client
    SALVAGE = "salvage"  # failing pregnancies are dropped, the client is kept if any remain

    @classmethod
    def from_string(cls, value: str) -> "ValidationPolicy":
        """Parse a policy name (case-insensitive)."""
        normalized = str(value).strip().lower()
        for policy in cls:
            if policy.value == normalized:
                return policy
        choices = ", ".join(p.value for p in cls)
        raise ValueError(f"policy must be one of: {choices}, got {value!r}")


def _parse_list(value: str) -> Tuple[str, ...]:
    """Parse a comma- or newline-separated INI value into a tuple of names."""
    items = []
    for line in value.splitlines():
        for item in line.split(','):
            item = item.strip()
            if item:
                items.append(item)
    return tuple(items)


def _format_list(values: Tuple[str, ...]) -> str:
    return ', '.join(values)


def _check_names(section: str, name: str, values: Tuple[str, ...], allow_empty: bool = False) -> None:
    if not allow_empty and not values:
        raise ValueError(f"{section}.{name} must not be empty")
    if len(set(values)) != len(values):
        raise ValueError(f"{section}.{name} contains duplicate entries: {list(values)}")
    for value in values:
        if not isinstance(value, str) or not value:
            raise ValueError(f"{section}.{name} entries must be non-empty strings, got {value!r}")


@dataclass(frozen=True)
class WhitelistConfig:
    """Properties kept per entity type; everything else is dropped."""

    client: Tuple[str, ...] = ('id', 'pregnancies')

    pregnancy: Tuple[str, ...] = (
        'id', 'id_client', 'data_encr', 'expected_birth_date',
        'birth', 'cares_after', 'cares_after_phone',
    )

    birth: Tuple[str, ...] = ('id', 'id_pregnancy', 'data_encr', 'children')

    child: Tuple[str, ...] = (
        'id', 'id_birth', 'date_birth', 'data_encr',
        'created_at', 'updated_at', 'deleted_at',
        'created_by', 'updated_by', 'in_dashboard',
        'pregnancy_id', 'client_id',
    )

    care_after: Tuple[str, ...] = ('id', 'id_pregnancy', 'data_encr', 'date_start', 'date_end')

    care_after_phone: Tuple[str, ...] = (
        'id', 'id_user', 'id_pregnancy',
        'date_start', 'date_end', 'is_breast_feeding',
    )

    def for_entity(self, entity_type: EntityType) -> Tuple[str, ...]:
        """Whitelist for one entity type."""
        return getattr(self, entity_type.value)

    def validate(self) -> None:
        """Validate whitelist configuration."""
        for entity_type in EntityType:
            _check_names('whitelist', entity_type.value, self.for_entity(entity_type))


@dataclass(frozen=True)
class DataEncrConfig:
    """Keys kept inside ``data_encr`` blobs per entity type."""

    pregnancy: Tuple[str, ...] = ('fields-type', 'egt', 'grav', 'para', 'stillwunsch')

    birth: Tuple[str, ...] = ('fields-type', 'geburts-modus', 'blutverlust', 'mother-entlassungdatum')

    child: Tuple[str, ...] = ('fields-type', 'birth_date', 'birth_time')

    care_after: Tuple[str, ...] = (
        'stillt', 'child-tab', 'ibds-left', 'ibds-right',
        'care_length', 'is_first_care', 'laktierend-left', 'laktierend-right',
        'regelrechtes-wochenbett',
    )

    # Per-child keys of care-after blobs; {id} matches any numeric child id
    care_after_dynamic_patterns: Tuple[str, ...] = (
        'kind-{id}-nahrung',
        'kind-{id}-physiologisches-neugeborenes',
    )

    # Entity types that carry a data_encr blob
    ENTITY_TYPES = (
        EntityType.PREGNANCY,
        EntityType.BIRTH,
        EntityType.CHILD,
        EntityType.CARE_AFTER,
    )

    def for_entity(self, entity_type: EntityType) -> Tuple[str, ...]:
        """Fixed allow-list for one entity type."""
        if entity_type not in self.ENTITY_TYPES:
            raise KeyError(f"{entity_type.value} has no data_encr allow-list")
        return getattr(self, entity_type.value)

    def validate(self) -> None:
        """Validate data_encr configuration."""
        for entity_type in self.ENTITY_TYPES:
            _check_names('data_encr', entity_type.value, self.for_entity(entity_type), allow_empty=True)

        _check_names('data_encr', 'care_after_dynamic_patterns', self.care_after_dynamic_patterns, allow_empty=True)
        for pattern in self.care_after_dynamic_patterns:
            if pattern.count(DYNAMIC_ID_PLACEHOLDER) != 1:
                raise ValueError(
                    f"dynamic pattern must contain exactly one {DYNAMIC_ID_PLACEHOLDER} placeholder, got {pattern!r}"
                )


@dataclass(frozen=True)
class RequiredFieldsConfig:
    """Fields that must be present (and non-empty) for a record to be kept."""

    client: Tuple[str, ...] = ('pregnancies',)
    pregnancy: Tuple[str, ...] = ('birth', 'cares_after', 'cares_after_phone')
    birth: Tuple[str, ...] = ('children',)

    # Whether empty lists fail the pregnancy-level check (client and birth checks always do)
    pregnancy_non_empty_arrays: bool = True

    @classmethod
    def for_policy(cls, policy: ValidationPolicy) -> "RequiredFieldsConfig":
        """Default required fields for a validation policy."""
        if policy is ValidationPolicy.STRICT:
            return cls(pregnancy=('birth',), pregnancy_non_empty_arrays=False)
        return cls()

    def validate(self) -> None:
        """Validate required-field configuration."""
        _check_names('required', 'client', self.client)
        _check_names('required', 'pregnancy', self.pregnancy, allow_empty=True)
        _check_names('required', 'birth', self.birth, allow_empty=True)


@dataclass(frozen=True)
class ValidationConfig:
    """Validation policy and its required-field tables."""

    policy: ValidationPolicy = ValidationPolicy.SALVAGE

    # None means: use the defaults of the selected policy
    required: Optional[RequiredFieldsConfig] = None

    @property
    def required_fields(self) -> RequiredFieldsConfig:
        """Required fields in effect for this run."""
        if self.required is not None:
            return self.required
        return RequiredFieldsConfig.for_policy(self.policy)

    def validate(self) -> None:
        """Validate validation configuration."""
        if not isinstance(self.policy, ValidationPolicy):
            raise ValueError(f"policy must be a ValidationPolicy, got {self.policy!r}")
        self.required_fields.validate()


@dataclass(frozen=True)
class Config:
    """Main configuration container."""
    whitelist: WhitelistConfig = field(default_factory=WhitelistConfig)
    data_encr: DataEncrConfig = field(default_factory=DataEncrConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)

    @property
    def policy(self) -> ValidationPolicy:
        return self.validation.policy

    def with_policy(self, policy: ValidationPolicy) -> "Config":
        """
        Return a copy using another validation policy.

        Required fields that merely restate the current policy's defaults are
        dropped, so the new policy's defaults apply. Custom tables are kept.
        """
        required = self.validation.required
        if required == RequiredFieldsConfig.for_policy(self.policy):
            required = None
        return replace(self, validation=replace(self.validation, policy=policy, required=required))

    def validate(self) -> None:
        """Validate entire configuration."""
        self.whitelist.validate()
        self.data_encr.validate()
        self.validation.validate()
        logger.info("Configuration validated successfully")

    def summary_lines(self) -> List[str]:
        """Human-readable configuration summary."""
        required = self.validation.required_fields
        lines = [f"Validation Policy:        {self.policy.value}"]
        lines.append(f"Required (client):        {_format_list(required.client)}")
        lines.append(f"Required (pregnancy):     {_format_list(required.pregnancy)}"
                     f"{' (non-empty)' if required.pregnancy_non_empty_arrays else ''}")
        lines.append(f"Required (birth):         {_format_list(required.birth)}")
        for entity_type in EntityType:
            label = f"Whitelist ({entity_type.value}):"
            lines.append(f"{label:<26}{len(self.whitelist.for_entity(entity_type))} properties")
        lines.append(f"Dynamic Patterns:         {_format_list(self.data_encr.care_after_dynamic_patterns)}")
        return lines

    @classmethod
    def from_ini(cls, config_path: str) -> "Config":
        """Load configuration from INI file."""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Config file not found: {config_path}")

        parser = configparser.ConfigParser()
        parser.read(config_path, encoding='utf-8')

        whitelist_overrides: Dict[str, Tuple[str, ...]] = {}
        if 'whitelist' in parser:
            sec = parser['whitelist']
            for entity_type in EntityType:
                if entity_type.value in sec:
                    whitelist_overrides[entity_type.value] = _parse_list(sec[entity_type.value])

        data_encr_overrides: Dict[str, Tuple[str, ...]] = {}
        if 'data_encr' in parser:
            sec = parser['data_encr']
            for name in [t.value for t in DataEncrConfig.ENTITY_TYPES] + ['care_after_dynamic_patterns']:
                if name in sec:
                    data_encr_overrides[name] = _parse_list(sec[name])

        policy = ValidationPolicy.SALVAGE
        if 'validation' in parser and 'policy' in parser['validation']:
            policy = ValidationPolicy.from_string(parser['validation']['policy'])

        # Required fields start from the policy defaults; listed keys override them
        required = None
        if 'required' in parser:
            sec = parser['required']
            defaults = RequiredFieldsConfig.for_policy(policy)
            required = RequiredFieldsConfig(
                client=_parse_list(sec['client']) if 'client' in sec else defaults.client,
                pregnancy=_parse_list(sec['pregnancy']) if 'pregnancy' in sec else defaults.pregnancy,
                birth=_parse_list(sec['birth']) if 'birth' in sec else defaults.birth,
                pregnancy_non_empty_arrays=(
                    sec.getboolean('pregnancy_non_empty_arrays')
                    if 'pregnancy_non_empty_arrays' in sec
                    else defaults.pregnancy_non_empty_arrays
                ),
            )

        config = cls(
            whitelist=WhitelistConfig(**whitelist_overrides),
            data_encr=DataEncrConfig(**data_encr_overrides),
            validation=ValidationConfig(policy=policy, required=required),
        )

        logger.info(f"Configuration loaded from {config_path}")
        return config

    def to_ini(self, config_path: str) -> None:
        """Save configuration to INI file."""
        parser = configparser.ConfigParser()

        parser['validation'] = {
            'policy': self.policy.value,
        }

        if self.validation.required is not None:
            required = self.validation.required
            parser['required'] = {
                'client': _format_list(required.client),
                'pregnancy': _format_list(required.pregnancy),
                'birth': _format_list(required.birth),
                'pregnancy_non_empty_arrays': str(required.pregnancy_non_empty_arrays).lower(),
            }

        parser['whitelist'] = {
            entity_type.value: _format_list(self.whitelist.for_entity(entity_type))
            for entity_type in EntityType
        }

        data_encr_section = {
            entity_type.value: _format_list(self.data_encr.for_entity(entity_type))
            for entity_type in DataEncrConfig.ENTITY_TYPES
        }
        data_encr_section['care_after_dynamic_patterns'] = _format_list(
            self.data_encr.care_after_dynamic_patterns
        )
        parser['data_encr'] = data_encr_section

        with open(config_path, 'w', encoding='utf-8') as f:
            parser.write(f)

        logger.info(f"Configuration saved to {config_path}")
