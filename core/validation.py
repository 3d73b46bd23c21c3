"""
Record Validation.

Decides which clients and pregnancies survive into the filtered output.

Two policies share one validator (see ValidationPolicy):
- STRICT:  a single failing pregnancy rejects the whole client
- SALVAGE: failing pregnancies are dropped and reported individually; the
           client is rejected only when no valid pregnancy remains

Validation failures are accounting, not errors: every outcome is returned as
data (ValidationResult / ClientDecision) and nothing here raises for a
malformed record.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from core.config import Config, RequiredFieldsConfig, ValidationPolicy
from schema.records import record_id


logger = logging.getLogger(__name__)


NO_VALID_PREGNANCIES_REASON = "No valid pregnancies remaining after validation"


@dataclass(frozen=True)
class EntityCheck:
    """Result of a required-field check on one entity."""
    valid: bool
    missing_field: Optional[str] = None


@dataclass(frozen=True)
class ValidationResult:
    """Validation outcome with a report-ready reason."""
    valid: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class SkippedClient:
    """A client left out of the output."""
    id: Any
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "reason": self.reason}


@dataclass(frozen=True)
class SkippedPregnancy:
    """A pregnancy removed from its client (salvage policy only)."""
    client_id: Any
    pregnancy_id: Any
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clientId": self.client_id,
            "pregnancyId": self.pregnancy_id,
            "reason": self.reason,
        }


@dataclass
class ClientDecision:
    """What happens to one input client."""
    client_id: Any
    kept: Optional[Dict[str, Any]] = None
    skipped_client: Optional[SkippedClient] = None
    skipped_pregnancies: List[SkippedPregnancy] = field(default_factory=list)

    @property
    def is_kept(self) -> bool:
        return self.kept is not None


def is_valid_value(value: Any, check_non_empty_array: bool = False) -> bool:
    """
    Check if a value counts as present.

    None fails; an empty list fails only when ``check_non_empty_array`` is set.
    Empty strings, 0 and False are valid.
    """
    if value is None:
        return False
    if check_non_empty_array and isinstance(value, list) and len(value) == 0:
        return False
    return True


def validate_entity(
    entity: Any,
    required_fields: Sequence[str],
    check_non_empty_arrays: bool = False
) -> EntityCheck:
    """
    Validate a single entity against its required fields.

    Stops at the first invalid field. A missing or non-dict entity is treated
    as having none of its fields.

    Args:
        entity: Record to check
        required_fields: Field names, checked in order
        check_non_empty_arrays: Treat empty lists as missing

    Returns:
        EntityCheck naming the first missing field, if any
    """
    for field_name in required_fields:
        value = entity.get(field_name) if isinstance(entity, dict) else None
        if not is_valid_value(value, check_non_empty_arrays):
            return EntityCheck(valid=False, missing_field=field_name)
    return EntityCheck(valid=True)


def _missing_reason(entity_name: str, field_name: str) -> str:
    return f"Missing required field '{entity_name}.{field_name}'"


class RecordValidator:
    """
    Validates clients and their pregnancies under a configured policy.

    Required fields come from ``config.validation.required_fields``; the
    client and birth checks always treat empty lists as missing, the
    pregnancy check only when ``pregnancy_non_empty_arrays`` is set.
    """

    def __init__(self, config: Config):
        """
        Initialize validator.

        Args:
            config: Configuration object
        """
        self.config = config
        self.policy: ValidationPolicy = config.validation.policy
        self.required: RequiredFieldsConfig = config.validation.required_fields

    def validate_client(self, client: Any) -> ValidationResult:
        """Validate client-level required fields."""
        check = validate_entity(client, self.required.client, True)
        if not check.valid:
            return ValidationResult(False, _missing_reason('client', check.missing_field))
        return ValidationResult(True)

    def validate_pregnancy(self, pregnancy: Any) -> ValidationResult:
        """Validate one pregnancy and, when present, its birth."""
        check = validate_entity(
            pregnancy, self.required.pregnancy, self.required.pregnancy_non_empty_arrays
        )
        if not check.valid:
            return ValidationResult(False, _missing_reason('pregnancy', check.missing_field))

        birth = pregnancy.get('birth') if isinstance(pregnancy, dict) else None
        if birth is not None:
            birth_check = validate_entity(birth, self.required.birth, True)
            if not birth_check.valid:
                return ValidationResult(False, _missing_reason('birth', birth_check.missing_field))

        return ValidationResult(True)

    def evaluate(self, client: Any) -> ClientDecision:
        """
        Partition one client according to the policy.

        Returns:
            ClientDecision with either a kept client (carrying only its valid
            pregnancies) or a skipped-client entry, plus any skipped pregnancies
        """
        client_id = record_id(client)

        client_result = self.validate_client(client)
        if not client_result.valid:
            return ClientDecision(
                client_id=client_id,
                skipped_client=SkippedClient(client_id, client_result.reason),
            )

        pregnancies = client.get('pregnancies')
        if not isinstance(pregnancies, list):
            # Present but not a sequence of pregnancies: nothing to salvage
            return ClientDecision(
                client_id=client_id,
                skipped_client=SkippedClient(
                    client_id, "Invalid field 'client.pregnancies' (expected a list)"
                ),
            )

        if self.policy is ValidationPolicy.STRICT:
            return self._evaluate_strict(client, client_id, pregnancies)
        return self._evaluate_salvage(client, client_id, pregnancies)

    def _evaluate_strict(self, client: Dict[str, Any], client_id: Any, pregnancies: List[Any]) -> ClientDecision:
        for pregnancy in pregnancies:
            result = self.validate_pregnancy(pregnancy)
            if not result.valid:
                reason = f"Pregnancy {record_id(pregnancy)}: {result.reason}"
                logger.debug(f"Client {client_id} rejected: {reason}")
                return ClientDecision(
                    client_id=client_id,
                    skipped_client=SkippedClient(client_id, reason),
                )

        return ClientDecision(client_id=client_id, kept={**client, 'pregnancies': list(pregnancies)})

    def _evaluate_salvage(self, client: Dict[str, Any], client_id: Any, pregnancies: List[Any]) -> ClientDecision:
        valid_pregnancies = []
        skipped_pregnancies = []

        for pregnancy in pregnancies:
            result = self.validate_pregnancy(pregnancy)
            if result.valid:
                valid_pregnancies.append(pregnancy)
            else:
                skipped_pregnancies.append(
                    SkippedPregnancy(client_id, record_id(pregnancy), result.reason)
                )

        if not valid_pregnancies:
            logger.debug(f"Client {client_id} rejected: {NO_VALID_PREGNANCIES_REASON}")
            return ClientDecision(
                client_id=client_id,
                skipped_client=SkippedClient(client_id, NO_VALID_PREGNANCIES_REASON),
                skipped_pregnancies=skipped_pregnancies,
            )

        return ClientDecision(
            client_id=client_id,
            kept={**client, 'pregnancies': valid_pregnancies},
            skipped_pregnancies=skipped_pregnancies,
        )
