"""
Entity Filters.

Builds the filtered record tree: every entity is projected onto its
whitelist, its data_encr blob onto the per-type allow-list, and nested
collections are filtered recursively.

Filters never mutate their input and never raise for missing optional
fields; absent keys simply stay absent.
"""

from typing import Any, List

from core.config import Config
from core.projection import filter_data_encr, pick_properties
from schema.records import (
    EntityType,
    BirthRecord,
    CareAfterPhoneRecord,
    CareAfterRecord,
    ChildRecord,
    ClientRecord,
    PregnancyRecord,
)


class EntityFilter:
    """
    Projects client trees onto the configured whitelists.

    Structure handled:
        client.pregnancies[]
            pregnancy.data_encr
            pregnancy.birth -> birth.data_encr, birth.children[] -> child.data_encr
            pregnancy.cares_after[] -> care_after.data_encr (+ dynamic 'kind-{id}-*' keys)
            pregnancy.cares_after_phone[]
    """

    def __init__(self, config: Config):
        self.config = config
        self.whitelist = config.whitelist
        self.data_encr = config.data_encr

    def _project(self, record: Any, entity_type: EntityType) -> Any:
        return pick_properties(record, self.whitelist.for_entity(entity_type))

    def _filter_blob(self, filtered: dict, entity_type: EntityType, with_patterns: bool = False) -> None:
        if 'data_encr' not in filtered:
            return
        patterns = self.data_encr.care_after_dynamic_patterns if with_patterns else None
        filtered['data_encr'] = filter_data_encr(
            filtered['data_encr'],
            self.data_encr.for_entity(entity_type),
            patterns,
        )

    @staticmethod
    def _map(items: Any, func) -> Any:
        if isinstance(items, list):
            return [func(item) for item in items]
        return items

    def filter_care_after_phone(self, care_after_phone: CareAfterPhoneRecord) -> CareAfterPhoneRecord:
        return self._project(care_after_phone, EntityType.CARE_AFTER_PHONE)

    def filter_care_after(self, care_after: CareAfterRecord) -> CareAfterRecord:
        filtered = self._project(care_after, EntityType.CARE_AFTER)
        if isinstance(filtered, dict):
            self._filter_blob(filtered, EntityType.CARE_AFTER, with_patterns=True)
        return filtered

    def filter_child(self, child: ChildRecord) -> ChildRecord:
        filtered = self._project(child, EntityType.CHILD)
        if isinstance(filtered, dict):
            self._filter_blob(filtered, EntityType.CHILD)
        return filtered

    def filter_birth(self, birth: BirthRecord) -> BirthRecord:
        """Filter a birth; a missing birth stays None."""
        if birth is None:
            return None

        filtered = self._project(birth, EntityType.BIRTH)
        if not isinstance(filtered, dict):
            return filtered

        self._filter_blob(filtered, EntityType.BIRTH)
        if 'children' in filtered:
            filtered['children'] = self._map(filtered['children'], self.filter_child)

        return filtered

    def filter_pregnancy(self, pregnancy: PregnancyRecord) -> PregnancyRecord:
        filtered = self._project(pregnancy, EntityType.PREGNANCY)
        if not isinstance(filtered, dict):
            return filtered

        self._filter_blob(filtered, EntityType.PREGNANCY)

        if 'birth' in filtered:
            filtered['birth'] = self.filter_birth(filtered['birth'])

        if 'cares_after' in filtered:
            filtered['cares_after'] = self._map(filtered['cares_after'], self.filter_care_after)

        if 'cares_after_phone' in filtered:
            filtered['cares_after_phone'] = self._map(
                filtered['cares_after_phone'], self.filter_care_after_phone
            )

        return filtered

    def filter_client(self, client: ClientRecord) -> ClientRecord:
        filtered = self._project(client, EntityType.CLIENT)
        if isinstance(filtered, dict) and 'pregnancies' in filtered:
            filtered['pregnancies'] = self._map(filtered['pregnancies'], self.filter_pregnancy)
        return filtered

    def filter_clients(self, clients: List[ClientRecord]) -> List[ClientRecord]:
        """Filter a list of already-validated clients."""
        return [self.filter_client(client) for client in clients]
