#!/usr/bin/env python3
"""
Generate Sample Pregnancy Data
==============================
Creates a synthetic client dataset shaped like the production export,
including personal fields the filter must remove and a share of incomplete
pregnancies the validator must skip.

Usage:
    python examples/generate_sample_data.py

    # Or with custom parameters:
    python examples/generate_sample_data.py --num-clients 5000 --output data/sample.json
"""

import argparse
import json
import random
import string
from datetime import date, timedelta
from typing import Any, Dict, List, Optional


FIRST_NAMES = ['Anna', 'Lena', 'Marie', 'Sophie', 'Laura', 'Julia', 'Sarah', 'Lisa']
LAST_NAMES = ['Müller', 'Schmidt', 'Schneider', 'Fischer', 'Weber', 'Meyer', 'Wagner']
CITIES = ['Berlin', 'Hamburg', 'München', 'Köln', 'Leipzig', 'Dresden']
BIRTH_MODES = ['spontan', 'sectio', 'vakuum', 'forceps']


class _IdSequence:
    """Monotonic ids shared by all entities of one dataset."""

    def __init__(self, start: int = 1):
        self._next = start

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value


def _random_date(rng: random.Random, start: date, days: int) -> str:
    return (start + timedelta(days=rng.randint(0, days))).isoformat()


def _timestamp(rng: random.Random) -> str:
    return f"{_random_date(rng, date(2022, 1, 1), 900)} {rng.randint(0, 23):02d}:{rng.randint(0, 59):02d}:00"


def generate_child(rng: random.Random, ids: _IdSequence, birth_id: int, pregnancy_id: int, client_id: int) -> Dict[str, Any]:
    birth_date = _random_date(rng, date(2023, 1, 1), 600)
    return {
        'id': ids.next(),
        'id_birth': birth_id,
        'name': rng.choice(FIRST_NAMES),
        'date_birth': birth_date,
        'data_encr': {
            'fields-type': 'child',
            'birth_date': birth_date,
            'birth_time': f"{rng.randint(0, 23):02d}:{rng.randint(0, 59):02d}",
            'vorname': rng.choice(FIRST_NAMES),
            'kinderarzt': f"Dr. {rng.choice(LAST_NAMES)}",
        },
        'created_at': _timestamp(rng),
        'updated_at': _timestamp(rng),
        'deleted_at': None,
        'created_by': rng.randint(1, 20),
        'updated_by': rng.randint(1, 20),
        'in_dashboard': rng.random() < 0.8,
        'pregnancy_id': pregnancy_id,
        'client_id': client_id,
    }


def generate_care_after(rng: random.Random, ids: _IdSequence, pregnancy_id: int, child_ids: List[int]) -> Dict[str, Any]:
    data_encr = {
        'stillt': rng.random() < 0.7,
        'child-tab': child_ids[0] if child_ids else None,
        'care_length': rng.randint(20, 90),
        'is_first_care': rng.random() < 0.3,
        'regelrechtes-wochenbett': rng.random() < 0.9,
        'notiz': 'Freitext mit persönlichen Angaben',
    }
    for child_id in child_ids:
        data_encr[f'kind-{child_id}-nahrung'] = rng.choice(['muttermilch', 'pre', 'gemischt'])
        data_encr[f'kind-{child_id}-physiologisches-neugeborenes'] = rng.random() < 0.9
        data_encr[f'kind-{child_id}-gewicht'] = rng.randint(2500, 4500)
    start = _random_date(rng, date(2023, 1, 1), 600)
    return {
        'id': ids.next(),
        'id_pregnancy': pregnancy_id,
        'id_user': rng.randint(1, 20),
        'data_encr': data_encr,
        'date_start': start,
        'date_end': start,
        'address': f"{rng.choice(CITIES)}, Hauptstraße {rng.randint(1, 120)}",
    }


def generate_care_after_phone(rng: random.Random, ids: _IdSequence, pregnancy_id: int) -> Dict[str, Any]:
    start = _random_date(rng, date(2023, 1, 1), 600)
    return {
        'id': ids.next(),
        'id_user': rng.randint(1, 20),
        'id_pregnancy': pregnancy_id,
        'date_start': start,
        'date_end': start,
        'is_breast_feeding': rng.random() < 0.7,
        'phone': '0' + ''.join(rng.choice(string.digits) for _ in range(10)),
    }


def generate_pregnancy(
    rng: random.Random,
    ids: _IdSequence,
    client_id: int,
    incomplete_ratio: float
) -> Dict[str, Any]:
    pregnancy_id = ids.next()
    birth_id = ids.next()
    children = [
        generate_child(rng, ids, birth_id, pregnancy_id, client_id)
        for _ in range(1 if rng.random() < 0.95 else 2)
    ]
    child_ids = [child['id'] for child in children]

    pregnancy = {
        'id': pregnancy_id,
        'id_client': client_id,
        'data_encr': {
            'fields-type': 'pregnancy',
            'egt': _random_date(rng, date(2023, 1, 1), 600),
            'grav': rng.randint(1, 5),
            'para': rng.randint(0, 4),
            'stillwunsch': rng.random() < 0.8,
            'krankenkasse': rng.choice(['AOK', 'TK', 'Barmer']),
        },
        'expected_birth_date': _random_date(rng, date(2023, 1, 1), 600),
        'birth': {
            'id': birth_id,
            'id_pregnancy': pregnancy_id,
            'data_encr': {
                'fields-type': 'birth',
                'geburts-modus': rng.choice(BIRTH_MODES),
                'blutverlust': rng.randint(100, 1200),
                'mother-entlassungdatum': _random_date(rng, date(2023, 1, 1), 600),
                'klinik': f"Klinikum {rng.choice(CITIES)}",
            },
            'children': children,
        },
        'cares_after': [
            generate_care_after(rng, ids, pregnancy_id, child_ids)
            for _ in range(rng.randint(1, 4))
        ],
        'cares_after_phone': [
            generate_care_after_phone(rng, ids, pregnancy_id)
            for _ in range(rng.randint(1, 3))
        ],
        'comment': 'Interne Notiz',
    }

    if rng.random() < incomplete_ratio:
        defect = rng.choice(['no_birth', 'no_children', 'no_cares_after', 'no_cares_after_phone'])
        if defect == 'no_birth':
            pregnancy['birth'] = None
        elif defect == 'no_children':
            pregnancy['birth']['children'] = []
        elif defect == 'no_cares_after':
            pregnancy['cares_after'] = []
        else:
            del pregnancy['cares_after_phone']

    return pregnancy


def generate_client(rng: random.Random, ids: _IdSequence, incomplete_ratio: float) -> Dict[str, Any]:
    client_id = ids.next()
    num_pregnancies = rng.choice([0, 1, 1, 1, 2, 2, 3]) if rng.random() < 0.97 else 0
    return {
        'id': client_id,
        'first_name': rng.choice(FIRST_NAMES),
        'last_name': rng.choice(LAST_NAMES),
        'email': f"client{client_id}@example.org",
        'city': rng.choice(CITIES),
        'pregnancies': [
            generate_pregnancy(rng, ids, client_id, incomplete_ratio)
            for _ in range(num_pregnancies)
        ],
    }


def generate_sample_data(
    num_clients: int = 1000,
    output_path: Optional[str] = None,
    incomplete_ratio: float = 0.2,
    seed: int = 42
) -> List[Dict[str, Any]]:
    """
    Generate a synthetic client dataset.

    Args:
        num_clients: Number of clients
        output_path: Optional JSON file to write
        incomplete_ratio: Share of pregnancies with a missing required field
        seed: Random seed

    Returns:
        List of client records
    """
    if not 0 <= incomplete_ratio <= 1:
        raise ValueError(f"incomplete_ratio must be in [0, 1], got {incomplete_ratio}")

    rng = random.Random(seed)
    ids = _IdSequence()
    clients = [generate_client(rng, ids, incomplete_ratio) for _ in range(num_clients)]

    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(clients, f, indent=2, ensure_ascii=False)
        print(f"Wrote {num_clients:,} clients to {output_path}")

    return clients


def main():
    parser = argparse.ArgumentParser(
        description="Generate a synthetic pregnancy dataset",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--num-clients', type=int, default=1000, help='Number of clients (default: 1000)')
    parser.add_argument('--output', type=str, default='data/sample_clients.json', help='Output JSON path')
    parser.add_argument('--incomplete-ratio', type=float, default=0.2,
                        help='Share of pregnancies missing a required field (default: 0.2)')
    parser.add_argument('--seed', type=int, default=42, help='Random seed (default: 42)')
    args = parser.parse_args()

    generate_sample_data(
        num_clients=args.num_clients,
        output_path=args.output,
        incomplete_ratio=args.incomplete_ratio,
        seed=args.seed,
    )


if __name__ == '__main__':
    main()
