"""
JSON Writer for the filtered dataset.

Output is a pretty-printed JSON array. Keys keep the order produced by the
projection, so runs over the same input are byte-identical and diffable.
"""

import json
from typing import Any, List


class JsonWriter:
    """Serializes filtered client records."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def render(self, records: List[Any]) -> str:
        """Serialize records to JSON text."""
        return json.dumps(records, indent=self.indent, ensure_ascii=self.ensure_ascii)
