"""
JSON Client Record Reader.

Reads the full client dataset into memory. The root of the document must be
an array of client objects; anything else is a fatal input error.
"""

import json
import logging
import os
from typing import Any, List


logger = logging.getLogger(__name__)


class JsonRecordReader:
    """
    Reads a client dataset from a JSON file.

    Errors:
    - FileNotFoundError: input path does not exist
    - ValueError: content is not valid JSON, or the root is not an array
    - OSError: file exists but cannot be read
    """

    def __init__(self, input_path: str, encoding: str = 'utf-8'):
        """
        Initialize reader.

        Args:
            input_path: Path to the input JSON document
            encoding: File encoding
        """
        self.input_path = input_path
        self.encoding = encoding

    def read_raw(self) -> Any:
        """Parse the document without checking its shape."""
        if not os.path.exists(self.input_path):
            raise FileNotFoundError(f"Input file not found: {self.input_path}")

        size_mb = os.path.getsize(self.input_path) / (1024 ** 2)
        logger.info(f"Reading input file: {self.input_path} ({size_mb:.2f} MB)")

        with open(self.input_path, 'r', encoding=self.encoding) as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Input file is not valid JSON: {self.input_path}: {e}") from e

    def read(self) -> List[Any]:
        """
        Read and return the list of client records.

        Returns:
            Client records in input order
        """
        data = self.read_raw()
        if not isinstance(data, list):
            raise ValueError(
                f"Input data must be an array of clients, got {type(data).__name__}"
            )

        logger.info(f"Read {len(data):,} client records")
        return data
