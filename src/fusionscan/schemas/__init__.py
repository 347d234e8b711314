import collections.abc
import os
from typing import Dict

from snakemake.utils import validate as snakemake_validate

SCHEMA_FILE = os.path.join(os.path.dirname(__file__), 'config.json')


class ImmutableDict(collections.abc.Mapping):
    def __init__(self, data):
        self._data = data

    def __getitem__(self, key):
        return self._data[key]

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)


def validate_config(config: Dict) -> Dict:
    """
    check the config against the schema and fill in any missing default values (in place)
    """
    snakemake_validate(config, SCHEMA_FILE, set_default=True)
    return config


DEFAULTS = ImmutableDict(validate_config({}))
