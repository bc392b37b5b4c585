"""
Distribution Serializer

Versioned dump/parse of a built tree, address lookup, and file IO.
"""
from .distribution import (
    DumpValue,
    DistributionDump,
    DistributionEntry,
    Distribution,
)
from .io import (
    DistributionIOError,
    dump_json,
    save_distribution,
    load_distribution,
    read_allocations_file,
)

__all__ = [
    "DumpValue",
    "DistributionDump",
    "DistributionEntry",
    "Distribution",
    "DistributionIOError",
    "dump_json",
    "save_distribution",
    "load_distribution",
    "read_allocations_file",
]
