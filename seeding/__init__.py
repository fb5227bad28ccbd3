"""
Corpus seeding strategies.
"""

from configuration import BenchConfig
from seeding.base import CorpusSeeder, SeedReport
from seeding.direct import DirectWriteSeeder
from seeding.staged import StagedSyncSeeder

SEEDERS = {
    DirectWriteSeeder.strategy: DirectWriteSeeder,
    StagedSyncSeeder.strategy: StagedSyncSeeder,
}


def create_seeder(config: BenchConfig, storage, **kwargs) -> CorpusSeeder:
    """Create the seeder selected by config.seed_strategy."""
    try:
        seeder_class = SEEDERS[config.seed_strategy]
    except KeyError:
        raise ValueError(f"Unsupported seed strategy: {config.seed_strategy}")
    return seeder_class(config, storage, **kwargs)


__all__ = ['CorpusSeeder', 'SeedReport', 'DirectWriteSeeder', 'StagedSyncSeeder', 'create_seeder']
