"""
Configuration for the ListObjects benchmark harness.

This module contains:
- Default values for the endpoint, credentials and benchmark parameters
- The immutable BenchConfig value resolved once from environment overrides
- Naming and file constants shared by the seeder, drivers and report
"""

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Tuple

from common.errors import ConfigurationError

# =============================================================================
# ENDPOINT & CREDENTIALS
# =============================================================================

DEFAULT_ENDPOINT: str = "http://localhost:9000"
DEFAULT_ACCESS_KEY: str = "rustfsadmin"
DEFAULT_SECRET_KEY: str = "rustfsadmin"
DEFAULT_REGION: str = "us-east-1"

# =============================================================================
# BENCHMARK PARAMETERS
# =============================================================================

DEFAULT_TIERS: str = "100 1000 5000 10000"
DEFAULT_NESTED_PREFIXES: int = 100
DEFAULT_BUCKET_PREFIX: str = "bench-list"

DEFAULT_HYPERFINE_RUNS: int = 10
DEFAULT_HYPERFINE_WARMUP: int = 2

DEFAULT_PAGE_SIZE: int = 1000  # S3 default page size

# =============================================================================
# SEEDING
# =============================================================================

DEFAULT_SEED_PARALLELISM: int = 32
DEFAULT_SEED_STRATEGY: str = "direct"
DEFAULT_PAYLOAD_BYTES: int = 1024

SEED_STRATEGIES: Tuple[str, ...] = ("direct", "staged")
PROGRESS_INTERVAL: int = 1000  # Log seeding progress every N objects

# =============================================================================
# LISTING CLIENT
# =============================================================================

DEFAULT_LISTING_CLIENT: str = "awscli"
LISTING_CLIENTS: Tuple[str, ...] = ("awscli", "native")

DELETE_BATCH_SIZE: int = 1000  # DeleteObjects accepts at most 1000 keys

# =============================================================================
# OUTPUT
# =============================================================================

DEFAULT_RESULTS_DIR: str = "./results"
REPORT_FILENAME: str = "report.md"

# Pattern labels double as artifact basenames: <label>.json / <label>.md
FULL_LIST_LABEL: str = "full-list"
PAGINATED_LABEL: str = "paginated"
PREFIX_LABEL: str = "prefix"
PATTERN_LABELS: Tuple[str, ...] = (FULL_LIST_LABEL, PAGINATED_LABEL, PREFIX_LABEL)


def parse_tiers(value: str) -> Tuple[int, ...]:
    """Parse a space-delimited tier list into a sorted tuple of unique positive ints."""
    tiers = set()
    for token in value.split():
        try:
            tier = int(token)
        except ValueError:
            raise ConfigurationError(f"Invalid tier {token!r}: must be an integer")
        if tier <= 0:
            raise ConfigurationError(f"Invalid tier {tier}: must be positive")
        tiers.add(tier)

    if not tiers:
        raise ConfigurationError("At least one tier is required")
    return tuple(sorted(tiers))


def _int_option(environ: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name}={raw!r} is not an integer")
    if value < minimum:
        raise ConfigurationError(f"{name}={value} must be >= {minimum}")
    return value


def _choice_option(environ: Mapping[str, str], name: str, default: str, choices: Tuple[str, ...]) -> str:
    value = environ.get(name) or default
    value = value.lower()
    if value not in choices:
        raise ConfigurationError(f"{name}={value!r} must be one of: {', '.join(choices)}")
    return value


@dataclass(frozen=True)
class BenchConfig:
    """Resolved benchmark configuration, passed to every component."""

    endpoint: str = DEFAULT_ENDPOINT
    access_key_id: str = DEFAULT_ACCESS_KEY
    secret_access_key: str = field(default=DEFAULT_SECRET_KEY, repr=False)
    region: str = DEFAULT_REGION
    tiers: Tuple[int, ...] = parse_tiers(DEFAULT_TIERS)
    nested_prefixes: int = DEFAULT_NESTED_PREFIXES
    bucket_prefix: str = DEFAULT_BUCKET_PREFIX
    runs: int = DEFAULT_HYPERFINE_RUNS
    warmup: int = DEFAULT_HYPERFINE_WARMUP
    seed_parallelism: int = DEFAULT_SEED_PARALLELISM
    seed_strategy: str = DEFAULT_SEED_STRATEGY
    payload_bytes: int = DEFAULT_PAYLOAD_BYTES
    results_dir: str = DEFAULT_RESULTS_DIR
    page_size: int = DEFAULT_PAGE_SIZE
    listing_client: str = DEFAULT_LISTING_CLIENT
    label: str = ""

    def with_tiers(self, tiers) -> "BenchConfig":
        """Return a copy with the tier set replaced (accepts ints or a string)."""
        if isinstance(tiers, str):
            return replace(self, tiers=parse_tiers(tiers))
        return replace(self, tiers=parse_tiers(" ".join(str(t) for t in tiers)))

    def ensure_results_dir(self) -> str:
        """Create the results directory if absent and return its path."""
        os.makedirs(self.results_dir, exist_ok=True)
        return self.results_dir

    def artifact_path(self, label: str, extension: str) -> str:
        return os.path.join(self.results_dir, f"{label}.{extension}")

    @property
    def report_path(self) -> str:
        return os.path.join(self.results_dir, REPORT_FILENAME)

    def subprocess_env(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Environment for trial commands so they resolve the same configuration."""
        env = dict(os.environ if base is None else base)
        env.update({
            "AWS_ACCESS_KEY_ID": self.access_key_id,
            "AWS_SECRET_ACCESS_KEY": self.secret_access_key,
            "AWS_DEFAULT_REGION": self.region,
            "S3_ENDPOINT": self.endpoint,
            "BENCH_TIERS": " ".join(str(t) for t in self.tiers),
            "BENCH_NESTED_PREFIXES": str(self.nested_prefixes),
            "BENCH_BUCKET_PREFIX": self.bucket_prefix,
            "PAGE_SIZE": str(self.page_size),
            "RESULTS_DIR": self.results_dir,
        })
        return env


def resolve_config(environ: Optional[Mapping[str, str]] = None, **overrides) -> BenchConfig:
    """Resolve the benchmark configuration from environment overrides with defaults.

    Args:
        environ: Mapping to read from (default: os.environ)
        **overrides: Field values that take precedence over the environment
            (e.g. from command-line flags). None values are ignored.

    Returns:
        Immutable BenchConfig

    Raises:
        ConfigurationError: If any option has an invalid value
    """
    if environ is None:
        environ = os.environ

    config = BenchConfig(
        endpoint=environ.get("S3_ENDPOINT") or DEFAULT_ENDPOINT,
        access_key_id=environ.get("AWS_ACCESS_KEY_ID") or DEFAULT_ACCESS_KEY,
        secret_access_key=environ.get("AWS_SECRET_ACCESS_KEY") or DEFAULT_SECRET_KEY,
        region=environ.get("AWS_DEFAULT_REGION") or DEFAULT_REGION,
        tiers=parse_tiers(environ.get("BENCH_TIERS") or DEFAULT_TIERS),
        nested_prefixes=_int_option(environ, "BENCH_NESTED_PREFIXES", DEFAULT_NESTED_PREFIXES),
        bucket_prefix=environ.get("BENCH_BUCKET_PREFIX") or DEFAULT_BUCKET_PREFIX,
        runs=_int_option(environ, "HYPERFINE_RUNS", DEFAULT_HYPERFINE_RUNS),
        warmup=_int_option(environ, "HYPERFINE_WARMUP", DEFAULT_HYPERFINE_WARMUP, minimum=0),
        seed_parallelism=_int_option(environ, "SEED_PARALLELISM", DEFAULT_SEED_PARALLELISM),
        seed_strategy=_choice_option(environ, "SEED_STRATEGY", DEFAULT_SEED_STRATEGY, SEED_STRATEGIES),
        payload_bytes=_int_option(environ, "SEED_PAYLOAD_BYTES", DEFAULT_PAYLOAD_BYTES),
        results_dir=environ.get("RESULTS_DIR") or DEFAULT_RESULTS_DIR,
        page_size=_int_option(environ, "PAGE_SIZE", DEFAULT_PAGE_SIZE),
        listing_client=_choice_option(environ, "BENCH_LISTING_CLIENT", DEFAULT_LISTING_CLIENT, LISTING_CLIENTS),
        label=environ.get("BENCH_LABEL", ""),
    )

    overrides = {k: v for k, v in overrides.items() if v is not None}
    if "tiers" in overrides:
        config = config.with_tiers(overrides.pop("tiers"))
    if "seed_strategy" in overrides and overrides["seed_strategy"] not in SEED_STRATEGIES:
        raise ConfigurationError(f"Unknown seed strategy: {overrides['seed_strategy']}")
    if "listing_client" in overrides and overrides["listing_client"] not in LISTING_CLIENTS:
        raise ConfigurationError(f"Unknown listing client: {overrides['listing_client']}")
    return replace(config, **overrides)
