"""
Builders for the shell commands timed in each trial.

Two listing clients are supported: the aws CLI (s3api list-objects-v2) and
this project's own probe subcommand, which runs the async listing code in
systems/base.py. Drivers only depend on the TrialCommandBuilder interface.
"""

import shlex
import sys

from common.layout import DELIMITER
from configuration import BenchConfig

NULL_OUTPUT = "> /dev/null"
# Prints "<IsTruncated>\t<NextContinuationToken>" for one page in text output
PAGE_STATE_QUERY = "[IsTruncated, NextContinuationToken]"


class TrialCommandBuilder:
    """Produces one shell command per logical listing operation."""

    name = "base"

    def full_list(self, bucket: str, tier: int) -> str:
        raise NotImplementedError

    def paginated(self, bucket: str, page_size: int) -> str:
        raise NotImplementedError

    def prefix_filter(self, bucket: str, prefix: str) -> str:
        raise NotImplementedError

    def delimiter(self, bucket: str, delimiter: str = DELIMITER) -> str:
        raise NotImplementedError


class AwsCliCommandBuilder(TrialCommandBuilder):
    """aws s3api list-objects-v2 commands against the configured endpoint."""

    name = "awscli"

    def __init__(self, endpoint: str, executable: str = "aws"):
        self.endpoint = endpoint
        self.executable = executable

    def _request(self, bucket: str, *options: str) -> str:
        parts = [
            self.executable, "s3api",
            "--endpoint-url", shlex.quote(self.endpoint),
            "--no-cli-pager",
            "list-objects-v2",
            "--bucket", shlex.quote(bucket),
        ]
        parts += list(options)
        return " ".join(parts)

    def _list(self, bucket: str, *options: str) -> str:
        return " ".join([self._request(bucket, *options), "--output", "json", NULL_OUTPUT])

    def full_list(self, bucket: str, tier: int) -> str:
        return self._list(bucket, "--max-items", str(tier))

    def paginated(self, bucket: str, page_size: int) -> str:
        """Shell loop issuing one request per page until the listing is exhausted.

        Passing --max-keys or --continuation-token disables the CLI's own
        paginator, so each invocation is exactly one ListObjectsV2 call.
        """
        page = self._request(
            bucket,
            "--max-keys", str(page_size),
            "--query", shlex.quote(PAGE_STATE_QUERY),
            "--output", "text",
        )
        return (
            "set -f; token=''; while :; do "
            f'if [ -z "$token" ]; then out=$({page}) || exit 1; '
            f'else out=$({page} --continuation-token "$token") || exit 1; fi; '
            'set -- $out; '
            '[ "$1" = True ] && [ -n "$2" ] && [ "$2" != None ] || break; '
            'token=$2; done'
        )

    def prefix_filter(self, bucket: str, prefix: str) -> str:
        return self._list(bucket, "--prefix", shlex.quote(prefix))

    def delimiter(self, bucket: str, delimiter: str = DELIMITER) -> str:
        return self._list(bucket, "--delimiter", shlex.quote(delimiter))


class NativeCommandBuilder(TrialCommandBuilder):
    """`python -m listbench probe ...` commands (aioboto3 listing loop)."""

    name = "native"

    def __init__(self, python: str = sys.executable, module: str = "listbench"):
        self.python = python
        self.module = module

    def _probe(self, operation: str, bucket: str, *options: str) -> str:
        parts = [shlex.quote(self.python), "-m", self.module, "probe", operation,
                 "--bucket", shlex.quote(bucket)]
        parts += list(options)
        parts.append(NULL_OUTPUT)
        return " ".join(parts)

    def full_list(self, bucket: str, tier: int) -> str:
        return self._probe("list", bucket, "--limit", str(tier))

    def paginated(self, bucket: str, page_size: int) -> str:
        return self._probe("paginate", bucket, "--page-size", str(page_size))

    def prefix_filter(self, bucket: str, prefix: str) -> str:
        return self._probe("prefix", bucket, "--prefix", shlex.quote(prefix))

    def delimiter(self, bucket: str, delimiter: str = DELIMITER) -> str:
        return self._probe("delimiter", bucket, "--delimiter", shlex.quote(delimiter))


def create_command_builder(config: BenchConfig) -> TrialCommandBuilder:
    """Create the command builder selected by config.listing_client."""
    if config.listing_client == "awscli":
        return AwsCliCommandBuilder(config.endpoint)
    if config.listing_client == "native":
        return NativeCommandBuilder()
    raise ValueError(f"Unsupported listing client: {config.listing_client}")
