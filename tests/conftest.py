import contextlib
import dataclasses
import io
from typing import Any, Callable, Sequence

import pytest

import dcflags
from dcflags import _strings


@dataclasses.dataclass(frozen=True)
class CliResult:
    exit_code: int
    stdout: str
    stderr: str


@pytest.fixture
def run_cli() -> Callable[..., CliResult]:
    """Run `dcflags.cli()` until it exits, capturing its (uncolored) output."""

    def run(schema: Any, args: Sequence[str], **kwargs: Any) -> CliResult:
        stdout = io.StringIO()
        stderr = io.StringIO()
        with pytest.raises(SystemExit) as e:
            with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(
                stderr
            ):
                dcflags.cli(schema, args=args, prog="app", **kwargs)
        return CliResult(
            exit_code=e.value.code,  # type: ignore
            stdout=_strings.strip_ansi_sequences(stdout.getvalue()),
            stderr=_strings.strip_ansi_sequences(stderr.getvalue()),
        )

    return run
