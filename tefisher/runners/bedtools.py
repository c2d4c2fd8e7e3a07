# tefisher/runners/bedtools.py
from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from tefisher.errors import ConfigurationError, FisherRunError
from tefisher.formats import bed as fmt_bed
from tefisher.formats.bed import IntervalRecord

logger = logging.getLogger(__name__)

STDERR_TAIL_LINES = 200


@dataclass(frozen=True)
class RawReport:
    stdout: str
    stderr: str = ""
    returncode: int = 0
    cmd: Tuple[str, ...] = ()


class OverlapRunner(Protocol):
    def run(self, genome_file: str, regions_file: str, family_file: str) -> RawReport: ...


@dataclass(slots=True)
class BedtoolsFisherOptions:
    # Executable name (override with an absolute path if needed)
    exe: str = "bedtools"

    # Seconds; None waits forever
    timeout: Optional[float] = None

    # Anything else to pass straight through (e.g. "-f", "0.5")
    extra_args: Sequence[str] = field(default_factory=tuple)

    # Pre-flight validation toggle
    validate_inputs: bool = True

    def build_cmd(self, genome_file: str, regions_file: str, family_file: str) -> List[str]:
        # regions are the query (-a); the family is the db side (-b)
        cmd: List[str] = [
            self.exe, "fisher",
            "-a", regions_file,
            "-b", family_file,
            "-g", genome_file,
        ]
        if self.extra_args:
            cmd.extend(list(self.extra_args))
        return cmd


# ---------------------------
# Pre-flight validation
# ---------------------------

def _require_file(path: str, what: str, exc: type = ConfigurationError) -> None:
    if not (path and os.path.isfile(path)):
        raise exc(f"{what} not found: {path!r}")


def require_executable(exe: str) -> str:
    found = shutil.which(exe)
    if not found:
        raise ConfigurationError(
            f"Executable {exe!r} not found on PATH. "
            "Install bedtools or pass an absolute path with --bedtools."
        )
    return found


# ---------------------------
# Runner
# ---------------------------

class BedtoolsFisher:
    """Runs `bedtools fisher` once per call and returns its captured output."""

    def __init__(self, opts: Optional[BedtoolsFisherOptions] = None):
        self.opts = opts or BedtoolsFisherOptions()
        if self.opts.validate_inputs:
            require_executable(self.opts.exe)

    def run(self, genome_file: str, regions_file: str, family_file: str) -> RawReport:
        if self.opts.validate_inputs:
            _require_file(genome_file, "Genome file", FisherRunError)
            _require_file(regions_file, "Region BED", FisherRunError)
            _require_file(family_file, "Family BED", FisherRunError)

        cmd = self.opts.build_cmd(genome_file, regions_file, family_file)
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            raise FisherRunError(f"could not start {shlex.join(cmd)}: {e}") from e

        try:
            out, err = proc.communicate(timeout=self.opts.timeout)
        except subprocess.TimeoutExpired as e:
            proc.kill()
            proc.communicate()
            raise FisherRunError(
                f"{self.opts.exe} fisher timed out after {self.opts.timeout}s.\n"
                f"Command: {shlex.join(cmd)}"
            ) from e

        if proc.returncode != 0:
            tail_lines = err.splitlines()[-STDERR_TAIL_LINES:]
            tail = "\n".join(tail_lines)
            raise FisherRunError(
                f"{self.opts.exe} fisher exited with code {proc.returncode}.\n"
                f"Command: {shlex.join(cmd)}\n"
                f"stderr (last {len(tail_lines)} lines):\n{tail or '<empty>'}"
            )
        return RawReport(stdout=out, stderr=err, returncode=proc.returncode, cmd=tuple(cmd))


def run_overlap_test(
    runner: OverlapRunner,
    genome_file: str,
    regions_file: str,
    subject_records: Iterable[IntervalRecord],
    workfile: str,
) -> RawReport:
    """
    Materialize `subject_records` into `workfile`, run the test, and remove
    `workfile` on every exit path.
    """
    try:
        fmt_bed.encode(subject_records, sink=workfile)
        report = runner.run(genome_file, regions_file, workfile)
    finally:
        try:
            os.remove(workfile)
        except FileNotFoundError:
            pass
    if report.stderr:
        logger.debug("stderr from %s:\n%s", os.path.basename(workfile), report.stderr.rstrip())
    return report
