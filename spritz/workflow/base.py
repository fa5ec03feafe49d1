"""Timed execution of a pipeline stage.

A stage runs its body and, when that returns normally, writes results.txt
with the version and elapsed wall clock time. Failures come back as a
WorkflowResult carrying the original exception and leave no results file;
the caller decides how to report them.
"""
import abc
import collections
import datetime
import enum
import os
import re
import time

from spritz import utils
from spritz.log import logger
from spritz.pipeline import version

RESULTS_FILE = "results.txt"


class WorkflowType(enum.Enum):
    FASTQ2PROTEINS = "fastq2proteins"
    LNCRNA_DISCOVERY = "lncrna_discovery"


class WorkflowResult(collections.namedtuple("WorkflowResult",
                                            ["workflow_type", "summary_file", "elapsed", "error"])):
    """Outcome of a stage: a summary file and elapsed time, or the error raised.
    """
    @property
    def succeeded(self):
        return self.error is None

    def raise_for_error(self):
        """Re-raise the stage's original exception, if any.
        """
        if self.error is not None:
            raise self.error
        return self


class SpritzFlow(abc.ABC):
    """Base for pipeline stages; subclasses implement `run_specific`.
    """
    def __init__(self, workflow_type):
        self.workflow_type = workflow_type

    def run_task(self, output_folder, genome_fastas, gene_sets, rnaseq_files, display_name=None):
        """Run the stage, timing it and writing results.txt on success.
        """
        label = display_name or self.workflow_type.value
        logger.info("Starting %s" % label)
        start = time.monotonic()
        try:
            self.run_specific(output_folder, genome_fastas, gene_sets, rnaseq_files)
        except Exception as e:
            elapsed = _elapsed(start)
            logger.debug("%s stopped after %s: %s" % (label, elapsed, e))
            return WorkflowResult(self.workflow_type, None, elapsed, e)
        elapsed = _elapsed(start)
        summary_file = write_summary(output_folder, elapsed)
        logger.info("Finished %s in %s" % (label, elapsed))
        return WorkflowResult(self.workflow_type, summary_file, elapsed, None)

    @abc.abstractmethod
    def run_specific(self, output_folder, genome_fastas, gene_sets, rnaseq_files):
        pass


def _elapsed(start):
    return datetime.timedelta(seconds=time.monotonic() - start)

def write_summary(output_folder, elapsed):
    utils.safe_makedir(output_folder)
    out_file = os.path.join(output_folder, RESULTS_FILE)
    with open(out_file, "w") as out_handle:
        out_handle.write("Spritz: version %s\n" % version.__version__)
        out_handle.write(str(elapsed))
    return out_file

_timedelta_re = re.compile(r"^(?:(?P<days>-?\d+) days?, )?(?P<hours>\d+):(?P<minutes>\d{2}):"
                           r"(?P<seconds>\d{2}(?:\.\d+)?)$")

def read_summary(summary_file):
    """Retrieve the version label and elapsed time from a results file.
    """
    with open(summary_file) as in_handle:
        label = in_handle.readline().strip()
        elapsed = in_handle.readline().strip()
    m = _timedelta_re.match(elapsed)
    if not m:
        raise ValueError("Unexpected elapsed time in %s: %s" % (summary_file, elapsed))
    return label, datetime.timedelta(days=int(m.group("days") or 0),
                                     hours=int(m.group("hours")),
                                     minutes=int(m.group("minutes")),
                                     seconds=float(m.group("seconds")))
