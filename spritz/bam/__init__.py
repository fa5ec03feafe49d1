"""Functionality to query and extract information from aligned BAM files.
"""
import collections
import os

from spritz import utils
from spritz.bam import ref
from spritz.log import logger

SORTED_MARKER = "header_sorted.txt"
READGROUP_MARKER = "header_readgrouped.txt"

HeaderStatus = collections.namedtuple("HeaderStatus", ["sorted", "grouped"])


def header_check_commands(runner, in_bam, sorted_marker, grouped_marker):
    """Probe commands writing header lines of interest to marker files.

    A marker file with content means the BAM header has the feature.
    """
    view = runner.cl_samtools("view", ["-H", runner.convert(in_bam)])
    return ["%s | grep SO:coordinate > %s" % (view, runner.convert(sorted_marker)),
            "%s | grep '^@RG' > %s" % (view, runner.convert(grouped_marker))]

def check_header(runner, in_bam):
    """Check whether a BAM is coordinate sorted and has read groups.
    """
    sorted_marker = os.path.join(runner.work_dir, SORTED_MARKER)
    grouped_marker = os.path.join(runner.work_dir, READGROUP_MARKER)
    runner.run_script("check_sorted.bash",
                      [runner.cd_work_dir()] +
                      header_check_commands(runner, in_bam, sorted_marker, grouped_marker),
                      "Check header: %s" % os.path.basename(in_bam))
    status = HeaderStatus(utils.file_exists(sorted_marker), utils.file_exists(grouped_marker))
    for marker in [sorted_marker, grouped_marker]:
        utils.remove_safe(marker)
    logger.debug("%s sorted: %s, read grouped: %s" % (os.path.basename(in_bam), status.sorted,
                                                       status.grouped))
    return status

def index(runner, in_bam):
    return runner.cl_samtools("index", [runner.convert(in_bam)])

def subset_bam(runner, in_bam, ref_file, region, out_bam, threads=1):
    """Extract reads in a genome region into a new BAM file with GATK.
    """
    logger.info("Subset %s to %s" % (os.path.basename(in_bam), region))
    params = ["-nct", str(threads),
              "-R", runner.convert(ref_file),
              "-I", runner.convert(in_bam),
              "-o", runner.convert(out_bam),
              "-L", region]
    runner.run_script("subset_bam.bash",
                      [runner.cd_work_dir()] + ref.index_commands(runner, ref_file) +
                      [runner.cl_gatk("PrintReads", params)],
                      "GATK PrintReads subset")
    return out_bam
