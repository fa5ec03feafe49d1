"""Perform quality score recalibration with the GATK toolkit.

Corrects read quality scores post-alignment to provide improved estimates of
error rates based on alignments to the reference genome. This step produces
the table of covariates; BaseRecalibrator does not support multiple threads
in GATK 3.
"""
import os

from spritz import utils
from spritz.bam import ref
from spritz.log import logger


def _gatk_base_recalibrator(runner, align_bam, ref_file, out_file, dbsnp_file=None):
    params = ["-R", runner.convert(ref_file),
              "-I", runner.convert(align_bam)]
    if dbsnp_file:
        params += ["-knownSites", runner.convert(dbsnp_file)]
    params += ["-o", runner.convert(out_file)]
    return runner.cl_gatk("BaseRecalibrator", params)

def base_recalibration(runner, ref_file, align_bam, known_vrns=None):
    """Create the base recalibration table for a BAM file, returning its path.
    """
    out_file = utils.replace_suffix(align_bam, ".recaltable")
    if not known_vrns:
        logger.info("No known sites for BaseRecalibrator on %s; running without -knownSites"
                    % os.path.basename(align_bam))
    runner.run_script("base_recalibration.bash",
                      [runner.cd_work_dir()] + ref.index_commands(runner, ref_file) +
                      [_gatk_base_recalibrator(runner, align_bam, ref_file, out_file, known_vrns)],
                      "GATK BaseRecalibrator")
    return out_file
