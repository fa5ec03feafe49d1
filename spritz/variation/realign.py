"""Perform realignment of BAM files around indels using the GATK toolkit.
"""
import os

from spritz import utils
from spritz.bam import ref
from spritz.log import logger


def realign_files(align_bam):
    """Target intervals and realigned BAM derived from an input BAM.
    """
    return (utils.replace_suffix(align_bam, ".forIndelRealigner.intervals"),
            utils.replace_suffix(align_bam, ".realigned.bam"))

def gatk_realigner_targets(runner, align_bam, ref_file, out_file, threads=1, known_vrns=None):
    """Generate a list of interval regions for realignment around indels.
    """
    params = ["--num_threads", str(threads),
              "-R", runner.convert(ref_file),
              "-I", runner.convert(align_bam)]
    if known_vrns:
        params += ["-known", runner.convert(known_vrns)]
    params += ["-o", runner.convert(out_file)]
    return runner.cl_gatk("RealignerTargetCreator", params)

def gatk_indel_realignment_cl(runner, align_bam, ref_file, intervals, out_file, known_vrns=None):
    """Prepare input arguments for GATK indel realignment.

    IndelRealigner does not support multiple threads.
    """
    params = ["-R", runner.convert(ref_file),
              "-I", runner.convert(align_bam)]
    if known_vrns:
        params += ["-known", runner.convert(known_vrns)]
    params += ["-targetIntervals", runner.convert(intervals),
               "-o", runner.convert(out_file)]
    return runner.cl_gatk("IndelRealigner", params)

def realign_indels(runner, ref_file, align_bam, threads=1, known_vrns=None):
    """Realign reads around indels, returning the realigned BAM path.
    """
    intervals, out_bam = realign_files(align_bam)
    logger.info("Realigning indels: %s" % os.path.basename(align_bam))
    runner.run_script("realign_indels.bash",
                      [runner.cd_work_dir()] + ref.index_commands(runner, ref_file) +
                      [gatk_realigner_targets(runner, align_bam, ref_file, intervals, threads, known_vrns),
                       gatk_indel_realignment_cl(runner, align_bam, ref_file, intervals, out_bam,
                                                 known_vrns)],
                      "GATK RealignerTargetCreator and IndelRealigner")
    return out_bam
