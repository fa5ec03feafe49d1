"""GATK variant calling -- HaplotypeCaller on individual RNA-Seq BAM files.
"""
import os

from spritz import utils
from spritz.bam import ref
from spritz.log import logger

MIN_CONFIDENCE = 20


def haplotype_caller_cl(runner, align_bam, ref_file, out_file, dbsnp=None, threads=1):
    params = ["-nct", str(threads),
              "-R", runner.convert(ref_file),
              "-I", runner.convert(align_bam),
              "--standard_min_confidence_threshold_for_calling", str(MIN_CONFIDENCE),
              "-rf", "ReassignMappingQuality"]
    if dbsnp:
        params += ["--dbsnp", runner.convert(dbsnp)]
    params += ["-o", runner.convert(out_file)]
    return runner.cl_gatk("HaplotypeCaller", params)

def variant_calling(runner, ref_file, align_bam, dbsnp=None, threads=1):
    """Call variants on a prepared BAM file, returning the output VCF path.
    """
    out_file = utils.replace_suffix(align_bam, ".vcf")
    logger.info("Calling variants: %s" % os.path.basename(align_bam))
    runner.run_script("variant_calling.bash",
                      [runner.cd_work_dir()] + ref.index_commands(runner, ref_file) +
                      [haplotype_caller_cl(runner, align_bam, ref_file, out_file, dbsnp, threads)],
                      "GATK HaplotypeCaller")
    return out_file
