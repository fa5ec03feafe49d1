"""Prepare RNA-Seq alignments for GATK variant calling.

Follows the GATK 3 RNA-Seq best practices: add read groups and coordinate
sort where needed, mark duplicates, split reads spanning introns
(SplitNCigarReads) and reassign the STAR/TopHat mapping qualities of 255 to
60 so the GATK tools do not discard them.

Intermediate BAMs are removed inside the scripts, but only once the next
file in the chain exists, so a failing step leaves its input in place.
"""
import os

from spritz import bam, utils
from spritz.bam import ref
from spritz.broad import picardrun
from spritz.log import logger

FIX_QUALS_FLAG = "-fixMisencodedQuals"


def group_sort_command(runner, in_bam, is_sorted, is_grouped):
    """Choose the Picard command adding read groups and/or sorting an input BAM.

    Returns the command and the BAM it writes. The command is None for BAMs
    that are already sorted and read grouped.
    """
    if is_sorted and is_grouped:
        return None, in_bam
    elif not is_grouped:
        out_bam = utils.replace_suffix(in_bam, ".grouped.bam" if is_sorted else ".sorted.grouped.bam")
        return picardrun.picard_fix_rgs(runner, in_bam, out_bam, sort=not is_sorted), out_bam
    else:
        out_bam = utils.replace_suffix(in_bam, ".sorted.bam")
        return picardrun.picard_sort(runner, in_bam, out_bam), out_bam

def prep_files(group_sort_bam):
    """Names of the files derived from a sorted, read grouped BAM.
    """
    marked_bam = utils.replace_suffix(group_sort_bam, ".marked.bam")
    metrics = utils.replace_suffix(group_sort_bam, ".marked.metrics")
    split_bam = utils.replace_suffix(marked_bam, ".split.bam")
    mapq_bam = utils.replace_suffix(split_bam, ".mapqfixed.bam")
    return marked_bam, metrics, split_bam, mapq_bam

def remove_if_exists(runner, check_file, to_remove):
    """Shell line removing files once check_file is present.
    """
    return "if [ -f %s ]; then rm -f %s; fi" % (runner.convert(check_file),
                                                 " ".join(runner.convert(x) for x in to_remove))

def split_reads_cl(runner, ref_file, in_bam, out_bam, fix_quals=True):
    """SplitNCigarReads commandline, by default fixing misencoded quality scores.

    -fixMisencodedQuals subtracts 31 from every quality score, which is right for
    older Illumina 1.5+ encodings and fails on correctly encoded reads.
    """
    params = ["-R", runner.convert(ref_file),
              "-I", runner.convert(in_bam),
              "-o", runner.convert(out_bam),
              "-U", "ALLOW_N_CIGAR_READS"]
    if fix_quals:
        params.append(FIX_QUALS_FLAG)
    return runner.cl_gatk("SplitNCigarReads", params)

def split_reads_fallback(runner, ref_file, in_bam, out_bam):
    """Rerun SplitNCigarReads without -fixMisencodedQuals if the first attempt left no output.

    A missing output cannot be told apart: correctly encoded qualities and any
    other SplitNCigarReads failure look the same from here. We retry exactly
    once and report the ambiguity.
    """
    if os.path.exists(out_bam):
        return out_bam
    logger.warning("SplitNCigarReads with %s did not produce %s. Retrying once without it. "
                   "This is expected for correctly encoded quality scores, but the first "
                   "attempt may also have failed for another reason; check its output."
                   % (FIX_QUALS_FLAG, os.path.basename(out_bam)))
    runner.run_script("split_fallback.bash",
                      [runner.cd_work_dir(), split_reads_cl(runner, ref_file, in_bam, out_bam, fix_quals=False)],
                      "GATK SplitNCigarReads without %s" % FIX_QUALS_FLAG)
    if not os.path.exists(out_bam):
        logger.warning("SplitNCigarReads did not produce %s" % out_bam)
    return out_bam

def reassign_mapq_cl(runner, ref_file, in_bam, out_bam):
    params = ["-R", runner.convert(ref_file),
              "-I", runner.convert(in_bam),
              "-o", runner.convert(out_bam),
              "-rf", "ReassignMappingQuality"]
    return runner.cl_gatk("PrintReads", params)

def prepare_bam(runner, in_bam, ref_file):
    """Group, sort and mark duplicates with Picard, then split and fix mapping qualities with GATK.

    Returns the path of the prepared BAM, or the input BAM when its header
    shows it is already coordinate sorted with read groups.
    """
    status = bam.check_header(runner, in_bam)
    group_sort, group_sort_bam = group_sort_command(runner, in_bam, status.sorted, status.grouped)
    if group_sort is None:
        logger.info("%s is already sorted and read grouped" % os.path.basename(in_bam))
        return in_bam
    marked_bam, metrics, split_bam, mapq_bam = prep_files(group_sort_bam)
    logger.info("Preparing %s for variant calling" % os.path.basename(in_bam))
    runner.run_script("picard.bash",
                      [runner.cd_work_dir(),
                       group_sort,
                       picardrun.picard_mark_duplicates(runner, group_sort_bam, marked_bam, metrics),
                       remove_if_exists(runner, marked_bam, [group_sort_bam])] +
                      ref.index_commands(runner, ref_file) +
                      [bam.index(runner, marked_bam),
                       split_reads_cl(runner, ref_file, marked_bam, split_bam)],
                      "Picard group, sort and mark duplicates")
    split_reads_fallback(runner, ref_file, marked_bam, split_bam)
    runner.run_script("mapq.bash",
                      [runner.cd_work_dir(),
                       remove_if_exists(runner, split_bam,
                                        [marked_bam, marked_bam + ".bai",
                                         utils.replace_suffix(marked_bam, ".bai")]),
                       reassign_mapq_cl(runner, ref_file, split_bam, mapq_bam),
                       bam.index(runner, mapq_bam),
                       remove_if_exists(runner, mapq_bam, [split_bam])],
                      "GATK PrintReads reassign mapping quality")
    return mapq_bam
