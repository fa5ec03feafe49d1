"""Convenience functions for building common Picard commandlines.

Paths are translated to the shell's form here; callers pass host paths.
"""
import os

from spritz.pipeline import config_utils


def picard_fix_rgs(picard, in_bam, out_bam, sort=False):
    """Add read group information to BAM files, optionally coordinate sorting.
    """
    names = config_utils.get_read_group(picard.config)
    opts = [("PU", names["pu"]),
            ("PL", names["pl"]),
            ("SM", names["sm"]),
            ("LB", names["lb"]),
            ("I", picard.convert(in_bam)),
            ("O", picard.convert(out_bam))]
    if sort:
        opts.append(("SO", "coordinate"))
    return picard.cl_picard("AddOrReplaceReadGroups", opts)

def picard_sort(picard, in_bam, out_bam, sort_order="coordinate"):
    """Sort a BAM file by coordinates.
    """
    opts = [("SO", sort_order),
            ("I", picard.convert(in_bam)),
            ("O", picard.convert(out_bam))]
    return picard.cl_picard("SortSam", opts)

def picard_mark_duplicates(picard, in_bam, out_bam, metrics_file, assume_sorted=True):
    opts = [("I", picard.convert(in_bam)),
            ("O", picard.convert(out_bam)),
            ("M", picard.convert(metrics_file))]
    if assume_sorted:
        opts.append(("AS", "true"))
    return picard.cl_picard("MarkDuplicates", opts)

def picard_index_ref(picard, ref_file):
    """Provide a Picard style dict index commandline for a reference genome.
    """
    dict_file = "%s.dict" % os.path.splitext(ref_file)[0]
    opts = [("R", picard.convert(ref_file)),
            ("O", picard.convert(dict_file))]
    return picard.cl_picard("CreateSequenceDictionary", opts)

def picard_sort_vcf(picard, in_vcf, out_vcf, seq_dict=None):
    """Sort a VCF to match the reference sequence dictionary ordering.
    """
    opts = [("I", picard.convert(in_vcf)),
            ("O", picard.convert(out_vcf))]
    if seq_dict:
        opts.append(("SEQUENCE_DICTIONARY", picard.convert(seq_dict)))
    return picard.cl_picard_jar("SortVcf", opts)
