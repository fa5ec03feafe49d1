"""Manipulation functionality to deal with reference files.

Indexes are only built when missing, so these return an empty list when
there is nothing to do.
"""
import os

from spritz.broad import picardrun


def fasta_index_file(ref_file):
    return ref_file + ".fai"

def dict_file(ref_file):
    return "%s.dict" % os.path.splitext(ref_file)[0]

def fasta_index_commands(runner, ref_file):
    """Retrieve samtools style fasta index commands.
    """
    if os.path.exists(fasta_index_file(ref_file)):
        return []
    return [runner.cl_samtools("faidx", [runner.convert(ref_file)])]

def sequence_dictionary_commands(runner, ref_file):
    if os.path.exists(dict_file(ref_file)):
        return []
    return [picardrun.picard_index_ref(runner, ref_file)]

def index_commands(runner, ref_file):
    """Commands producing both the .fai and .dict indexes GATK needs.
    """
    return fasta_index_commands(runner, ref_file) + sequence_dictionary_commands(runner, ref_file)
