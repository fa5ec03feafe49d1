"""Command line wrappers around GATK, Picard and samtools for RNA-Seq variant calling.
"""
