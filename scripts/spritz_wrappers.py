#!/usr/bin/env python -Es
"""Run GATK, Picard and samtools wrappers for RNA-Seq variant calling.

Each step writes a bash script into <workdir>/scripts/ and runs it, so the
exact commands can be inspected and rerun by hand.

Usage:
  spritz_wrappers.py install [--skip-system] [--workdir DIR]
  spritz_wrappers.py prepare-bam <bam> <ref_file>
  spritz_wrappers.py realign <bam> <ref_file> [--known-sites VCF]
  spritz_wrappers.py recalibrate <bam> <ref_file> [--known-sites VCF]
  spritz_wrappers.py call <bam> <ref_file> [--dbsnp VCF]
  spritz_wrappers.py known-sites <target_dir> <ref_file> --genome-build GRCh38
  spritz_wrappers.py subset-bam <bam> <ref_file> <region> <out_bam>
  spritz_wrappers.py run <output_dir> <ref_file> <bam> [<bam> ...]

Common options: -c/--config YAML, --workdir DIR, -t/--threads N
"""
from spritz.pipeline import main

if __name__ == "__main__":
    main.main()
