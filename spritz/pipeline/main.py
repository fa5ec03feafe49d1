"""Main entry point for running the wrappers from the command line.

Each subcommand runs one wrapper (or the full variant calling workflow) and
prints the path(s) it produces.
"""
import argparse
import os
import sys

from spritz import bam, broad, install, log, utils
from spritz.log import logger
from spritz.pipeline import config_utils, version
from spritz.provenance import do
from spritz.variation import bamprep, gatk, knownsites, realign, recalibrate
from spritz.workflow import variants


def _add_common(parser):
    parser.add_argument("-c", "--config", help="YAML configuration file overriding the defaults")
    parser.add_argument("--workdir", default=None,
                        help=("Directory with tool jars, ChromosomeMappings and scripts/. "
                              "Defaults to current working directory"))
    parser.add_argument("-t", "--threads", type=int, default=1,
                        help="Threads for GATK tools that support them")
    return parser

def parse_cl_args(in_args):
    description = "Run GATK, Picard and samtools wrappers for RNA-Seq variant calling."
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("-v", "--version", action="version", version=version.__version__)
    subparsers = parser.add_subparsers(dest="command", help="spritz wrapper commands")
    subparsers.required = True

    p = _add_common(subparsers.add_parser("install", help="Install dependencies and GATK/Picard"))
    p.add_argument("--skip-system", action="store_true", default=False,
                   help="Only install GATK, Picard and chromosome mappings")

    p = _add_common(subparsers.add_parser("prepare-bam", help="Group, sort, mark duplicates and split reads"))
    p.add_argument("bam")
    p.add_argument("ref_file")

    for name, help_str in [("realign", "Realign reads around indels"),
                           ("recalibrate", "Create base recalibration table")]:
        p = _add_common(subparsers.add_parser(name, help=help_str))
        p.add_argument("bam")
        p.add_argument("ref_file")
        p.add_argument("--known-sites", help="VCF of known variant sites")

    p = _add_common(subparsers.add_parser("call", help="Call variants with HaplotypeCaller"))
    p.add_argument("bam")
    p.add_argument("ref_file")
    p.add_argument("--dbsnp", help="dbSNP VCF")

    p = _add_common(subparsers.add_parser("known-sites", help="Download and remap dbSNP known sites"))
    p.add_argument("target_dir")
    p.add_argument("ref_file")
    p.add_argument("--genome-build", choices=["GRCh37", "GRCh38"], required=True)
    p.add_argument("--all-variants", action="store_true", default=False,
                   help="Download all variants instead of common variants only")

    p = _add_common(subparsers.add_parser("subset-bam", help="Extract reads in a region"))
    p.add_argument("bam")
    p.add_argument("ref_file")
    p.add_argument("region")
    p.add_argument("out_bam")

    p = _add_common(subparsers.add_parser("run", help="Run variant calling on aligned BAM files"))
    p.add_argument("output_dir")
    p.add_argument("ref_file")
    p.add_argument("bams", nargs="+")
    p.add_argument("--genome-build", choices=["GRCh37", "GRCh38"], default=None,
                   help="Genome build for dbSNP known sites; skipped if not set")
    p.add_argument("--all-variants", action="store_true", default=False,
                   help="Use all dbSNP variants instead of common variants only")
    p.add_argument("--name", help="Name to report for the run")
    return parser.parse_args(in_args)

def _abspath(fname):
    return os.path.abspath(fname) if fname else fname

def run_main(args):
    """Dispatch a parsed commandline, returning the process exit code.
    """
    workdir = utils.safe_makedir(os.path.abspath(args.workdir or os.getcwd()))
    config = config_utils.load_config(args.config, work_dir=workdir)
    if not config.get("log_dir"):
        config["log_dir"] = os.path.join(workdir, log.DEFAULT_LOG_DIR)
    log.setup_local_logging(config)
    if not do.check_bash_setup(config):
        logger.error("bash not found; set shell: bash: in the configuration")
        return 1
    runner = broad.runner_from_config(config)
    if args.command == "install":
        if not args.skip_system:
            install.install_dependencies(config)
        install.install_gatk(config)
        return 0
    elif args.command == "prepare-bam":
        out = bamprep.prepare_bam(runner, _abspath(args.bam), _abspath(args.ref_file))
    elif args.command == "realign":
        out = realign.realign_indels(runner, _abspath(args.ref_file), _abspath(args.bam),
                                     args.threads, _abspath(args.known_sites))
    elif args.command == "recalibrate":
        out = recalibrate.base_recalibration(runner, _abspath(args.ref_file), _abspath(args.bam),
                                             _abspath(args.known_sites))
    elif args.command == "call":
        out = gatk.variant_calling(runner, _abspath(args.ref_file), _abspath(args.bam),
                                   _abspath(args.dbsnp), args.threads)
    elif args.command == "known-sites":
        out = knownsites.download_known_sites(runner, _abspath(args.target_dir), not args.all_variants,
                                              args.genome_build == "GRCh37",
                                              args.genome_build == "GRCh38",
                                              _abspath(args.ref_file))
    elif args.command == "subset-bam":
        out = bam.subset_bam(runner, _abspath(args.bam), _abspath(args.ref_file), args.region,
                             _abspath(args.out_bam), args.threads)
    elif args.command == "run":
        flow = variants.VariantCallingFlow(config, args.threads, args.genome_build,
                                           not args.all_variants)
        result = flow.run_task(_abspath(args.output_dir), [_abspath(args.ref_file)], [],
                               [_abspath(x) for x in args.bams], args.name)
        if not result.succeeded:
            logger.error("Variant calling failed: %s" % result.error)
            return 1
        out = result.summary_file
        for vcf in flow.vcfs:
            print(vcf)
    else:
        raise ValueError("Unexpected command: %s" % args.command)
    print(out)
    return 0

def main(in_args=None):
    args = parse_cl_args(sys.argv[1:] if in_args is None else in_args)
    sys.exit(run_main(args))
