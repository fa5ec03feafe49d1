"""Loads configurations from .yaml files and expands environment variables.

Every setting has a default in `DEFAULTS`, so a configuration file only needs
the values that differ on a given machine:

  work_dir          Directory holding tool jars, ChromosomeMappings and scripts/
  log_dir           Directory for spritz.log, spritz-debug.log, spritz-commands.log
  shell             bash interpreter used to run generated scripts and the mount
                    prefix used when translating drive-letter paths
  resources         Invocation of gatk (jar + jvm_opts), picard (jar + jvm_opts),
                    picard-tools and samtools
  read_group        PU/PL/SM/LB tags for AddOrReplaceReadGroups
  known_sites       dbSNP VCF URLs per genome build, all and common variants
  chromosome_mappings  UCSC to Ensembl chromosome tables per genome build,
                    relative to work_dir
  install           Packages for the dependency installer
"""
import copy
import os

import toolz as tz
import yaml


class CmdNotFound(Exception):
    pass

DBSNP_BASE = "ftp://ftp.ncbi.nih.gov/snp/organisms"

DEFAULTS = {
    "work_dir": os.getcwd(),
    "log_dir": None,
    "include_time": True,
    "log_level": "INFO",
    "shell": {"bash": None,
              "mount_prefix": "/mnt/"},
    "resources": {"gatk": {"cmd": "java",
                           "jar": "GenomeAnalysisTK.jar",
                           "jvm_opts": ["-Xmx20G"]},
                  "picard": {"cmd": "java",
                             "jar": "picard.jar",
                             "jvm_opts": ["-Xmx20G"]},
                  "picard-tools": {"cmd": "picard-tools"},
                  "samtools": {"cmd": "samtools"}},
    "read_group": {"pu": "platform",
                   "pl": "illumina",
                   "sm": "sample",
                   "lb": "library"},
    "known_sites": {
        "GRCh37": {"all": DBSNP_BASE + "/human_9606_b150_GRCh37p13/VCF/GATK/All_20170710.vcf.gz",
                   "common": DBSNP_BASE + "/human_9606_b150_GRCh37p13/VCF/GATK/common_all_20170710.vcf.gz"},
        "GRCh38": {"all": DBSNP_BASE + "/human_9606_b150_GRCh38p7/VCF/GATK/All_20170710.vcf.gz",
                   "common": DBSNP_BASE + "/human_9606_b150_GRCh38p7/VCF/GATK/common_all_20170710.vcf.gz"}},
    "chromosome_mappings": {"GRCh37": os.path.join("ChromosomeMappings", "GRCh37_UCSC2ensembl.txt"),
                            "GRCh38": os.path.join("ChromosomeMappings", "GRCh38_UCSC2ensembl.txt")},
    "install": {"apt": ["gcc", "g++", "make", "cmake", "build-essential",
                        "zlib1g-dev",
                        "samtools", "picard-tools", "tophat", "cufflinks",
                        "gawk", "git", "wget", "python3", "python3-dev",
                        "python3-setuptools", "python3-pip"],
                "pip": ["bitsets", "cython", "bx-python", "pysam", "RSeQC", "numpy"],
                "java": "openjdk-8-jdk",
                "gatk_url": "https://software.broadinstitute.org/gatk/download/",
                "picard_url": "https://github.com/broadinstitute/picard/releases/download/2.15.0/picard.jar",
                "chromosome_mappings_url": "https://github.com/dpryan79/ChromosomeMappings.git"},
}

# ## Retrieval functions

def default_config(**overrides):
    """Provide a fresh copy of the defaults with top level overrides applied.
    """
    config = copy.deepcopy(DEFAULTS)
    config["work_dir"] = os.getcwd()
    return _merge(config, {k: v for k, v in overrides.items() if v is not None})

def load_config(config_file=None, **overrides):
    """Load YAML config file, replacing environmental variables.

    Values from the file are merged over `DEFAULTS`; keyword overrides (from the
    command line) win over both.
    """
    config = default_config()
    if config_file:
        if not os.path.exists(config_file):
            raise ValueError("Could not find input configuration file %s" % config_file)
        with open(config_file) as in_handle:
            custom = yaml.safe_load(in_handle) or {}
        config = _merge(config, _expand_paths(custom))
    config = _merge(config, {k: v for k, v in overrides.items() if v is not None})
    config["work_dir"] = os.path.abspath(expand_path(config["work_dir"]))
    return config

def _merge(base, custom):
    out = copy.deepcopy(base)
    for k, v in custom.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out

def _expand_paths(config):
    for field, setting in config.items():
        if isinstance(config[field], dict):
            config[field] = _expand_paths(config[field])
        else:
            config[field] = expand_path(setting)
    return config

def expand_path(path):
    """ Combines os.path.expandvars with replacing ~ with $HOME.
    """
    try:
        return os.path.expandvars(path.replace("~", "$HOME"))
    except AttributeError:
        return path

def get_resources(name, config):
    """Retrieve resources for a program, pulling from multiple config sources.
    """
    return tz.get_in(["resources", name], config,
                     tz.get_in(["resources", name], DEFAULTS, {}))

def get_program(name, config, default=None):
    """Retrieve the command used to invoke a program.
    """
    pconfig = tz.get_in(["resources", name], config)
    if pconfig is None:
        return default or name
    elif isinstance(pconfig, str):
        return pconfig
    elif "cmd" in pconfig:
        return pconfig["cmd"]
    elif default is not None:
        return default
    else:
        return name

def get_jar(name, config):
    """Retrieve a java jar, relative paths resolved against the work directory.
    """
    jar = tz.get_in(["resources", name, "jar"], config)
    if not jar:
        raise CmdNotFound("No jar configured for %s" % name)
    return jar if os.path.isabs(jar) else os.path.join(get_work_dir(config), jar)

def get_work_dir(config):
    return config.get("work_dir") or os.getcwd()

def get_scripts_dir(config):
    return os.path.join(get_work_dir(config), "scripts")

def get_mount_prefix(config):
    return tz.get_in(["shell", "mount_prefix"], config, DEFAULTS["shell"]["mount_prefix"])

def get_read_group(config):
    return tz.merge(DEFAULTS["read_group"], config.get("read_group") or {})

def get_known_sites_url(config, genome_build, common_only):
    return tz.get_in(["known_sites", genome_build, "common" if common_only else "all"], config)

def get_chromosome_mappings(config, genome_build):
    fname = tz.get_in(["chromosome_mappings", genome_build], config)
    if fname and not os.path.isabs(fname):
        fname = os.path.join(get_work_dir(config), fname)
    return fname
