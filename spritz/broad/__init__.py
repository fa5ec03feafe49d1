"""Work with Broad's Java libraries and samtools from Python.

  Picard -- BAM manipulation and analysis library.
  GATK -- Next-generation sequence processing (GATK 3 `-T Tool` style).

Command lines are built as `Command` objects. Each builder checks the
arguments a tool cannot run without, so a missing input path is reported when
the command is assembled rather than as a confusing error inside a script.
"""
import os

from spritz import setpath
from spritz.pipeline import config_utils
from spritz.provenance import do

# Flags that must be present with a value for each GATK tool
GATK_REQUIRED = {
    "SplitNCigarReads": ["-R", "-I", "-o"],
    "PrintReads": ["-R", "-I", "-o"],
    "RealignerTargetCreator": ["-R", "-I", "-o"],
    "IndelRealigner": ["-R", "-I", "-targetIntervals", "-o"],
    "BaseRecalibrator": ["-R", "-I", "-o"],
    "HaplotypeCaller": ["-R", "-I", "-o"],
}

# KEY=VALUE options that must be present for each Picard tool
PICARD_REQUIRED = {
    "AddOrReplaceReadGroups": ["I", "O", "PU", "PL", "SM", "LB"],
    "SortSam": ["I", "O", "SO"],
    "MarkDuplicates": ["I", "O", "M"],
    "CreateSequenceDictionary": ["R", "O"],
    "SortVcf": ["I", "O"],
}

SAMTOOLS_REQUIRED = {
    "faidx": 1,
    "index": 1,
    "view": 1,
}


class CommandError(ValueError):
    """A command line was requested with missing or empty required arguments.
    """
    pass


class Command(object):
    """A single tool invocation: program tokens followed by its arguments.
    """
    def __init__(self, program, args=None, name=None):
        self.program = [str(x) for x in program]
        self.args = [str(x) for x in (args or [])]
        self.name = name or " ".join(self.program)

    def to_list(self):
        return self.program + self.args

    def __str__(self):
        return " ".join(self.to_list())

    def __repr__(self):
        return "Command(%s)" % str(self)

    def __eq__(self, other):
        return isinstance(other, Command) and self.to_list() == other.to_list()


def _check_no_missing(name, values):
    missing = [i for i, x in enumerate(values) if x is None or x == ""]
    if missing:
        raise CommandError("%s: empty argument at position %s" % (name, missing[0]))

def check_flags(name, params, required):
    """Ensure each required flag is present and followed by a value.
    """
    for flag in required:
        if flag not in params:
            raise CommandError("%s requires %s" % (name, flag))
        i = params.index(flag)
        if i + 1 >= len(params) or params[i + 1] is None or params[i + 1] == "":
            raise CommandError("%s requires a value for %s" % (name, flag))
    _check_no_missing(name, params)

def check_options(name, options, required):
    """Ensure each required KEY=VALUE option is present with a value.
    """
    present = dict((k, v) for k, v in options)
    for key in required:
        if present.get(key) is None or present.get(key) == "":
            raise CommandError("%s requires %s=" % (name, key))
    _check_no_missing(name, [v for _, v in options])


class BroadRunner:
    """Simplify building and running Broad and samtools commandlines.

    Holds the configuration: how each tool is invoked, where the work
    directory and scripts live, and how host paths appear inside the shell.
    """
    def __init__(self, config):
        self._config = config

    @property
    def config(self):
        return self._config

    @property
    def work_dir(self):
        return config_utils.get_work_dir(self._config)

    def convert(self, path):
        """Translate a host path into the shell's form.
        """
        return setpath.convert_config_path(path, self._config)

    def cd_work_dir(self):
        return "cd %s" % self.convert(self.work_dir)

    def script_path(self, name):
        return os.path.join(config_utils.get_scripts_dir(self._config), name)

    def run_script(self, name, commands, descr=None):
        """Write commands to scripts/<name> and run it, waiting for completion.
        """
        return do.run_script(self.script_path(name), commands, self._config, descr)

    def _java_program(self, name):
        resources = config_utils.get_resources(name, self._config)
        return ([config_utils.get_program(name, self._config, "java")] +
                list(resources.get("jvm_opts", [])) +
                ["-jar", self.convert(config_utils.get_jar(name, self._config))])

    def cl_gatk(self, tool, params):
        """Prepare a GATK 3 commandline: `java <jvm_opts> -jar GenomeAnalysisTK.jar -T <tool> ...`
        """
        params = list(params)
        check_flags(tool, params, GATK_REQUIRED.get(tool, []))
        return Command(self._java_program("gatk"), ["-T", tool] + params, name="GATK %s" % tool)

    def _picard_args(self, command, options):
        options = list(options)
        check_options(command, options, PICARD_REQUIRED.get(command, []))
        return [command] + ["%s=%s" % (x, y) for x, y in options]

    def cl_picard(self, command, options):
        """Prepare a Picard commandline using the picard-tools wrapper.
        """
        return Command([config_utils.get_program("picard-tools", self._config)],
                       self._picard_args(command, options), name="Picard %s" % command)

    def cl_picard_jar(self, command, options):
        """Prepare a Picard commandline running picard.jar directly.
        """
        return Command(self._java_program("picard"), self._picard_args(command, options),
                       name="Picard %s" % command)

    def cl_samtools(self, command, args):
        args = list(args)
        if len(args) < SAMTOOLS_REQUIRED.get(command, 0):
            raise CommandError("samtools %s requires an input file" % command)
        _check_no_missing("samtools %s" % command, args)
        return Command([config_utils.get_program("samtools", self._config)], [command] + args,
                       name="samtools %s" % command)

def runner_from_config(config):
    return BroadRunner(config)
