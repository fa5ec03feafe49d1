"""Install third party software needed by the wrappers.

Generates one-time setup scripts: system packages through apt-get, python
packages used by RSeQC, a Java runtime, and the GATK/Picard jars plus the
chromosome name tables in the work directory.
"""
import os

import toolz as tz

from spritz import setpath
from spritz.log import logger
from spritz.pipeline import config_utils
from spritz.provenance import do

GATK_TARBALL = "GenomeAnalysisTK-*.tar.bz2"
GATK_JAR = "GenomeAnalysisTK.jar"


def _apt_install(package):
    return ("if dpkg -s {0} > /dev/null 2>&1 || command -v {0} > /dev/null 2>&1 ; then\n"
            "  echo found {0}\n"
            "else\n"
            "  sudo apt-get -y install {0}\n"
            "fi").format(package)

def _java_install(package):
    return ("version=$(java -version 2>&1 | awk -F '\"' '/version/ {print $2}')\n"
            "if [[ \"$version\" > \"1.5\" ]]; then\n"
            "  echo found java $version\n"
            "else\n"
            "  sudo apt-get -y install %s\n"
            "fi") % package

def dependency_commands(config):
    """Commands checking for and installing system and python dependencies.
    """
    install = tz.merge(config_utils.DEFAULTS["install"], config.get("install") or {})
    commands = ["echo \"Checking for updates and installing any missing dependencies. "
                "Please enter your password for this step:\"",
                "sudo apt-get -y update",
                "sudo apt-get -y upgrade"]
    commands += [_apt_install(x) for x in install["apt"]]
    commands += ["pip3 install --user --upgrade pip virtualenv",
                 "pip3 install --user --upgrade %s" % " ".join(install["pip"])]
    commands.append(_java_install(install["java"]))
    return commands

def install_dependencies(config):
    """Install system packages, python packages and Java, returning the script exit code.
    """
    script = os.path.join(config_utils.get_scripts_dir(config), "install_dependencies.bash")
    logger.info("Installing dependencies with %s" % script)
    return do.run_script(script, dependency_commands(config), config, "Install dependencies")

def gatk_commands(config):
    """Commands unpacking GATK, cloning the chromosome mappings and fetching picard.jar.

    GATK 3 cannot be downloaded without accepting its license, so the script
    waits for the user to place the tarball in the work directory.
    """
    work_dir = config_utils.get_work_dir(config)
    shell_dir = setpath.convert_config_path(work_dir, config)
    urls = tz.merge(config_utils.DEFAULTS["install"], config.get("install") or {})
    return ["cd %s" % shell_dir,
            "while ! ls %s > /dev/null 2>&1 && [ ! -f %s ]" % (GATK_TARBALL, GATK_JAR),
            "do",
            "  echo \"Genome Analysis Toolkit (GATK) not found.\"",
            "  echo \"Please download GATK from their website %s\"" % urls["gatk_url"],
            "  echo \"Then, place the file (.tar.bz2) in the folder %s\"" % work_dir,
            "  read -n 1 -s -r -p \"Press any key to continue\"",
            "done",
            "if [ ! -f %s ]; then tar -jxvf %s; fi" % (GATK_JAR, GATK_TARBALL),
            "if [ ! -f %s ]; then mv GenomeAnalysisTK-*/%s .; fi" % (GATK_JAR, GATK_JAR),
            "if [ -f %s ]; then rm -rf GenomeAnalysisTK-*; fi" % GATK_JAR,
            "if [ ! -d ChromosomeMappings ]; then git clone %s; fi" % urls["chromosome_mappings_url"],
            "if [ ! -f picard.jar ]; then wget %s; fi" % urls["picard_url"]]

def install_gatk(config):
    script = os.path.join(config_utils.get_scripts_dir(config), "install_gatk.bash")
    logger.info("Installing GATK and Picard jars in %s" % config_utils.get_work_dir(config))
    return do.run_script(script, gatk_commands(config), config, "Install GATK")
