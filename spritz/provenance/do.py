"""Centralize running of external commands through generated bash scripts.

Each wrapper writes its commands into a script under the work directory and
runs it with bash. Command lines are logged to the commands log; failures
inside a script are only reported through the exit status and the tools'
own output.
"""
import os
import shlex
import subprocess

import toolz as tz

from spritz import setpath, utils
from spritz.log import logger, logger_cl

BANNER = (
    r"__________                __                _____                    ",
    r"\______   \_______  _____/  |_  ____  _____/ ____\___________  _____ ",
    r" |     ___/\_  __ \/  _ \   __\/ __ \/  _ \   __\/  _ \_  __ \/     \\",
    r" |    |     |  | \(  <_> )  | \  ___(  <_> )  | (  <_> )  | \/  Y Y  \\",
    r" |____|     |__|   \____/|__|  \___  >____/|__|  \____/|__|  |__|_|  /",
    r"                                   \/                              \/",
    r"________          __        ___.                                     ",
    r"\______ \ _____ _/  |______ \_ |__ _____    ______ ____              ",
    r" |    |  \\\\__  \\\\   __\__  \ | __ \\\\__  \  /  ___// __ \             ",
    r" |    \`   \/ __ \|  |  / __ \| \_\ \/ __ \_\___ \\\\  ___/             ",
    r"/_______  (____  /__| (____  /___  (____  /____  >\___  >            ",
    r"        \/     \/          \/    \/     \/     \/     \/             ",
    r"___________              .__                                         ",
    r"\_   _____/ ____    ____ |__| ____   ____                            ",
    r" |    __)_ /    \  / ___\|  |/    \_/ __ \                           ",
    r" |        \   |  \/ /_/  >  |   |  \  ___/                           ",
    r"/_______  /___|  /\___  /|__|___|  /\___  >                          ",
    r"        \/     \//_____/         \/     \/                            ",
)

def banner():
    """Fixed echo lines written at the top of every generated script.
    """
    return "".join('echo "%s"\n' % line for line in BANNER)

def find_bash(config=None):
    configured = tz.get_in(["shell", "bash"], config) if config else None
    if configured:
        return configured
    for test_bash in [utils.which("bash"), "/bin/bash", "/usr/bin/bash", "/usr/local/bin/bash"]:
        if test_bash and os.path.exists(test_bash):
            return test_bash
    raise IOError("Could not find bash in any standard location. Needed to run generated scripts")

def check_bash_setup(config=None):
    """Check that the bash interpreter used to run scripts is available.
    """
    try:
        return os.path.exists(find_bash(config))
    except IOError:
        return False

def run_bash_command(command, arguments, config=None):
    """Start `bash -c "<command> <arguments>"`, returning the running process.
    """
    cl = [find_bash(config), "-c", "%s %s" % (command, arguments)]
    logger_cl.debug(" ".join(cl))
    return subprocess.Popen(cl)

def write_script(script_path, commands):
    """Overwrite script_path with the banner followed by one command per line.
    """
    utils.safe_makedir(os.path.dirname(os.path.abspath(script_path)))
    with open(script_path, "w") as out_handle:
        out_handle.write(banner() + "\n")
        for cmd in commands:
            out_handle.write("%s\n" % cmd)
    return script_path

def generate_and_run_script(script_path, commands, config=None):
    """Write the commands to a script and start bash on it.

    Callers are responsible for waiting on the returned process.
    """
    commands = [str(x) for x in commands]
    write_script(script_path, commands)
    logger_cl.debug("Script %s" % script_path)
    for cmd in commands:
        logger_cl.debug(cmd)
    script = setpath.convert_config_path(script_path, config)
    return run_bash_command("bash", shlex.quote(script), config)

def run_script(script_path, commands, config=None, descr=None):
    """Generate and run a script, blocking until it finishes.

    Returns the exit code. A non-zero exit is logged but not raised: the
    outputs each caller expects are the only signal of success.
    """
    if descr:
        logger.debug(descr)
    proc = generate_and_run_script(script_path, commands, config)
    exitcode = proc.wait()
    if exitcode != 0:
        logger.warning("%s exited with code %s" % (os.path.basename(script_path), exitcode))
    return exitcode

