"""Translate host paths into the form seen by the shell that runs the tools.

Scripts are executed by a bash that may see the host filesystem through a
mount point (e.g. Windows drives under /mnt/ in WSL). Paths embedded in
generated commands have to be in the shell's form.
"""
import re

from spritz.pipeline import config_utils

DEFAULT_MOUNT_PREFIX = "/mnt/"

_drive_name = re.compile(r"^([A-Za-z]):")


def convert_path(path, mount_prefix=DEFAULT_MOUNT_PREFIX):
    """Convert a host path into the equivalent path inside the execution shell.

    examples:
    convert_path("C:\\Users\\me\\a.bam") -> "/mnt/c/Users/me/a.bam"
    convert_path("/mnt/c/Users/me/a.bam") -> "/mnt/c/Users/me/a.bam"
    convert_path("/data/a.bam") -> "/data/a.bam"

    Malformed paths are converted as best we can and fail later in the shell.
    """
    if path is None:
        return None
    if path == "":
        return ""
    if path.startswith(mount_prefix):
        return path
    path = path.replace("\\", "/")
    m = _drive_name.match(path)
    if m:
        return mount_prefix + m.group(1).lower() + path[m.end():]
    return path

def convert_config_path(path, config=None):
    """Convert a path using the mount prefix from a configuration.
    """
    prefix = config_utils.get_mount_prefix(config) if config else DEFAULT_MOUNT_PREFIX
    return convert_path(path, prefix)
