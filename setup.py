#!/usr/bin/env python

"""Setup file and install script for the Spritz GATK, Picard and samtools wrappers"""

import os
import subprocess

import setuptools

VERSION = '0.1.0'

# add spritz version number and git commit hash of the current revision to version.py
try:
    git_run = subprocess.run(['git', 'rev-parse', '--short', 'HEAD'], stdout=subprocess.PIPE,
                             stderr=subprocess.DEVNULL)
    git_run.check_returncode()
except (OSError, subprocess.SubprocessError):
    commit_hash = ''
else:
    commit_hash = git_run.stdout.strip().decode()

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, 'spritz', 'pipeline', 'version.py'), 'w') as version_file:
    version_file.writelines([f'__version__ = "{VERSION}"\n',
                             f'__git_revision__ = "{commit_hash}"\n'])

# GATK, Picard and samtools are installed by `spritz_wrappers.py install`
setuptools.setup(name='spritz',
                 version=VERSION,
                 description='Wrappers for RNA-Seq variant calling with GATK, Picard and samtools',
                 packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
                 scripts=['scripts/spritz_wrappers.py'],
                 python_requires='>=3.6',
                 install_requires=['logbook', 'PyYAML', 'toolz'],
                 extras_require={'test': ['pytest', 'pytest-mock', 'mock']})
