import pytest

from spritz import broad
from spritz.pipeline import config_utils


@pytest.fixture
def config():
    return config_utils.default_config(work_dir="/work")


@pytest.fixture
def runner(config):
    return broad.runner_from_config(config)


@pytest.fixture
def run_script(mocker, runner):
    """Capture generated scripts instead of running them."""
    return mocker.patch.object(runner, "run_script", return_value=0)


@pytest.fixture
def scripts(run_script):
    """(script name, commands as strings) for each script the runner was asked to run."""
    def get():
        return [(c[0][0], [str(x) for x in c[0][1]]) for c in run_script.call_args_list]
    return get
