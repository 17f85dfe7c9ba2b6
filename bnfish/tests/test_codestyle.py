import importlib.util
import os.path
import subprocess
import sys
import unittest


PACKAGE = "bnfish"


def find_root():
    return os.path.dirname(
        os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    )


def run_tool(tool, *args):
    """
    Run a code quality tool as a module over the package, from the project
    root.  The test is skipped when the tool is not installed.
    """
    if importlib.util.find_spec(tool) is None:
        raise unittest.SkipTest("%s module is missing" % tool)

    try:
        subprocess.run(
            [sys.executable, "-m", tool, *args, PACKAGE],
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=find_root(),
        )
    except subprocess.CalledProcessError as ex:
        output = ex.stdout.decode()
        if ex.stderr:
            output += "\n\n" + ex.stderr.decode()
        raise AssertionError(
            f"{tool} validation failed:\n{output}"
        ) from None


class TestCodeQuality(unittest.TestCase):
    def test_flake8(self):
        run_tool("flake8")

    def test_mypy(self):
        config_path = os.path.join(find_root(), "pyproject.toml")
        if not os.path.exists(config_path):
            raise RuntimeError("could not locate pyproject.toml file")
        run_tool("mypy", "--config-file", config_path)


if __name__ == "__main__":
    unittest.main()
