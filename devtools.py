import subprocess
import sys

PACKAGE = "prisonsphere"


def format() -> None:
    """Run Black on the prisonsphere package and its tests."""
    subprocess.check_call(["black", PACKAGE, "tests", "scripts", *sys.argv[1:]])


def lint() -> None:
    """Run Pylint on the prisonsphere package."""
    subprocess.check_call(["pylint", PACKAGE, *sys.argv[1:]])


def typecheck() -> None:
    """Run Mypy on the prisonsphere package."""
    subprocess.check_call(["mypy", PACKAGE, *sys.argv[1:]])


def test() -> None:
    """Run the pytest suite."""
    subprocess.check_call(["pytest", *sys.argv[1:]])
