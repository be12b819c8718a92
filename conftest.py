# type: ignore

# The purpose of this file is to detect tests with `ground_size` as input and
# then run these tests for every ground set size from 2 up to a certain limit.
# The limit can be configured using `--groundsize` and its default value is 6.

# Tests using `ground_size` usually enumerate all permutations of the ground
# set, so the limit should stay small.


def pytest_addoption(parser):
    parser.addoption(
        "--groundsize",
        action="store",
        default="6",
        help="Only check ground sets up to this size.",
    )


def pytest_generate_tests(metafunc):
    if "ground_size" in metafunc.fixturenames:
        size = int(metafunc.config.getoption("groundsize"))
        metafunc.parametrize("ground_size", list(range(2, size + 1)))
