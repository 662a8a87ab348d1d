"""Convention rule set: package.json, CI configuration and README checks."""

from ..policy import Policy
from ..runner import Runner
from .ci import register_ci_checks
from .manifest import register_manifest_checks
from .readme import register_readme_checks


def build_runner(policy: Policy) -> Runner:
    """Register every check for the policy in report order.

    Document-loading checks come first in each group; the checks after them
    read what they loaded.
    """
    runner = Runner()
    register_manifest_checks(runner, policy)
    register_ci_checks(runner, policy)
    register_readme_checks(runner, policy)
    return runner


__all__ = [
    "build_runner",
    "register_ci_checks",
    "register_manifest_checks",
    "register_readme_checks",
]
