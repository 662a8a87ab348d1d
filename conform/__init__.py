"""conform - convention checker for Gramener JavaScript packages.

Validates package.json, .gitlab-ci.yml and README.md against a fixed policy
and reports the outcome as TAP.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
