from pathlib import Path
import re

from setuptools import find_packages, setup

HERE = Path(__file__).parent.absolute()
with (HERE / "README.md").open("rt") as fh:
    LONG_DESCRIPTION = fh.read().strip()

VERSION = re.search(
    r'^version = "(.+)"$',
    (HERE / "simple_project_page" / "_version.py").read_text(),
    re.MULTILINE,
).group(1)

REQUIREMENTS: dict[str, list[str]] = {
    "core": [
        "httpx",
        "packaging>=23.2",
        "typing_extensions; python_version < '3.12'",
    ],
    "test": [
        "pytest",
        "pytest_asyncio",
    ],
    "dev": [
        "pre-commit",
    ],
}

setup(
    name="simple-project-page",
    version=VERSION,
    description=(
        "Normalization of simple repository (PEP-503 / PEP-691) project pages "
        "into a single model of the available distribution files"
    ),
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    packages=find_packages(),
    python_requires="~=3.11",
    package_data={"simple_project_page": ["py.typed"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Typing :: Typed",
    ],
    install_requires=REQUIREMENTS["core"],
    extras_require={
        **REQUIREMENTS,
        # The "dev" extra is the union of "test" and "doc", with an option
        # to have explicit development dependencies listed.
        "dev": [
            req
            for extra in ["dev", "test", "doc"]
            for req in REQUIREMENTS.get(extra, [])
        ],
        # The "all" extra is the union of all requirements.
        "all": [req for reqs in REQUIREMENTS.values() for req in reqs],
    },
    entry_points={
        "console_scripts": [
            "simple-project-page = simple_project_page.cli:main",
        ],
    },
)
