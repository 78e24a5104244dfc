"""
setup.py for the Perfetto build driver

Runtime Requirements (invoked, not installed):
- macOS: git, curl, Python 3, Xcode Command Line Tools
- Windows (Git Bash): git, cygpath, powershell.exe, Visual Studio or Build Tools
  with the C++ workload (located through vswhere.exe)

Configuration:
- Defaults live in perfetto_build/config/build.yaml
- Set PERFETTO_BUILD_CONFIG to use another file
- Set PERFETTO_BUILD_VERBOSE=1 for debug output, PERFETTO_BUILD_DRY_RUN=1 to
  print commands without running them
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read README for long description
readme_path = Path("README.md")
long_description = ""
if readme_path.exists():
    with open(readme_path, "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name="perfetto-build",
    version="1.0.0",
    description="Builds Perfetto's native tools with GN and Ninja on macOS and Windows",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["perfetto_build", "perfetto_build.*"]),
    package_data={
        "perfetto_build": [
            "config/build.yaml",
        ]
    },
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "perfetto-build=perfetto_build.main:main",
        ],
    },
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
        "pydantic>=2.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "black",
            "flake8",
            "mypy",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: MacOS",
        "Operating System :: Microsoft :: Windows",
        "Topic :: Software Development :: Build Tools",
    ],
)
