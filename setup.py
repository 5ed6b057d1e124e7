# -*- coding: utf-8 -*-
import setuptools
import pathlib
import site
import sys

# odd bug with develop (editable) installs, see: https://github.com/pypa/pip/issues/7953
site.ENABLE_USER_SITE = "--user" in sys.argv[1:]

required = [
    "numpy",
    "matplotlib>=3.4.0",
    "simplejson>= 3.19.2",
    "pyvisa",
    "pyvisa_py",
    "mashumaro",
    "loguru",
    "click>=8.0.0",
]

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

# Read version
version = {}
with open("src/dsoplot/_version.py", "r") as f:
    exec(f.read(), version)

if __name__ == "__main__":
    setuptools.setup(
        name="dsoplot",
        version=version["__version__"],
        description="Web bridge to Agilent DSO6000 oscilloscopes: SCPI control, waveform decoding, gnuplot plots.",
        long_description=long_description,
        long_description_content_type="text/markdown",
        keywords=[
            "oscilloscope",
            "DSO6000",
            "SCPI",
            "VXI-11",
            "gnuplot",
        ],
        classifiers=[
            "License :: OSI Approved :: MIT License",
            "Development Status :: 5 - Production/Stable",
        ],
        license="MIT",
        package_dir={"": "src"},
        packages=setuptools.find_packages(
            where="src",
            exclude=["*.test", "*.test.*", "test.*", "test", "test_*"],
        ),
        entry_points={
            "console_scripts": [
                "dsoplot=dsoplot.cli:cli",
            ],
        },
        install_requires=required,
        extras_require={"test": ["pytest"]},
        python_requires=">= 3.11",
        package_data={"": ["*.md"]},
        setup_requires=["wheel"],  # force install of wheel first
    )
# https://setuptools.readthedocs.io/en/latest/userguide/datafiles.html
