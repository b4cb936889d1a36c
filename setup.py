#!/usr/bin/env python3
"""
Setup script for targetd provisioner.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

packages = find_packages(where=".", include=["targetd_provisioner", "targetd_provisioner.*"])

setup(
    name="targetd-provisioner",
    version="0.1.0",
    author="targetd provisioner contributors",
    description="iSCSI and NFS volume provisioner for targetd",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="Apache-2.0",
    packages=packages,
    package_dir={"": "."},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "targetd-provisioner=targetd_provisioner.cli.cli:main",
        ],
        "oslo.config.opts": [
            "targetd_provisioner=targetd_provisioner.configuration:list_opts",
        ],
    },
)
