#! /usr/bin/env python

from setuptools import setup

setup(
    name="paleosim",
    version="0.1.0",
    author="Jeet Sukumaran",
    author_email="jeetsukumaran@gmail.com",
    packages=["paleosim"],
    scripts=["bin/paleosim-simulate.py",
            ],
    url="http://pypi.python.org/pypi/paleosim/",
    license="LICENSE.txt",
    description="Birth-death simulation of clades under general speciation and extinction rates",
    long_description=open("README.rst").read(),
    install_requires=[
        "dendropy",
        "numpy",
        "pandas",
        "scipy",
        ],
    extras_require={
        "test": ["pytest"],
        },
)
