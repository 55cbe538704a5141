#!/usr/bin/env python3

from setuptools import setup

setup(
    name="tnyid3",
    version="0.1.0",
    packages=["tnyid3"],
    python_requires=">=3.6",
    license="BSD",
    description="Incremental ID3v2.2/ID3v2.3 tag reader and writer in pure Python 3",
    long_description="""
tnyid3 reads the ID3v2 tag at the start of an audio file frame by frame,
from whatever data a stream has made available so far.  Text information
and attached picture frames can be read and modified; the tag is written
back as ID3v2.3, in place if it fits into the space of the original tag,
or into a new file otherwise.
""",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Topic :: Multimedia :: Sound/Audio"
        ],
    )
