# This file is part of pixlib.

# Imports:

import os
import sys
import unittest

from setuptools import setup
from setuptools import Command


# Constants

PIXLIB_MODULES = [
    "settings", "errors", "channel", "gamma", "alpha", "color",
    "format", "helpers", "raster", "compositing", "palette",
]


# Helper classes and routines:

def print_err(msg):
    print(msg, file=sys.stderr)


def read_version():
    """Returns the version string declared in pixlib/__init__.py"""
    path = os.path.join(os.path.dirname(__file__), "pixlib", "__init__.py")
    with open(path) as fp:
        for line in fp:
            if line.startswith("__version__"):
                return line.split("=", 1)[1].strip().strip("\"'")
    print_err("No __version__ found in %r" % (path,))
    sys.exit(1)


class Doctests (Command):
    """Runs the examples embedded in the pixlib module docstrings

    The unit tests under tests/ run these too, but it's handy to be able
    to check the documentation on its own after editing it.

    """

    description = "[pixlib] run the docstring examples of every module"
    user_options = [
        ("modules=", None, "comma-separated module names (default: all)"),
    ]

    def initialize_options(self):
        self.modules = None

    def finalize_options(self):
        if self.modules:
            self.modules = [m.strip() for m in self.modules.split(",")]
        else:
            self.modules = list(PIXLIB_MODULES)

    def run(self):
        import doctest
        import importlib
        suite = unittest.TestSuite()
        for name in self.modules:
            mod = importlib.import_module("pixlib." + name)
            self.announce("collecting doctests from %r" % (mod.__name__,),
                          level=2)
            suite.addTests(doctest.DocTestSuite(mod))
        result = unittest.TextTestRunner(verbosity=1).run(suite)
        if not result.wasSuccessful():
            sys.exit(1)


# Setup script "main()":

setup(
    name='pixlib',
    version=read_version(),
    description='Pixel formats, color conversion, and Porter-Duff '
                'compositing for in-memory rasters.',
    license="GPLv2+",

    packages=['pixlib'],
    python_requires='>=3.6',
    install_requires=[
        'numpy',
    ],
    cmdclass={
        "doctests": Doctests,
    },
    test_suite='tests',
)
