#!/usr/bin/env python

""" STAR gamma / pi0 triggered hadron correlations analysis.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

from gamma_hadron.version import __version__  # noqa: F401
