#!/usr/bin/env python

""" Version information.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

__version__ = "0.1.0"
