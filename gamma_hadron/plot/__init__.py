#!/usr/bin/env python

""" Plot package for the gamma-hadron correlation analysis.

.. code-author: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

__all__ = [
    "base",
    "correlations",
]
