#!/usr/bin/env python

""" Tests for writing the histograms in the YODA format.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import logging
import os
import pytest

from gamma_hadron.analysis import output
from gamma_hadron.base import analysis_objects

# Setup logger
logger = logging.getLogger(__name__)

@pytest.fixture
def histogram():
    """ Simple filled histogram. """
    h = analysis_objects.BookedHistogram("d01-x01-y01", bin_edges = [0, 1, 2], title = "Test title")
    h.fill([0.5, 1.5, 1.5, -1, 5])
    return h

def test_format_histogram(logging_mixin, histogram):
    """ Test formatting a histogram. """
    text = output.format_histogram(histogram, analysis_name = "STAR_2016_I1442357")
    lines = text.splitlines()

    assert lines[0] == "BEGIN YODA_HISTO1D_V2 /STAR_2016_I1442357/d01-x01-y01"
    assert lines[1] == "Path: /STAR_2016_I1442357/d01-x01-y01"
    assert lines[2] == "Title: Test title"
    assert lines[-1] == "END YODA_HISTO1D_V2"
    # Total, underflow, and overflow
    assert lines[8].split("\t")[0].strip() == "Total"
    assert lines[8].split("\t")[-1] == "5"
    assert lines[9].split("\t")[-1] == "1"
    assert lines[10].split("\t")[-1] == "1"
    # The two bins
    bins = [line.split("\t") for line in lines[12:-1]]
    assert len(bins) == 2
    assert [float(b[0]) for b in bins] == [0, 1]
    assert [float(b[1]) for b in bins] == [1, 2]
    assert [float(b[2]) for b in bins] == [1, 2]
    assert [int(b[-1]) for b in bins] == [1, 2]

def test_write_yoda(logging_mixin, histogram, tmp_path):
    """ Test writing the histograms to file. """
    histograms = analysis_objects.HistogramCollection()
    histograms.histograms[histogram.name] = histogram
    histograms.book("d02-x01-y01", bin_edges = [0, 1, 2])
    output_prefix = str(tmp_path / "output")

    filename = output.write_yoda(histograms, analysis_name = "STAR_2016_I1442357", output_prefix = output_prefix)

    assert filename == os.path.join(output_prefix, "STAR_2016_I1442357.yoda")
    with open(filename, "r") as f:
        text = f.read()
    assert text.count("BEGIN YODA_HISTO1D_V2") == 2
    assert "/STAR_2016_I1442357/d02-x01-y01" in text

    # Custom filename
    filename = output.write_yoda(histograms, analysis_name = "STAR_2016_I1442357", output_prefix = output_prefix, filename = "test")
    assert filename == os.path.join(output_prefix, "test.yoda")
    assert os.path.exists(filename)
