#!/usr/bin/env python

""" Write the booked histograms in the YODA text format.

The YODA format is used by the standard tools for comparing analysis output to reference data,
which match on the histogram paths (ie. ``/{analysis_name}/d01-x01-y01``).

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import logging
import os
from typing import Iterable, List

from gamma_hadron.base import analysis_objects

logger = logging.getLogger(__name__)

def _format_row(label_low: str, label_high: str, h: analysis_objects.BookedHistogram, index: slice) -> str:
    """ Format a row of summed bin statistics. """
    return "\t".join([
        label_low, label_high,
        f"{h.sum_w[index].sum():e}", f"{h.sum_w2[index].sum():e}",
        f"{h.sum_wx[index].sum():e}", f"{h.sum_wx2[index].sum():e}",
        f"{int(h.n_entries[index].sum())}",
    ])

def format_histogram(h: analysis_objects.BookedHistogram, analysis_name: str) -> str:
    """ Format a booked histogram as a YODA ``Histo1D`` block.

    Args:
        h: Histogram to format.
        analysis_name: Name of the analysis, which is used as the histogram path prefix.
    Returns:
        The formatted histogram.
    """
    path = f"/{analysis_name}/{h.name}"
    total_sum_w = h.sum_w.sum()
    mean = h.sum_wx.sum() / total_sum_w if total_sum_w != 0 else 0.0

    lines: List[str] = [
        f"BEGIN YODA_HISTO1D_V2 {path}",
        f"Path: {path}",
        f"Title: {h.title}",
        "Type: Histo1D",
        "---",
        f"# Mean: {mean:e}",
        f"# Area: {total_sum_w:e}",
        "# ID\t ID\t sumw\t sumw2\t sumwx\t sumwx2\t numEntries",
        _format_row("Total   ", "Total   ", h, slice(None)),
        _format_row("Underflow", "Underflow", h, slice(0, 1)),
        _format_row("Overflow", "Overflow", h, slice(-1, None)),
        "# xlow\t xhigh\t sumw\t sumw2\t sumwx\t sumwx2\t numEntries",
    ]
    for i, (low, high) in enumerate(zip(h.bin_edges[:-1], h.bin_edges[1:])):
        # Offset by one to account for the underflow.
        lines.append(_format_row(f"{low:e}", f"{high:e}", h, slice(i + 1, i + 2)))
    lines.append("END YODA_HISTO1D_V2")

    return "\n".join(lines) + "\n"

def write_yoda(histograms: Iterable[analysis_objects.BookedHistogram], analysis_name: str,
               output_prefix: str, filename: str = "") -> str:
    """ Write histograms to a YODA file.

    Args:
        histograms: Histograms to be written.
        analysis_name: Name of the analysis.
        output_prefix: Directory where the file will be written.
        filename: Filename (without the extension). Default: "", which corresponds to the analysis name.
    Returns:
        The filename under which the histograms were written.
    """
    if not filename:
        filename = analysis_name
    if not os.path.exists(output_prefix):
        os.makedirs(output_prefix)
    full_path = os.path.join(output_prefix, f"{filename}.yoda")

    with open(full_path, "w") as f:
        f.write("\n".join(format_histogram(h, analysis_name) for h in histograms))

    logger.info(f"Wrote histograms to {full_path}")
    return full_path
