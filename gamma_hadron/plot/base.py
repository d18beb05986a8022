#!/usr/bin/env python

""" Base plotting module.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

from dataclasses import dataclass
import logging
import os
from typing import List, Optional, Sequence

# Import and configure plotting packages
import matplotlib
import matplotlib.axes
import matplotlib.figure

import pachyderm.plot

from gamma_hadron.base import analysis_objects

# Setup logger
logger = logging.getLogger(__name__)

# Configure plot styling.
pachyderm.plot.configure()

# Provided for convenience.
PlottingOutputWrapper = analysis_objects.PlottingOutputWrapper

@dataclass
class PlotLabels:
    """ Simple wrapper for keeping plot labels together.

    Note:
        The attributes are initialized to and compared against ``None`` rather than the empty
        string because empty string is a valid value.

    Attributes:
        title: Title of the plot.
        x_label: x axis label of the plot.
        y_label: y axis label of the plot.
    """
    title: Optional[str] = None
    x_label: Optional[str] = None
    y_label: Optional[str] = None

    def apply_labels(self, ax: matplotlib.axes.Axes) -> None:
        if self.title is not None:
            ax.set_title(self.title)
        if self.x_label is not None:
            ax.set_xlabel(self.x_label)
        if self.y_label is not None:
            ax.set_ylabel(self.y_label)

def save_plot(obj: analysis_objects.PlottingOutputWrapper,
              figure: matplotlib.figure.Figure,
              output_name: str) -> List[str]:
    """ Loop over all requested file extensions and save the current plot in matplotlib.

    Args:
        obj: Contains the output_prefix and printing_extensions
        figure: Figure on which the plot was drawn.
        output_name: Filename under which the plot should be saved, but without the file extension.
    Returns:
        Filenames under which the plot was saved.
    """
    # Setup output area
    if not os.path.exists(obj.output_prefix):
        os.makedirs(obj.output_prefix)

    return save_plot_impl(
        fig = figure, output_prefix = obj.output_prefix, output_name = output_name,
        printing_extensions = obj.printing_extensions
    )

def save_plot_impl(fig: matplotlib.figure.Figure,
                   output_prefix: str, output_name: str,
                   printing_extensions: Sequence[str]) -> List[str]:
    """ Implementation of generic save plot function.

    It loops over all requested file extensions and save the matplotlib fig.

    Args:
        fig: Figure on which the plot was drawn.
        output_prefix: File path to where files should be saved.
        output_name: Filename under which the plot should be saved, but without the file extension.
        printing_extensions: List of file extensions under which plots should be saved. They should
            not contain the dot!
    Returns:
        Filenames under which the plot was saved.
    """
    filenames = []
    for extension in printing_extensions:
        filename = os.path.join(output_prefix, output_name + "." + extension)
        logger.debug(f"Saving matplotlib figure to \"{filename}\"")
        fig.savefig(filename)
        filenames.append(filename)
    return filenames
