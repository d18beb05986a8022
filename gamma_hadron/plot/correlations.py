#!/usr/bin/env python

""" Plot the gamma-hadron correlations.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import itertools
import logging
from typing import Dict, List

import matplotlib.pyplot as plt

from gamma_hadron.analysis import selections
from gamma_hadron.base import analysis_objects
from gamma_hadron.base import labels
from gamma_hadron.base import params
from gamma_hadron.plot import base as plot_base

logger = logging.getLogger(__name__)

def _summary_label(selected_analysis_options: params.SelectedAnalysisOptions,
                   experiment_label: params.ExperimentLabel,
                   trigger_selection: selections.ParticleSelection,
                   associated_selection: selections.ParticleSelection) -> str:
    """ Determine the label describing the system and the selections. """
    text = labels.make_valid_latex_string(experiment_label.display_str())
    text += "\n" + labels.system_label(
        energy = selected_analysis_options.collision_energy,
        system = selected_analysis_options.collision_system,
        activity = selected_analysis_options.event_activity,
    )
    text += "\n" + labels.trigger_pt_range_string(trigger_selection.pt_range.min, trigger_selection.pt_range.max)
    text += "\n" + labels.associated_pt_range_string(associated_selection.pt_range.min, associated_selection.pt_range.max)
    return text

def delta_phi_figures(histograms: analysis_objects.HistogramCollection,
                      output_info: analysis_objects.PlottingOutputWrapper,
                      selected_analysis_options: params.SelectedAnalysisOptions,
                      experiment_label: params.ExperimentLabel,
                      trigger_selection: selections.ParticleSelection,
                      associated_selection: selections.ParticleSelection) -> List[str]:
    """ Plot the delta phi distributions, with one plot per figure of the paper.

    Args:
        histograms: Booked (and filled) histograms.
        output_info: Output information.
        selected_analysis_options: Selected analysis options.
        experiment_label: Experiment label for the plots.
        trigger_selection: Trigger particle selection.
        associated_selection: Associated particle selection.
    Returns:
        Filenames under which the plots were saved.
    """
    summary = _summary_label(
        selected_analysis_options = selected_analysis_options, experiment_label = experiment_label,
        trigger_selection = trigger_selection, associated_selection = associated_selection,
    )

    # Group the definitions by figure.
    figures: Dict[int, List[analysis_objects.HistogramDefinition]] = {
        figure: list(definitions)
        for figure, definitions in itertools.groupby(analysis_objects.HISTOGRAM_DEFINITIONS, key = lambda d: d.figure)
    }

    filenames = []
    for figure, definitions in figures.items():
        fig, ax = plt.subplots(figsize = (8, 6))
        try:
            for definition in definitions:
                if definition.identifier not in histograms:
                    logger.warning(f"Histogram {definition.identifier} was not booked. Skipping it in figure {figure}.")
                    continue
                h = histograms[definition.identifier].to_histogram()
                panel = f" ({definition.panel})" if definition.panel else ""
                ax.errorbar(
                    h.x, h.y, yerr = h.errors,
                    marker = "o", linestyle = "", markersize = 4,
                    label = f"{definition.identifier}{panel}: {definition.description}",
                )

            # Labeling
            plot_labels = plot_base.PlotLabels(
                x_label = labels.delta_phi_axis_label(),
                y_label = labels.delta_phi_counts_label(),
            )
            plot_labels.apply_labels(ax)
            ax.text(0.03, 0.97, s = summary,
                    horizontalalignment = "left",
                    verticalalignment = "top",
                    multialignment = "left",
                    transform = ax.transAxes)
            ax.legend(loc = "upper right", frameon = False, fontsize = 8)
            fig.tight_layout()

            # Save. The figure is closed even if saving fails.
            filenames.extend(plot_base.save_plot(output_info, fig, f"figure_{figure}_delta_phi"))
        finally:
            plt.close(fig)

    return filenames
