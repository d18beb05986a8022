#!/usr/bin/env python

""" Direct photon and neutral pion triggered hadron correlations.

Reproduces the observables of STAR, "Jet-like correlations with direct-photon and neutral-pion
triggers at sqrt(s_NN) = 200 GeV" (arXiv:1604.01117).

Can be invoked via ``python -m gamma_hadron.analysis.correlations -c ...``.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

from dataclasses import dataclass, field
import logging
import numpy as np
from typing import Any, Callable, Dict, Optional, Sequence, Union

from gamma_hadron.analysis import centrality
from gamma_hadron.analysis import output
from gamma_hadron.analysis import selections
from gamma_hadron.base import analysis_manager
from gamma_hadron.base import analysis_objects
from gamma_hadron.base import params
from gamma_hadron.event_gen import event_file
from gamma_hadron.event_gen import generator
from gamma_hadron.event_gen import toy_model
from gamma_hadron.plot import correlations as plot_correlations

logger = logging.getLogger(__name__)

ANALYSIS_NAME = "STAR_2016_I1442357"

# Type helpers
CentralityEstimator = Callable[[generator.Event], float]

def default_delta_phi_bin_edges(n_bins: int = 30) -> np.ndarray:
    """ Uniform delta phi binning over [0, 2 pi). """
    return np.linspace(0, 2 * np.pi, n_bins + 1)

def delta_phi(phi_trigger: Union[float, np.ndarray], phi_associated: Union[float, np.ndarray]) -> np.ndarray:
    """ Calculate the azimuthal angle difference between associated and trigger particles.

    Args:
        phi_trigger: Trigger particle phi.
        phi_associated: Associated particle phi.
    Returns:
        phi_associated - phi_trigger, shifted into [0, 2 pi).
    """
    values = np.mod(np.asarray(phi_associated, dtype = np.float64) - np.asarray(phi_trigger, dtype = np.float64), 2 * np.pi)
    # The modulo of a very small negative value can round up to exactly 2 pi.
    return np.where(values >= 2 * np.pi, values - 2 * np.pi, values)

@dataclass
class EventCounters:
    """ Bookkeeping of the processed events.

    Attributes:
        n_events: Number of events which were analyzed.
        n_vetoed: Number of events which were vetoed by the centrality selection.
        n_accepted: Number of events which were accepted.
        sum_of_weights: Sum of the event weights of the accepted events.
        n_triggers: Number of triggers for each trigger type.
        n_pairs: Number of trigger-associated pairs which were filled.
    """
    n_events: int = 0
    n_vetoed: int = 0
    n_accepted: int = 0
    sum_of_weights: float = 0.0
    n_triggers: Dict[params.TriggerType, int] = field(default_factory = lambda: {t: 0 for t in params.TriggerType})
    n_pairs: int = 0

class GammaHadronCorrelations:
    """ Correlate trigger photons and neutral pions with associated charged hadrons.

    Every trigger-associated pair where the associated particle has a lower pt than the trigger
    is filled into all of the booked histograms with the (constant) fill weight. Note that the
    event weight is explicitly not used for the fill.

    Args:
        trigger_selection: Trigger particle selection.
        associated_selection: Associated particle selection.
        centrality_estimator: Determines the centrality of an event. Default: None. It must be
            provided if a centrality range is selected.
        centrality_range: Accepted centrality range (inclusive). Default: None, which disables
            the centrality selection.
        delta_phi_bin_edges: Bin edges of the delta phi histograms. Default: 30 bins over [0, 2 pi).
        fill_weight: Weight used to fill the histograms. Default: 1.
        analysis_name: Name of the analysis. Default: "STAR_2016_I1442357".

    Attributes:
        histograms: Booked histograms. Available after ``init()``.
        counters: Bookkeeping of the processed events.
    """
    def __init__(self, trigger_selection: selections.ParticleSelection,
                 associated_selection: selections.ParticleSelection,
                 centrality_estimator: Optional[CentralityEstimator] = None,
                 centrality_range: Optional[params.SelectedRange] = None,
                 delta_phi_bin_edges: Optional[Union[Sequence[float], np.ndarray]] = None,
                 fill_weight: float = 1.0,
                 analysis_name: str = ANALYSIS_NAME):
        if centrality_range is not None and centrality_estimator is None:
            raise ValueError(f"Centrality range {centrality_range} is selected, but no centrality estimator was provided.")
        if delta_phi_bin_edges is None:
            delta_phi_bin_edges = default_delta_phi_bin_edges()

        self.trigger_selection = trigger_selection
        self.associated_selection = associated_selection
        self.centrality_estimator = centrality_estimator
        self.centrality_range = centrality_range
        self.delta_phi_bin_edges = np.array(delta_phi_bin_edges, dtype = np.float64)
        self.fill_weight = fill_weight
        self.analysis_name = analysis_name

        self.histograms = analysis_objects.HistogramCollection()
        self.counters = EventCounters()

    def init(self) -> None:
        """ Book the histograms and reset the event counters. """
        self.histograms = analysis_objects.HistogramCollection()
        for definition in analysis_objects.HISTOGRAM_DEFINITIONS:
            self.histograms.book(
                definition.identifier, bin_edges = self.delta_phi_bin_edges,
                title = definition.description,
            )
        self.counters = EventCounters()
        logger.debug(f"Booked {len(self.histograms)} histograms with {len(self.delta_phi_bin_edges) - 1} delta phi bins")

    def _passes_centrality_selection(self, event: generator.Event) -> bool:
        """ Check whether the event is within the selected centrality range. """
        if self.centrality_range is None:
            return True
        # Help out mypy
        assert self.centrality_estimator is not None
        c = self.centrality_estimator(event)
        return not (c < self.centrality_range.min or c > self.centrality_range.max)

    def analyze(self, event: generator.Event) -> bool:
        """ Perform the per-event analysis.

        Args:
            event: Event level information and the final state particles.
        Returns:
            True if the event was accepted. False if it was vetoed.
        """
        self.counters.n_events += 1
        # The first events will be used to calibrate the centrality, so they are outside of any centrality range.
        if not self._passes_centrality_selection(event):
            self.counters.n_vetoed += 1
            return False

        event_properties, particles = event
        self.counters.n_accepted += 1
        self.counters.sum_of_weights += event_properties.weight

        triggers = self.trigger_selection.select(particles)
        associated = self.associated_selection.select(particles)
        for trigger_type in params.TriggerType:
            self.counters.n_triggers[trigger_type] += int(np.count_nonzero(triggers["pid"] == trigger_type.value))
        if len(triggers) == 0 or len(associated) == 0:
            return True

        # Pairs are stored as (trigger, associated).
        # Only include associated particles with pt less than the trigger.
        pair_mask = associated["pT"][np.newaxis, :] < triggers["pT"][:, np.newaxis]
        values = delta_phi(triggers["phi"][:, np.newaxis], associated["phi"][np.newaxis, :])[pair_mask]

        self.histograms.fill_all(values, self.fill_weight)
        self.counters.n_pairs += len(values)

        return True

    def finalize(self) -> None:
        """ Finalize the analysis.

        The histograms are intentionally not normalized. We just report the bookkeeping.
        """
        c = self.counters
        triggers = ", ".join(f"{t}: {n}" for t, n in c.n_triggers.items())
        logger.info(
            f"{self.analysis_name}: events: {c.n_events}, vetoed: {c.n_vetoed}, accepted: {c.n_accepted}"
            f" (sum of weights: {c.sum_of_weights}), triggers: ({triggers}), pairs: {c.n_pairs}"
        )

def create_event_source(task_config: Dict[str, Any], toy_model_config: Dict[str, Any],
                        selected_analysis_options: params.SelectedAnalysisOptions,
                        formatting_options: Optional[Dict[str, Any]] = None) -> Union[generator.Generator, event_file.EventFileReader]:
    """ Create the event source specified in the configuration.

    Args:
        task_config: Task configuration.
        toy_model_config: Toy model configuration.
        selected_analysis_options: Selected analysis options.
        formatting_options: Options used to format the input prefix. Default: None, in which case
            the input prefix is used as given.
    Returns:
        The event source.
    """
    event_source = task_config.get("event_source", "toy")
    if event_source == "toy":
        return toy_model.ToyHeavyIonGenerator(
            parameters = toy_model.ToyModelParameters.from_config(toy_model_config),
            # Energy is specified in TeV in ``params.CollisionEnergy``, but the generator
            # expects it to be in GeV.
            sqrt_s = selected_analysis_options.collision_energy.value * 1000,
            random_seed = task_config.get("random_seed", None),
        )
    if event_source == "file":
        input_prefix = task_config["input_prefix"]
        if formatting_options:
            input_prefix = input_prefix.format(**formatting_options)
        return event_file.EventFileReader(
            input_prefix = input_prefix,
            name = task_config.get("input_name", "events"),
        )
    raise ValueError(f"Unrecognized event source \"{event_source}\". Options: [\"toy\", \"file\"]")

class STARGammaHadronManager(analysis_manager.Manager):
    """ Manage running the gamma-hadron correlations analysis.

    Args:
        config_filename: Path to the configuration filename.
        selected_analysis_options: Selected analysis options.
    """
    def __init__(self, config_filename: str, selected_analysis_options: params.SelectedAnalysisOptions, **kwargs: str):
        # Initialize the base class
        super().__init__(
            config_filename = config_filename, selected_analysis_options = selected_analysis_options,
            manager_task_name = "STARGammaHadronManager", **kwargs,
        )

        # Basic configuration
        self.n_events = self.task_config["n_events"]
        self.experiment_label = params.ExperimentLabel[self.config.get("experimentLabel", "simulation")]
        self.analysis_name = self.config.get("analysisName", ANALYSIS_NAME)

        # Selections
        self.trigger_selection, self.associated_selection = selections.selections_from_config(self.config["selections"])

        # Centrality
        centrality_config = self.config["centrality"]
        event_activity = self.selected_analysis_options.event_activity
        centrality_range: Optional[params.SelectedRange] = None
        centrality_estimator: Optional[CentralityEstimator] = None
        if centrality_config.get("enabled", True) and event_activity != params.EventActivity.inclusive:
            centrality_range = event_activity.value_range
            centrality_estimator = centrality.ImpactParameterCentrality(
                n_calibration_events = centrality_config.get("n_calibration_events", 20),
            )
        else:
            logger.info("Centrality selection is disabled.")

        # Create the event source and the analysis.
        self.event_source = create_event_source(
            task_config = self.task_config, toy_model_config = self.config.get("toyModel", {}),
            selected_analysis_options = self.selected_analysis_options,
            formatting_options = self.formatting_options,
        )
        self.analysis = GammaHadronCorrelations(
            trigger_selection = self.trigger_selection,
            associated_selection = self.associated_selection,
            centrality_estimator = centrality_estimator,
            centrality_range = centrality_range,
            delta_phi_bin_edges = self.task_config.get("delta_phi_bin_edges", None),
            fill_weight = self.task_config.get("fill_weight", 1.0),
            analysis_name = self.analysis_name,
        )

    def run(self) -> bool:
        """ Setup and run the analysis. """
        # Steps to the analysis
        # 1. Setup
        # 2. Event loop
        # 3. Finalize and write the output
        if not self.event_source.initialized:
            res = self.event_source.setup()
            if not res:
                raise RuntimeError("Event source setup failed!")
        self.analysis.init()

        logger.info(f"Analyzing {self.n_events} events for {self.analysis_name}")
        with self._progress_manager.counter(total = self.n_events,
                                            desc = "Analyzing", unit = "events") as progress:
            for event in self.event_source(self.n_events):
                self.analysis.analyze(event)
                progress.update()

        self.analysis.finalize()

        # Write out the histograms and plot them.
        output.write_yoda(
            self.analysis.histograms, analysis_name = self.analysis_name,
            output_prefix = self.output_info.output_prefix,
        )
        if self.task_config.get("plot", True):
            plot_correlations.delta_phi_figures(
                histograms = self.analysis.histograms, output_info = self.output_info,
                selected_analysis_options = self.selected_analysis_options,
                experiment_label = self.experiment_label,
                trigger_selection = self.trigger_selection,
                associated_selection = self.associated_selection,
            )

        return True

def run_from_terminal() -> STARGammaHadronManager:
    """ Driver function for running the gamma-hadron correlations analysis. """
    # Setup and run the analysis
    manager: STARGammaHadronManager = analysis_manager.run_helper(
        manager_class = STARGammaHadronManager, task_name = "STARGammaHadronManager",
        description = "STAR Gamma-Hadron Correlations Manager",
    )

    # Return it for convenience.
    return manager

if __name__ == "__main__":
    run_from_terminal()
