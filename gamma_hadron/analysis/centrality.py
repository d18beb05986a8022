#!/usr/bin/env python

""" Centrality estimation.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import logging
import numpy as np
from typing import Optional, Sequence

from gamma_hadron.event_gen import generator

logger = logging.getLogger(__name__)

# Returned when the centrality cannot (yet) be determined. It is outside of any physical window.
INVALID_CENTRALITY = -1.0

class ImpactParameterCentrality:
    """ Estimate the centrality from the impact parameter of the collision.

    The centrality of an event is the percentile of its impact parameter within the distribution of
    impact parameters. The distribution is either provided as a fixed reference, or it is built up
    from the events themselves. In the latter case, the first ``n_calibration_events - 1`` events are
    used purely for calibration and are assigned an invalid centrality of -1.

    Args:
        n_calibration_events: Number of events required before the centrality can be determined. Default: 20.
        reference_impact_parameters: Fixed reference distribution of impact parameters. If provided,
            no calibration is performed and the reference isn't updated. Default: None.

    Attributes:
        n_calibration_events: Number of events required before the centrality can be determined.
        impact_parameters: Impact parameters which define the distribution, kept sorted in ascending order.
        fixed_reference: True if the distribution is a fixed reference.
    """
    def __init__(self, n_calibration_events: int = 20, reference_impact_parameters: Optional[Sequence[float]] = None):
        self.n_calibration_events = n_calibration_events
        self.fixed_reference = reference_impact_parameters is not None
        self.impact_parameters: np.ndarray = np.sort(np.array(
            reference_impact_parameters if reference_impact_parameters is not None else [], dtype = np.float64
        ))
        if self.fixed_reference and len(self.impact_parameters) == 0:
            raise ValueError("Must provide at least one reference impact parameter.")

    @property
    def calibrated(self) -> bool:
        return self.fixed_reference or len(self.impact_parameters) >= self.n_calibration_events

    def __call__(self, event: generator.Event) -> float:
        """ Determine the centrality of the given event.

        Args:
            event: Event for which the centrality should be determined.
        Returns:
            Centrality in percent, or -1 if it could not be determined.
        """
        event_properties, _ = event
        impact_parameter = event_properties.impact_parameter
        if not self.fixed_reference:
            self.impact_parameters = np.insert(
                self.impact_parameters, np.searchsorted(self.impact_parameters, impact_parameter), impact_parameter
            )

        if not self.calibrated:
            return INVALID_CENTRALITY

        # Fraction of the distribution which is less than or equal to the impact parameter.
        n_less_or_equal = np.searchsorted(self.impact_parameters, impact_parameter, side = "right")
        return float(100.0 * n_less_or_equal / len(self.impact_parameters))
