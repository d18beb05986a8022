#!/usr/bin/env python

""" Labeling for plotting, etc.

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

import logging
import numbers
from typing import Union, TYPE_CHECKING

if TYPE_CHECKING:
    from gamma_hadron.base import params  # noqa: F401

logger = logging.getLogger(__name__)

def make_valid_latex_string(s: str) -> str:
    """ Take a string and make it a valid latex math string by wrapping it with "$"" when necessary.

    Of course, strings are only wrapped with the "$" if they are not already present.

    Args:
        s: The input string.
    Returns:
        The properly formatted string.
    """
    if s == "":
        return s
    if not s.startswith("$"):
        s = "$" + s
    if not s.endswith("$"):
        s = s + "$"
    return s

def pt_display_label(lower_label: str = "T", upper_label: str = "") -> str:
    """ Generate a pt display label without the "$".

    Args:
        lower_label: Subscript label for pT. Default: "T"
        upper_label: Superscript label for pT. Default: ""
    Returns:
        Properly formatted pt string.
    """
    return r"\mathit{p}_{\mathrm{%(lower_label)s}}^{\mathrm{%(upper_label)s}}" % {
        "lower_label": lower_label,
        "upper_label": upper_label,
    }

def momentum_units_label_gev() -> str:
    """ Generate a GeV/c label.

    Args:
        None.
    Returns:
        A properly latex formatted GeV/c label.
    """
    return r"\mathrm{GeV/\mathit{c}}"

def pt_range_string(min_pt: float, max_pt: float, lower_label: str, upper_label: str) -> str:
    """ Generate string to describe a pt range.

    Args:
        min_pt: Lower edge of the range.
        max_pt: Upper edge of the range.
        lower_label: Subscript label for pT.
        upper_label: Superscript labe for pT.
    Returns:
        The pt range label.
    """
    return r"$%(lower)s < %(pt_label)s < %(upper)s\:%(units_label)s$" % {
        "lower": f"{min_pt:g}",
        "pt_label": pt_display_label(lower_label = lower_label, upper_label = upper_label),
        "upper": f"{max_pt:g}",
        "units_label": momentum_units_label_gev(),
    }

def trigger_pt_range_string(min_pt: float, max_pt: float) -> str:
    """ Generate a label for the trigger pt range. """
    return pt_range_string(min_pt = min_pt, max_pt = max_pt, lower_label = "T", upper_label = "trig")

def associated_pt_range_string(min_pt: float, max_pt: float) -> str:
    """ Generate a label for the associated particle pt range. """
    return pt_range_string(min_pt = min_pt, max_pt = max_pt, lower_label = "T", upper_label = "assoc")

def system_label(energy: Union[float, "params.CollisionEnergy"],
                 system: Union[str, "params.CollisionSystem"],
                 activity: Union[str, "params.EventActivity"]) -> str:
    """ Generates the collision system, event activity, and energy label as a latex label.

    Args:
        energy: The collision energy
        system: The collision system.
        activity: The event activity selection.
    Returns:
        Label for the entire system, combining the available information.
    """
    # We defer the import until here because we need the objects, but we don't want to explicitly
    # depend on the params module.
    from gamma_hadron.base import params  # noqa: F811

    # Handle energy
    if isinstance(energy, numbers.Number):
        energy = params.CollisionEnergy(energy)
    elif isinstance(energy, str):
        try:
            e = float(energy)
            energy = params.CollisionEnergy(e)
        except ValueError:
            energy = params.CollisionEnergy[energy]  # type: ignore
    # Ensure that we've done our conversion correctly. This also helps out mypy.
    assert isinstance(energy, params.CollisionEnergy)

    # Handle collision system
    if isinstance(system, str):
        system = params.CollisionSystem[system]  # type: ignore

    # Handle event activity
    if isinstance(activity, str):
        activity = params.EventActivity[activity]  # type: ignore
    event_activity_str = activity.display_str()
    if event_activity_str:
        event_activity_str = r",\:" + event_activity_str

    system_label = r"$%(system)s\:%(energy)s%(event_activity)s$" % {
        "system": system.display_str(),
        "energy": energy.display_str(),
        "event_activity": event_activity_str,
    }

    return system_label

def delta_phi_axis_label() -> str:
    """ The delta phi x axis label. """
    return make_valid_latex_string(r"\Delta\varphi\:\mathrm{(rad)}")

def delta_phi_counts_label() -> str:
    """ The delta phi y axis label. The histograms are not normalized, so it is just the pair counts. """
    return make_valid_latex_string(r"\mathrm{d}N_{\mathrm{pairs}}/\mathrm{d}\Delta\varphi")
