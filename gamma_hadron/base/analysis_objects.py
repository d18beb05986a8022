#!/usr/bin/env python

""" Analysis objects for the gamma-hadron anaylsis

.. codeauthor:: Raymond Ehlers <raymond.ehlers@cern.ch>, Yale University
"""

from dataclasses import dataclass
import logging
import numpy as np
from typing import Dict, Iterator, List, Sequence, Union

from pachyderm import generic_class
from pachyderm import histogram
from pachyderm import yaml

# Setup logger
logger = logging.getLogger(__name__)

@dataclass
class PlottingOutputWrapper:
    """ Simple wrapper to allow use of the ``gamma_hadron.plot.base.save_plot`` convenience function.

    Attributes:
        output_prefix: File path to where files should be saved.
        printing_extensions: List of file extensions under which plots should be saved.
    """
    output_prefix: str
    printing_extensions: List[str]

####################
# Histogram booking
####################
@dataclass(frozen = True)
class HistogramDefinition:
    """ Defines a booked histogram and the figure of the paper to which it corresponds.

    Attributes:
        identifier: Identifier under which the histogram is booked, such as "d01-x01-y01". It
            must be preserved verbatim because it is used to match the reference data.
        figure: Figure number in the paper.
        panel: Panel of the figure. Empty if the figure has only one panel.
        attribute_name: Short name describing the quantity.
        description: Description of the histogram.
    """
    identifier: str
    figure: int
    panel: str
    attribute_name: str
    description: str

# The histograms of arXiv:1604.01117, in the order in which they are booked.
HISTOGRAM_DEFINITIONS = (
    # Figure 1: Correlation functions
    HistogramDefinition("d01-x01-y01", 1, "a", "CF_1a_gamma", "Correlation function, direct photon triggers"),
    HistogramDefinition("d02-x01-y01", 1, "a", "CF_1a_pi", "Correlation function, neutral pion triggers"),
    HistogramDefinition("d03-x01-y01", 1, "b", "CF_1b_gamma", "Correlation function, direct photon triggers"),
    HistogramDefinition("d04-x01-y01", 1, "b", "CF_1b_pi", "Correlation function, neutral pion triggers"),
    HistogramDefinition("d05-x01-y01", 1, "c", "CF_1c_gamma", "Correlation function, direct photon triggers"),
    HistogramDefinition("d06-x01-y01", 1, "c", "CF_1c_pi", "Correlation function, neutral pion triggers"),
    HistogramDefinition("d07-x01-y01", 1, "d", "CF_1d_gamma", "Correlation function, direct photon triggers"),
    HistogramDefinition("d08-x01-y01", 1, "d", "CF_1d_pi", "Correlation function, neutral pion triggers"),
    # Figure 2: z_T distributions
    HistogramDefinition("d09-x01-y01", 2, "a", "ZD_2a_au", "z_T distribution, Au+Au"),
    HistogramDefinition("d10-x01-y01", 2, "a", "ZD_2a_pp", "z_T distribution, p+p"),
    HistogramDefinition("d11-x01-y01", 2, "b", "ZD_2b_au", "z_T distribution, Au+Au"),
    HistogramDefinition("d12-x01-y01", 2, "b", "ZD_2b_pp", "z_T distribution, p+p"),
    # Figure 3
    HistogramDefinition("d13-x01-y01", 3, "", "ZD_3_au", "z_T distribution, Au+Au"),
    HistogramDefinition("d14-x01-y01", 3, "", "ZD_3_pp", "z_T distribution, p+p"),
    # Figure 4
    HistogramDefinition("d15-x01-y01", 4, "", "ZD_pp", "z_T distribution, p+p"),
    # Figure 5: Away-side medium modification factor
    HistogramDefinition("d16-x01-y01", 5, "", "IAA_photon", "I_AA, direct photon triggers"),
    HistogramDefinition("d17-x01-y01", 5, "", "IAA_pi", "I_AA, neutral pion triggers"),
    # Figure 6
    HistogramDefinition("d18-x01-y01", 6, "", "DZT_photon", "D(z_T) difference, direct photon triggers"),
    HistogramDefinition("d19-x01-y01", 6, "", "DZT_pi", "D(z_T) difference, neutral pion triggers"),
    # Figure 7
    HistogramDefinition("d20-x01-y01", 7, "", "IAA_trig", "I_AA as a function of trigger energy"),
    HistogramDefinition("d21-x01-y01", 7, "", "IAA_assoc", "I_AA as a function of associated momentum"),
)

class BookedHistogram:
    """ A fillable 1D histogram.

    The statistics are stored in arrays of length ``n_bins + 2``, where the first entry is the
    underflow and the last entry is the overflow. This keeps the fill a single vectorized operation.
    The lower bin edge is inclusive, while the upper bin edge is exclusive.

    Args:
        name: Name (identifier) of the histogram.
        bin_edges: Bin edges of the histogram.
        title: Title of the histogram. Default: "".

    Attributes:
        name: Name (identifier) of the histogram.
        title: Title of the histogram.
        bin_edges: Bin edges of the histogram.
        sum_w: Sum of weights in each bin (including underflow and overflow).
        sum_w2: Sum of squared weights in each bin (including underflow and overflow).
        sum_wx: Sum of weight * x in each bin (including underflow and overflow).
        sum_wx2: Sum of weight * x^2 in each bin (including underflow and overflow).
        n_entries: Number of fills in each bin (including underflow and overflow).
    """
    def __init__(self, name: str, bin_edges: Union[Sequence[float], np.ndarray], title: str = ""):
        bin_edges = np.array(bin_edges, dtype = np.float64)
        # Validation
        if bin_edges.ndim != 1 or len(bin_edges) < 2:
            raise ValueError(f"Need at least two bin edges to define histogram {name}. Given: {bin_edges}")
        if np.any(np.diff(bin_edges) <= 0):
            raise ValueError(f"Bin edges of histogram {name} must be strictly increasing. Given: {bin_edges}")

        self.name = name
        self.title = title
        self.bin_edges = bin_edges
        n_cells = len(bin_edges) + 1
        self.sum_w = np.zeros(n_cells)
        self.sum_w2 = np.zeros(n_cells)
        self.sum_wx = np.zeros(n_cells)
        self.sum_wx2 = np.zeros(n_cells)
        self.n_entries = np.zeros(n_cells, dtype = np.int64)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, n_bins={self.n_bins}, entries={self.entries})"

    @property
    def n_bins(self) -> int:
        return len(self.bin_edges) - 1

    @property
    def entries(self) -> int:
        """ Total number of fills, including the underflow and overflow. """
        return int(np.sum(self.n_entries))

    @property
    def contents(self) -> np.ndarray:
        """ Bin contents, excluding the underflow and overflow. """
        return self.sum_w[1:-1]

    @property
    def underflow(self) -> float:
        return float(self.sum_w[0])

    @property
    def overflow(self) -> float:
        return float(self.sum_w[-1])

    def find_bin(self, values: Union[float, np.ndarray]) -> np.ndarray:
        """ Find the cell index of the given values.

        Note:
            The index is with respect to the statistics arrays, so 0 is the underflow and
            ``n_bins + 1`` is the overflow. The bin containing the value is thus ``index - 1``
            in the bin edges.

        Args:
            values: Value(s) to locate.
        Returns:
            Cell indices.
        """
        return np.searchsorted(self.bin_edges, values, side = "right")

    def fill(self, values: Union[float, np.ndarray], weight: Union[float, np.ndarray] = 1.0) -> None:
        """ Fill the histogram.

        Args:
            values: Value(s) to be filled.
            weight: Weight(s) for the values. A single weight is applied to all values.
        Returns:
            None. The histogram is filled in place.
        """
        values = np.atleast_1d(np.asarray(values, dtype = np.float64))
        weights = np.broadcast_to(np.asarray(weight, dtype = np.float64), values.shape)
        indices = self.find_bin(values)

        np.add.at(self.sum_w, indices, weights)
        np.add.at(self.sum_w2, indices, weights ** 2)
        np.add.at(self.sum_wx, indices, weights * values)
        np.add.at(self.sum_wx2, indices, weights * values ** 2)
        np.add.at(self.n_entries, indices, 1)

    def reset(self) -> None:
        """ Reset all of the stored statistics. """
        for arr in [self.sum_w, self.sum_w2, self.sum_wx, self.sum_wx2, self.n_entries]:
            arr[:] = 0

    def to_histogram(self) -> histogram.Histogram1D:
        """ Convert the filled values into a ``pachyderm`` histogram for further processing and plotting. """
        return histogram.Histogram1D(
            bin_edges = self.bin_edges, y = self.sum_w[1:-1], errors_squared = self.sum_w2[1:-1],
        )

class HistogramCollection(generic_class.EqualityMixin):
    """ Stores booked histograms by their identifiers.

    Attributes:
        histograms: Histograms stored by identifier, in the order in which they were booked.
    """
    def __init__(self) -> None:
        self.histograms: Dict[str, BookedHistogram] = {}

    def book(self, name: str, bin_edges: Union[Sequence[float], np.ndarray], title: str = "") -> BookedHistogram:
        """ Book a histogram under the given identifier.

        Args:
            name: Identifier of the histogram.
            bin_edges: Bin edges of the histogram.
            title: Title of the histogram. Default: "".
        Returns:
            The booked histogram.
        Raises:
            ValueError: If a histogram was already booked under the identifier.
        """
        if name in self.histograms:
            raise ValueError(f"Histogram {name} has already been booked.")
        h = BookedHistogram(name = name, bin_edges = bin_edges, title = title)
        self.histograms[name] = h
        return h

    def fill_all(self, values: Union[float, np.ndarray], weight: Union[float, np.ndarray] = 1.0) -> None:
        """ Fill the same values into every booked histogram. """
        for h in self.histograms.values():
            h.fill(values, weight)

    def __getitem__(self, name: str) -> BookedHistogram:
        try:
            return self.histograms[name]
        except KeyError as e:
            raise KeyError(f"Histogram {name} has not been booked. Available: {list(self.histograms)}") from e

    def __contains__(self, name: str) -> bool:
        return name in self.histograms

    def __iter__(self) -> Iterator[BookedHistogram]:
        return iter(self.histograms.values())

    def __len__(self) -> int:
        return len(self.histograms)

###################################
# Binning (with YAML)
###################################
class DeltaPhiBinEdges:
    """ Define uniform delta phi bin edges in units of pi.

    It reads objects registered under the tag ``!DeltaPhiBinEdges``. Loading

    .. code-block:: yaml

        - bin_edges: !DeltaPhiBinEdges
                n_bins: 4
                min: 0
                max: 2

    yields

    .. code-block:: python

        >>> bin_edges = [0, np.pi / 2, np.pi, 3 * np.pi / 2, 2 * np.pi]

    Note:
        This is just convenience function for YAML. It isn't round-trip because we would never use write back out.
        The edges are returned as a list (rather than an array) so that the configuration can still be simplified.
    """
    @classmethod
    def from_yaml(cls, constructor: yaml.Constructor, data: yaml.ruamel.yaml.nodes.MappingNode) -> List[float]:
        """ Convert input YAML mapping to the delta phi bin edges. """
        configuration = {constructor.construct_object(key_node): constructor.construct_object(value_node) for key_node, value_node in data.value}
        n_bins = int(configuration["n_bins"])
        if n_bins < 1:
            raise ValueError(f"Must have at least one delta phi bin. Given: {n_bins}")
        edges = np.linspace(configuration.get("min", 0) * np.pi, configuration.get("max", 2) * np.pi, n_bins + 1)
        return [float(e) for e in edges]
