"""Select representative points with the Largest-Triangle-Three-Buckets algorithm.

Based on lttb-numpy by JA Viljoen (MIT License),
https://git.sr.ht/~javiljoen/lttb-numpy. Only point selection is needed here:
callers keep their own values for the chosen indices.

Reference
---------
Sveinn Steinarsson. 2013. Downsampling Time Series for Visual
Representation. MSc thesis. University of Iceland.
"""

from __future__ import annotations

import numpy as np


def _areas_of_triangles(a, bs, c):
    """Twice the areas of the triangles (a, b, c) for every b in ``bs``.

    Only relative magnitudes matter to the caller, so the 0.5 factor is left out.
    """
    return np.abs((a[0] - c[0]) * (bs[:, 1] - a[1]) + (bs[:, 0] - a[0]) * (c[1] - a[1]))


def lttb_indices(data, n_out):
    """Indices of the ``n_out`` points LTTB keeps from ``data``.

    Parameters
    ----------
    data : numpy.array
        A 2-dimensional array with strictly increasing time values in the
        first column
    n_out : int
        Number of points to keep

    Returns
    -------
    numpy.array
        Sorted integer indices into ``data``; first and last rows are always kept.

    Raises
    ------
    ValueError
        If ``data`` is not two columns wide or ``n_out`` is out of range.
    """
    if data.ndim != 2 or data.shape[1] != 2:
        raise ValueError("data should have two columns")

    if n_out > data.shape[0]:
        raise ValueError("n_out must be <= number of rows in data")

    if n_out == data.shape[0]:
        return np.arange(len(data))

    if n_out < 3:
        raise ValueError("Can only downsample to a minimum of 3 points")

    n_bins = n_out - 2
    middle_data = data[1:-1]

    bin_edges = np.linspace(0, len(middle_data), n_bins + 1, dtype=int)
    bin_sums = np.add.reduceat(middle_data, bin_edges[:-1], axis=0)
    bin_sizes = np.diff(bin_edges)
    # The last data point stands in for the centroid after the final bin
    bin_centroids = np.vstack([bin_sums / bin_sizes[:, np.newaxis], data[-1]])

    indices = np.zeros(n_out, dtype=int)
    indices[-1] = len(data) - 1

    previous = data[0]
    for i in range(n_bins):
        bin_start = bin_edges[i]
        this_bin = middle_data[bin_start : bin_edges[i + 1]]

        local_idx = int(np.argmax(_areas_of_triangles(previous, this_bin, bin_centroids[i + 1])))

        # +1 because middle_data starts at index 1
        indices[i + 1] = bin_start + local_idx + 1
        previous = this_bin[local_idx]

    return indices
