"""Running median filter for pitch tracks with gaps.

Unvoiced frames are carried as NaN.  They are ignored inside each window
instead of poisoning it, so a voiced run keeps its value up to the edge of a
gap and a window with no voiced frames at all stays unvoiced.
"""

from typing import Optional, Sequence, Union

import numpy as np

Track = Union[np.ndarray, Sequence[Optional[float]]]


def median_filter(values: Track, window: int) -> np.ndarray:
    """
    Apply a NaN-aware running median.

    Args:
        values: Sequence of floats; None or NaN marks an absent value
        window: Window width in frames (even widths are widened by one)

    Returns:
        Float array of the same length.  Each entry is the element at index
        len // 2 of the sorted finite values inside the window (clipped to
        the sequence bounds), or NaN when the window has no finite value.
    """
    track = np.asarray(
        [np.nan if v is None else v for v in values], dtype=float
    )
    if window < 1:
        raise ValueError(f"Median window must be positive, got {window}")

    width = window if window % 2 == 1 else window + 1
    half = width // 2
    n = len(track)
    out = np.full(n, np.nan)

    for i in range(n):
        lo = max(0, i - half)
        hi = min(n, i + half + 1)
        segment = track[lo:hi]
        finite = np.sort(segment[np.isfinite(segment)])
        if finite.size:
            out[i] = finite[finite.size // 2]

    return out
