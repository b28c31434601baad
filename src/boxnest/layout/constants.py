"""Layout constants used across layout modules.

All sizes are expressed in grid units; the renderer multiplies by
GRID_SIZE to obtain pixels.
"""

# ---------------------------------------------------------------------------
# Grid / spacing defaults
# ---------------------------------------------------------------------------
GRID_SIZE: int = 10
"""Pixels per grid unit."""

MARGIN: float = 1.0
"""Spacing between siblings and between a parent edge and its children."""

LABEL_MARGIN: float = 2.0
"""Space reserved at the top of a parent for its label."""

# ---------------------------------------------------------------------------
# Size limits
# ---------------------------------------------------------------------------
MIN_WIDTH: float = 5.0
"""Smallest width any node may have."""

MIN_HEIGHT: float = 3.0
"""Smallest height any node may have."""

# ---------------------------------------------------------------------------
# Default node sizes (used when a node is created without explicit bounds)
# ---------------------------------------------------------------------------
DEFAULT_ROOT_WIDTH: float = 16.0
"""Initial width of a new root node."""

DEFAULT_ROOT_HEIGHT: float = 10.0
"""Initial height of a new root node."""

DEFAULT_LEAF_WIDTH: float = 5.0
"""Initial width of a new child node."""

DEFAULT_LEAF_HEIGHT: float = 3.0
"""Initial height of a new child node."""

DEFAULT_TEXT_LABEL_WIDTH: float = 8.0
"""Initial width of a new text label."""

DEFAULT_TEXT_LABEL_HEIGHT: float = 3.0
"""Initial height of a new text label."""

# ---------------------------------------------------------------------------
# Fixed leaf dimensions
# ---------------------------------------------------------------------------
LEAF_FIXED_WIDTH: float = 5.0
"""Pinned leaf width when fixed-width mode is on."""

LEAF_FIXED_HEIGHT: float = 3.0
"""Pinned leaf height when fixed-height mode is on."""

# ---------------------------------------------------------------------------
# Z-order
# ---------------------------------------------------------------------------
MAX_Z_DEPTH: int = 10
"""Depth beyond which z-order stops increasing."""

Z_BASE: int = 10
"""Base z-index of a root node."""

Z_DEPTH_STEP: int = 10
"""Z-index increment per hierarchy level."""

Z_SELECTED_PARENT_BOOST: int = 5
"""Added to a selected node that has children.

Kept small so the selected parent stays below its own children.
"""

Z_SELECTED_LEAF_BOOST: int = 100
"""Added to a selected node without children."""

Z_RESIZE: int = 900
"""Z-index band for a node being resized and its descendants."""

Z_DRAG: int = 1000
"""Z-index band for a node being dragged and its descendants."""

# ---------------------------------------------------------------------------
# Free-space search
# ---------------------------------------------------------------------------
RANDOM_ATTEMPTS: int = 10
"""Random candidates tried before falling back to the interior corner."""

RANDOM_SEED: int = 0
"""Seed of the default random generator for the randomized fallback."""

# ---------------------------------------------------------------------------
# Numeric tolerance
# ---------------------------------------------------------------------------
EPSILON: float = 1e-6
"""Tolerance for floating-point comparisons of coordinates."""

# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------
DEFAULT_STRATEGY: str = "grid"
"""Packing strategy used when no other is requested."""
