"""
Label layout - where each vocabulary label sits over the scene image.

Detected coordinates are used as-is (when x > 0). Everything else falls back
to a two-column grid: x = 25 + 50 * (i % 2), y = 20 + 20 * (i // 2), in
percent. Rows run past 100% for more than about 8 items; no collision
handling is attempted.
"""

from dataclasses import dataclass

from lingocard.schemas import Vocabulary

GRID_COLUMNS = 2
GRID_LEFT = 25.0
GRID_COLUMN_STEP = 50.0
GRID_TOP = 20.0
GRID_ROW_STEP = 20.0


@dataclass(frozen=True)
class LabelPosition:
    """Label center in percent of the image box."""
    x: float
    y: float
    detected: bool  # True when taken from object detection


def fallback_position(index: int) -> LabelPosition:
    """Grid slot for the index-th label."""
    row, col = divmod(index, GRID_COLUMNS)
    return LabelPosition(
        x=GRID_LEFT + col * GRID_COLUMN_STEP,
        y=GRID_TOP + row * GRID_ROW_STEP,
        detected=False,
    )


def has_detected_position(vocab: Vocabulary) -> bool:
    return vocab.coordinates is not None and vocab.coordinates.x > 0


def compute_label_positions(vocabulary: list[Vocabulary]) -> list[LabelPosition]:
    """
    Position every label, in vocabulary order.

    Args:
        vocabulary: Items in display order

    Returns:
        One LabelPosition per item
    """
    positions = []
    for index, vocab in enumerate(vocabulary):
        if has_detected_position(vocab):
            positions.append(LabelPosition(x=vocab.coordinates.x, y=vocab.coordinates.y, detected=True))
        else:
            positions.append(fallback_position(index))
    return positions
