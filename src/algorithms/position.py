"""
Coarse position descriptions for narration.
"""

from __future__ import annotations

from models.detection import BoundingBox


def describe_position(box: BoundingBox, frame_width: float, frame_height: float) -> str:
    """
    Describe where a box sits in the frame and how close it looks.

    The frame is split into thirds horizontally and vertically; closeness
    comes from the box height relative to the frame height.

    Returns:
        A string such as "left-top, far" or "center-middle, very close".
    """
    center_x, center_y = box.center

    if center_x < frame_width / 3:
        direction_x = "left"
    elif center_x > frame_width * 2 / 3:
        direction_x = "right"
    else:
        direction_x = "center"

    if center_y < frame_height / 3:
        direction_y = "top"
    elif center_y > frame_height * 2 / 3:
        direction_y = "bottom"
    else:
        direction_y = "middle"

    box_height = box.height
    if box_height > frame_height / 2:
        closeness = "very close"
    elif box_height > frame_height / 3:
        closeness = "near"
    else:
        closeness = "far"

    return f"{direction_x}-{direction_y}, {closeness}"
