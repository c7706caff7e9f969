"""
Animation frame remapping.

An animated tile drags every tile it shows into the optimized map, even
tiles never painted on a layer. Frames are walked depth-first with an
explicit stack, so long frame chains do not grow the Python call stack.
"""

from typing import Callable, Iterator, List, Optional, Tuple

from .config import EMPTY_TILE
from .models import Frame, TileData

# (record receiving remapped frames, source frames still to remap)
PendingAnimation = Tuple[TileData, Iterator[Frame]]

# Maps an original gid to (dense id, animation of a newly seen tile or None)
Register = Callable[[int], Tuple[int, Optional[PendingAnimation]]]


def pending_animation(record: TileData, frames: List[Frame]) -> PendingAnimation:
    """Prepare `record` to receive the remapped copy of `frames`"""
    record.animation = []
    return record, iter(frames)


def resolve_animations(root: PendingAnimation, register: Register) -> None:
    """
    Remap the frames of `root` and of every tile they pull in.

    `register` records a gid before its own frames are walked, so a frame
    pointing back at a tile already being resolved gets its recorded id
    and no pending animation.

    Args:
        root: Animation of the tile that was just registered
        register: Callback assigning dense ids
    """
    stack = [root]

    while stack:
        record, frames = stack[-1]
        frame = next(frames, None)

        if frame is None:
            stack.pop()
            continue

        if frame.tileid == EMPTY_TILE:
            record.animation.append(Frame(tileid=EMPTY_TILE, duration=frame.duration))
            continue

        new_id, nested = register(frame.tileid)
        record.animation.append(Frame(tileid=new_id, duration=frame.duration))

        if nested is not None:
            stack.append(nested)
