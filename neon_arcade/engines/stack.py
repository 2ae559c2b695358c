"""Stack drop-timing engine.

Transitions never mutate their input: each returns a new `StackState` (or the same
object when the transition is a no-op).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

BLOCK_HEIGHT = 25
CANVAS_WIDTH = 400
CANVAS_HEIGHT = 600
INITIAL_WIDTH = 200
BASE_SPEED = 2
SPEED_STEP = 0.15

COLORS: tuple[str, ...] = (
    "#00fff5",
    "#ff2d95",
    "#39ff14",
    "#b026ff",
    "#ffe600",
    "#06b6d4",
    "#f97316",
    "#ec4899",
    "#a855f7",
    "#22c55e",
)


@dataclass(slots=True)
class Block:
    x: float
    y: float
    width: float
    height: float
    color: str


@dataclass(slots=True)
class StackState:
    # Placed blocks, bottom to top. Append-only during a session.
    blocks: list[Block] = field(default_factory=list)
    current_block: Block | None = None
    direction: int = 1
    speed: float = BASE_SPEED
    game_over: bool = False
    score: int = 0


def create_initial_state() -> StackState:
    base_block = Block(
        x=(CANVAS_WIDTH - INITIAL_WIDTH) / 2,
        y=CANVAS_HEIGHT - BLOCK_HEIGHT,
        width=INITIAL_WIDTH,
        height=BLOCK_HEIGHT,
        color=COLORS[0],
    )
    moving_block = Block(
        x=0,
        y=CANVAS_HEIGHT - BLOCK_HEIGHT * 2,
        width=INITIAL_WIDTH,
        height=BLOCK_HEIGHT,
        color=COLORS[1],
    )
    return StackState(
        blocks=[base_block],
        current_block=moving_block,
        direction=1,
        speed=BASE_SPEED,
        game_over=False,
        score=0,
    )


def update_moving_block(state: StackState) -> StackState:
    """Slide the moving block one step, bouncing off either wall."""

    if state.current_block is None or state.game_over:
        return state

    block = replace(state.current_block)
    block.x += state.speed * state.direction

    direction = state.direction
    if block.x + block.width > CANVAS_WIDTH:
        block.x = CANVAS_WIDTH - block.width
        direction = -1
    elif block.x < 0:
        block.x = 0
        direction = 1

    return replace(state, blocks=list(state.blocks), current_block=block, direction=direction)


def drop_block(state: StackState) -> StackState:
    """Drop the moving block onto the top of the stack.

    Only the part overlapping the top block survives. A complete miss ends the game
    and leaves the stack and score as they were.
    """

    if state.current_block is None or state.game_over or not state.blocks:
        return state

    current = state.current_block
    top = state.blocks[-1]

    overlap_start = max(current.x, top.x)
    overlap_end = min(current.x + current.width, top.x + top.width)
    overlap_width = overlap_end - overlap_start

    if overlap_width <= 0:
        return replace(state, blocks=list(state.blocks), current_block=replace(current), game_over=True)

    score = state.score + 1
    placed = Block(
        x=overlap_start,
        y=current.y,
        width=overlap_width,
        height=BLOCK_HEIGHT,
        color=current.color,
    )
    next_block = Block(
        x=0,
        y=current.y - BLOCK_HEIGHT,
        width=overlap_width,
        height=BLOCK_HEIGHT,
        color=COLORS[(score + 1) % len(COLORS)],
    )

    return StackState(
        blocks=[*state.blocks, placed],
        current_block=next_block,
        direction=1,
        speed=BASE_SPEED + score * SPEED_STEP,
        game_over=False,
        score=score,
    )


def camera_offset(state: StackState) -> float:
    """Vertical offset a renderer applies so the top of the stack stays in view."""

    if state.current_block is not None:
        top_y = state.current_block.y
    elif state.blocks:
        top_y = state.blocks[-1].y
    else:
        return 0.0
    return max(0.0, CANVAS_HEIGHT / 2 - top_y)
