from __future__ import annotations

from statemachine import State, StateMachine

from neon_arcade.api.models import GameSession, SessionStatus


class SessionFSM(StateMachine):
    """Lifecycle of one play session.

    - playing -> game_over (Stack miss)
    - playing -> completed (Sudoku solved)
    - any -> playing on reset

    Engines decide *when* a session ends; the FSM only guards which transitions exist.
    """

    playing = State(SessionStatus.playing.value, value=SessionStatus.playing.value, initial=True)
    game_over = State(SessionStatus.game_over.value, value=SessionStatus.game_over.value)
    completed = State(SessionStatus.completed.value, value=SessionStatus.completed.value)

    fail = playing.to(game_over)
    complete = playing.to(completed)
    restart = playing.to.itself() | game_over.to(playing) | completed.to(playing)

    def __init__(self, session: GameSession):
        self.session = session
        super().__init__(start_value=session.status.value)

    @property
    def is_terminal(self) -> bool:
        return self.current_state in (self.game_over, self.completed)

    def sync_status_to_model(self) -> None:
        self.session.status = SessionStatus(str(self.current_state.value))
