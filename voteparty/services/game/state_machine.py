import logging
import threading
import time
from dataclasses import replace

from voteparty.commands import (
    AdminCommand, Disconnect, HardReset, HostLogin, Join, NextRound, RequestState,
    ShowLeaderboard, StartRound, SubmitVote, TimerTick,
)
from voteparty.errors import CommandRejected, InvalidCommandForPhase, RoundDataMissing, UnauthorizedAdminCommand
from voteparty.models import GameSession, Phase, RoundResult
from .scheduler import RoundTimer
from .scoring import ScoreEngine
from .sessions import SessionRegistry
from .tally import VoteTally

RESULT_PHASES = (Phase.REVEAL, Phase.LEADERBOARD, Phase.GAME_OVER)
ROUND_PHASES = (Phase.QUESTION, Phase.REVEAL, Phase.LEADERBOARD)


def _no_background_task(fn, *args):
    return None


class GameStateMachine:
    """Owner of the one game session and of every transition applied to it.

    All input arrives as a command through ``dispatch``, which processes it
    to completion under a single lock, so socket handlers running on
    different threads and the timer worker never interleave. Rejected
    commands (wrong phase, unknown session, unauthorized host...) are
    logged and otherwise ignored.
    """

    def __init__(self, catalog, broadcaster, authority, *, round_duration=15, points_per_correct=100,
                 vote_debounce_ms=500, round_leaderboard_size=5, final_leaderboard_size=10,
                 max_name_length=12, start_task=None, sleep=None, clock=time.monotonic, logger=None):
        self.catalog = catalog
        self.broadcaster = broadcaster
        self.authority = authority
        self.round_duration = round_duration
        self.round_leaderboard_size = round_leaderboard_size
        self.final_leaderboard_size = final_leaderboard_size
        self.vote_debounce_ms = vote_debounce_ms
        self.logger = logger or logging.getLogger('voteparty')
        self._clock = clock
        self._lock = threading.Lock()
        self.registry = SessionRegistry(max_name_length=max_name_length)
        self.scores = ScoreEngine(points_per_correct)
        self.timer = RoundTimer(start_task or _no_background_task, sleep or time.sleep, self._timer_fired)
        self.session = self._new_session()
        self._handlers = {
            Join: self._join,
            SubmitVote: self._submit_vote,
            RequestState: self._request_state,
            HostLogin: self._host_login,
            Disconnect: self._disconnect,
            TimerTick: self._tick,
            StartRound: self._start_round,
            ShowLeaderboard: self._show_leaderboard,
            NextRound: self._next_round,
            HardReset: self._hard_reset,
        }

    @classmethod
    def from_config(cls, config, catalog, broadcaster, authority, *, start_task=None, sleep=None, logger=None):
        return cls(
            catalog, broadcaster, authority,
            round_duration=int(config.get('ROUND_DURATION_SEC', 15)),
            points_per_correct=int(config.get('POINTS_PER_CORRECT', 100)),
            vote_debounce_ms=int(config.get('VOTE_DEBOUNCE_MS', 500)),
            round_leaderboard_size=int(config.get('ROUND_LEADERBOARD_SIZE', 5)),
            final_leaderboard_size=int(config.get('FINAL_LEADERBOARD_SIZE', 10)),
            max_name_length=int(config.get('MAX_NAME_LENGTH', 12)),
            start_task=start_task, sleep=sleep, logger=logger,
        )

    def _new_session(self) -> GameSession:
        return GameSession(total_rounds=len(self.catalog), tally=VoteTally(self._clock, self.vote_debounce_ms))

    # ---- entry points ----

    def dispatch(self, command) -> None:
        handler = self._handlers[type(command)]
        if isinstance(command, HostLogin):
            # the bcrypt check runs outside the lock
            command = replace(command, verified=self.authority.verify(command.password))
        with self._lock:
            try:
                if isinstance(command, AdminCommand):
                    self.authority.require(command.sid)
                handler(command)
            except UnauthorizedAdminCommand as exc:
                self.logger.warning(f"[admin-denied] {type(command).__name__}: {exc}")
            except CommandRejected as exc:
                self.logger.debug(f"[ignored] {type(command).__name__} sid={command.sid}: {type(exc).__name__}: {exc}")

    def snapshot(self) -> dict:
        with self._lock:
            return self.public_state()

    def _timer_fired(self, generation: int) -> None:
        self.dispatch(TimerTick(generation=generation))

    # ---- state views ----

    def public_state(self) -> dict:
        s = self.session
        round_def = self.catalog.get(s.round_index) if s.phase in ROUND_PHASES else None
        return {
            'phase': s.phase.value,
            'round_index': s.round_index,
            'tally': s.tally.snapshot(),
            'seconds_remaining': s.seconds_remaining,
            'media_reference': round_def.media_reference if round_def else None,
            'result': s.result.to_dict() if s.result is not None and s.phase in RESULT_PHASES else None,
            'total_rounds': s.total_rounds,
            'player_count': len(self.registry),
        }

    def host_state(self) -> dict:
        state = self.public_state()
        state['players'] = [p.to_dict() for p in self.registry]
        return state

    def _broadcast_state(self) -> None:
        self.broadcaster.to_everyone('state_update', self.public_state())

    def _sync_hosts(self) -> None:
        self.broadcaster.to_hosts('host_state_update', self.host_state())

    def _require_phase(self, command, *phases) -> None:
        if self.session.phase not in phases:
            raise InvalidCommandForPhase(f"{type(command).__name__} not allowed in {self.session.phase.value}")

    # ---- players ----

    def _join(self, cmd: Join) -> None:
        player, created = self.registry.join(cmd.session_id, cmd.name, cmd.sid)
        self.logger.info(f"[join] {'new' if created else 'returning'} player={player.name!r} sid={cmd.sid}")
        self.broadcaster.to_connection(cmd.sid, 'player_data_update', {'score': player.score, 'my_vote': player.vote})
        self.broadcaster.to_connection(cmd.sid, 'preload_assets', self.catalog.media_references())
        self._broadcast_state()
        self._sync_hosts()

    def _submit_vote(self, cmd: SubmitVote) -> None:
        self._require_phase(cmd, Phase.QUESTION)
        player = self.registry.get(cmd.session_id)
        choice = self.session.tally.record(player, cmd.choice)
        self.broadcaster.to_connection(cmd.sid, 'vote_registered', choice)
        self.broadcaster.to_everyone('stats_update', self.session.tally.snapshot())
        self._sync_hosts()

    def _request_state(self, cmd: RequestState) -> None:
        self.broadcaster.to_connection(cmd.sid, 'state_update', self.public_state())
        player = self.registry.by_sid(cmd.sid)
        if player is not None:
            self.broadcaster.to_connection(cmd.sid, 'player_data_update', {'score': player.score, 'my_vote': player.vote})
        if self.authority.is_authorized(cmd.sid):
            self.broadcaster.to_connection(cmd.sid, 'host_state_update', self.host_state())

    def _disconnect(self, cmd: Disconnect) -> None:
        self.authority.revoke(cmd.sid)
        player = self.registry.disconnect(cmd.sid)
        if player is not None:
            self.logger.info(f"[disconnect] player={player.name!r} sid={cmd.sid}")
            self._sync_hosts()

    # ---- host ----

    def _host_login(self, cmd: HostLogin) -> None:
        if not cmd.verified:
            self.logger.warning(f"[host-login] rejected sid={cmd.sid}")
            self.broadcaster.to_connection(cmd.sid, 'login_error', {'message': 'Invalid host password'})
            return
        self.authority.grant(cmd.sid)
        self.logger.info(f"[host-login] accepted sid={cmd.sid}")
        self.broadcaster.add_host(cmd.sid)
        self.broadcaster.to_connection(cmd.sid, 'host_state_update', self.host_state())

    def _start_round(self, cmd: StartRound) -> None:
        self._require_phase(cmd, Phase.LOBBY)
        self._begin_round(self.session.round_index)

    def _begin_round(self, index: int) -> None:
        round_def = self.catalog.get(index)
        if round_def is None:
            raise RoundDataMissing(f"no round at index {index}")
        s = self.session
        s.round_index = index
        s.tally.reset()
        self.registry.clear_votes()
        s.result = None
        s.seconds_remaining = self.round_duration
        s.phase = Phase.QUESTION
        generation = self.timer.arm()
        self.logger.info(f"[round-start] round={index + 1}/{s.total_rounds} duration={self.round_duration}s timer={generation}")
        self.broadcaster.to_everyone('new_round', {
            'round_index': index,
            'media_reference': round_def.media_reference,
            'duration': self.round_duration,
        })
        self._broadcast_state()
        self._sync_hosts()

    def _show_leaderboard(self, cmd: ShowLeaderboard) -> None:
        self._require_phase(cmd, Phase.REVEAL)
        self.session.phase = Phase.LEADERBOARD
        self._broadcast_state()

    def _next_round(self, cmd: NextRound) -> None:
        self._require_phase(cmd, Phase.LEADERBOARD)
        self.timer.cancel()
        next_index = self.session.round_index + 1
        if next_index >= self.session.total_rounds:
            self._finish_game()
            return
        self._begin_round(next_index)

    def _finish_game(self) -> None:
        s = self.session
        s.phase = Phase.GAME_OVER
        s.seconds_remaining = None
        leaderboard = self.scores.leaderboard(self.registry, self.final_leaderboard_size)
        s.result = RoundResult(correct_choice=None, tally=None, leaderboard=leaderboard)
        self.logger.info(f"[finish] after round={s.round_index + 1} players={len(self.registry)}")
        self._broadcast_state()
        self._sync_hosts()

    def _hard_reset(self, cmd: HardReset) -> None:
        self.timer.cancel()
        self.registry.clear()
        self.session = self._new_session()
        self.logger.warning(f"[hard-reset] requested by sid={cmd.sid}")
        self.broadcaster.to_everyone('game_reset_event')
        self._broadcast_state()
        self._sync_hosts()

    # ---- timer ----

    def _tick(self, cmd: TimerTick) -> None:
        if not self.timer.is_current(cmd.generation):
            raise InvalidCommandForPhase(f"stale timer generation {cmd.generation}")
        self._require_phase(cmd, Phase.QUESTION)
        s = self.session
        s.seconds_remaining = max(0, (s.seconds_remaining or 0) - 1)
        self.logger.debug(f"[timer-tick] round={s.round_index + 1} remaining={s.seconds_remaining}s")
        self.broadcaster.to_everyone('timer_update', s.seconds_remaining)
        if s.seconds_remaining <= 0:
            self.timer.cancel()
            self._reveal()

    def _reveal(self) -> None:
        s = self.session
        if s.phase != Phase.QUESTION:
            return
        players = list(self.registry)
        # Work on copies first so a failure leaves the round untouched
        try:
            round_def = self.catalog.get(s.round_index)
            answer, outcome = self.scores.score_round(players, round_def.correct_choice)
            new_scores = {sid: score for sid, (score, _) in outcome.items()}
            leaderboard = self.scores.leaderboard(players, self.round_leaderboard_size, scores=new_scores)
            result = RoundResult(correct_choice=answer, tally=s.tally.snapshot(), leaderboard=leaderboard)
        except Exception:
            self.logger.exception(f"[reveal] failed to score round={s.round_index + 1}; staying in {s.phase.value}")
            return

        for player in players:
            player.score = new_scores[player.session_id]
        s.result = result
        s.phase = Phase.REVEAL
        s.seconds_remaining = None
        self.logger.info(f"[reveal] round={s.round_index + 1} answer={answer} tally={result.tally}")

        for player in players:
            if not player.connected:
                continue
            _, correct = outcome[player.session_id]
            self.broadcaster.to_connection(player.sid, 'player_data_update', {
                'score': player.score,
                'round_result': 'CORRECT' if correct else 'WRONG',
            })
        self.broadcaster.to_everyone('round_result', result.to_dict())
        self._broadcast_state()
        self._sync_hosts()
