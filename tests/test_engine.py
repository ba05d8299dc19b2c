import pytest

from whackamole.logger import GameLogger
from whackamole.models import Difficulty, EventType, GameStatus, TargetKind, occupied_cells

NORMAL, SPECIAL, BOMB = 0.0, 0.75, 0.95


def occupied(engine):
    return len(occupied_cells(engine.grid))


def record_events(engine):
    events = []
    engine.subscribe(events.append)
    return events


@pytest.mark.parametrize('difficulty, expected', [
    (Difficulty.EASY, (1500, 1200, 1)),
    (Difficulty.MEDIUM, (1200, 1000, 2)),
    (Difficulty.HARD, (900, 800, 3)),
])
def test_difficulty_parameters(difficulty, expected):
    params = difficulty.params
    assert (params.spawn_interval_ms, params.target_lifetime_ms, params.max_targets) == expected


def test_new_engine_is_ready(make_engine):
    engine = make_engine()
    assert engine.status is GameStatus.READY
    assert engine.score == 0
    assert engine.time_remaining == 60
    assert occupied(engine) == 0
    assert engine.difficulty is Difficulty.MEDIUM


def test_start_begins_round_with_deferred_first_spawn(make_engine, advance):
    engine = make_engine()
    engine.start()
    assert engine.status is GameStatus.PLAYING
    assert engine.score == 0
    assert engine.time_remaining == 60
    # first spawn is queued, not run inline
    assert occupied(engine) == 0

    advance(engine)
    assert occupied(engine) == 2


def test_start_twice_does_not_double_timers(make_engine, timers, advance):
    engine = make_engine()
    engine.start()
    pending = timers.pending()
    engine.start()
    assert timers.pending() == pending

    advance(engine, 1000)
    assert engine.time_remaining == 59


@pytest.mark.parametrize('difficulty, expected', [
    (Difficulty.EASY, 1),
    (Difficulty.MEDIUM, 2),
    (Difficulty.HARD, 3),
])
def test_first_spawn_places_up_to_max_targets(make_engine, advance, difficulty, expected):
    engine = make_engine(difficulty)
    engine.start()
    advance(engine)
    assert occupied(engine) == expected


def test_medium_targets_expire_after_lifetime(make_engine, advance):
    engine = make_engine(Difficulty.MEDIUM)
    engine.start()
    advance(engine)
    targets = [engine.grid[r][c] for r, c in occupied_cells(engine.grid)]
    assert len(targets) == 2
    assert all(t.lifetime_ms == 1000 for t in targets)

    advance(engine, 999)
    assert occupied(engine) == 2
    advance(engine, 1)
    assert occupied(engine) == 0
    # next cycle at 1200 ms
    advance(engine, 200)
    assert occupied(engine) == 2


def test_spawn_cycle_does_not_overwrite_existing_targets(make_engine, advance):
    engine = make_engine(Difficulty.HARD)
    engine.start()
    advance(engine)
    before = {cell: engine.grid[cell[0]][cell[1]] for cell in occupied_cells(engine.grid)}
    # fire the spawn cycle again directly while the first targets are alive
    engine._spawn_cycle()
    for (row, col), target in before.items():
        assert engine.grid[row][col] is target
    assert occupied(engine) == 6


def test_countdown_ticks_once_per_second(make_engine, advance):
    engine = make_engine()
    engine.start()
    for expected in range(59, 54, -1):
        advance(engine, 1000)
        assert engine.time_remaining == expected


def test_last_tick_ends_game_and_stops_everything(make_engine, advance):
    engine = make_engine()
    engine.start()
    advance(engine, 59000)
    assert engine.time_remaining == 1
    assert engine.status is GameStatus.PLAYING

    advance(engine, 1000)
    assert engine.time_remaining == 0
    assert engine.status is GameStatus.ENDED

    grid = engine.grid
    advance(engine, 10000)
    assert engine.time_remaining == 0
    # visible targets stay put and nothing new spawns
    assert engine.grid is grid


def test_pending_tick_after_pause_does_not_decrement(make_engine, advance):
    engine = make_engine()
    engine.start()
    advance(engine, 1500)
    engine.pause()
    assert engine.status is GameStatus.PAUSED
    advance(engine, 5000)
    assert engine.time_remaining == 59


def test_pause_freezes_board_and_resume_clears_it(make_engine, advance):
    engine = make_engine(Difficulty.EASY)
    engine.start()
    advance(engine)
    assert engine.select_cell(0, 0) is TargetKind.NORMAL
    advance(engine, 2000)
    assert occupied(engine) == 1

    engine.pause()
    frozen = engine.grid
    advance(engine, 5000)
    assert engine.grid is frozen
    assert engine.time_remaining == 58

    engine.start()
    assert engine.status is GameStatus.PLAYING
    assert occupied(engine) == 0
    assert engine.score == 10
    assert engine.time_remaining == 58

    advance(engine)
    assert occupied(engine) == 1
    advance(engine, 1000)
    assert engine.time_remaining == 57


def test_stale_expiry_does_not_clear_newer_target(make_engine, advance):
    engine = make_engine(Difficulty.EASY)
    engine.start()
    advance(engine)
    first = engine.grid[0][0]
    assert first.expires_at_ms == 1200

    advance(engine, 500)
    engine.pause()
    advance(engine, 100)
    engine.start()
    advance(engine)
    second = engine.grid[0][0]
    assert second is not first
    assert second.kind is first.kind

    # the first target's expiry fires now and must leave the new one alone
    advance(engine, 600)
    assert engine.grid[0][0] is second
    advance(engine, 600)
    assert engine.grid[0][0] is None


@pytest.mark.parametrize('draw, points', [
    (NORMAL, 10),
    (SPECIAL, 25),
])
def test_selecting_target_scores(make_engine, advance, draw, points):
    engine = make_engine(Difficulty.EASY, draws=(draw,))
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    assert engine.score == points
    assert engine.grid[0][0] is None


def test_bomb_subtracts_fifteen(make_engine, advance):
    engine = make_engine(Difficulty.EASY, draws=(NORMAL, NORMAL, NORMAL, BOMB))
    engine.start()
    advance(engine)
    for _ in range(3):
        engine.select_cell(0, 0)
        advance(engine, 1500)
    assert engine.score == 30
    assert engine.select_cell(0, 0) is TargetKind.BOMB
    assert engine.score == 15


def test_bomb_score_is_floored_at_zero(make_engine, advance):
    engine = make_engine(Difficulty.EASY, draws=(NORMAL, BOMB))
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    advance(engine, 1500)
    assert engine.score == 10

    events = record_events(engine)
    engine.select_cell(0, 0)
    assert engine.score == 0
    assert events[-1].type is EventType.TARGET_HIT
    assert events[-1].delta == -10


def test_double_select_scores_once(make_engine, advance):
    engine = make_engine(Difficulty.EASY)
    engine.start()
    advance(engine)
    events = record_events(engine)
    assert engine.select_cell(0, 0) is TargetKind.NORMAL
    assert engine.select_cell(0, 0) is None
    assert engine.score == 10
    assert [e.type for e in events] == [EventType.TARGET_HIT, EventType.MISSED_EMPTY]
    assert events[0].kind is TargetKind.NORMAL


def test_select_empty_cell_reports_miss(make_engine, advance):
    engine = make_engine(Difficulty.EASY)
    engine.start()
    advance(engine)
    events = record_events(engine)
    assert engine.select_cell(2, 2) is None
    assert engine.score == 0
    assert len(events) == 1
    assert events[0].type is EventType.MISSED_EMPTY
    assert (events[0].row, events[0].col) == (2, 2)


@pytest.mark.parametrize('row, col', [(3, 0), (0, 3), (-1, 0), (0, -1)])
def test_out_of_range_selection_is_ignored(make_engine, advance, row, col):
    engine = make_engine()
    engine.start()
    advance(engine)
    events = record_events(engine)
    assert engine.select_cell(row, col) is None
    assert events == []


def test_selection_ignored_unless_playing(make_engine, advance):
    engine = make_engine(Difficulty.EASY)
    events = record_events(engine)
    assert engine.select_cell(0, 0) is None

    engine.start()
    advance(engine)
    engine.pause()
    assert engine.select_cell(0, 0) is None
    assert engine.score == 0
    assert EventType.TARGET_HIT not in [e.type for e in events]
    assert EventType.MISSED_EMPTY not in [e.type for e in events]


def test_pause_only_from_playing(make_engine):
    engine = make_engine()
    engine.pause()
    assert engine.status is GameStatus.READY


def test_restart_returns_to_ready_and_stops_timers(make_engine, advance):
    engine = make_engine(Difficulty.EASY)
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    advance(engine, 3000)

    engine.restart()
    assert engine.status is GameStatus.READY
    assert engine.score == 0
    assert engine.time_remaining == 60
    assert occupied(engine) == 0

    advance(engine, 10000)
    assert engine.time_remaining == 60
    assert occupied(engine) == 0


@pytest.mark.parametrize('setup', ['paused', 'ended'])
def test_restart_from_any_status(make_engine, advance, setup):
    engine = make_engine()
    engine.start()
    advance(engine)
    if setup == 'paused':
        engine.pause()
    else:
        advance(engine, 60000)
        assert engine.status is GameStatus.ENDED
    engine.restart()
    assert engine.status is GameStatus.READY
    assert engine.time_remaining == 60


def test_start_after_end_requires_restart(make_engine, advance):
    engine = make_engine()
    engine.start()
    advance(engine, 60000)
    engine.start()
    assert engine.status is GameStatus.ENDED

    engine.restart()
    engine.start()
    assert engine.status is GameStatus.PLAYING


def test_difficulty_locked_during_round(make_engine, advance):
    engine = make_engine(Difficulty.MEDIUM)
    engine.start()
    assert engine.set_difficulty(Difficulty.HARD) is False
    engine.pause()
    assert engine.set_difficulty(Difficulty.HARD) is False
    assert engine.difficulty is Difficulty.MEDIUM

    engine.restart()
    assert engine.set_difficulty(Difficulty.HARD) is True
    assert engine.params.max_targets == 3


def test_difficulty_change_reloads_high_score(make_engine, scores):
    scores.scores.update({'easy': 40, 'hard': 90})
    engine = make_engine(Difficulty.EASY)
    assert engine.high_score == 40
    engine.set_difficulty(Difficulty.HARD)
    assert engine.high_score == 90
    engine.set_difficulty(Difficulty.MEDIUM)
    assert engine.high_score == 0


def test_new_high_score_written_once_on_end(make_engine, advance, scores):
    scores.scores['easy'] = 5
    engine = make_engine(Difficulty.EASY)
    events = record_events(engine)
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    advance(engine, 60000)

    assert engine.status is GameStatus.ENDED
    assert scores.writes == [(Difficulty.EASY, 10)]
    assert engine.high_score == 10
    types = [e.type for e in events]
    assert types.index(EventType.NEW_HIGH_SCORE) > types.index(EventType.STATUS_CHANGED)
    assert events[-1].type is EventType.NEW_HIGH_SCORE

    advance(engine, 5000)
    assert len(scores.writes) == 1


def test_lower_score_keeps_stored_best(make_engine, advance, scores):
    scores.scores['medium'] = 500
    engine = make_engine()
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    advance(engine, 60000)
    assert scores.writes == []
    assert engine.high_score == 500


def test_high_score_read_failure_defaults_to_zero(make_engine):
    def broken(difficulty):
        raise OSError("disk gone")

    engine = make_engine(read_best=broken)
    assert engine.high_score == 0


def test_high_score_write_failure_does_not_block_end(make_engine, advance):
    def broken(difficulty, score):
        raise OSError("read-only")

    engine = make_engine(Difficulty.EASY, write_best=broken)
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    advance(engine, 60000)
    assert engine.status is GameStatus.ENDED
    assert engine.high_score == 10


def test_snapshot_reports_kinds(make_engine, advance):
    engine = make_engine(Difficulty.MEDIUM, draws=(SPECIAL, BOMB))
    engine.start()
    advance(engine)
    snap = engine.snapshot()
    assert snap.status is GameStatus.PLAYING
    assert snap.grid[0][:2] == (TargetKind.SPECIAL, TargetKind.BOMB)
    assert snap.grid[1] == (None, None, None)
    assert snap.time_remaining == 60


def test_status_events_and_unsubscribe(make_engine):
    engine = make_engine()
    events = record_events(engine)
    engine.start()
    engine.pause()
    engine.unsubscribe(events.append)
    engine.restart()
    assert [e.status for e in events] == [GameStatus.PLAYING, GameStatus.PAUSED]


def test_engine_writes_gameplay_log(make_engine, advance, tmp_path):
    log_file = tmp_path / 'log.md'
    engine = make_engine(Difficulty.EASY, logger=GameLogger(str(log_file)))
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    engine.select_cell(1, 1)
    advance(engine, 60000)

    text = log_file.read_text(encoding='utf-8')
    assert 'READY -> PLAYING' in text
    assert '| HIT |' in text
    assert '| MISS |' in text
    assert 'NEW HIGH SCORE' in text


def test_failed_reread_at_end_keeps_stored_best(make_engine, advance, scores):
    scores.scores['easy'] = 500
    reads = []

    def flaky(difficulty):
        reads.append(difficulty)
        if len(reads) > 1:
            raise OSError("store unavailable")
        return scores.read(difficulty)

    engine = make_engine(Difficulty.EASY, read_best=flaky)
    assert engine.high_score == 500
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    advance(engine, 60000)

    assert engine.status is GameStatus.ENDED
    assert len(reads) == 2
    assert scores.writes == []
    assert scores.scores['easy'] == 500
    assert engine.high_score == 500
    assert not engine.new_high_score


def test_new_high_score_flag_belongs_to_finished_round(make_engine, advance, scores):
    scores.scores['hard'] = 5
    engine = make_engine(Difficulty.EASY)
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    advance(engine, 60000)
    assert engine.new_high_score
    assert engine.snapshot().new_high_score

    # a record on one difficulty is not re-judged against another's best
    engine.set_difficulty(Difficulty.HARD)
    assert engine.high_score == 5
    assert engine.snapshot().new_high_score

    engine.restart()
    assert not engine.new_high_score
    assert not engine.snapshot().new_high_score


def test_no_new_high_score_flag_when_best_not_beaten(make_engine, advance, scores):
    scores.scores['medium'] = 500
    engine = make_engine()
    engine.start()
    advance(engine)
    engine.select_cell(0, 0)
    advance(engine, 60000)
    assert engine.status is GameStatus.ENDED
    assert not engine.snapshot().new_high_score
