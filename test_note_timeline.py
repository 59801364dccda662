from __future__ import annotations

from game_models import GameState, InputSnapshot, NoteKind
from note_timeline import NOTE_START_Y, Note, NoteTimeline


def test_notes_start_at_kind_specific_heights(make_session):
    session = make_session("Left,Normal,0\nLeft,Hold,0\nLeft,Bomb,0\nSpecial,SpeedUp,0\n", level=2)
    notes = session.timeline.notes()

    assert [note.y for note in notes] == [100, 24, 24, 100]
    assert [note.x for note in notes] == [364, 364, 364, 964]
    assert NOTE_START_Y[NoteKind.HOLD] == 24


def test_sprite_ids():
    assert Note.create(NoteKind.NORMAL, spawn_frame=0, lane="Up", x=1).sprite_id() == "noteUp"
    assert Note.create(NoteKind.HOLD, spawn_frame=0, lane="Up", x=1).sprite_id() == "holdNoteUp"
    assert Note.create(NoteKind.BOMB, spawn_frame=0, lane="Up", x=1).sprite_id() == "noteBomb"
    assert Note.create(NoteKind.SPECIAL, spawn_frame=0, lane="Special", x=1, subtype="2x").sprite_id() == "note2x"


def test_only_spawned_notes_scroll(make_session, canvas):
    session = make_session("Left,Normal,0\nDown,Normal,5\n")
    session.frame_count = 3

    session.timeline.advance(session, InputSnapshot.empty(), canvas)

    first, second = session.timeline.notes()
    assert first.y == 104
    assert second.y == 100
    assert [command.sprite_id for command in canvas.sprite_commands()] == ["noteLeft"]


def test_scroll_speed_is_read_every_frame(make_session, canvas):
    session = make_session("Left,Normal,0\n", scroll_speed=4)
    session.timeline.advance(session, InputSnapshot.empty(), canvas)
    session.scroll_speed = 5
    session.timeline.advance(session, InputSnapshot.empty(), canvas)
    assert session.timeline.notes()[0].y == 109


def test_cleared_notes_are_skipped(make_session, canvas):
    session = make_session("Left,Normal,0\n")
    note = session.timeline.notes()[0]
    note.cleared = True

    session.timeline.advance(session, InputSnapshot.empty(), canvas)

    assert note.y == 100
    assert canvas.sprite_commands() == []


def test_lose_follows_last_registered_note(make_session, canvas):
    # The first row spawns late, but only the last row decides the loss.
    session = make_session("Left,Normal,100000\nDown,Normal,0\n")
    first, last = session.timeline.notes()
    last.y = 765

    session.timeline.advance(session, InputSnapshot.empty(), canvas)

    assert last.y == 769
    assert first.y == 100
    assert session.state is GameState.LOSE


def test_no_lose_when_state_already_left_play(make_session, canvas):
    session = make_session("Down,Normal,0\n")
    session.state = GameState.WIN
    session.timeline.notes()[0].y = 800
    session.timeline.advance(session, InputSnapshot.empty(), canvas)
    assert session.state is GameState.WIN


def test_empty_level_never_loses(make_session, canvas):
    session = make_session("")
    assert len(session.timeline) == 0
    session.timeline.advance(session, InputSnapshot.empty(), canvas)
    assert session.state is GameState.PLAY


def test_clear_lane_only_touches_eligible_notes_in_that_lane(make_session):
    session = make_session("Left,Normal,0\nLeft,Normal,50\nDown,Normal,0\n")
    early, late, other = session.timeline.notes()

    cleared = session.timeline.clear_lane("Left", 10, 768)

    assert cleared == 1
    assert (early.cleared, late.cleared, other.cleared) == (True, False, False)


def test_timeline_keeps_file_order():
    notes = [Note.create(NoteKind.NORMAL, spawn_frame=frame, lane="Left", x=0) for frame in (30, 10, 20)]
    timeline = NoteTimeline(notes)
    assert [note.spawn_frame for note in timeline.notes()] == [30, 10, 20]
    assert [note.spawn_frame for note in timeline.eligible_notes(25, 768)] == [10, 20]


def _scroll_until_off_screen(session, canvas, note):
    for _ in range(400):
        if note.y > session.window_height:
            break
        session.timeline.advance(session, InputSnapshot.empty(), canvas)
    assert note.y > session.window_height


def test_normal_missed_at_speed_that_skips_the_bottom_row(make_session, canvas):
    session = make_session("Down,Normal,0\nDown,Normal,100000\n", scroll_speed=3)
    note = session.timeline.notes()[0]

    _scroll_until_off_screen(session, canvas, note)

    assert note.y == 769
    assert note.scored
    assert [grade.distance for grade in session.scoring.recent_grades()] == [300.0]
    assert session.scoring.points == -5


def test_hold_missed_once_at_speed_that_skips_the_bottom_row(make_session, canvas):
    session = make_session("Down,Hold,0\nDown,Normal,100000\n", scroll_speed=3)
    note = session.timeline.notes()[0]
    note.y = 25

    _scroll_until_off_screen(session, canvas, note)

    assert note.y == 769
    assert not note.scored
    assert [grade.distance for grade in session.scoring.recent_grades()] == [300.0]
    assert session.scoring.points == -5
