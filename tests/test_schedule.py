"""Tests for scheduling grid decoding and lookups."""

import pytest

from summit_core.data import load_schedule, read_grid_matrix
from summit_core.errors import MalformedGridError
from summit_core.schedule import (
    day_for,
    extract_capacity,
    find_conflicts,
    is_venue_row,
    parse_grid,
    parse_session_cell,
    parse_time_slot,
    sessions_at_time_slot,
    sessions_by_type,
    sessions_for_day,
)


@pytest.mark.parametrize(
    ("name", "slot_type", "day", "number"),
    [
        ("Sessions #1", "Session", "Monday", 1),
        ("Sessions #4", "Session", "Tuesday", 4),
        ("Session 7", "Session", "Wednesday", 7),
        ("Sessions #10", "Session", "Thursday", 10),
        ("Sessions #12", "Session", "Unknown", 12),
        ("Labs #1", "Lab", "Monday", 1),
        ("Labs #3", "Lab", "Tuesday", 3),
        ("labs #5", "Lab", "Wednesday", 5),
        ("Lab 7", "Lab", "Thursday", 7),
        ("Strategy Keynote #1", "Strategy Keynote", "Tuesday", 0),
        ("Strategy Keynote #2", "Strategy Keynote", "Tuesday", 0),
        ("Strategy Keynote #3", "Strategy Keynote", "Wednesday", 0),
        ("Lunch", "Session", "Unknown", 0),
    ],
)
def test_parse_time_slot(name, slot_type, day, number) -> None:
    slot = parse_time_slot(4, name, "9:00 AM")
    assert slot.type == slot_type
    assert slot.day == day
    assert slot.number == number
    assert slot.full_time == f"{name}\n9:00 AM"


def test_time_slot_without_detail_text() -> None:
    slot = parse_time_slot(5, " Sessions #2 ", "")
    assert slot.name == "Sessions #2"
    assert slot.full_time == "Sessions #2"


def test_day_for_outside_ranges() -> None:
    assert day_for("Lab", 8) == "Unknown"
    assert day_for("Session", 0) == "Unknown"


def test_extract_capacity() -> None:
    assert extract_capacity("Palazzo A CAP: 250") == 250
    assert extract_capacity("Lido 3001 CAP 120") == 120
    assert extract_capacity("Zeno cap:80") == 80
    assert extract_capacity("Murano 3301") is None


def test_is_venue_row() -> None:
    assert is_venue_row("Level 3 Ballroom")
    assert is_venue_row("Delfino 4001A")
    assert not is_venue_row("palazzo a")
    assert not is_venue_row("Random notes row")
    assert not is_venue_row("")


def test_parse_session_cell_flags_and_title() -> None:
    slot = parse_time_slot(6, "Labs #2", "1:00 PM")

    coded = parse_session_cell("L300: Build a pipeline - HOLD", slot, "Lido", 120)
    assert coded.session_code == "L300"
    assert coded.title == "Build a pipeline - HOLD"
    assert coded.type == "Lab"
    assert coded.is_hold
    assert coded.status == "hold"

    bare = parse_session_cell("TBD repeat", slot, "Lido", 120)
    assert bare.session_code is None
    assert bare.title == "TBD repeat"
    assert bare.type == "Lab"
    assert bare.is_tbd and bare.is_repeat
    assert bare.status == "repeat"

    code_only = parse_session_cell("S410", slot, "Lido", 120)
    assert code_only.title == ""
    assert code_only.type == "Session"


def test_do_not_schedule_outranks_other_markers() -> None:
    slot = parse_time_slot(4, "Sessions #1", "")
    cell = parse_session_cell("Do not schedule (hold, open)", slot, "Lido", None)
    assert cell.is_open and cell.is_hold and cell.is_do_not_schedule
    assert cell.status == "do-not-schedule"


def test_parse_grid(grid_matrix) -> None:
    schedule = parse_grid(grid_matrix)

    assert [slot.name for slot in schedule.time_slots] == [
        "Sessions #1",
        "Sessions #2",
        "Labs #2",
        "Strategy Keynote #3",
        "Sessions #12",
    ]
    assert [slot.index for slot in schedule.time_slots] == [4, 5, 6, 7, 8]
    assert [venue.name for venue in schedule.venues] == ["Palazzo A CAP: 250", "Lido 3001 CAP 120"]
    assert [venue.capacity for venue in schedule.venues] == [250, 120]
    assert schedule.days == ["Monday", "Tuesday", "Wednesday"]

    palazzo = schedule.venues[0]
    assert [cell.session_code for cell in palazzo.sessions] == ["S100", "S200", "L300", "SK01"]
    assert palazzo.sessions[0].title == "Commerce deep dive"
    assert palazzo.sessions[3].type == "Strategy Keynote"
    assert palazzo.sessions[3].day == "Wednesday"

    lido = schedule.venues[1]
    assert [cell.status for cell in lido.sessions] == ["open", None, "repeat", "do-not-schedule"]
    assert lido.sessions[-1].day == "Unknown"


def test_every_cell_sits_in_a_known_slot(grid_matrix) -> None:
    schedule = parse_grid(grid_matrix)
    slot_indexes = {slot.index for slot in schedule.time_slots}
    for venue in schedule.venues:
        for cell in venue.sessions:
            assert cell.time_slot_index in slot_indexes
            assert cell.raw_content.strip()


def test_parse_grid_rejects_short_matrix() -> None:
    with pytest.raises(MalformedGridError):
        parse_grid([["", "", "", "", "Sessions #1"]])
    with pytest.raises(MalformedGridError):
        parse_grid([])


def test_parse_grid_header_only() -> None:
    schedule = parse_grid([["", "", "", "", "Sessions #1"], ["", "", "", "", "9:00"]])
    assert len(schedule.time_slots) == 1
    assert schedule.venues == []


def test_find_conflicts(grid_matrix) -> None:
    conflicts = find_conflicts(parse_grid(grid_matrix))
    assert len(conflicts) == 1
    assert conflicts[0].time_slot == "Sessions #2"
    assert conflicts[0].duplicate_codes == ["S200"]


def test_same_code_in_one_venue_twice_is_not_a_conflict() -> None:
    matrix = [
        ["", "", "", "", "Sessions #1", "Sessions #1"],
        ["", "", "", "", "9:00", "9:00"],
        ["", "", "", "", "", ""],
        ["Zeno CAP 40", "", "", "", "S1", "S1"],
    ]
    assert find_conflicts(parse_grid(matrix)) == []


def test_day_and_type_views(grid_matrix) -> None:
    schedule = parse_grid(grid_matrix)

    tuesday = sessions_for_day(schedule, "Tuesday")
    assert {slot.name for slot in tuesday.time_slots} == {"Sessions #2", "Labs #2"}
    assert all(cell.day == "Tuesday" for venue in tuesday.venues for cell in venue.sessions)

    labs = sessions_by_type(schedule, "Lab")
    assert [slot.name for slot in labs.time_slots] == ["Labs #2"]
    assert [cell.session_code for venue in labs.venues for cell in venue.sessions] == ["L300", None]

    assert sessions_for_day(schedule, "Thursday").venues == []
    assert len(sessions_at_time_slot(schedule, "Sessions #2")) == 2


def test_read_grid_matrix_drops_blank_rows() -> None:
    text = ",,,,Sessions #1\n,,,,9:00\n\n,,,,\nRoom,,,,\nZeno CAP 40,,,,S1\n"
    matrix = read_grid_matrix(text)
    assert matrix == [
        ["", "", "", "", "Sessions #1"],
        ["", "", "", "", "9:00"],
        ["Room", "", "", "", ""],
        ["Zeno CAP 40", "", "", "", "S1"],
    ]


def test_read_grid_matrix_pads_short_and_cuts_long_rows() -> None:
    text = ",,,,Sessions #1,Sessions #2\n,,,,9:00,10:00\nRoom\nZeno CAP 40,,,,S1,S2,extra,more\n"
    matrix = read_grid_matrix(text)
    assert matrix[2] == ["Room", "", "", "", "", ""]
    assert matrix[3] == ["Zeno CAP 40", "", "", "", "S1", "S2"]


def test_read_grid_matrix_empty() -> None:
    assert read_grid_matrix("") == []


def test_load_schedule_from_csv(grid_csv) -> None:
    schedule = load_schedule(grid_csv.encode("utf-8"))
    assert len(schedule.time_slots) == 5
    assert len(schedule.venues) == 2
    assert len(find_conflicts(schedule)) == 1


def test_load_schedule_empty_file_is_malformed() -> None:
    with pytest.raises(MalformedGridError):
        load_schedule(b"")


def test_one_code_in_two_venues_is_one_conflict() -> None:
    matrix = [
        ["", "", "", "", "Sessions #1", "Sessions #2"],
        ["", "", "", "", "9:00", "10:00"],
        ["", "", "", "", "", ""],
        ["Palazzo B CAP 300", "", "", "", "S101", "S100: Keynote recap"],
        ["Murano 3201 CAP 90", "", "", "", "S102", "S100"],
    ]
    conflicts = find_conflicts(parse_grid(matrix))
    assert len(conflicts) == 1
    assert conflicts[0].time_slot == "Sessions #2"
    assert conflicts[0].duplicate_codes == ["S100"]
