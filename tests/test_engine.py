import logging

import pytest

from threemensmorris.board import SLOTS, free_slot_at, is_free
from threemensmorris.engine import (
    Banner,
    BeginGame,
    Exit,
    Game,
    MoveSelectedTo,
    NavigateTo,
    Phase,
    PlaceAt,
    Reset,
    SelectAt,
)
from threemensmorris.tokens import Player


def pos(slot):
    return SLOTS[slot].position


def started() -> Game:
    g = Game(event_log=logging.getLogger("test.events"))
    assert g.begin()
    return g


def play_placements(g: Game, slots):
    for s in slots:
        assert g.place(s), s
    return g


def finish_slide(g: Game) -> None:
    frames = 0
    while g.in_transit:
        g.update(1 / 60)
        frames += 1
        assert frames < 1000


def test_initial_state():
    g = Game()
    assert g.phase == Phase.START
    assert g.turn == Player.A
    assert len(g.tokens) == 0
    assert g.banner() == Banner.START


def test_scenario_placement_win():
    g = started()
    play_placements(g, [0, 1, 3, 4, 6])
    assert g.phase == Phase.WIN
    assert g.winner == Player.A
    assert g.turn == Player.A  # no alternation on a win
    assert g.view().board == "120120100"
    assert g.view().winning_line == (0, 3, 6)
    assert g.banner() == Banner.WIN_A


def test_scenario_all_placed_enters_movement():
    g = started()
    # A: 0, 1, 5  B: 2, 3, 4
    play_placements(g, [0, 2, 1, 3, 5, 4])
    assert g.phase == Phase.MOVEMENT
    assert g.turn == Player.A
    assert g.placed == {Player.A: 3, Player.B: 3}
    assert g.winner is None
    assert g.banner() == Banner.MOVEMENT_A


def movement_game() -> Game:
    # A: 4, 2, 3  B: 0, 5, 8 ; free: 1, 6, 7
    g = started()
    play_placements(g, [4, 0, 2, 5, 3, 8])
    assert g.phase == Phase.MOVEMENT and g.turn == Player.A
    return g


def test_scenario_slide_reserves_destination():
    g = movement_game()
    assert g.select_slot(4)
    idx = g.selected
    assert g.move_selected(1)
    token = g.tokens[idx]
    assert token.slot == 4 and token.moving and token.destination == 1
    assert g.selected is None
    assert not token.selected
    # reserved for everybody while sliding
    assert not is_free(1, g.tokens)
    assert free_slot_at(pos(1), g.tokens) is None
    assert g.banner() == Banner.MOVEMENT_B
    assert g.turn == Player.A  # turn passes on arrival

    finish_slide(g)
    assert token.slot == 1 and not token.moving
    assert is_free(4, g.tokens)
    assert g.turn == Player.B
    assert g.phase == Phase.MOVEMENT


def test_scenario_non_adjacent_move_rejected_keeps_selection():
    # A: 0, 5, 7  B: 1, 3, 6 ; free: 2, 4, 8
    g = started()
    play_placements(g, [0, 1, 5, 3, 7, 6])
    assert g.phase == Phase.MOVEMENT
    assert g.select_slot(0)
    idx = g.selected
    assert not g.move_selected(8)
    assert g.selected == idx
    assert g.tokens[idx].selected
    assert not g.in_transit
    assert g.move_selected(4)


def test_placement_rejected_on_occupied_slot():
    g = started()
    g.place(4)
    before = (g.view(), dict(g.placed))
    assert not g.place(4)
    assert not g.handle(PlaceAt(pos(4)))
    assert (g.view(), dict(g.placed)) == before
    assert g.turn == Player.B


def test_place_at_outside_any_slot_ignored():
    g = started()
    assert not g.handle(PlaceAt((175.0, 175.0)))
    assert len(g.tokens) == 0


def test_turn_alternates_after_each_placement():
    g = started()
    turns = []
    for s in [0, 2, 1, 3, 5, 4]:
        turns.append(g.turn)
        g.place(s)
    assert turns == [Player.A, Player.B] * 3


def test_move_requires_selection_free_and_adjacent():
    g = movement_game()
    assert not g.move_selected(1)  # nothing selected
    assert g.select_slot(3)  # A token on 3: neighbours 0, 4, 6
    assert not g.move_selected(0)  # occupied by B
    assert not g.move_selected(4)  # occupied by A
    assert not g.move_selected(7)  # free but not adjacent
    assert g.move_selected(6)


def test_select_only_own_tokens():
    g = movement_game()
    b_idx = g.tokens.index_on_slot(0)
    assert not g.select(b_idx)
    assert not g.select_slot(0)
    assert not g.handle(SelectAt(pos(0)))
    assert g.selected is None
    assert g.handle(SelectAt(pos(2)))
    first = g.selected
    assert g.handle(SelectAt(pos(3)))
    assert not g.tokens[first].selected
    assert g.tokens[g.selected].selected


def test_no_selection_or_second_move_while_sliding():
    g = movement_game()
    g.select_slot(4)
    g.move_selected(1)
    assert not g.select_slot(2)
    assert not g.handle(MoveSelectedTo(pos(6)))
    assert g.tokens.moving_tokens() == [0]


def test_movement_win_attributed_to_mover():
    # A: 0, 3, 4  B: 1, 5, 8 ; A slides 4 -> 6 completing 0-3-6
    g = started()
    play_placements(g, [0, 1, 3, 5, 4, 8])
    assert g.phase == Phase.MOVEMENT
    g.select_slot(4)
    assert g.move_selected(6)
    assert g.phase == Phase.MOVEMENT
    finish_slide(g)
    assert g.phase == Phase.WIN
    assert g.winner == Player.A
    assert g.turn == Player.A


def test_player_b_placement_win():
    g = started()
    play_placements(g, [0, 1, 3, 4, 8, 7])
    assert g.winner == Player.B
    assert g.turn == Player.B
    assert g.placed == {Player.A: 3, Player.B: 2}
    assert g.banner() == Banner.WIN_B


def test_win_freezes_play_until_reset():
    g = started()
    play_placements(g, [0, 1, 3, 4, 6])
    board = g.view().board
    for slot in range(9):
        assert not g.place(slot)
        assert not g.select_slot(slot)
    assert not g.handle(PlaceAt(pos(2)))
    assert not g.handle(MoveSelectedTo(pos(2)))
    assert not g.handle(BeginGame())
    assert g.view().board == board
    assert g.handle(Reset())
    assert g.phase == Phase.START


def test_reset_outside_win_goes_to_placement():
    g = movement_game()
    g.select_slot(4)
    g.move_selected(1)
    assert g.handle(Reset())
    assert g.phase == Phase.PLACEMENT
    assert len(g.tokens) == 0
    assert g.placed == {Player.A: 0, Player.B: 0}
    assert g.turn == Player.A
    assert g.selected is None
    assert not g.in_transit
    assert g.update(1.0) == []


def test_reset_from_win_returns_to_start_then_begin():
    g = started()
    play_placements(g, [0, 1, 3, 4, 6])
    g.reset()
    assert g.phase == Phase.START
    assert g.winner is None
    assert len(g.tokens) == 0
    assert g.handle(BeginGame())
    assert g.phase == Phase.PLACEMENT


def test_menu_navigation():
    g = Game()
    assert g.handle(NavigateTo(Phase.INSTRUCTIONS))
    assert g.banner() == Banner.INSTRUCTIONS
    assert not g.handle(NavigateTo(Phase.ABOUT))
    assert not g.handle(BeginGame())
    assert g.handle(NavigateTo(Phase.START))
    assert g.handle(NavigateTo(Phase.ABOUT))
    assert g.phase == Phase.ABOUT
    assert g.handle(NavigateTo(Phase.START))
    assert not g.handle(NavigateTo(Phase.WIN))
    assert g.phase == Phase.START


def test_exit_only_from_win():
    g = started()
    assert not g.handle(Exit())
    assert not g.exited
    play_placements(g, [0, 1, 3, 4, 6])
    assert g.handle(Exit())
    assert g.exited


def test_selection_cleared_and_stale_index_dropped():
    g = movement_game()
    g.select_slot(2)
    g.tokens.clear()
    assert g.selected is None


def test_events_logged(caplog):
    g = Game(event_log=logging.getLogger("test.events"))
    with caplog.at_level(logging.INFO, logger="test.events"):
        g.begin()
        play_placements(g, [0, 1, 3, 4, 6])
        g.exit()
        g.reset()
    messages = [r.getMessage() for r in caplog.records if r.name == "test.events"]
    assert messages == ["Game started.", "Player A wins!", "Game exited.", "Game reset."]


def test_invalid_intents_not_logged(caplog):
    g = started()
    with caplog.at_level(logging.INFO):
        caplog.clear()
        g.place(0)
        assert not g.place(0)
        assert not g.select_slot(0)
    assert [r for r in caplog.records if r.levelno >= logging.INFO] == []


def test_handle_rejects_unknown_intent():
    with pytest.raises(TypeError):
        Game().handle("place 0")  # type: ignore[arg-type]
