"""
Game state machine for Three Men's Morris.
Teaching notes:
- Phases: Start, About, Instructions (menus), Placement, Movement, Win.
- Placement: players alternate dropping tokens on free slots, three each.
  A line completed during placement wins at once.
- Movement: the player to move selects one of their tokens and slides it to a
  free adjacent slot. The win check runs when the slide arrives, not when it
  starts, and always for the token's owner.
- The turn passes after every placement or arrival that does not win.
- Input that breaks a rule is ignored: ``handle`` returns False and nothing
  changes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .board import free_slot_at, is_adjacent, is_free, serialize_occupancy, check_slot
from .gamelog import event_logger
from .motion import DEFAULT_SPEED, advance
from .tokens import Player, TokenRegistry
from .win import WIN_MASKS, has_won, winning_line

log = logging.getLogger(__name__)

TOKENS_PER_PLAYER = 3


class Phase(Enum):
    START = "start"
    ABOUT = "about"
    INSTRUCTIONS = "instructions"
    PLACEMENT = "placement"
    MOVEMENT = "movement"
    WIN = "win"


class Banner(Enum):
    """Overlay a renderer should show; the renderer maps it to its own art."""
    START = "start"
    INSTRUCTIONS = "instructions"
    ABOUT = "about"
    PLACEMENT_A = "placement_a"
    PLACEMENT_B = "placement_b"
    MOVEMENT_A = "movement_a"
    MOVEMENT_B = "movement_b"
    WIN_A = "win_a"
    WIN_B = "win_b"


_MENU_BANNERS = {
    Phase.START: Banner.START,
    Phase.INSTRUCTIONS: Banner.INSTRUCTIONS,
    Phase.ABOUT: Banner.ABOUT,
}
_TURN_BANNERS = {
    (Phase.PLACEMENT, Player.A): Banner.PLACEMENT_A,
    (Phase.PLACEMENT, Player.B): Banner.PLACEMENT_B,
    (Phase.MOVEMENT, Player.A): Banner.MOVEMENT_A,
    (Phase.MOVEMENT, Player.B): Banner.MOVEMENT_B,
}
_WIN_BANNERS = {Player.A: Banner.WIN_A, Player.B: Banner.WIN_B}

Point = Tuple[float, float]


# -- intents ----------------------------------------------------------------

@dataclass(frozen=True)
class NavigateTo:
    target: Phase


@dataclass(frozen=True)
class BeginGame:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Exit:
    pass


@dataclass(frozen=True)
class PlaceAt:
    position: Point


@dataclass(frozen=True)
class SelectAt:
    position: Point


@dataclass(frozen=True)
class MoveSelectedTo:
    position: Point


Intent = Union[NavigateTo, BeginGame, Reset, Exit, PlaceAt, SelectAt, MoveSelectedTo]


# -- renderer-facing snapshot ----------------------------------------------

@dataclass(frozen=True)
class TokenView:
    owner: Player
    slot: int
    position: Point
    selected: bool
    moving: bool
    destination: Optional[int]


@dataclass(frozen=True)
class FrameView:
    phase: Phase
    turn: Player
    winner: Optional[Player]
    board: str
    tokens: Tuple[TokenView, ...]
    banner: Banner
    winning_line: Optional[Tuple[int, int, int]]


class Game:
    def __init__(
        self,
        event_log: Optional[logging.Logger] = None,
        speed: float = DEFAULT_SPEED,
    ) -> None:
        self.events = event_log if event_log is not None else event_logger()
        self.speed = speed
        self.tokens = TokenRegistry()
        self.phase = Phase.START
        self.turn = Player.A
        self.placed: Dict[Player, int] = {Player.A: 0, Player.B: 0}
        self.winner: Optional[Player] = None
        self.exited = False
        self._selected: Optional[int] = None

    # -- queries ------------------------------------------------------------

    @property
    def selected(self) -> Optional[int]:
        """Index of the selected token, or None if unset or stale."""
        if not self.tokens.is_valid_index(self._selected):
            self._selected = None
        return self._selected

    @property
    def in_transit(self) -> bool:
        return bool(self.tokens.moving_tokens())

    def banner(self) -> Banner:
        if self.phase in _MENU_BANNERS:
            return _MENU_BANNERS[self.phase]
        if self.phase == Phase.WIN:
            return _WIN_BANNERS[self.winner or self.turn]
        # during a slide the indicator already names the next mover
        nxt = self.turn.other if self.in_transit else self.turn
        return _TURN_BANNERS[(self.phase, nxt)]

    def view(self) -> FrameView:
        tokens = tuple(
            TokenView(
                owner=t.owner,
                slot=t.slot,
                position=(float(t.position[0]), float(t.position[1])),
                selected=t.selected,
                moving=t.moving,
                destination=t.destination,
            )
            for t in self.tokens
        )
        line = winning_line(self.tokens, self.winner) if self.winner is not None else None
        return FrameView(
            phase=self.phase,
            turn=self.turn,
            winner=self.winner,
            board=serialize_occupancy(self.tokens),
            tokens=tokens,
            banner=self.banner(),
            winning_line=line,
        )

    # -- intents ------------------------------------------------------------

    def handle(self, intent: Intent) -> bool:
        """Apply one intent. Returns False when it was ignored."""
        if isinstance(intent, NavigateTo):
            return self.navigate(intent.target)
        if isinstance(intent, BeginGame):
            return self.begin()
        if isinstance(intent, Reset):
            return self.reset()
        if isinstance(intent, Exit):
            return self.exit()
        if isinstance(intent, PlaceAt):
            return self.place_at(intent.position)
        if isinstance(intent, SelectAt):
            return self.select_at(intent.position)
        if isinstance(intent, MoveSelectedTo):
            return self.move_selected_to(intent.position)
        raise TypeError(f"Unknown intent: {intent!r}")

    def navigate(self, target: Phase) -> bool:
        if self.phase == Phase.START and target in (Phase.INSTRUCTIONS, Phase.ABOUT):
            self.phase = target
            return True
        if self.phase in (Phase.INSTRUCTIONS, Phase.ABOUT) and target == Phase.START:
            self.phase = Phase.START
            return True
        return self._ignore("navigate to %s from %s", target.value, self.phase.value)

    def begin(self) -> bool:
        if self.phase != Phase.START:
            return self._ignore("begin outside start screen")
        self._new_round()
        self.phase = Phase.PLACEMENT
        self.events.info("Game started.")
        return True

    def reset(self) -> bool:
        # from Win back to the title screen, otherwise straight into a fresh placement
        self.phase = Phase.START if self.phase == Phase.WIN else Phase.PLACEMENT
        self._new_round()
        self.events.info("Game reset.")
        return True

    def exit(self) -> bool:
        if self.phase != Phase.WIN:
            return self._ignore("exit outside win screen")
        self.exited = True
        self.events.info("Game exited.")
        return True

    def place(self, slot: int) -> bool:
        if self.phase != Phase.PLACEMENT:
            return self._ignore("place in phase %s", self.phase.value)
        if not is_free(slot, self.tokens):
            return self._ignore("place on taken slot %d", slot)
        player = self.turn
        if self.placed[player] >= TOKENS_PER_PLAYER:
            return self._ignore("%s has no tokens left", player.label)

        self.tokens.place_token(player, slot)
        if has_won(self.tokens, player, WIN_MASKS):
            self._declare_winner(player)
            return True

        self.placed[player] += 1
        if all(n == TOKENS_PER_PLAYER for n in self.placed.values()):
            self.phase = Phase.MOVEMENT
        self.turn = player.other
        return True

    def place_at(self, position: Sequence[float]) -> bool:
        if self.phase != Phase.PLACEMENT:
            return self._ignore("place in phase %s", self.phase.value)
        slot = free_slot_at(position, self.tokens)
        if slot is None:
            return self._ignore("no free slot at %s", tuple(position))
        return self.place(slot)

    def select(self, index: int) -> bool:
        if self.phase != Phase.MOVEMENT:
            return self._ignore("select in phase %s", self.phase.value)
        if self.in_transit:
            return self._ignore("select while a token is sliding")
        if not self.tokens.is_valid_index(index):
            return self._ignore("select unknown token %s", index)
        token = self.tokens[index]
        if token.owner != self.turn:
            return self._ignore("select opponent token %d", index)
        previous = self.selected
        if previous is not None:
            self.tokens[previous].selected = False
        token.selected = True
        self._selected = index
        return True

    def select_slot(self, slot: int) -> bool:
        index = self.tokens.index_on_slot(check_slot(slot), owner=self.turn)
        if index is None:
            return self._ignore("no own token on slot %d", slot)
        return self.select(index)

    def select_at(self, position: Sequence[float]) -> bool:
        index = self.tokens.token_at(position, owner=self.turn)
        if index is None:
            return self._ignore("no own token at %s", tuple(position))
        return self.select(index)

    def move_selected(self, slot: int) -> bool:
        if self.phase != Phase.MOVEMENT:
            return self._ignore("move in phase %s", self.phase.value)
        index = self.selected
        if index is None:
            return self._ignore("move without selection")
        token = self.tokens[index]
        if token.moving:
            return self._ignore("token %d already moving", index)
        if not is_free(slot, self.tokens):
            return self._ignore("move onto taken slot %d", slot)
        if not is_adjacent(token.slot, slot):
            return self._ignore("slot %d not adjacent to %d", slot, token.slot)
        self.tokens.begin_move(index, slot)
        self._selected = None
        return True

    def move_selected_to(self, position: Sequence[float]) -> bool:
        if self.phase != Phase.MOVEMENT:
            return self._ignore("move in phase %s", self.phase.value)
        slot = free_slot_at(position, self.tokens)
        if slot is None:
            return self._ignore("no free slot at %s", tuple(position))
        return self.move_selected(slot)

    # -- frame update ---------------------------------------------------------

    def update(self, dt: float) -> List[int]:
        """Advance sliding tokens by ``dt`` seconds and settle arrivals."""
        arrived = advance(self.tokens, dt, self.speed)
        for index in arrived:
            self.finish_move(index)
        return arrived

    def finish_move(self, index: int) -> None:
        token = self.tokens.complete_move(index)
        self._selected = None
        if has_won(self.tokens, token.owner, WIN_MASKS):
            self._declare_winner(token.owner)
            return
        self.turn = token.owner.other

    # -- internals ------------------------------------------------------------

    def _declare_winner(self, player: Player) -> None:
        self.winner = player
        self.phase = Phase.WIN
        self.events.info("%s wins!", player.label)

    def _new_round(self) -> None:
        self.tokens.clear()
        self.placed = {Player.A: 0, Player.B: 0}
        self.turn = Player.A
        self.winner = None
        self.exited = False
        self._selected = None

    def _ignore(self, msg: str, *args) -> bool:
        log.debug("ignored: " + msg, *args)
        return False
