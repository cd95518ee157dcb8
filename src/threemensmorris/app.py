"""
pygame front end: turns clicks into intents and draws each frame.

Nothing here decides rules. Clicks are mapped to intents using the current
phase and the button layout; the ``Game`` accepts or ignores them. Drawing
reads a ``FrameView`` only.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Tuple

import pygame

from .board import ADJACENCY, HALF_SLOT, SLOTS, contains
from .config import GameConfig
from .engine import (
    Banner,
    BeginGame,
    Exit,
    FrameView,
    Game,
    Intent,
    MoveSelectedTo,
    NavigateTo,
    Phase,
    PlaceAt,
    Reset,
    SelectAt,
)
from .tokens import Player

log = logging.getLogger(__name__)

TITLE = "Three Men's Morris"


class Settings:
    BG_COLOR = (250, 248, 240)
    LINE_COLOR = (60, 50, 40)
    LINE_WIDTH = 6
    SLOT_COLOR = (200, 190, 170)
    SLOT_RADIUS = 14
    TOKEN_RADIUS = int(HALF_SLOT)
    TOKEN_COLORS = {Player.A: (200, 40, 40), Player.B: (30, 60, 190)}
    SELECTED_COLOR = (250, 200, 30)
    WIN_LINE_COLOR = (40, 170, 60)
    BUTTON_COLOR = (60, 50, 40)
    BUTTON_TEXT = (250, 248, 240)
    TEXT_COLOR = (30, 25, 20)
    FONT_SIZE = 40
    SMALL_FONT_SIZE = 28


# Button boxes per phase, (left, top, width, height).
BUTTONS: Dict[Phase, Dict[str, Tuple[int, int, int, int]]] = {
    Phase.START: {
        "start": (165, 440, 275, 100),
        "instructions": (165, 560, 275, 100),
        "about": (165, 680, 275, 100),
    },
    Phase.INSTRUCTIONS: {"back": (165, 665, 275, 100)},
    Phase.ABOUT: {"back": (165, 665, 275, 100)},
    Phase.PLACEMENT: {"reset": (340, 620, 240, 80)},
    Phase.MOVEMENT: {"reset": (340, 620, 240, 80)},
    Phase.WIN: {"restart": (165, 510, 275, 100), "exit": (165, 650, 275, 100)},
}

BUTTON_LABELS = {
    "start": "Start",
    "instructions": "How to play",
    "about": "About",
    "back": "Back",
    "reset": "Reset",
    "restart": "Play again",
    "exit": "Exit",
}

BANNER_TEXT = {
    Banner.START: TITLE,
    Banner.INSTRUCTIONS: "How to play",
    Banner.ABOUT: "About",
    Banner.PLACEMENT_A: "Player A: place a token",
    Banner.PLACEMENT_B: "Player B: place a token",
    Banner.MOVEMENT_A: "Player A: move a token",
    Banner.MOVEMENT_B: "Player B: move a token",
    Banner.WIN_A: "Player A wins!",
    Banner.WIN_B: "Player B wins!",
}

INSTRUCTIONS = (
    "Players take turns placing three tokens each.",
    "Then click one of your tokens and a free",
    "neighbouring point to slide it there.",
    "Three in a row, column or diagonal wins.",
)

ABOUT = (
    "Three Men's Morris, a classic board game",
    "for two players on a 3x3 grid.",
)

_BUTTON_INTENTS: Dict[str, Intent] = {
    "start": BeginGame(),
    "instructions": NavigateTo(Phase.INSTRUCTIONS),
    "about": NavigateTo(Phase.ABOUT),
    "back": NavigateTo(Phase.START),
    "reset": Reset(),
    "restart": Reset(),
    "exit": Exit(),
}


def button_at(phase: Phase, pos: Sequence[float]) -> Optional[str]:
    for name, box in BUTTONS[phase].items():
        if pygame.Rect(box).collidepoint(int(pos[0]), int(pos[1])):
            return name
    return None


def translate_click(pos: Sequence[float], view: FrameView) -> Optional[Intent]:
    """Map a left click to the intent it expresses in the current phase."""
    point = (float(pos[0]), float(pos[1]))
    name = button_at(view.phase, point)
    if name is not None:
        return _BUTTON_INTENTS[name]
    if view.phase == Phase.PLACEMENT:
        return PlaceAt(point)
    if view.phase == Phase.MOVEMENT:
        for t in view.tokens:
            if t.owner == view.turn and contains(t.position, point):
                return SelectAt(point)
        return MoveSelectedTo(point)
    return None


class Renderer:
    def __init__(self, screen: pygame.Surface) -> None:
        self.screen = screen
        self.font = pygame.font.Font(None, Settings.FONT_SIZE)
        self.small = pygame.font.Font(None, Settings.SMALL_FONT_SIZE)

    def draw(self, view: FrameView) -> None:
        self.screen.fill(Settings.BG_COLOR)
        if view.phase in (Phase.PLACEMENT, Phase.MOVEMENT):
            self._draw_board(view)
            self._text(BANNER_TEXT[view.banner], (20, 640), self.font)
        else:
            self._text(BANNER_TEXT[view.banner], (self.screen.get_width() // 2, 200), self.font, center=True)
            if view.phase == Phase.INSTRUCTIONS:
                self._lines(INSTRUCTIONS, 300)
            elif view.phase == Phase.ABOUT:
                self._lines(ABOUT, 300)
            elif view.phase == Phase.WIN:
                self._draw_board(view, top=260, scale=0.35)
        for name, box in BUTTONS[view.phase].items():
            self._button(BUTTON_LABELS[name], box)

    def _draw_board(self, view: FrameView, top: float = 0.0, scale: float = 1.0) -> None:
        left = (self.screen.get_width() - 600 * scale) / 2

        def px(xy):
            return (int(left + xy[0] * scale), int(top + xy[1] * scale))

        for a, neighbours in ADJACENCY.items():
            for b in neighbours:
                if a < b:
                    pygame.draw.line(self.screen, Settings.LINE_COLOR,
                                     px(SLOTS[a].position), px(SLOTS[b].position),
                                     max(1, int(Settings.LINE_WIDTH * scale)))
        for s in SLOTS:
            pygame.draw.circle(self.screen, Settings.SLOT_COLOR, px(s.position),
                               max(2, int(Settings.SLOT_RADIUS * scale)))
        if view.winning_line is not None:
            a, _, c = view.winning_line
            pygame.draw.line(self.screen, Settings.WIN_LINE_COLOR,
                             px(SLOTS[a].position), px(SLOTS[c].position),
                             max(2, int(Settings.LINE_WIDTH * 2 * scale)))
        radius = max(3, int(Settings.TOKEN_RADIUS * scale))
        for t in view.tokens:
            pygame.draw.circle(self.screen, Settings.TOKEN_COLORS[t.owner], px(t.position), radius)
            if t.selected:
                pygame.draw.circle(self.screen, Settings.SELECTED_COLOR, px(t.position), radius, 4)

    def _button(self, label: str, box: Tuple[int, int, int, int]) -> None:
        rect = pygame.Rect(box)
        pygame.draw.rect(self.screen, Settings.BUTTON_COLOR, rect, border_radius=12)
        self._text(label, rect.center, self.font, color=Settings.BUTTON_TEXT, center=True)

    def _lines(self, lines: Sequence[str], top: int) -> None:
        for i, line in enumerate(lines):
            self._text(line, (40, top + i * 36), self.small)

    def _text(self, text: str, at, font, color=Settings.TEXT_COLOR, center: bool = False) -> None:
        surf = font.render(text, True, color)
        rect = surf.get_rect(center=at) if center else surf.get_rect(topleft=at)
        self.screen.blit(surf, rect)


def _make_icon() -> pygame.Surface:
    icon = pygame.Surface((32, 32))
    icon.fill(Settings.BG_COLOR)
    pygame.draw.circle(icon, Settings.TOKEN_COLORS[Player.A], (10, 16), 7)
    pygame.draw.circle(icon, Settings.TOKEN_COLORS[Player.B], (22, 16), 7)
    return icon


def run(config: GameConfig, events: logging.Logger) -> int:
    """Open the window and run the frame loop. Returns a process exit status."""
    events.info("Game started.")
    try:
        pygame.init()
        screen = pygame.display.set_mode(config.window_size)
        pygame.display.set_caption(TITLE)
        pygame.display.set_icon(_make_icon())
        renderer = Renderer(screen)
    except (pygame.error, OSError) as e:
        events.error("Failed to initialise display: %s", e)
        pygame.quit()
        return 1

    game = Game(event_log=events, speed=config.speed)
    clock = pygame.time.Clock()
    running = True
    try:
        while running:
            dt = clock.tick(config.fps) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    events.info("Game closed by user.")
                    running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    intent = translate_click(event.pos, game.view())
                    if intent is not None:
                        game.handle(intent)
            if game.exited:
                running = False
            game.update(dt)
            renderer.draw(game.view())
            pygame.display.flip()
    finally:
        pygame.quit()
    return 0
