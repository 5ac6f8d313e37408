# visualization.py
"""
Handles the visualization of the circuit simulation using Pygame.
"""
import logging
import math
import pygame
import numpy as np
from typing import Callable, Tuple

from constants import (
    WINDOW_WIDTH, WINDOW_HEIGHT, CIRCUIT_ORIGIN, BACKGROUND_COLOR,
    OUTER_WIDTH, OUTER_HEIGHT, CONDUCTOR_WIDTH, CONDUCTOR_COLOR,
    CARRIER_COLOR, CARRIER_RADIUS, TRANSIENT_RADIUS,
    FIELD_MARKER_COLOR, FIELD_MARKER_HALF_LENGTH, RAIL_OFFSET, TRACK_HEIGHT,
    BATTERY_LEFT, BATTERY_TOP, BATTERY_WIDTH, BATTERY_HEIGHT, BATTERY_BAND_WIDTH,
    FULL_CHARGE, MANGANESE_COLOR, ELECTROLYTE_COLOR, ZINC_COLOR, ION_COLOR,
    ION_ROWS, ION_COLUMNS, SWITCH_LEFT, SWITCH_WIDTH, SWITCH_HEIGHT,
    BULB_CENTER_X, BULB_RADIUS, BULB_ON_COLOR, BULB_OFF_COLOR,
    TEXT_COLOR, BUTTON_COLOR, BUTTON_HOVER_COLOR, BUTTON_BORDER_COLOR,
    TOGGLE_LABEL, DEAD_LABEL, LEGEND_ENTRIES, WINDOW_TITLE
)
from simulation import SimulationSnapshot


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, fps: int = 60, title: str = ...):
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - draw(self, snapshot: SimulationSnapshot, on_toggle: Callable[[], None]) -> bool:
#     - Inputs:
#       - snapshot: read-only view of the simulation for this frame.
#       - on_toggle: called when the user clicks the button or presses SPACE.
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: Renders the frame, handles Pygame events and limits
#       the frame rate. Never mutates the snapshot.

class Visualizer:
    """
    Renders simulation snapshots and provides the toggle button.
    """
    def __init__(self, fps: int = 60, title: str = WINDOW_TITLE):
        pygame.init()
        pygame.font.init()

        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.fps = fps
        self.title = title
        self.origin = CIRCUIT_ORIGIN

        # Pygame will fall back to its default font if Arial is not found.
        self.font_title = pygame.font.SysFont("Arial", 20, bold=True)
        self.font_main = pygame.font.SysFont("Arial", 16)
        self.font_small = pygame.font.SysFont("Arial", 13)
        self.font_ion = pygame.font.SysFont("Arial", 12)
        self.font_polarity = pygame.font.SysFont("Arial", 30)

        # The button sits in the middle of the conductor's hole.
        ox, oy = self.origin
        button_w, button_h = 330, 40
        self.button_rect = pygame.Rect(
            ox + (OUTER_WIDTH - button_w) // 2, oy + (OUTER_HEIGHT - button_h) // 2,
            button_w, button_h
        )

        # The conductor frame never changes, so it is rendered once.
        self.frame_surface = self._pre_render_frame()

        logging.info(f"Visualizer initialized with Pygame display ({WINDOW_WIDTH}x{WINDOW_HEIGHT}).")

    def _to_screen(self, x: float, y: float) -> Tuple[int, int]:
        return int(round(self.origin[0] + x)), int(round(self.origin[1] + y))

    def _pre_render_frame(self) -> pygame.Surface:
        surf = pygame.Surface((OUTER_WIDTH, OUTER_HEIGHT), pygame.SRCALPHA)
        pygame.draw.rect(surf, CONDUCTOR_COLOR, surf.get_rect(), CONDUCTOR_WIDTH)
        return surf

    def _draw_bulb(self, energized: bool):
        center = self._to_screen(BULB_CENTER_X, TRACK_HEIGHT + RAIL_OFFSET)
        if energized:
            glow = pygame.Surface((BULB_RADIUS * 4, BULB_RADIUS * 4), pygame.SRCALPHA)
            pygame.draw.circle(glow, (255, 255, 0, 60), (BULB_RADIUS * 2, BULB_RADIUS * 2), BULB_RADIUS + 10)
            self.screen.blit(glow, (center[0] - BULB_RADIUS * 2, center[1] - BULB_RADIUS * 2))
        pygame.draw.circle(self.screen, BULB_ON_COLOR if energized else BULB_OFF_COLOR, center, BULB_RADIUS)

    def _draw_carriers(self, snapshot: SimulationSnapshot):
        points = snapshot.carrier_points
        if not snapshot.closed:
            # Idle vibration is purely visual; the simulated positions stay frozen.
            phase = np.sin(2.0 * math.pi * snapshot.clock / snapshot.carrier_periods)
            points = points + snapshot.carrier_vibrations * phase[:, np.newaxis]

        for (x, y), visible in zip(points, snapshot.carrier_visible):
            if visible:
                pygame.draw.circle(self.screen, CARRIER_COLOR, self._to_screen(x, y), CARRIER_RADIUS)

    def _draw_field_markers(self, snapshot: SimulationSnapshot):
        if not snapshot.energized:
            return
        for x, y, angle in snapshot.field_markers:
            # Markers cross the conductor: vertical on horizontal segments.
            if angle in (0, 180):
                start, end = (x, y - FIELD_MARKER_HALF_LENGTH), (x, y + FIELD_MARKER_HALF_LENGTH)
            else:
                start, end = (x - FIELD_MARKER_HALF_LENGTH, y), (x + FIELD_MARKER_HALF_LENGTH, y)
            pygame.draw.line(self.screen, FIELD_MARKER_COLOR, self._to_screen(*start), self._to_screen(*end), 2)

    def _draw_switch(self, closed: bool):
        if closed:
            return
        left, top = self._to_screen(SWITCH_LEFT, RAIL_OFFSET - SWITCH_HEIGHT / 2)
        pygame.draw.rect(self.screen, BACKGROUND_COLOR, pygame.Rect(left, top, int(SWITCH_WIDTH), int(SWITCH_HEIGHT)))

    def _draw_battery(self, snapshot: SimulationSnapshot):
        left, top = self._to_screen(BATTERY_LEFT, BATTERY_TOP)
        band = int(BATTERY_BAND_WIDTH)
        height = int(BATTERY_HEIGHT)
        body = pygame.Rect(left, top, int(BATTERY_WIDTH), height)

        pygame.draw.rect(self.screen, (255, 255, 255), body)
        pygame.draw.rect(self.screen, MANGANESE_COLOR, pygame.Rect(left, top, band, height))

        # Electrolyte level follows the stored charge.
        level = int(round(height * snapshot.stored_charge / FULL_CHARGE))
        if level > 0:
            pygame.draw.rect(self.screen, ELECTROLYTE_COLOR, pygame.Rect(left + band, top + height - level, band, level))
        pygame.draw.rect(self.screen, ZINC_COLOR, pygame.Rect(left + 2 * band, top, band, height))
        pygame.draw.rect(self.screen, (0, 0, 0), body, 1)

        # Positive ions in the manganese band, filled row by row.
        total_ions = ION_ROWS * ION_COLUMNS
        visible_ions = int(round(total_ions * snapshot.ion_budget / FULL_CHARGE))
        plus = self.font_ion.render("+", True, ION_COLOR)
        for idx in range(visible_ions):
            r, c = divmod(idx, ION_COLUMNS)
            rect = plus.get_rect(center=(left + 5 + c * 8, int(top + 8 + r * 4.5)))
            self.screen.blit(plus, rect)

        for label, x in (("+", left + band // 2), ("-", left + int(BATTERY_WIDTH) - band // 2)):
            surf = self.font_polarity.render(label, True, FIELD_MARKER_COLOR)
            self.screen.blit(surf, surf.get_rect(center=(x, top + height + 20)))

    def _draw_transients(self, snapshot: SimulationSnapshot):
        for x, y in snapshot.transient_points:
            pygame.draw.circle(self.screen, CARRIER_COLOR, self._to_screen(x, y), TRANSIENT_RADIUS)

    def _draw_button(self, dead: bool, mouse_pos: Tuple[int, int]):
        is_hovered = self.button_rect.collidepoint(mouse_pos)
        color = BUTTON_HOVER_COLOR if is_hovered else BUTTON_COLOR
        pygame.draw.rect(self.screen, color, self.button_rect, border_radius=8)
        pygame.draw.rect(self.screen, BUTTON_BORDER_COLOR, self.button_rect, 1, border_radius=8)

        text_surf = self.font_main.render(DEAD_LABEL if dead else TOGGLE_LABEL, True, TEXT_COLOR)
        self.screen.blit(text_surf, text_surf.get_rect(center=self.button_rect.center))

    def _draw_legend(self):
        """Renders the legend in two rows below the circuit."""
        columns = 4
        col_width = 190
        start_x = (WINDOW_WIDTH - columns * col_width) // 2
        start_y = self.origin[1] + OUTER_HEIGHT + 60
        for i, (label, swatch) in enumerate(LEGEND_ENTRIES):
            row, col = divmod(i, columns)
            x = start_x + col * col_width
            y = start_y + row * 26
            if swatch == "dot":
                pygame.draw.circle(self.screen, CARRIER_COLOR, (x + 5, y + 7), 5)
            elif swatch == "small_dot":
                pygame.draw.circle(self.screen, CARRIER_COLOR, (x + 5, y + 7), 4)
            elif swatch == "plus":
                plus = self.font_main.render("+", True, ION_COLOR)
                self.screen.blit(plus, plus.get_rect(center=(x + 5, y + 7)))
            elif swatch == "field":
                for k in range(3):
                    pygame.draw.rect(self.screen, FIELD_MARKER_COLOR, pygame.Rect(x + k * 6, y + 1, 3, 12))
            else:
                fill = {"manganese": MANGANESE_COLOR, "electrolyte": ELECTROLYTE_COLOR, "zinc": ZINC_COLOR}[swatch]
                pygame.draw.rect(self.screen, fill, pygame.Rect(x, y + 3, 8, 8))
            text = self.font_small.render(label, True, TEXT_COLOR)
            self.screen.blit(text, (x + 22, y))

    def draw(self, snapshot: SimulationSnapshot, on_toggle: Callable[[], None]) -> bool:
        """
        Draws one frame and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        mouse_pos = pygame.mouse.get_pos()

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                if event.key == pygame.K_SPACE:
                    on_toggle()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self.button_rect.collidepoint(mouse_pos):
                    on_toggle()

        self.screen.fill(BACKGROUND_COLOR)

        title_surf = self.font_title.render(self.title, True, TEXT_COLOR)
        self.screen.blit(title_surf, title_surf.get_rect(center=(WINDOW_WIDTH // 2, 50)))

        # Draw order follows the layering of the circuit: bulb behind the
        # conductor, battery and button on top, chemistry above everything.
        self._draw_bulb(snapshot.energized)
        self.screen.blit(self.frame_surface, self.origin)
        self._draw_carriers(snapshot)
        self._draw_field_markers(snapshot)
        self._draw_switch(snapshot.closed)
        self._draw_battery(snapshot)
        self._draw_button(snapshot.dead, mouse_pos)
        self._draw_transients(snapshot)
        self._draw_legend()

        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
