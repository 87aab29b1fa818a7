"""Progress dashboard image renderer."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from ..goals.progress import ProgressSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Theme:
    """Look and density of a rendered dashboard."""
    name: str
    width: int
    height: int
    background: str
    foreground: str
    accent: str
    muted: str
    font_scale: float = 1.0
    monochrome: bool = False
    show_week: bool = True


THEMES = {
    "default": Theme(
        name="default",
        width=800,
        height=480,
        background="white",
        foreground="#1f2937",
        accent="#2563eb",
        muted="#e5e7eb",
    ),
    "compact": Theme(
        name="compact",
        width=400,
        height=240,
        background="white",
        foreground="#1f2937",
        accent="#16a34a",
        muted="#e5e7eb",
        font_scale=0.6,
        show_week=False,
    ),
    "eink": Theme(
        name="eink",
        width=800,
        height=480,
        background="white",
        foreground="black",
        accent="black",
        muted="white",
        monochrome=True,
    ),
}


def get_theme(name: str) -> Theme:
    """Look up a theme by name."""
    try:
        return THEMES[name]
    except KeyError:
        raise ValueError(
            f"Unknown theme '{name}', expected one of: {', '.join(sorted(THEMES))}"
        ) from None


class DashboardRenderer:
    """Renders the commitment progress view to an image."""

    def __init__(self, output_dir: str = "static/images", theme: str = "default"):
        """
        Initialize renderer.

        Args:
            output_dir: Directory to save generated images
            theme: Name of the theme in THEMES
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.theme = get_theme(theme)

        # Try to load fonts, fall back to default
        self.fonts = self._load_fonts()

    def _load_fonts(self) -> dict:
        """Load fonts for rendering."""
        fonts = {}
        sizes = {"header": 28, "big": 40, "title": 20, "normal": 16, "small": 14}

        # Try to find system fonts
        font_paths = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/System/Library/Fonts/Helvetica.ttc",  # macOS
        ]

        try:
            for path in font_paths:
                if Path(path).exists():
                    for key, size in sizes.items():
                        fonts[key] = ImageFont.truetype(
                            path, max(8, int(size * self.theme.font_scale))
                        )
                    logger.info(f"Loaded fonts from {path}")
                    break
        except OSError as e:
            logger.warning(f"Could not load TrueType fonts: {e}, using default")
            fonts = {}

        # Fall back to default fonts
        if not fonts:
            default_font = ImageFont.load_default()
            fonts = {key: default_font for key in sizes}

        return fonts

    def _scale(self, value: float) -> int:
        return int(value * self.theme.width / 800)

    def render(self, summary: ProgressSummary) -> tuple[str, str]:
        """
        Render the dashboard.

        Args:
            summary: Progress values for the tracked goal; a zero-day summary
                renders the setup screen

        Returns:
            Tuple of (filename, file_path)
        """
        theme = self.theme
        logger.info(
            f"Rendering {theme.name} dashboard for {summary.completed_days}/{summary.goal_days}"
        )

        image = Image.new("RGB", (theme.width, theme.height), theme.background)
        draw = ImageDraw.Draw(image)

        if summary.goal_days > 0:
            self._draw_header(draw, summary)
            self._draw_progress_ring(draw, summary)
            self._draw_stats(draw, summary)
            if theme.show_week:
                self._draw_week(draw, summary)
        else:
            self._draw_setup(draw)
        self._draw_footer(draw, summary)

        if theme.monochrome:
            image = self._convert_to_monochrome(image)

        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        filename = f"commitment-{theme.name}-{timestamp}"
        file_path = self.output_dir / f"{filename}.png"

        image.save(file_path, "PNG")
        logger.info(f"Saved dashboard to {file_path}")

        return filename, str(file_path)

    def _text_width(self, draw: ImageDraw.ImageDraw, text: str, font) -> int:
        bbox = draw.textbbox((0, 0), text, font=font)
        return bbox[2] - bbox[0]

    def _draw_header(self, draw: ImageDraw.ImageDraw, summary: ProgressSummary):
        """Draw goal title and start date."""
        theme = self.theme
        margin = self._scale(20)

        title = f"{summary.goal_days}-Day Commitment"
        draw.text((margin, self._scale(15)), title, fill=theme.foreground, font=self.fonts["header"])

        started = f"Started {summary.started_on}"
        width = self._text_width(draw, started, self.fonts["normal"])
        draw.text(
            (theme.width - width - margin, self._scale(22)),
            started,
            fill=theme.foreground,
            font=self.fonts["normal"],
        )

        line_y = self._scale(60)
        draw.line([margin, line_y, theme.width - margin, line_y], fill=theme.foreground, width=2)

    def _draw_progress_ring(self, draw: ImageDraw.ImageDraw, summary: ProgressSummary):
        """Draw the circular completion gauge with day count and percentage."""
        theme = self.theme
        radius = self._scale(90)
        cx = self._scale(150)
        cy = self._scale(200)
        box = [cx - radius, cy - radius, cx + radius, cy + radius]
        ring = max(4, self._scale(14))

        if theme.monochrome:
            draw.ellipse(box, outline=theme.foreground, width=1)
        else:
            draw.ellipse(box, outline=theme.muted, width=ring)
        if summary.percentage > 0:
            end = -90 + 360 * min(summary.percentage, 100) / 100
            draw.arc(box, start=-90, end=end, fill=theme.accent, width=ring)

        count = str(summary.completed_days)
        count_width = self._text_width(draw, count, self.fonts["big"])
        draw.text(
            (cx - count_width / 2, cy - self._scale(35)),
            count,
            fill=theme.foreground,
            font=self.fonts["big"],
        )

        percent = f"{summary.percentage}%"
        percent_width = self._text_width(draw, percent, self.fonts["normal"])
        draw.text(
            (cx - percent_width / 2, cy + self._scale(15)),
            percent,
            fill=theme.foreground,
            font=self.fonts["normal"],
        )

    def _draw_stats(self, draw: ImageDraw.ImageDraw, summary: ProgressSummary):
        """Draw goal/completed/remaining, the achievement and any milestone."""
        theme = self.theme
        x = self._scale(300)
        y = self._scale(100)

        stats = [
            ("Goal", summary.goal_days),
            ("Completed", summary.completed_days),
            ("Remaining", summary.remaining_days),
        ]
        column = self._scale(150)
        for i, (label, value) in enumerate(stats):
            draw.text((x + i * column, y), str(value), fill=theme.foreground, font=self.fonts["header"])
            draw.text((x + i * column, y + self._scale(38)), label, fill=theme.foreground, font=self.fonts["small"])

        draw.text(
            (x, y + self._scale(85)),
            summary.achievement,
            fill=theme.accent,
            font=self.fonts["title"],
        )

        if summary.milestone:
            draw.text(
                (x, y + self._scale(120)),
                f"Milestone: {summary.milestone.title}",
                fill=theme.foreground,
                font=self.fonts["title"],
            )
            draw.text(
                (x, y + self._scale(150)),
                summary.milestone.message,
                fill=theme.foreground,
                font=self.fonts["small"],
            )

    def _draw_week(self, draw: ImageDraw.ImageDraw, summary: ProgressSummary):
        """Draw the seven-slot recent progress strip."""
        theme = self.theme
        size = self._scale(32)
        gap = self._scale(12)
        x = self._scale(300)
        y = self._scale(330)

        draw.text((x, y - self._scale(28)), "Last 7 days", fill=theme.foreground, font=self.fonts["small"])

        for i, slot in enumerate(summary.week_progress):
            left = x + i * (size + gap)
            box = [left, y, left + size, y + size]
            if slot == "completed":
                draw.ellipse(box, fill=theme.accent, outline=theme.accent)
            elif slot == "today":
                draw.ellipse(box, outline=theme.foreground, width=2)
                draw.text((left + size / 3, y + size / 5), "T", fill=theme.foreground, font=self.fonts["small"])
            else:
                draw.ellipse(box, fill=theme.muted, outline=theme.foreground if theme.monochrome else theme.muted)

    def _draw_setup(self, draw: ImageDraw.ImageDraw):
        """Draw the no-goal screen."""
        theme = self.theme
        lines = [
            ("No active goal", self.fonts["header"]),
            ("Start a commitment of 1 to 365 days.", self.fonts["normal"]),
        ]
        y = theme.height // 2 - self._scale(40)
        for text, font in lines:
            width = self._text_width(draw, text, font)
            draw.text(((theme.width - width) / 2, y), text, fill=theme.foreground, font=font)
            y += self._scale(45)

    def _draw_footer(self, draw: ImageDraw.ImageDraw, summary: ProgressSummary):
        """Draw footer with last check-in and update time."""
        theme = self.theme
        margin = self._scale(20)
        y = theme.height - self._scale(35)

        draw.line([margin, y - 10, theme.width - margin, y - 10], fill=theme.foreground, width=2)

        draw.text(
            (margin, y),
            f"Last check-in: {summary.last_check_in}",
            fill=theme.foreground,
            font=self.fonts["small"],
        )

        time_text = f"Last update: {datetime.now().strftime('%H:%M')}"
        width = self._text_width(draw, time_text, self.fonts["small"])
        draw.text((theme.width - width - margin, y), time_text, fill=theme.foreground, font=self.fonts["small"])

    def _convert_to_monochrome(self, image: Image.Image) -> Image.Image:
        """Convert image to monochrome for e-ink display."""
        return image.convert("1")
