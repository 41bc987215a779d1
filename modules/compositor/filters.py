"""
Filter-graph construction.

Pure functions that turn declarative parameters into ffmpeg filter strings
and argument vectors. Nothing here touches the filesystem except font
resolution, which checks whether a configured font file exists.
"""

from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from shared.models.generation import FontWeight, OverlayPosition, TextOverlay, VideoTheme
from shared.themes import get_theme_config

BUMPER_FPS = 25
BUMPER_FADE_SECONDS = 0.5

# Distance of anchored text from the nearest frame edge(s)
OVERLAY_MARGIN = 50
# Padding around text inside its background box
OVERLAY_BOX_BORDER = 20
DEFAULT_BOX_OPACITY = 0.7

# Fontconfig family used when no font file is configured
FALLBACK_FONT_FAMILY = "Sans"

PathLike = Union[str, Path]


def format_number(value: float) -> str:
    """Render a number without a trailing '.0' (6 -> '6', 5.5 -> '5.5')."""
    return format(float(value), "g")


# Bumper clips

def bumper_filter(
    width: int,
    height: int,
    duration: float,
    fade_in: bool,
    fade_out: bool
) -> str:
    """
    Scale/pad a still image to the target frame, centred, at a fixed frame rate.

    Fades last 0.5s; the fade-out starts at duration - 0.5.
    """
    chain = (
        f"[0:v]scale={width}:{height}:force_original_aspect_ratio=decrease,"
        f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2,setsar=1,fps={BUMPER_FPS}"
    )
    if fade_in:
        chain += f",fade=t=in:st=0:d={format_number(BUMPER_FADE_SECONDS)}"
    if fade_out:
        start = format_number(duration - BUMPER_FADE_SECONDS)
        chain += f",fade=t=out:st={start}:d={format_number(BUMPER_FADE_SECONDS)}"
    return chain


def bumper_args(
    image_path: PathLike,
    output_path: PathLike,
    duration: float,
    width: int,
    height: int,
    fade_in: bool,
    fade_out: bool
) -> List[str]:
    return [
        "-loop", "1",
        "-i", str(image_path),
        "-filter_complex", bumper_filter(width, height, duration, fade_in, fade_out),
        "-t", format_number(duration),
        "-c:v", "libx264",
        "-pix_fmt", "yuv420p",
        "-y",
        str(output_path),
    ]


# Concatenation

def concat_list_content(paths: Sequence[PathLike]) -> str:
    """Concat demuxer list: one quoted absolute path per line."""
    lines = []
    for path in paths:
        posix = Path(path).resolve().as_posix()
        # A single quote inside a quoted path is written as '\''
        lines.append("file '{}'".format(posix.replace("'", "'\\''")))
    return "\n".join(lines) + "\n"


def concat_args(list_path: PathLike, output_path: PathLike) -> List[str]:
    return ["-f", "concat", "-safe", "0", "-i", str(list_path), "-c", "copy", "-y", str(output_path)]


# Probe and merge

def probe_args(video_path: PathLike) -> List[str]:
    return [
        "-v", "error",
        "-select_streams", "v:0",
        "-show_entries", "stream=width,height",
        "-of", "json",
        str(video_path),
    ]


def merge_args(video_path: PathLike, audio_path: PathLike, output_path: PathLike) -> List[str]:
    return [
        "-i", str(video_path),
        "-i", str(audio_path),
        "-c:v", "copy",
        "-c:a", "aac",
        "-map", "0:v:0",
        "-map", "1:a:0",
        "-shortest",
        "-y",
        str(output_path),
    ]


# Text overlays

class ResolvedTextStyle(NamedTuple):
    text_color: str
    font_size: int
    font_weight: FontWeight
    background_color: Optional[str]
    background_opacity: float


def resolve_text_style(overlay: TextOverlay, theme: VideoTheme) -> ResolvedTextStyle:
    """Overlay styling with unset fields taken from the theme."""
    style = get_theme_config(theme).text_style
    opacity = overlay.background_opacity
    if opacity is None:
        opacity = style.background_opacity
    if opacity is None:
        opacity = DEFAULT_BOX_OPACITY
    return ResolvedTextStyle(
        text_color=overlay.text_color or style.text_color,
        font_size=overlay.font_size or style.font_size,
        font_weight=overlay.font_weight or style.font_weight,
        background_color=overlay.background_color or style.background_color,
        background_opacity=opacity,
    )


def resolve_font(
    weight: FontWeight,
    font_path: Optional[str] = None,
    bold_font_path: Optional[str] = None
) -> Tuple[str, str]:
    """
    Pick the drawtext font option.

    A configured font file is used when it exists; otherwise the fontconfig
    family lookup picks a system font.

    Returns:
        (option name, value): ('fontfile', path) or ('font', pattern)
    """
    candidates = [bold_font_path, font_path] if weight is FontWeight.BOLD else [font_path]
    for candidate in candidates:
        if candidate and Path(candidate).expanduser().is_file():
            return "fontfile", str(Path(candidate).expanduser())
    if weight is FontWeight.BOLD:
        return "font", f"{FALLBACK_FONT_FAMILY}:style=Bold"
    return "font", FALLBACK_FONT_FAMILY


POSITION_EXPRESSIONS: Dict[OverlayPosition, Tuple[str, str]] = {
    OverlayPosition.TOP_LEFT: (f"{OVERLAY_MARGIN}", f"{OVERLAY_MARGIN}"),
    OverlayPosition.TOP_CENTER: ("(w-text_w)/2", f"{OVERLAY_MARGIN}"),
    OverlayPosition.TOP_RIGHT: (f"w-text_w-{OVERLAY_MARGIN}", f"{OVERLAY_MARGIN}"),
    OverlayPosition.CENTER: ("(w-text_w)/2", "(h-text_h)/2"),
    OverlayPosition.BOTTOM_LEFT: (f"{OVERLAY_MARGIN}", f"h-text_h-{OVERLAY_MARGIN}"),
    OverlayPosition.BOTTOM_CENTER: ("(w-text_w)/2", f"h-text_h-{OVERLAY_MARGIN}"),
    OverlayPosition.BOTTOM_RIGHT: (f"w-text_w-{OVERLAY_MARGIN}", f"h-text_h-{OVERLAY_MARGIN}"),
}


def position_expressions(position: OverlayPosition) -> Tuple[str, str]:
    return POSITION_EXPRESSIONS[OverlayPosition(position)]


def alpha_expression(start: float, end: float, fade: float) -> str:
    """
    Visibility of an overlay as an ffmpeg expression of t.

    The between() gate is multiplied by the smaller of a fade-in and a
    fade-out ramp, so overlapping fade windows never exceed full opacity.
    """
    s, e = format_number(start), format_number(end)
    gate = f"between(t,{s},{e})"
    if fade <= 0:
        return gate
    f = format_number(fade)
    return f"{gate}*min(min(1,(t-{s})/{f}),min(1,({e}-t)/{f}))"


def hex_to_ffmpeg_color(hex_color: str, opacity: Optional[float] = None) -> str:
    """'#RRGGBB' -> '0xRRGGBB', with '@opacity' when given."""
    color = "0x" + hex_color.lstrip("#").upper()
    if opacity is not None:
        color += f"@{format_number(opacity)}"
    return color


def escape_option_value(value: str) -> str:
    """First escaping level: a filter option value."""
    return value.replace("\\", "\\\\").replace("'", "\\'").replace(":", "\\:")


def escape_filtergraph(value: str) -> str:
    """Second escaping level: text embedded in a filter graph description."""
    for char in ("\\", "'", "[", "]", ",", ";"):
        value = value.replace(char, "\\" + char)
    return value


def drawtext_filter(
    overlay: TextOverlay,
    theme: VideoTheme = VideoTheme.INFORMATIONAL,
    font_path: Optional[str] = None,
    bold_font_path: Optional[str] = None
) -> str:
    """Build one drawtext filter for an overlay."""
    style = resolve_text_style(overlay, theme)
    font_option, font_value = resolve_font(style.font_weight, font_path, bold_font_path)
    x, y = position_expressions(overlay.position)

    options: List[Tuple[str, str]] = [
        (font_option, font_value),
        ("text", overlay.text),
        ("expansion", "none"),
        ("fontsize", str(style.font_size)),
        ("fontcolor", hex_to_ffmpeg_color(style.text_color)),
        ("x", x),
        ("y", y),
    ]
    if style.background_color and style.background_opacity > 0:
        options.extend([
            ("box", "1"),
            ("boxcolor", hex_to_ffmpeg_color(style.background_color, style.background_opacity)),
            ("boxborderw", str(OVERLAY_BOX_BORDER)),
        ])
    options.append(
        ("alpha", alpha_expression(overlay.start_time, overlay.end_time, overlay.fade_duration))
    )

    body = ":".join(f"{key}={escape_option_value(value)}" for key, value in options)
    return "drawtext=" + escape_filtergraph(body)


def text_overlay_filter(
    overlays: Sequence[TextOverlay],
    theme: VideoTheme = VideoTheme.INFORMATIONAL,
    font_path: Optional[str] = None,
    bold_font_path: Optional[str] = None
) -> str:
    """Chain one drawtext per overlay, in order."""
    return ",".join(drawtext_filter(o, theme, font_path, bold_font_path) for o in overlays)


def text_overlay_args(
    video_path: PathLike,
    output_path: PathLike,
    filter_chain: str
) -> List[str]:
    return [
        "-i", str(video_path),
        "-vf", filter_chain,
        "-c:v", "libx264",
        "-pix_fmt", "yuv420p",
        "-c:a", "copy",
        "-y",
        str(output_path),
    ]
