"""
display1306 - write lines of text or images to an SSD1306 OLED
================================================================

Text mode (default): arguments, or stdin when there are none, are written
to the display starting at --line. With --buffer-file the other lines
survive from one run to the next.

    $ display1306 "hello" "world"
    $ display1306 -b /tmp/oled.txt -l 3 "third line only"
    $ uptime | display1306 -l 5

Image mode: arguments are image files shown in turn. Arguments starting
with "@" are commands:

    @clear              blank the screen
    @interval=DURATION  change the delay between images
    @pause=DURATION     sleep once

    $ display1306 -i --loop --duration 10s frame*.png
    $ display1306 -i logo.png @pause=2s @clear

--dry-run draws into an in-memory display instead of the panel; add
--preview out.png to see the result.

--save-defaults stores the hardware, buffer and font options given on the
command line in the settings file so later runs pick them up:

    $ display1306 --save-defaults -d /dev/i2c-3 -b ~/.oled-lines
"""
import logging
import re
import sys
import time
import traceback
from enum import IntEnum
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence, Tuple

import click
from click.core import ParameterSource

from config import Config
from display import Display, DisplayConfig, DisplayError, FontSpec
from hw.simulator import SimulatedTarget

logger = logging.getLogger("display1306")


class ExitCode(IntEnum):
    SUCCESS = 0
    DISPLAY_ERROR = 1    # device, buffer file, image or font failure
    INVALID_ARGS = 2     # click reports usage errors with this code too
    INTERNAL_ERROR = 3   # unexpected internal error


# =============================================================================
# Parameter types
# =============================================================================

_DURATION_RE = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)(ms|s|m|h)?$")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, None: 1.0}


def parse_duration(value: str) -> float:
    """Parse '30ms', '1.5s', '2m', '1h' or a bare number of seconds."""
    m = _DURATION_RE.match(value.strip())
    if not m:
        raise ValueError(f"invalid duration '{value}'")
    return float(m.group(1)) * _UNIT_SECONDS[m.group(2)]


class DurationType(click.ParamType):
    """Click parameter type for durations, converted to seconds."""
    name = "duration"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> float:
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return parse_duration(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


class AddressType(click.ParamType):
    """Click parameter type for I2C addresses: 60, 0x3C or 0o74."""
    name = "address"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        if isinstance(value, int):
            return value
        try:
            addr = int(value, 0)
        except ValueError:
            self.fail(f"invalid i2c address '{value}'", param, ctx)
        if not 0x03 <= addr <= 0x77:
            self.fail(f"i2c address 0x{addr:02X} out of range", param, ctx)
        return addr


DURATION = DurationType()
ADDRESS = AddressType()


# =============================================================================
# Helpers
# =============================================================================

def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    if isinstance(error, DisplayError):
        logger.error("%s", error)
        sys.exit(ExitCode.DISPLAY_ERROR)
    logger.error("Internal error: %s", error)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)


def _given(ctx: click.Context, name: str) -> bool:
    return ctx.get_parameter_source(name) is ParameterSource.COMMANDLINE


def _validate(ctx: click.Context, args: Sequence[str], image: bool, dry_run: bool) -> None:
    if image and not args and not ctx.params.get("save_defaults"):
        raise click.UsageError("--image requires at least one image filename as argument")
    for name, flag in (("loop", "--loop"), ("image_interval", "--image-interval"),
                       ("duration", "--duration")):
        if _given(ctx, name) and not image:
            raise click.UsageError(f"{flag} can only be used with --image")
    for name, flag in (("font", "--font"), ("font_size", "--font-size")):
        if _given(ctx, name) and image:
            raise click.UsageError(f"{flag} cannot be used with --image")
    if _given(ctx, "preview") and not dry_run:
        raise click.UsageError("--preview can only be used with --dry-run")


def _save_defaults(cfg: Config, **given) -> None:
    """Store the options given on this command line as the new defaults."""
    for key, value in given.items():
        if value is not None:
            cfg.set(key, str(value) if isinstance(value, Path) else value)
    try:
        cfg.save()
    except OSError as e:
        raise click.FileError(str(cfg.path), hint=str(e)) from e


def _read_stdin() -> List[str]:
    return click.get_text_stream("stdin").read().splitlines()


def run_command(command: str, d: Display, interval: float) -> Tuple[float, bool]:
    """Run an '@' command from an image sequence.

    Returns the (possibly changed) interval and whether to skip the delay
    that normally follows an image.
    """
    name, _, value = command[1:].partition("=")
    if name == "clear":
        d.clear_screen()
        return interval, False
    if name in ("interval", "pause"):
        if not value:
            raise click.BadParameter(f"@{name} requires a value: @{name}=duration")
        try:
            seconds = parse_duration(value)
        except ValueError as e:
            raise click.BadParameter(f"@{name}: {e}") from e
        if name == "interval":
            logger.info("Updated image interval to %ss", seconds)
            return seconds, True
        logger.info("Pausing for %ss", seconds)
        time.sleep(seconds)
        return interval, True
    raise click.BadParameter(f"unknown command: {command}")


def show_images(d: Display, items: Sequence[str], interval: float,
                loop: bool = False, duration: float = 0.0) -> None:
    start = time.monotonic()
    while True:
        for item in items:
            delay = len(items) > 1
            if item.startswith("@"):
                interval, skip = run_command(item, d, interval)
                delay = delay and not skip
            else:
                d.show_image_file(item)

            if delay:
                time.sleep(interval)

            if loop and duration > 0 and time.monotonic() - start >= duration:
                return
        if not loop:
            return


# =============================================================================
# Main command
# =============================================================================

@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("args", nargs=-1)
@click.option("-d", "--device", default=None, help="Path to i2c device [default: /dev/i2c-1]")
@click.option("-a", "--address", type=ADDRESS, default=None, help="I2C address of the display")
@click.option("-l", "--line", type=click.IntRange(min=1), default=1, show_default=True,
              help="Line number to start printing (1-based)")
@click.option("-L", "--lines", "line_count", type=click.IntRange(min=1), default=None,
              help="Number of text lines on the display [default: 5]")
@click.option("-b", "--buffer-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Keep the displayed lines in this file between runs")
@click.option("-k", "--clear", is_flag=True, help="Clear the display and buffer")
@click.option("-n", "--dry-run", is_flag=True, help="Run without actual hardware")
@click.option("-p", "--preview", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Save the simulated screen as PNG (with --dry-run)")
@click.option("-f", "--font", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Path to truetype font file")
@click.option("-s", "--font-size", type=float, default=None,
              help="Font size in points (ignored if --font not provided) [default: 13]")
@click.option("-i", "--image", is_flag=True, help="Interpret arguments as image filenames")
@click.option("--image-interval", type=DURATION, default=None,
              help="Interval between images [default: 30ms]")
@click.option("--loop", is_flag=True, help="Loop through images continuously")
@click.option("--duration", type=DURATION, default=0.0,
              help="Maximum duration to run loop (0 for unlimited)")
@click.option("-c", "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, envvar="DISPLAY1306_CONFIG", help="Settings file")
@click.option("--save-defaults", is_flag=True,
              help="Store the device, address, lines, buffer, font and interval options "
                   "in the settings file; without arguments nothing is displayed")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def main(args, device, address, line, line_count, buffer_file, clear, dry_run, preview,
         font, font_size, image, image_interval, loop, duration, config_path, save_defaults,
         verbose) -> None:
    """Write text lines or images to an SSD1306 OLED display."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx = click.get_current_context()
    _validate(ctx, args, image, dry_run)

    cfg = Config(config_path).load()
    if save_defaults:
        _save_defaults(cfg, device=device, address=address, lines=line_count,
                       buffer_file=buffer_file, font=font, font_size=font_size,
                       image_interval=image_interval)
        if not args:
            return

    # Read text before touching the device so stdin is consumed first.
    text: List[str] = []
    if not image:
        text = list(args) if args else _read_stdin()

    target = SimulatedTarget() if dry_run else None
    try:
        font_spec = None
        font_path = font or cfg.get("font")
        if font_path and not image:
            font_spec = FontSpec.load(font_path, font_size or cfg.get("font_size"))

        d = Display(DisplayConfig(
            target=target,
            lines=line_count or cfg.get("lines"),
            font=font_spec,
            buffer_file=buffer_file or cfg.get("buffer_file"),
            device=device or cfg.get("device"),
            address=address if address is not None else cfg.get("address"),
        ))
    except Exception as e:
        handle_cli_exception(e, verbose)

    try:
        d.initialize()
        if image:
            if clear:
                d.clear_screen()
            interval = image_interval if image_interval is not None else cfg.get("image_interval")
            show_images(d, args, interval, loop, duration)
        else:
            if clear:
                d.clear()
            if text:
                d.set_lines(line - 1, text)
            d.commit()

        if preview is not None:
            target.save(preview)
    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        handle_cli_exception(e, verbose)
    finally:
        d.close()


if __name__ == "__main__":
    main()
