import argparse
import logging
import sys

from musicshare.constants import DEFAULT_HISTORY_PATH, DEFAULT_SCREEN_RATIO
from musicshare.errors import CatalogLookupError, CompositionError
from musicshare.generator import main
from musicshare.history import HistoryStore, format_date
from musicshare.models import AspectRatio, BackgroundStyle, FontStyle, StyleOptions


def list_history(history_path):
    store = HistoryStore(history_path)
    if not store.entries:
        print("No history yet.")
        return
    for idx, entry in enumerate(store.entries):
        print(f"{idx:3d}  {format_date(entry.created)}  {entry.display_name} - {entry.artist_name}  ({entry.music_item_id})")


def delete_history(history_path, indices):
    store = HistoryStore(history_path)
    removed = store.delete(indices)
    if not removed:
        print("Nothing to delete.")
    return removed


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a shareable image for an Apple Music / iTunes release")
    parser.add_argument("url", nargs="?", help="Apple Music share URL of a song or album")
    parser.add_argument("output", nargs="?", help="Output image path (.png, .jpg or .pdf). Defaults to output/<id>.png")
    parser.add_argument("--aspect", choices=[a.value for a in AspectRatio], default=AspectRatio.THREE_FOUR.value, help="Canvas aspect profile")
    parser.add_argument("--background", choices=[b.value for b in BackgroundStyle], default=BackgroundStyle.BLUR.value, help="Background treatment")
    parser.add_argument("--font", choices=[f.value for f in FontStyle], default=FontStyle.STANDARD.value, help="Font family for the text block")
    parser.add_argument("--qr", action="store_true", help="Add a QR code badge in the bottom-right corner")
    parser.add_argument("--qr-payload", default="", help="Text for the QR code. Defaults to the input URL.")
    parser.add_argument("--screen-ratio", type=float, default=DEFAULT_SCREEN_RATIO, help="Height/width ratio used by the 'device' aspect profile")
    parser.add_argument("--history-file", default=DEFAULT_HISTORY_PATH, help="Path of the history JSON file")
    parser.add_argument("--no-history", action="store_true", help="Do not add the generated image to the history")
    parser.add_argument("--list-history", action="store_true", help="Print saved history entries and exit")
    parser.add_argument("--delete-history", type=int, nargs="+", metavar="INDEX", help="Delete history entries by their --list-history index and exit")
    parser.add_argument("--history-limit", type=int, default=None, help="Keep at most this many history entries, dropping the oldest")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    # configure basic logging to console so users are kept up-to-date
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    if args.list_history:
        list_history(args.history_file)
        sys.exit(0)
    if args.delete_history:
        delete_history(args.history_file, args.delete_history)
        sys.exit(0)
    if not args.url:
        parser.error("the url argument is required")
    if args.history_limit is not None and args.history_limit < 1:
        parser.error("--history-limit must be at least 1")

    options = StyleOptions(
        aspect_ratio=AspectRatio(args.aspect),
        background_style=BackgroundStyle(args.background),
        font_style=FontStyle(args.font),
        qr_visible=args.qr,
        qr_payload=args.qr_payload,
        screen_ratio=args.screen_ratio,
    )
    try:
        main(
            args.url,
            args.output,
            options,
            history_path=args.history_file,
            save_history=not args.no_history,
            history_limit=args.history_limit,
        )
    except (CatalogLookupError, CompositionError) as exc:
        logging.getLogger(__name__).error("Could not create the share image: %s", exc)
        sys.exit(1)
