import argparse
import logging
import os.path
import sys
import textwrap

from rscatlas import (
    BinaryAtlasMap,
    DecodeError,
    InvalidExtension,
    JsonAtlasMap,
    RscCodec,
    )
from rscatlas.palette import load_palette


def main():
    desc = """
        Unpacks the tiles of an .RSC sprite container into one square
        greyscale image, a Texture Atlas. A companion file (.map), is created
        that defines where each tile is placed in the atlas.
        """

    # Parse arguments
    arg_parser = argparse.ArgumentParser(
        prog="rscatlas",
        description=textwrap.dedent(desc),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    arg_parser.add_argument(
        "-o",
        "--output-image-filename",
        metavar="output-image-filename",
        type=str,
        default="atlas.png",
        help="output image filename (atlas.png)",
    )
    arg_parser.add_argument(
        "-m",
        "--output-map-filename",
        metavar="output-map-filename",
        type=str,
        default="",
        help="output map filename (atlas.map)",
    )
    arg_parser.add_argument(
        "-mf",
        "--map-format",
        choices={"json", "binary"},
        default="json",
        help="format of map output",
    )
    arg_parser.add_argument(
        "-p",
        "--palette",
        metavar="palette",
        type=str,
        default="",
        help="colour the atlas with a .pal file",
    )
    arg_parser.add_argument(
        "-v", "--verbose", action="store_true", help="log every decoding step"
    )
    arg_parser.add_argument(
        "container", metavar="container", type=str, help="filename of .RSC container"
    )

    args = arg_parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    filename, ext = os.path.splitext(args.output_image_filename)

    if ext == "":
        print(
            "Error: Specify an image extension for output_image_filename (e.g. atlas.png).",
            file=sys.stderr,
        )
        exit(1)

    codec = RscCodec()
    try:
        atlas = codec.load(args.container)
        palette = load_palette(args.palette) if args.palette else None
    except InvalidExtension as e:
        print(f"Error: {e}", file=sys.stderr)
        exit(1)
    except DecodeError as e:
        print(f"Error: {args.container}: {e}", file=sys.stderr)
        exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        exit(1)

    atlas.to_image(palette).save(args.output_image_filename)
    map_path = args.output_map_filename or (filename + ".map")

    match args.map_format:
        case "json":
            with open(map_path, "w", encoding="utf-8") as file:
                JsonAtlasMap(atlas).write(file)
        case "binary":
            with open(map_path, "wb") as file:
                BinaryAtlasMap(atlas).write(file)


if __name__ == "__main__":
    main()
