"""Command-line entry point: ``sstvdec <audio.wav> [out.png]``."""

from __future__ import annotations

import argparse
import logging
import sys

from sstvdec import config
from sstvdec.logging import configure_logging, get_logger
from sstvdec.sstv import SSTVError, decode_file, save_png

logger = get_logger('sstvdec.cli')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sstvdec',
        description='Decode an SSTV transmission from a WAV file into a PNG image.',
    )
    parser.add_argument('input', help='Input audio file (PCM WAV)')
    parser.add_argument('output', nargs='?', default=config.OUTPUT_PATH,
                        help=f'Output PNG path (default: {config.OUTPUT_PATH})')
    parser.add_argument('--ycbcr-to-rgb', action='store_true',
                        default=config.YCBCR_TO_RGB,
                        help='Convert Robot mode YCbCr output to true RGB')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='More logging (-v info, -vv debug)')
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose >= 2:
        configure_logging(logging.DEBUG)
    elif args.verbose == 1:
        configure_logging(logging.INFO)
    else:
        configure_logging(config.LOG_LEVEL)

    try:
        result = decode_file(args.input)
    except SSTVError as e:
        logger.error(f"Decoding failed: {e}")
        print(e)
        return 1

    if result.is_truncated:
        print(f"Reached end of audio whilst decoding "
              f"({result.lines_decoded}/{result.mode.height} lines).")

    try:
        save_png(result, args.output, convert_ycbcr=args.ycbcr_to_rgb)
    except OSError as e:
        logger.error(f"Error writing {args.output}: {e}")
        print(f"Error writing to file: {e}")
        return 1

    print('Done.')
    return 0


if __name__ == '__main__':
    sys.exit(main())
