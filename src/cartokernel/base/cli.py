"""
Command-line access to the kernel's geo and clipping utilities.

usage:
    cartokernel-geo distance -0.1276 51.5072 2.3522 48.8566
    cartokernel-geo azimuth  -0.1276 51.5072 2.3522 48.8566
    cartokernel-geo clip --rect 0 0 10 10 --segment -5 5 15 5
"""

import argparse
import logging
import sys

from cartokernel.base.geo import azimuth_in_degrees, great_circle_distance_in_meters
from cartokernel.base.points import Point2
from cartokernel.base.rect import Rect
from cartokernel.base.utils import configure_logging


def _add_lonlat_args(p):
    p.add_argument('lon1', type=float, help='Longitude of the first point (degrees)')
    p.add_argument('lat1', type=float, help='Latitude of the first point (degrees)')
    p.add_argument('lon2', type=float, help='Longitude of the second point (degrees)')
    p.add_argument('lat2', type=float, help='Latitude of the second point (degrees)')


def build_parser():
    parser = argparse.ArgumentParser(prog='cartokernel-geo', description='Spherical distance, bearing and segment clipping')
    parser.add_argument('--verbose', dest='verbose', action='store_true', help='Enable debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('distance', help='Great-circle distance in metres')
    _add_lonlat_args(p)
    p = sub.add_parser('azimuth', help='Initial bearing in degrees clockwise from north')
    _add_lonlat_args(p)

    p = sub.add_parser('clip', help='Clip an integer segment to an integer rectangle')
    p.add_argument('--rect', nargs=4, type=int, required=True, metavar=('LEFT', 'TOP', 'RIGHT', 'BOTTOM'))
    p.add_argument('--segment', nargs=4, type=int, required=True, metavar=('X0', 'Y0', 'X1', 'Y1'))
    return parser


def main(argv=None):
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == 'distance':
        d = great_circle_distance_in_meters(args.lon1, args.lat1, args.lon2, args.lat2)
        print(f'{d:.3f}')
    elif args.command == 'azimuth':
        az = azimuth_in_degrees(args.lon1, args.lat1, args.lon2, args.lat2)
        print(f'{az:.6f}')
    else:
        rect = Rect(*args.rect)
        x0, y0, x1, y1 = args.segment
        clipped = rect.clip_segment(Point2(x0, y0), Point2(x1, y1))
        if clipped is None:
            print('[clip] rejected: segment lies outside the rectangle')
        else:
            start, end = clipped
            print(f'{start.x} {start.y} {end.x} {end.y}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
