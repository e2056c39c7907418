"""
GallerySync Client - Main Entry Point

This is the main entry point for the GallerySync client application.

Author: GallerySync Project
"""

import sys
import argparse


def main(argv=None):
    """
    Main entry point for GallerySync client.

    Parses command-line arguments and runs the requested CLI operation.
    """
    parser = argparse.ArgumentParser(
        prog='gallerysync',
        description='GallerySync - Image Catalog Synchronization Client'
    )

    parser.add_argument('operation', choices=['sync', 'status', 'list', 'show', 'pending', 'remove'],
                        help='sync with server, show status, list images, show one image, '
                             'or mark an image pending / remove it locally')
    parser.add_argument('image_id', nargs='?', type=int,
                        help='Image id (required for show, pending and remove)')
    parser.add_argument('--remote', action='store_true',
                        help='For list and show: read the server catalog instead of the local replica')

    args = parser.parse_args(argv)

    if args.operation in ('show', 'pending', 'remove') and args.image_id is None:
        parser.error(f"{args.operation} requires an image id")
    if args.remote and args.operation not in ('list', 'show'):
        parser.error("--remote only applies to list and show")

    from gallerysync_client.cli import run_cli_operation
    return run_cli_operation(args.operation, args.image_id, remote=args.remote)


if __name__ == '__main__':
    sys.exit(main())
