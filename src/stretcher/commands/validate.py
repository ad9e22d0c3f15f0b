"""Validate a manifest without deploying it.

Stricter than deploy: the checksum length is checked up front.
"""
import sys

from stretcher.core import UrlSourceOpener
from stretcher.deploy import DeploymentError
from stretcher.deploy.checksum import algorithm_for
from stretcher.commands.deploy import read_manifest


def setup_parser(parser):
    """Setup argument parser for validate command"""
    parser.add_argument(
        'manifest',
        help="Manifest path or URL ('-' reads the manifest from stdin)"
    )


def execute(args):
    """Execute validate command"""
    try:
        manifest = read_manifest(args.manifest, UrlSourceOpener(), strict=True)
    except DeploymentError as e:
        print(f"✗ Invalid manifest: {e.reason}", file=sys.stderr)
        return 1

    print("✓ Manifest OK")
    print(f"  src:      {manifest.source}")
    print(f"  dest:     {manifest.destination}")
    if manifest.checksum:
        print(f"  checksum: {algorithm_for(manifest.checksum)} {manifest.checksum}")
    else:
        print("  checksum: (none, archive will not be verified)")
    print(f"  commands: {len(manifest.pre_commands)} pre, {len(manifest.post_commands)} post")
    return 0
