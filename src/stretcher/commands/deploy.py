"""Deploy an archive described by a manifest.

Wires the production dependencies into ManifestDeployer.
"""
import sys
from typing import Optional

from stretcher.core import (
    ConsoleLogger,
    SubprocessRunner,
    UrlSourceOpener,
    YamlConfigLoader,
)
from stretcher.deploy import (
    DeploymentError,
    HookRunner,
    Manifest,
    ManifestDeployer,
    RsyncSynchronizer,
    TarExtractor,
    load_manifest,
    parse_manifest,
)


def setup_parser(parser):
    """Setup argument parser for deploy command"""
    parser.add_argument(
        'manifest',
        help="Manifest path or URL ('-' reads the manifest from stdin)"
    )
    parser.add_argument(
        '--temp-dir',
        help='Directory for the staged archive and extracted tree (default: system temp)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log every pipeline stage'
    )


def read_manifest(locator: str, opener: UrlSourceOpener, strict: bool = False) -> Manifest:
    """Load manifest from stdin ('-') or through the source opener."""
    if locator == '-':
        return parse_manifest(sys.stdin.buffer.read(), strict=strict, config_loader=YamlConfigLoader())
    return load_manifest(locator, opener, strict=strict, config_loader=YamlConfigLoader())


def build_deployer(
    manifest: Manifest,
    opener: Optional[UrlSourceOpener] = None,
    temp_dir: Optional[str] = None
) -> ManifestDeployer:
    """Create a ManifestDeployer with real subprocess, HTTP and logging."""
    process = SubprocessRunner()
    logger = ConsoleLogger()
    return ManifestDeployer(
        manifest=manifest,
        opener=opener or UrlSourceOpener(),
        extractor=TarExtractor(process),
        synchronizer=RsyncSynchronizer(process),
        hook_runner=HookRunner(process, logger),
        logger=logger,
        temp_dir=temp_dir
    )


def execute(args):
    """Execute deploy command"""
    opener = UrlSourceOpener()
    try:
        manifest = read_manifest(args.manifest, opener)
        result = build_deployer(manifest, opener, temp_dir=args.temp_dir).deploy()
    except DeploymentError as e:
        print(f"\n✗ Deploy failed ({e.stage.value})", file=sys.stderr)
        print(e.reason, file=sys.stderr)
        return 1

    print(f"\n✓ Deployed {manifest.source} to {result.destination}")
    print(f"  {result.bytes_written} bytes, digest {result.digest}")
    return 0
