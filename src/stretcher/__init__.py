"""
stretcher - deploy a checksummed archive onto a host

Fetches an archive, verifies its digest, runs pre-deploy hooks, extracts it,
mirrors it onto the destination with rsync, then runs post-deploy hooks.
"""
import argparse
import sys

__version__ = "0.1.0"


def main(argv=None):
    """Main CLI entry point"""
    from stretcher.commands import deploy, validate
    from stretcher.core import configure_logging

    parser = argparse.ArgumentParser(
        prog='stretcher',
        description='stretcher: checksummed archive deployment',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  stretcher deploy manifest.yml                   # Deploy from local manifest
  stretcher deploy https://example.com/app.yml    # Manifest fetched over HTTP
  curl -s https://example.com/app.yml | stretcher deploy -
  stretcher validate manifest.yml                 # Check manifest only
        '''
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Deploy command
    deploy_parser = subparsers.add_parser('deploy', help='Deploy the archive a manifest describes')
    deploy.setup_parser(deploy_parser)

    # Validate command
    validate_parser = subparsers.add_parser('validate', help='Validate a manifest')
    validate.setup_parser(validate_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(verbose=getattr(args, 'verbose', False))

    # Dispatch to command handler
    try:
        if args.command == 'deploy':
            sys.exit(deploy.execute(args))
        elif args.command == 'validate':
            sys.exit(validate.execute(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
