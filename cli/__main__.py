"""Entry point for the sentence scramble CLI client."""

import argparse
import sys

from cli.api_client import ScrambleAPIClient
from cli.console import ConsoleUI


def main():
    parser = argparse.ArgumentParser(description='Sentence Scramble - rebuild the sentences')
    parser.add_argument(
        '--server',
        default='http://localhost:8000',
        help='Server URL (default: http://localhost:8000)'
    )
    parser.add_argument(
        '--link',
        required=True,
        help='Shared assignment link or its #C=/#A= fragment'
    )
    parser.add_argument(
        '--student',
        default='',
        help='Student name used to save progress'
    )
    parser.add_argument(
        '--restart',
        action='store_true',
        help='Discard saved progress and start over'
    )
    args = parser.parse_args()

    client = ScrambleAPIClient(base_url=args.server, student=args.student)
    ui = ConsoleUI(client, args.link)

    try:
        ui.run(restart=args.restart)
    except KeyboardInterrupt:
        print('\nGoodbye!')
        sys.exit(0)


if __name__ == '__main__':
    main()
