"""
Command-line harness for poking at an OBS bucket.

Usage:
    obs-storage ls [directory] [-r]
    obs-storage cat path
    obs-storage put path local_file
    obs-storage rm path
    obs-storage url path
    obs-storage sign path seconds
"""
from __future__ import annotations

import sys
from pathlib import Path

from obs_storage.config import load_config
from obs_storage.core.logging import log_context

USAGE = __doc__


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def run(argv: list[str], filesystem) -> int:
    if not argv:
        print(USAGE)
        return 1

    command, args = argv[0], argv[1:]

    if command == "ls":
        recursive = "-r" in args
        positional = [arg for arg in args if arg != "-r"]
        directory = positional[0] if positional else ""
        for entry in filesystem.list_contents(directory, recursive):
            if entry["type"] == "dir":
                print(f"{'DIR':>12}  {entry['path']}/")
            else:
                print(f"{entry['size']:>12}  {entry['path']}")
        return 0

    if command == "cat" and len(args) == 1:
        contents = filesystem.read(args[0])
        if contents is False:
            return _fail(f"Could not read {args[0]}")
        sys.stdout.buffer.write(contents)
        return 0

    if command == "put" and len(args) == 2:
        local_file = Path(args[1])
        if not local_file.exists():
            return _fail(f"File not found: {local_file}")
        with open(local_file, "rb") as handle:
            result = filesystem.write_stream(args[0], handle)
        if result is False:
            return _fail(f"Could not write {args[0]}")
        print(f"Wrote {result['size']} bytes to {result['path']}")
        return 0

    if command == "rm" and len(args) == 1:
        if not filesystem.delete(args[0]):
            return _fail(f"Could not delete {args[0]}")
        return 0

    if command == "url" and len(args) == 1:
        print(filesystem.get_url(args[0]))
        return 0

    if command == "sign" and len(args) == 2:
        try:
            seconds = int(args[1])
        except ValueError:
            return _fail(f"Expiry must be a number of seconds: {args[1]}")
        url = filesystem.temporary_url(args[0], seconds)
        if url is False:
            return _fail(f"Could not sign {args[0]}")
        print(url)
        return 0

    print(USAGE)
    return 1


def main() -> None:
    try:
        config = load_config()
    except ValueError as exc:
        sys.exit(_fail(str(exc)))

    filesystem = config.create_filesystem()
    logger = filesystem.get_adapter().logger
    command = sys.argv[1] if len(sys.argv) > 1 else ""
    with log_context(logger, command=command):
        sys.exit(run(sys.argv[1:], filesystem))


if __name__ == "__main__":
    main()
