#!/usr/bin/env python
"""Command-line entry point for the vaccination registry project."""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'vaccination.settings')
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Is it installed and is the virtual "
            "environment active?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
