# topmark:header:start
#
#   project      : xType
#   file         : exit_codes.py
#   file_relpath : src/xtype/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 the xType authors
#
# topmark:header:end

"""Process exit codes of the ``xtype`` command.

Besides 0 and 1, the codes are borrowed from BSD ``sysexits.h``. Click's own
argument errors (an unknown category, a missing argument) keep Click's exit
code 2.

Example:
    ```sh
    xtype set public.mp3 ~/Applications/VLC.app
    [ $? -eq 66 ] && echo "no such application"
    ```
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit statuses, one per `XtypeCliError` subclass plus success."""

    SUCCESS = 0
    FAILURE = 1
    # EX_USAGE: --verbose together with --quiet
    USAGE_ERROR = 64
    # EX_NOINPUT: the application path does not exist
    FILE_NOT_FOUND = 66
    # EX_CONFIG: bad config file, unknown backend, unreadable catalog
    CONFIG_ERROR = 78
