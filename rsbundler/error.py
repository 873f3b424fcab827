"""Errors raised by bundlers and the bundling pipeline

Configuration problems (`ConfigError`) can be fixed by changing
parameters. `UnsupportedPlatform` cannot: the host lacks the platform
or native tool a format needs. `NativeToolError` is a non-zero exit
of the packaging tool. File system faults are left as `OSError`.

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""


class Error(Exception):
    """Base for all rsbundler errors

    Args:
        msg (str): what went wrong, including the values in error
        advice (str): how to correct the problem [None]

    Attributes:
        advice (str): corrective suggestion or None
        msg (str): cause of the error
    """

    def __init__(self, msg, advice=None):
        self.msg = msg
        self.advice = advice
        super().__init__(msg if advice is None else f"{msg} Advice: {advice}")


class ConfigError(Error):
    """User supplied parameters are missing, invalid or contradictory"""

    pass


class NativeToolError(Error):
    """Packaging tool exited with an error

    Args:
        cmd (list): command which was run
        output (str): captured stdout and stderr (may be empty)
        msg (str): cause of the error

    Attributes:
        cmd (list): command which was run
        output (str): captured output
    """

    def __init__(self, cmd, output, msg):
        self.cmd = cmd
        self.output = output
        super().__init__(
            f"{msg} cmd={' '.join(str(c) for c in cmd)}",
            "Set verbose to see the tool's output.",
        )


class UnsupportedPlatform(Error):
    """Format cannot be built on this host"""

    pass
