"""Front-end command line for :mod:`rsbundler.pkcli`.

Example::

    rsbundler bundle build app-dir out-dir --name 'My App' --formats rpm:tgz

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkcli
import sys


def main():
    return pkcli.main("rsbundler")


if __name__ == "__main__":
    sys.exit(main())
