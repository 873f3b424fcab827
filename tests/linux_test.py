"""test rsbundler.linux

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

import pytest


@pytest.mark.parametrize(
    "vendor,expect",
    [
        ("Smoke Vendor", "SmokeVendor-SmokeApp"),
        (3, "rsbundler-SmokeApp"),
        (None, "rsbundler-SmokeApp"),
    ],
)
def test_xdg_prefix(vendor, expect):
    from pykern import pkunit
    from pykern.pkcollections import PKDict
    from rsbundler import linux

    p = PKDict(app_name="Smoke App", vendor=vendor)
    pkunit.pkeq(expect, linux.XDG_FILE_PREFIX.fetch_from(p))
    pkunit.pkeq(
        "rsbundler-SmokeApp",
        linux.XDG_FILE_PREFIX.fetch_from(PKDict(app_name="Smoke App")),
    )
    p.linux_xdg_prefix = "smoke-"
    pkunit.pkeq("smoke-", linux.XDG_FILE_PREFIX.fetch_from(p))
