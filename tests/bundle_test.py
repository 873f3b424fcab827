"""test rsbundler.pkcli.bundle

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

import pytest
import shutil


def test_formats():
    from pykern import pkunit
    from rsbundler.pkcli import bundle

    f = bundle.formats()
    pkunit.pkre(r"^tgz: Application Image \(IMAGE\)$", f.split("\n")[0])
    pkunit.pkre(r"rpm: RPM Bundle \(INSTALLER\)", f)
    pkunit.pkre(r"daemon: Daemon Bundler", f)


def test_params():
    from pykern import pkcli, pkunit
    from rsbundler.pkcli import bundle

    p = bundle.params("rpm")
    pkunit.pkre(r"linux_bundle_name: Bundle Name\.", p)
    pkunit.pkre(r"choices: .*Audio and Video=AudioVideo", p)
    pkunit.pkre(r"app_resources: Application resources\.", p)
    with pkunit.pkexcept(pkcli.CommandError):
        bundle.params("msi")


@pytest.mark.skipif(not shutil.which("tar"), reason="no tar command")
def test_build(sample_params, no_tool_probe):
    from pykern import pkcli, pkunit
    from rsbundler.pkcli import bundle

    d = pkunit.empty_work_dir()
    p = sample_params(d)
    a = dict(
        build_root=str(p.build_root),
        name=p.app_name,
    )
    r = bundle.build(
        str(p.app_resources),
        str(d.join("out")),
        app_version="1.5",
        formats="tgz",
        **a,
    )
    pkunit.pkeq(f"tgz: {d.join('out', 'SmokeTestApp-1.5.tar.gz')}", r)
    with pkunit.pkexcept("Unknown format=msi"):
        bundle.build(str(p.app_resources), str(d.join("out")), formats="msi", **a)
    with pkunit.pkexcept(r"rpm: .*per-user daemons"):
        bundle.build(
            str(p.app_resources),
            str(d.join("out")),
            formats="tgz:rpm",
            service="true",
            system_wide="false",
            **a,
        )
    with pkunit.pkexcept(pkcli.CommandError):
        bundle.build(
            str(p.app_resources),
            str(d.join("out")),
            runtime=str(d.join("no-such-runtime")),
            **a,
        )
