"""test rsbundler.linux_rpm

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

import pytest


def test_per_user_daemon(sample_params, no_tool_probe):
    from pykern import pkunit
    from rsbundler import error, linux_rpm

    d = pkunit.empty_work_dir()
    b = linux_rpm.Bundler()
    with pkunit.pkexcept("per-user daemons"):
        b.validate(sample_params(d, service_hint=True, system_wide=False))
    with pkunit.pkexcept(error.ConfigError):
        b.validate(sample_params(d, service_hint="true", system_wide="false"))
    pkunit.pkok(
        b.validate(sample_params(d, service_hint=True, system_wide=True)),
        "system wide daemon is valid",
    )
    pkunit.pkok(
        b.validate(sample_params(d, service_hint=True)),
        "system_wide=None is system wide",
    )
    pkunit.pkok(
        b.validate(sample_params(d, system_wide=False)),
        "per-user non-service is valid",
    )


@pytest.mark.parametrize(
    "params,expect",
    [
        (dict(linux_bundle_name="smoke app"), "bundle name"),
        (dict(license_file=["NO-SUCH-LICENSE"]), "license file is missing"),
        (dict(license_file=["/etc/passwd"]), "license file is missing"),
        (
            dict(file_associations=[dict(fa_extensions=["sm"])]),
            "No MIME types",
        ),
        (
            dict(
                file_associations=[
                    dict(fa_content_type=["text/x-a", "text/x-b"]),
                ],
            ),
            "More than one MIME",
        ),
        (dict(linux_desktop_category="Accessories"), "desktop category"),
        (dict(app_resources=None), "Application resources"),
    ],
)
def test_validate_errors(sample_params, no_tool_probe, params, expect):
    from pykern import pkunit
    from rsbundler import linux_rpm

    d = pkunit.empty_work_dir()
    with pkunit.pkexcept(expect):
        linux_rpm.Bundler().validate(sample_params(d, **params))


def test_bundle(sample_params, no_tool_probe, monkeypatch):
    from pykern import pkio, pkunit
    from rsbundler import linux_rpm, pipeline
    from rsbundler.bundle_params import BundleParams

    cmds = []

    def _run_tool(run, cmd):
        cmds.append([str(c) for c in cmd])
        pkio.write_text(run.outdir.join("smoketestapp-1.2-1.x86_64.rpm"), "rpm")

    monkeypatch.setattr(pipeline, "run_tool", _run_tool)
    d = pkunit.empty_work_dir()
    p = sample_params(
        d,
        app_version="1.2",
        category="Science",
        copyright="Copyright (c) 2026 Smoke Vendor",
        menu_hint=False,
        retain_work_dir=True,
        service_hint=True,
        vendor="Smoke Vendor",
    )
    pkio.write_text(p.app_resources.join("tool"), "#!/bin/sh\n")
    b = BundleParams(p)
    b.add_license_file("LICENSE")
    b.add_secondary_launcher("Smoke Tool", main_executable="tool")
    b.add_file_association(["smk"], "application/x-smoke", "Smoke & mirrors")
    p = b.as_dict()
    r = linux_rpm.Bundler().execute(p, d.join("out"))
    pkunit.pkeq(d.join("out", "smoketestapp-1.2-1.x86_64.rpm"), r)
    w = linux_rpm.Bundler().work_dir(p)
    s = pkio.read_text(w.join("smoketestapp.spec"))
    pkunit.pkre(r"Name: smoketestapp\n", s)
    pkunit.pkre(r"Version: 1.2\n", s)
    pkunit.pkre(r"%doc /opt/SmokeTestApp/app/LICENSE\n", s)
    pkunit.pkre(
        r"%description\n.*\nCopyright: Copyright \(c\) 2026 Smoke Vendor\n",
        s,
    )
    pkunit.pkre(
        r"xdg-desktop-menu install --novendor /opt/SmokeTestApp/SmokeTool.desktop",
        s,
    )
    pkunit.pkre(
        r"xdg-mime install /opt/SmokeTestApp/SmokeVendor-SmokeTestApp-MimeInfo.xml",
        s,
    )
    pkunit.pkre(r'if \[ "true" = "true" \]', s)
    i = w.join("SmokeTestApp")
    x = pkio.read_text(i.join("SmokeTestApp.desktop"))
    pkunit.pkre(r"Categories=Science\n", x)
    pkunit.pkre(r"MimeType=application/x-smoke\n", x)
    x = pkio.read_text(i.join("SmokeTool.desktop"))
    pkunit.pkre(r"Name=Smoke Tool\n", x)
    pkunit.pkre(r"Exec=/opt/SmokeTestApp/SmokeTool\n", x)
    pkunit.pkre(
        r"<glob pattern='\*.smk'/>",
        pkio.read_text(i.join("SmokeVendor-SmokeTestApp-MimeInfo.xml")),
    )
    pkunit.pkre(
        r"Smoke &amp; mirrors",
        pkio.read_text(i.join("SmokeVendor-SmokeTestApp-MimeInfo.xml")),
    )
    pkunit.pkok(i.join("smoketestapp.init").check(file=True), "no init script")
    pkunit.pkre("exec ./tool ", pkio.read_text(i.join("SmokeTool")))
    pkunit.pkeq("rpmbuild", cmds[0][0])
    pkunit.pkeq(f"%_rpmdir {d.join('out')}", cmds[0][cmds[0].index("--define") + 3])
    # store passed in is modified by ensure_shortcut
    pkunit.pkeq(True, p.menu_hint)
