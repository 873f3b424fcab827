"""test rsbundler.pipeline

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

import pytest
import shutil


def test_newest_artifact():
    from pykern import pkio, pkunit
    from rsbundler import pipeline
    import time

    d = pkunit.empty_work_dir()
    n = time.time()
    for f, m in ("app-1.1.rpm", n - 10), ("app-1.0.rpm", n - 100), ("x.deb", n):
        pkio.write_text(d.join(f), f)
        d.join(f).setmtime(m)
    pkunit.pkeq(d.join("app-1.1.rpm"), pipeline.newest_artifact(d, ".rpm"))
    with pkunit.pkexcept(IOError):
        pipeline.newest_artifact(d, ".pkg")


def test_render_template():
    from pykern import pkio, pkunit
    from pykern.pkcollections import PKDict
    from rsbundler import error, pipeline

    d = pkunit.empty_work_dir()
    r = _run(d, PKDict(resources_root=pkunit.data_dir().join("overrides")))
    t = pipeline.render_template(
        r,
        d.join("smoke.desktop"),
        "template.desktop",
        "Menu shortcut descriptor",
        PKDict(APPLICATION_NAME="Smoke"),
    )
    pkunit.pkre(r"Name=Smoke \(custom\)", pkio.read_text(t))
    pkunit.pkeq([t], r.config_files)
    r = _run(d, PKDict())
    with pkunit.pkexcept(error.ConfigError):
        pipeline.render_template(
            r,
            d.join("smoke.desktop"),
            "template.desktop",
            "Menu shortcut descriptor",
            PKDict(APPLICATION_NAME="Smoke"),
        )
    with pkunit.pkexcept(IOError):
        pipeline.render_template(
            r,
            d.join("smoke.desktop"),
            "no-such-template",
            "Missing",
            PKDict(),
        )


def test_template_str():
    from pykern import pkunit
    from rsbundler import pipeline

    pkunit.pkeq("", pipeline.template_str(None))
    pkunit.pkeq("true", pipeline.template_str(True))
    pkunit.pkeq("false", pipeline.template_str(False))
    pkunit.pkeq("a;b", pipeline.template_str(["a", "b"], ";"))
    pkunit.pkeq("a\nb", pipeline.template_str(("a", "b")))
    pkunit.pkeq("3", pipeline.template_str(3))


@pytest.mark.skipif(not shutil.which("sh"), reason="no sh command")
def test_test_tool():
    from pykern import pkio, pkunit
    from rsbundler import pipeline

    d = pkunit.empty_work_dir()
    t = d.join("fake-tool")
    pkio.write_text(t, "#!/bin/sh\necho 'fake-tool version 2.5.1'\n")
    t.chmod(0o755)
    pkunit.pkok(pipeline.test_tool(str(t), "2.0"), "2.5 >= 2.0")
    pkunit.pkok(pipeline.test_tool(str(t), "2.5"), "2.5 >= 2.5")
    pkunit.pkok(not pipeline.test_tool(str(t), "3.0"), "2.5 < 3.0")
    pkunit.pkok(pipeline.test_tool(str(t), None), "exists")
    pkunit.pkok(not pipeline.test_tool(str(d.join("missing")), "1.0"), "missing")
    pkunit.pkok(not pipeline.test_tool(str(d.join("missing")), None), "missing")


@pytest.mark.skipif(not shutil.which("sh"), reason="no sh command")
def test_cleanup_on_failure(sample_params, no_tool_probe):
    from pykern import pkunit
    from rsbundler import error

    d = pkunit.empty_work_dir()
    b = _FailingBundler()
    p = sample_params(d)
    with pkunit.pkexcept(error.NativeToolError):
        b.execute(p, d.join("out"))
    pkunit.pkok(not b.work_dir(p).check(), "work_dir={} not removed", b.work_dir(p))
    try:
        b.execute(p.pkupdate(retain_work_dir=True), d.join("out"))
        pkunit.pkfail("expecting NativeToolError")
    except error.NativeToolError as e:
        pkunit.pkre("failing output", e.output)
        pkunit.pkre("exit.*3", e.msg)
    pkunit.pkok(b.work_dir(p).check(dir=True), "work_dir={} removed", b.work_dir(p))
    pkunit.pkok(
        b.work_dir(p).join("SmokeTestApp", "app", "SmokeTestApp").check(file=True),
        "application not staged",
    )


def test_validation_precedes_side_effects(sample_params, no_tool_probe, monkeypatch):
    from pykern import pkunit
    from rsbundler import error, pipeline

    calls = []
    monkeypatch.setattr(pipeline, "run_tool", lambda *args: calls.append(args))
    d = pkunit.empty_work_dir()
    b = _FailingBundler()
    p = sample_params(d, main_executable="no-such-program")
    with pkunit.pkexcept("no-such-program"):
        b.execute(p, d.join("out"))
    pkunit.pkok(not d.join("build").check(), "build_root was created")
    pkunit.pkok(not d.join("out").check(), "outdir was created")
    pkunit.pkeq([], calls)


def test_unsupported_tool(sample_params):
    from pykern import pkunit
    from rsbundler import error

    d = pkunit.empty_work_dir()
    b = _FailingBundler()
    b.tools = (("rsbundler-no-such-tool", "1.0"),)
    with pkunit.pkexcept(error.UnsupportedPlatform):
        b.validate(sample_params(d))


@pytest.mark.parametrize(
    "module,params",
    [
        ("app_image", dict(retain_work_dir="maybe")),
        ("app_image", dict(verbose="maybe")),
        ("linux_rpm", dict(menu_hint="maybe")),
        ("linux_deb", dict(stop_on_uninstall="maybe")),
        ("mac_daemon", dict(mac_daemon_keep_alive="maybe")),
    ],
)
def test_unparsable_text_fails_validation(
    sample_params, no_tool_probe, monkeypatch, module, params
):
    from pykern import pkunit
    from rsbundler import error, pipeline
    import importlib

    calls = []
    monkeypatch.setattr(pipeline, "run_tool", lambda *args: calls.append(args))
    d = pkunit.empty_work_dir()
    b = importlib.import_module(f"rsbundler.{module}").Bundler()
    with pkunit.pkexcept(error.ConfigError):
        b.execute(sample_params(d, **params), d.join("out"))
    with pkunit.pkexcept(list(params.keys())[0]):
        b.validate(sample_params(d, **params))
    pkunit.pkok(not d.join("build").check(), "build_root was created")
    pkunit.pkok(not d.join("out").check(), "outdir was created")
    pkunit.pkeq([], calls)


def test_run_resolves_before_side_effects(sample_params):
    from pykern import pkunit
    from rsbundler import pipeline

    d = pkunit.empty_work_dir()
    with pkunit.pkexcept("retain_work_dir"):
        pipeline.run(
            _FailingBundler(),
            sample_params(d, retain_work_dir="maybe"),
            d.join("out"),
        )
    pkunit.pkok(not d.join("build").check(), "build_root was created")
    pkunit.pkok(not d.join("out").check(), "outdir was created")


@pytest.mark.skipif(not shutil.which("sh"), reason="no sh command")
def test_verbose(sample_params, no_tool_probe, capsys):
    from pykern import pkio, pkunit
    from rsbundler import error
    import re

    d = pkunit.empty_work_dir()
    b = _FailingBundler()
    p = sample_params(d, retain_work_dir=True, verbose=True)
    with pkunit.pkexcept(error.NativeToolError):
        b.execute(p, d.join("out"))
    out, err = capsys.readouterr()
    pkunit.pkre(r"sh output:\s+failing output", err)
    pkunit.pkre(
        "Kept working directory for debug: " + re.escape(str(b.work_dir(p))),
        err,
    )
    pkunit.pkre(
        "Config files are saved to " + re.escape(str(d.join("build", "config"))),
        err,
    )
    pkunit.pkre(
        r"exec ./SmokeTestApp",
        pkio.read_text(d.join("build", "config", "SmokeTestApp")),
    )
    pkunit.pkok(b.work_dir(p).check(dir=True), "work_dir removed")
    p.pkupdate(retain_work_dir=False)
    with pkunit.pkexcept(error.NativeToolError):
        b.execute(p, d.join("out"))
    out, err = capsys.readouterr()
    pkunit.pkok("Kept working directory" not in err, "retained message={}", err)
    pkunit.pkok(not b.work_dir(p).check(), "work_dir not removed")


def _run(work_d, params):
    from rsbundler import bundler, pipeline

    class _Linux(bundler.BundlerBase):
        format_id = "test"
        resource_prefix = "linux"

    return pipeline.Run(
        bundler=_Linux(),
        config_files=[],
        is_verbose=False,
        outdir=work_d,
        params=params,
        work_dir=work_d,
    )


def _FailingBundler():
    from rsbundler import bundler, pipeline

    class _Bundler(bundler.BundlerBase):
        artifact_ext = ".fail"
        format_id = "fail"
        name = "Failing Bundler"

        def invoke(self, run):
            pipeline.run_tool(run, ["sh", "-c", "echo failing output; exit 3"])

    return _Bundler()
