import pytest


@pytest.fixture(scope="function")
def sample_params():
    """Create an application in a work dir and return a store

    `pykern.pkunit` finds the test file by inspecting the stack so
    the test passes its work dir.
    """

    def res(work_d, **kwargs):
        from pykern import pkio
        from pykern.pkcollections import PKDict

        a = pkio.mkdir_parent(work_d.join("smoke"))
        e = a.join("SmokeTestApp")
        pkio.write_text(e, "#!/bin/sh\necho smoke\n")
        e.chmod(0o755)
        pkio.write_text(a.join("LICENSE"), "Apache License 2.0\n")
        return PKDict(
            app_name="Smoke Test App",
            app_resources=a,
            build_root=work_d.join("build"),
            identifier="smoke.app",
        ).pkupdate(kwargs)

    return res


@pytest.fixture(scope="function")
def no_tool_probe(monkeypatch):
    """Native tools are treated as installed"""
    from rsbundler import pipeline

    monkeypatch.setattr(pipeline, "test_tool", lambda tool, min_version: True)
