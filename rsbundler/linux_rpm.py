"""Red Hat Package Manager (RPM) installer

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkplatform
from rsbundler import bundler
from rsbundler import error
from rsbundler import linux
from rsbundler import pipeline
from rsbundler import standard
from rsbundler.param import ParamInfo
import re

#: Characters rpmbuild allows in a package name
_NAME_RE = re.compile(r"^[a-z\d+\-._]+$", re.IGNORECASE)


def _default_bundle_name(params):
    n = standard.APP_NAME.fetch_from(params)
    return n.lower().replace(" ", "") if n else None


def _parse_bundle_name(raw, params):
    if not _NAME_RE.search(raw):
        raise error.ConfigError(
            f"Invalid value '{raw}' for the bundle name.",
            "Adjust the linux_bundle_name param so that it only contains letters, digits, and the characters '+-._'.",
        )
    return raw


BUNDLE_NAME = ParamInfo(
    "linux_bundle_name",
    str,
    default=_default_bundle_name,
    converter=_parse_bundle_name,
    name="Bundle Name",
    description="The RPM package name, defaults to app_name in lower case",
)


class Bundler(bundler.BundlerBase):
    artifact_ext = ".rpm"
    description = "Red Hat Package Manager (RPM) bundler."
    format_id = "rpm"
    name = "RPM Bundle"
    resource_prefix = "linux"
    tools = (("rpmbuild", "4.0"),)

    def invoke(self, run):
        pipeline.run_tool(
            run,
            [
                "rpmbuild",
                "-bb",
                run.spec_file,
                "--define",
                f"%_sourcedir {run.work_dir}",
                "--define",
                f"%_rpmdir {run.outdir}",
                "--define",
                f"%_topdir {run.work_dir.join('rpmbuildroot')}",
            ],
        )

    def is_supported(self):
        return pkplatform.is_unix()

    def params(self):
        return super().params() + (
            BUNDLE_NAME,
            linux.DESKTOP_CATEGORY,
            linux.XDG_FILE_PREFIX,
            standard.CATEGORY,
            standard.COPYRIGHT,
            standard.DESCRIPTION,
            standard.FILE_ASSOCIATIONS,
            standard.LICENSE_FILE,
            standard.LICENSE_TYPE,
            standard.MENU_HINT,
            standard.RUN_AT_STARTUP,
            standard.SERVICE_HINT,
            standard.SHORTCUT_HINT,
            standard.START_ON_INSTALL,
            standard.STOP_ON_UNINSTALL,
            standard.SYSTEM_WIDE,
            standard.TITLE,
        )

    def render(self, run):
        d = linux.replacement_data(run.params, BUNDLE_NAME)
        d.APPLICATION_LICENSE_FILE = "\n".join(
            "%doc " + linux.installed_path(d, "app/" + f)
            for f in standard.LICENSE_FILE.fetch_from(run.params)
        )
        linux.secondary_launchers(run, d, run.root_dir, BUNDLE_NAME)
        linux.file_associations(run, d, run.root_dir)
        linux.render_desktop(run, d, run.root_dir)
        if standard.SERVICE_HINT.fetch_from(run.params):
            pipeline.render_template(
                run,
                run.root_dir.join(d.APPLICATION_PACKAGE + ".init"),
                "template.init.script",
                "RPM init script",
                d,
            ).chmod(0o755)
        run.spec_file = pipeline.render_template(
            run,
            run.work_dir.join(d.APPLICATION_PACKAGE + ".spec"),
            "template.spec",
            "RPM spec file",
            d,
        )

    def stage(self, run):
        linux.ensure_shortcut(run)
        super().stage(run)

    def validate_params(self, params):
        linux.validate_common(params)
        n = BUNDLE_NAME.fetch_from(params)
        if not n:
            raise error.ConfigError(
                "Bundle name is empty.",
                "Set app_name or linux_bundle_name.",
            )
        _parse_bundle_name(n, params)
