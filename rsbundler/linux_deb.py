"""Debian package (.deb) installer

The package tree is built in ``<work_dir>/pkg``::

    DEBIAN/control, postinst, prerm
    etc/init.d/<package>          (service only)
    opt/<app_fs_name>/            application image
    usr/share/doc/<package>/copyright

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkio
from pykern import pkplatform
from rsbundler import bundler
from rsbundler import error
from rsbundler import linux
from rsbundler import pipeline
from rsbundler import stage
from rsbundler import standard
from rsbundler.param import EnumeratedParam, ParamInfo
import platform
import re

#: Debian policy 5.6.1 for package names
_NAME_RE = re.compile(r"^[a-z\d][a-z\d+\-.]+$")

#: `platform.machine` to dpkg architecture
_ARCH = {
    "aarch64": "arm64",
    "amd64": "amd64",
    "arm64": "arm64",
    "i386": "i386",
    "i686": "i386",
    "x86_64": "amd64",
}


def _default_arch(params):
    return _ARCH.get(platform.machine().lower(), "all")


def _default_bundle_name(params):
    n = standard.APP_NAME.fetch_from(params)
    return re.sub(r"\s+", "-", n.lower()) if n else None


def _default_maintainer(params):
    return "{} <{}>".format(
        standard.VENDOR.fetch_from(params),
        standard.EMAIL.fetch_from(params),
    )


def _parse_bundle_name(raw, params):
    if not _NAME_RE.search(raw):
        raise error.ConfigError(
            f"Invalid value '{raw}' for the bundle name.",
            "Adjust the linux_deb_bundle_name param so that it starts with a lower case letter or digit"
            " and only contains lower case letters, digits, and the characters '+-.'.",
        )
    return raw


def _parse_section(raw, params):
    if raw in SECTION.values():
        return raw
    v = SECTION.value_for(raw)
    if v is None:
        raise error.ConfigError(
            f"Invalid Debian section={raw}.",
            f"Use one of: {', '.join(sorted(SECTION.values()))}",
        )
    return v


ARCH = ParamInfo(
    "deb_arch",
    str,
    default=_default_arch,
    name="Architecture",
    description="dpkg architecture, defaults to this host's or all",
)

BUNDLE_NAME = ParamInfo(
    "linux_deb_bundle_name",
    str,
    default=_default_bundle_name,
    converter=_parse_bundle_name,
    name="Bundle Name",
    description="The Debian package name, defaults to app_name in lower case",
)

MAINTAINER = ParamInfo(
    "deb_maintainer",
    str,
    default=_default_maintainer,
    name="Maintainer",
    description='Maintainer field, defaults to "<vendor> <<email>>"',
)

SECTION = EnumeratedParam(
    "deb_section",
    str,
    {
        "Development": "devel",
        "Editors": "editors",
        "Education": "education",
        "Games": "games",
        "Graphics": "graphics",
        "Miscellaneous": "misc",
        "Networking": "net",
        "Science": "science",
        "Sound": "sound",
        "Utilities": "utils",
        "Video": "video",
        "Web": "web",
    },
    default=lambda params: "misc",
    converter=_parse_section,
    name="Section",
    description="Debian archive section",
)


class Bundler(bundler.BundlerBase):
    artifact_ext = ".deb"
    description = "Debian package (.deb) bundler."
    format_id = "deb"
    name = "DEB Installer"
    resource_prefix = "linux"
    tools = (("dpkg-deb", "1.15"),)

    def invoke(self, run):
        p = run.params
        pipeline.run_tool(
            run,
            [
                "dpkg-deb",
                "--build",
                run.pkg_dir,
                run.outdir.join(
                    "{}_{}_{}{}".format(
                        BUNDLE_NAME.fetch_from(p),
                        standard.VERSION.fetch_from(p),
                        ARCH.fetch_from(p),
                        self.artifact_ext,
                    ),
                ),
            ],
        )

    def is_supported(self):
        return pkplatform.is_unix()

    def params(self):
        return super().params() + (
            ARCH,
            BUNDLE_NAME,
            MAINTAINER,
            SECTION,
            linux.DESKTOP_CATEGORY,
            linux.XDG_FILE_PREFIX,
            standard.CATEGORY,
            standard.COPYRIGHT,
            standard.DESCRIPTION,
            standard.EMAIL,
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
        p = run.params
        d = linux.replacement_data(p, BUNDLE_NAME).pkupdate(
            DEB_ARCH=ARCH.fetch_from(p),
            DEB_DESCRIPTION=_description(p),
            DEB_MAINTAINER=MAINTAINER.fetch_from(p),
            DEB_SECTION=SECTION.fetch_from(p),
        )
        linux.secondary_launchers(run, d, run.root_dir, BUNDLE_NAME)
        linux.file_associations(run, d, run.root_dir)
        linux.render_desktop(run, d, run.root_dir)
        _copyright(run, d)
        if standard.SERVICE_HINT.fetch_from(p):
            pipeline.render_template(
                run,
                pkio.mkdir_parent(run.pkg_dir.join("etc", "init.d")).join(
                    d.APPLICATION_PACKAGE
                ),
                "template.init.script",
                "DEB init script",
                d,
            ).chmod(0o755)
        c = pkio.mkdir_parent(run.pkg_dir.join("DEBIAN"))
        pipeline.render_template(
            run, c.join("control"), "template.control", "DEB control file", d
        )
        for f, x in (
            ("postinst", "DEB postinstall script"),
            ("prerm", "DEB prerm script"),
        ):
            pipeline.render_template(run, c.join(f), "template." + f, x, d).chmod(
                0o755
            )

    def stage(self, run):
        linux.ensure_shortcut(run)
        run.pkg_dir = run.work_dir.join("pkg")
        run.root_dir = stage.app_image(
            run,
            run.pkg_dir.join(linux.INSTALL_DIR.lstrip("/")),
        )

    def validate_params(self, params):
        linux.validate_common(params)
        for x in BUNDLE_NAME, SECTION:
            v = x.fetch_from(params)
            if not v:
                raise error.ConfigError(
                    f"{x.name} is empty.",
                    f"Set {x.key}.",
                )
            x.convert(v, params)


def _copyright(run, data):
    # notice followed by the text of each license file
    d = pkio.mkdir_parent(
        run.pkg_dir.join("usr", "share", "doc", data.APPLICATION_PACKAGE),
    )
    pkio.write_text(
        d.join("copyright"),
        "\n".join(
            [f"Copyright: {data.APPLICATION_COPYRIGHT}", ""]
            + [
                pkio.read_text(run.root_dir.join("app", x))
                for x in standard.LICENSE_FILE.fetch_from(run.params)
            ],
        ),
    )


def _description(params):
    # extended description lines start with a space, empty lines are " ."
    return "\n".join(
        " " + (l if l.strip() else ".")
        for l in (standard.DESCRIPTION.fetch_from(params) or "").splitlines()
        or [standard.TITLE.fetch_from(params) or ""]
    )
