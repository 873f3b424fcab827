"""macOS launchd daemon installer (.pkg)

Installs the application image in ``/Library/Application Support`` and a
launchd plist in ``/Library/LaunchDaemons``. Daemons are always system
wide.

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkio
from pykern import pkplatform
from pykern.pkcollections import PKDict
from rsbundler import bundler
from rsbundler import error
from rsbundler import pipeline
from rsbundler import stage
from rsbundler import standard

#: Where the application image is installed
INSTALL_DIR = "Library/Application Support"

#: Where the launchd plist is installed
LAUNCH_DAEMONS_DIR = "Library/LaunchDaemons"

KEEP_ALIVE = standard.bool_param(
    "mac_daemon_keep_alive",
    False,
    "Keep alive",
    "launchd restarts the daemon when it exits",
)


class Bundler(bundler.BundlerBase):
    artifact_ext = ".pkg"
    description = "macOS launchd daemon installer (.pkg)."
    format_id = "daemon"
    name = "Daemon Bundler"
    resource_prefix = "mac"
    tools = (("pkgbuild", None),)

    def invoke(self, run):
        p = run.params
        pipeline.run_tool(
            run,
            [
                "pkgbuild",
                "--root",
                run.pkg_dir,
                "--identifier",
                standard.IDENTIFIER.fetch_from(p),
                "--version",
                standard.VERSION.fetch_from(p),
                "--install-location",
                "/",
                "--scripts",
                run.scripts_dir,
                run.outdir.join(
                    f"{standard.APP_FS_NAME.fetch_from(p)}-daemon{self.artifact_ext}"
                ),
            ],
        )

    def is_supported(self):
        return pkplatform.is_darwin()

    def params(self):
        return super().params() + (
            KEEP_ALIVE,
            standard.RUN_AT_STARTUP,
            standard.START_ON_INSTALL,
            standard.SYSTEM_WIDE,
        )

    def render(self, run):
        p = run.params
        i = standard.IDENTIFIER.fetch_from(p)
        d = PKDict(
            DAEMON_IDENTIFIER=i,
            KEEP_ALIVE=pipeline.template_str(KEEP_ALIVE.fetch_from(p)),
            LAUNCHD_PLIST=f"/{LAUNCH_DAEMONS_DIR}/{i}.plist",
            LAUNCHER_PATH="/{}/{}/{}".format(
                INSTALL_DIR,
                run.root_dir.basename,
                run.root_dir.basename,
            ),
            RUN_AT_LOAD=pipeline.template_str(standard.RUN_AT_STARTUP.fetch_from(p)),
            START_ON_INSTALL=pipeline.template_str(
                standard.START_ON_INSTALL.fetch_from(p)
            ),
        )
        pipeline.render_template(
            run,
            pkio.mkdir_parent(run.pkg_dir.join(LAUNCH_DAEMONS_DIR)).join(
                i + ".plist"
            ),
            "template.daemon.launchd.plist",
            "Launchd plist file",
            d,
        )
        run.scripts_dir = pkio.mkdir_parent(run.work_dir.join("scripts"))
        for f in "preinstall", "postinstall":
            pipeline.render_template(
                run,
                run.scripts_dir.join(f),
                "template.daemon." + f,
                f"Daemon {f} script",
                d,
            ).chmod(0o755)

    def stage(self, run):
        run.pkg_dir = run.work_dir.join("root")
        run.root_dir = stage.app_image(run, run.pkg_dir.join(INSTALL_DIR))

    def validate(self, params):
        if params is not None:
            bundler.validate_system_wide(params, is_service=True)
        return super().validate(params)

    def validate_params(self, params):
        if not standard.IDENTIFIER.fetch_from(params):
            raise error.ConfigError(
                "Identifier is empty.",
                "Set identifier, e.g. org.example.daemon.",
            )
