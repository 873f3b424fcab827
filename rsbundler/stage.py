"""Materialize the application image

The image layout is the same for every format::

    <root>/<app_fs_name>/
        app/                 copy of app_resources
        runtime/             copy of runtime (if any)
        <app_fs_name>        launcher script
        <launcher_fs_name>   one per secondary launcher
        <app_fs_name>.png    icon (if any)

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkio
from pykern.pkcollections import PKDict
from rsbundler import error
from rsbundler import pipeline
from rsbundler import standard
import shlex
import shutil

#: Params which a secondary launcher never inherits from the primary
_LAUNCHER_IDENTITY = (
    standard.APP_NAME,
    standard.APP_FS_NAME,
    standard.ARGUMENTS,
    standard.DESCRIPTION,
    standard.MAIN_EXECUTABLE,
    standard.TITLE,
)


def app_image(run, root):
    """Copy the application into `root`

    Args:
        run (pipeline.Run): operation
        root (py.path): parent of the image directory

    Returns:
        py.path: image directory (``<root>/<app_fs_name>``)
    """
    p = run.params
    res = pkio.mkdir_parent(root.join(standard.APP_FS_NAME.fetch_from(p)))
    run.verbose("Staging application image in {}", res)
    shutil.copytree(
        str(standard.APP_RESOURCES.fetch_from(p)),
        str(res.join("app")),
        symlinks=True,
    )
    r = standard.RUNTIME.fetch_from(p)
    if r:
        shutil.copytree(str(r), str(res.join("runtime")), symlinks=True)
    else:
        run.verbose("No runtime bundled; the system runtime will be used")
    _launcher(run, res, p)
    for l in standard.SECONDARY_LAUNCHERS.fetch_from(p):
        _launcher(run, res, launcher_params(p, l))
    return res


def launcher_params(params, launcher):
    """Store for a secondary launcher

    The launcher inherits the primary's params except for identity
    fields (name, executable, arguments, ...), which it supplies.

    Args:
        params (dict): primary store
        launcher (dict): secondary launcher's params

    Returns:
        PKDict: new store
    """
    res = PKDict(params)
    for i in _LAUNCHER_IDENTITY:
        res.pkdel(i.key)
    return res.pkupdate(launcher)


def validate(params):
    """Checks every format needs

    Args:
        params (dict): store
    """
    a = standard.APP_RESOURCES.fetch_from(params)
    if a is None:
        raise error.ConfigError(
            "Application resources were not specified.",
            "Set app_resources to the directory containing the application.",
        )
    if not a.check(dir=True):
        raise error.ConfigError(
            f"Application resources={a} is not a directory.",
            "Set app_resources to the directory containing the application.",
        )
    n = set()
    for i, l in enumerate(
        [params] + list(standard.SECONDARY_LAUNCHERS.fetch_from(params))
    ):
        _validate_launcher(params, i, l, a, n)
    r = standard.RUNTIME.fetch_from(params)
    if r is not None and not r.check(dir=True):
        raise error.ConfigError(
            f"Runtime={r} is not a directory.",
            "Set runtime to a directory or None to use the system runtime.",
        )
    i = standard.ICON.fetch_from(params)
    if i is not None and not i.check(file=True):
        raise error.ConfigError(
            f"Icon={i} does not exist.",
            "Set icon to a PNG file or remove it.",
        )


def _launcher(run, image_dir, params):
    n = standard.APP_FS_NAME.fetch_from(params)
    f = pipeline.render_template(
        run,
        image_dir.join(n),
        "launcher.sh",
        f"Launcher script for {n}",
        PKDict(
            APPLICATION_NAME=standard.APP_NAME.fetch_from(params),
            ARGUMENTS=" ".join(
                shlex.quote(a) for a in standard.ARGUMENTS.fetch_from(params)
            ),
            HAS_RUNTIME=pipeline.template_str(
                standard.RUNTIME.fetch_from(params) is not None
            ),
            MAIN_EXECUTABLE=shlex.quote(
                standard.MAIN_EXECUTABLE.fetch_from(params),
            ),
        ),
        prefix="",
    )
    f.chmod(0o755)
    i = standard.ICON.fetch_from(params)
    if i:
        i.copy(image_dir.join(n + ".png"))


def _validate_launcher(params, index, launcher, app_resources, names):
    if index == 0:
        p = params
        w = "Application"
    else:
        if not isinstance(launcher, dict):
            raise error.ConfigError(
                f"Secondary launcher number {index} is not a dict.",
                "Use BundleParams.add_secondary_launcher.",
            )
        p = launcher_params(params, launcher)
        w = f"Secondary launcher number {index}"
    n = standard.APP_FS_NAME.fetch_from(p)
    if not n:
        raise error.ConfigError(
            f"{w} does not have a name.",
            "Set app_name to a name containing letters or digits.",
        )
    if n in names:
        raise error.ConfigError(
            f"{w} file system name={n} is already in use.",
            "Give each launcher a unique app_name.",
        )
    names.add(n)
    e = standard.MAIN_EXECUTABLE.fetch_from(p)
    if not app_resources.join(e).check(file=True):
        raise error.ConfigError(
            f"{w} main executable={e} not found in {app_resources}.",
            "Set main_executable to a program relative to app_resources.",
        )
