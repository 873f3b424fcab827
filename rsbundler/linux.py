"""Support shared by the Linux installers (rpm, deb)

Installers unpack the application image in ``/opt/<app_fs_name>`` and
register menu entries, MIME types and icons with the ``xdg-utils``
commands from the package's install scripts.

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern.pkcollections import PKDict
from rsbundler import bundler
from rsbundler import error
from rsbundler import pipeline
from rsbundler import stage
from rsbundler import standard
from rsbundler.param import EnumeratedParam, ParamInfo, fetch_typed_or_default
import re
import struct

#: Where installers put the application image
INSTALL_DIR = "/opt"

#: Vendor used in `XDG_FILE_PREFIX` if the store has none
DEFAULT_XDG_VENDOR = "rsbundler"

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

_WHITESPACE_RE = re.compile(r"\s+")


def _default_desktop_category(params):
    c = standard.CATEGORY.fetch_from(params)
    if c in DESKTOP_CATEGORY.values():
        return c
    return DESKTOP_CATEGORY.value_for(c) or "Utility"


def _default_xdg_prefix(params):
    v = fetch_typed_or_default(params, standard.VENDOR.key, str) or DEFAULT_XDG_VENDOR
    return _WHITESPACE_RE.sub(
        "",
        f"{v}-{standard.APP_FS_NAME.fetch_from(params)}",
    )


def _parse_desktop_category(raw, params):
    if raw in DESKTOP_CATEGORY.values():
        return raw
    v = DESKTOP_CATEGORY.value_for(raw)
    if v is None:
        raise error.ConfigError(
            f"Invalid desktop category={raw}.",
            f"Use one of: {', '.join(sorted(DESKTOP_CATEGORY.values()))}",
        )
    return v


DESKTOP_CATEGORY = EnumeratedParam(
    "linux_desktop_category",
    str,
    {
        "Audio and Video": "AudioVideo",
        "Audio": "Audio",
        "Development": "Development",
        "Education": "Education",
        "Game": "Game",
        "Graphics": "Graphics",
        "Network": "Network",
        "Office": "Office",
        "Science": "Science",
        "Settings": "Settings",
        "System": "System",
        "Utility": "Utility",
        "Video": "Video",
    },
    default=_default_desktop_category,
    converter=_parse_desktop_category,
    name="Desktop category",
    description="freedesktop.org main category of the menu entry",
)

XDG_FILE_PREFIX = ParamInfo(
    "linux_xdg_prefix",
    str,
    default=_default_xdg_prefix,
    name="Prefix for XDG files (mime, desktop, etc.)",
    description="Prefix of files registered with xdg-utils",
)


def ensure_shortcut(run):
    """At least one of menu or shortcut hint must be true

    Args:
        run (pipeline.Run): store may be modified
    """
    p = run.params
    if standard.MENU_HINT.fetch_from(p) or standard.SHORTCUT_HINT.fetch_from(p):
        return
    run.verbose("At least one type of shortcut is required. Enabling menu shortcut.")
    p[standard.MENU_HINT.key] = True


def file_associations(run, data, image_dir):
    """Write MimeInfo and add registrations to `data`

    Sets ``FILE_ASSOCIATION_INSTALL``, ``FILE_ASSOCIATION_REMOVE`` and
    ``DESKTOP_MIMES`` (empty when there are no associations).

    Args:
        run (pipeline.Run): operation
        data (PKDict): token map, modified
        image_dir (py.path): installed in ``/opt/<app_fs_name>``
    """
    p = run.params
    m = []
    i = []
    r = []
    for a in standard.FILE_ASSOCIATIONS.fetch_from(p):
        if not a:
            continue
        c = standard.FA_CONTENT_TYPE.fetch_from(a)
        if not c:
            continue
        e = standard.FA_EXTENSIONS.fetch_from(a)
        if not e:
            run.verbose("Creating association with no extensions for {}", c[0])
        m.append(
            PKDict(
                content_type=c[0],
                description=standard.FA_DESCRIPTION.fetch_from(a) or "",
                extensions=e,
            )
        )
        f = standard.FA_ICON.fetch_from(a)
        if not f or not f.check(file=True):
            continue
        s = png_square_size(f)
        if not s:
            run.verbose("Icon={} is not a square PNG; not registered", f)
            continue
        t = image_dir.join(f"{data.APPLICATION_FS_NAME}_fa_{f.basename}")
        f.copy(t)
        x = " ".join(
            (
                "--context mimetypes --size",
                str(s),
                installed_path(data, t.basename),
                c[0].replace("/", "-"),
            )
        )
        i.append(f"xdg-icon-resource install {x}")
        r.append(f"xdg-icon-resource uninstall {x}")
    if not m:
        return
    f = pipeline.render_template(
        run,
        image_dir.join(XDG_FILE_PREFIX.fetch_from(p) + "-MimeInfo.xml"),
        "template.MimeInfo.xml",
        "MimeInfo",
        PKDict(MIME_TYPES=m),
    )
    x = installed_path(data, f.basename)
    data.pkupdate(
        FILE_ASSOCIATION_INSTALL=_lines([f"xdg-mime install {x}"] + i),
        FILE_ASSOCIATION_REMOVE=_lines([f"xdg-mime uninstall {x}"] + r),
        DESKTOP_MIMES="MimeType=" + ";".join(y.content_type for y in m),
    )


def installed_path(data, basename):
    """Path of a file in the image after installation

    Args:
        data (PKDict): token map
        basename (str): file in image directory

    Returns:
        str: absolute path
    """
    return f"{INSTALL_DIR}/{data.APPLICATION_FS_NAME}/{basename}"


def png_square_size(path):
    """Size of a square PNG

    Args:
        path (py.path): image file

    Returns:
        int: width if square PNG else 0
    """
    with open(str(path), "rb") as f:
        b = f.read(24)
    if len(b) < 24 or not b.startswith(_PNG_SIGNATURE):
        return 0
    w, h = struct.unpack(">II", b[16:24])
    return w if w == h else 0


def render_desktop(run, data, image_dir):
    """Render the menu entry for the primary launcher

    Args:
        run (pipeline.Run): operation
        data (PKDict): token map
        image_dir (py.path): where to write

    Returns:
        py.path: desktop file
    """
    return pipeline.render_template(
        run,
        image_dir.join(data.APPLICATION_LAUNCHER_FILENAME + ".desktop"),
        "template.desktop",
        "Menu shortcut descriptor",
        data,
    )


def replacement_data(params, bundle_name):
    """Token map for the Linux templates

    Script tokens (``*_INSTALL``, ``*_REMOVE``) and ``DESKTOP_MIMES``
    are empty; `secondary_launchers` and `file_associations` fill them.

    Args:
        params (dict): store
        bundle_name (ParamInfo): package name descriptor

    Returns:
        PKDict: token to str
    """
    s = pipeline.template_str
    return PKDict(
        APPLICATION_COPYRIGHT=s(standard.COPYRIGHT.fetch_from(params)),
        APPLICATION_DESCRIPTION=s(standard.DESCRIPTION.fetch_from(params)),
        APPLICATION_FS_NAME=s(standard.APP_FS_NAME.fetch_from(params)),
        APPLICATION_LAUNCHER_FILENAME=s(standard.APP_FS_NAME.fetch_from(params)),
        APPLICATION_LICENSE_FILE=s(standard.LICENSE_FILE.fetch_from(params)),
        APPLICATION_LICENSE_TYPE=s(standard.LICENSE_TYPE.fetch_from(params)),
        APPLICATION_NAME=s(standard.APP_NAME.fetch_from(params)),
        APPLICATION_PACKAGE=s(bundle_name.fetch_from(params)),
        APPLICATION_SUMMARY=s(standard.TITLE.fetch_from(params)),
        APPLICATION_VENDOR=s(standard.VENDOR.fetch_from(params)),
        APPLICATION_VERSION=s(standard.VERSION.fetch_from(params)),
        DEPLOY_BUNDLE_CATEGORY=s(DESKTOP_CATEGORY.fetch_from(params)),
        DESKTOP_MIMES="",
        FILE_ASSOCIATION_INSTALL="",
        FILE_ASSOCIATION_REMOVE="",
        RUN_AT_STARTUP=s(standard.RUN_AT_STARTUP.fetch_from(params)),
        SECONDARY_LAUNCHERS_INSTALL="",
        SECONDARY_LAUNCHERS_REMOVE="",
        SERVICE_HINT=s(standard.SERVICE_HINT.fetch_from(params)),
        START_ON_INSTALL=s(standard.START_ON_INSTALL.fetch_from(params)),
        STOP_ON_UNINSTALL=s(standard.STOP_ON_UNINSTALL.fetch_from(params)),
        XDG_PREFIX=s(XDG_FILE_PREFIX.fetch_from(params)),
    )


def secondary_launchers(run, data, image_dir, bundle_name):
    """Render menu entries for secondary launchers

    Each entry is rendered with the primary's token map overridden
    by the launcher's identity. Sets ``SECONDARY_LAUNCHERS_INSTALL``
    and ``SECONDARY_LAUNCHERS_REMOVE`` in `data`.

    Args:
        run (pipeline.Run): operation
        data (PKDict): token map, modified
        image_dir (py.path): where to write
        bundle_name (ParamInfo): package name descriptor
    """
    i = []
    r = []
    for l in standard.SECONDARY_LAUNCHERS.fetch_from(run.params):
        d = replacement_data(stage.launcher_params(run.params, l), bundle_name)
        d.pkupdate(
            APPLICATION_FS_NAME=data.APPLICATION_FS_NAME,
            APPLICATION_PACKAGE=data.APPLICATION_PACKAGE,
        )
        x = installed_path(data, render_desktop(run, d, image_dir).basename)
        i.append(f"xdg-desktop-menu install --novendor {x}")
        r.append(f"xdg-desktop-menu uninstall --novendor {x}")
    data.pkupdate(
        SECONDARY_LAUNCHERS_INSTALL=_lines(i),
        SECONDARY_LAUNCHERS_REMOVE=_lines(r),
    )


def validate_common(params):
    """Checks shared by rpm and deb

    Args:
        params (dict): store
    """
    a = standard.APP_RESOURCES.fetch_from(params)
    for f in standard.LICENSE_FILE.fetch_from(params):
        if (
            not isinstance(f, str)
            or f.startswith("/")
            or not a.join(f).check(file=True)
        ):
            raise error.ConfigError(
                "Specified license file is missing.",
                f'Make sure that "{f}" references a file in the app resources, and that it is relative file reference.',
            )
    bundler.validate_system_wide(params)
    for i, x in enumerate(standard.FILE_ASSOCIATIONS.fetch_from(params), start=1):
        if not isinstance(x, dict):
            raise error.ConfigError(
                f"File Association number {i} is not a dict.",
                "Use BundleParams.add_file_association.",
            )
        m = standard.FA_CONTENT_TYPE.fetch_from(x)
        if not m:
            raise error.ConfigError(
                f"No MIME types were specified for File Association number {i}.",
                "For Linux Bundling specify one and only one MIME type for each file association.",
            )
        if len(m) > 1:
            raise error.ConfigError(
                f"More than one MIME types was specified for File Association number {i}.",
                "For Linux Bundling specify one and only one MIME type for each file association.",
            )
    DESKTOP_CATEGORY.fetch_from(params)


def _lines(values):
    return "".join(v + "\n" for v in values)
