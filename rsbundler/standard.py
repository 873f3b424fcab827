"""Parameters shared by all bundlers

Process wide defaults come from `pykern.pkconfig`, e.g.
``$RSBUNDLER_STANDARD_BUILD_ROOT``. Values in the parameter store always
override them.

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkconfig
from pykern import pkconst
from pykern import pkio
from rsbundler.param import ParamInfo
import os.path
import re
import tempfile

#: Types accepted as already parsed paths
PATH_TYPES = (pkconst.PY_PATH_LOCAL_TYPE,)

#: Characters not allowed in file system names
_FS_NAME_RE = re.compile(r"[^-a-zA-Z.0-9]")

cfg = None


def bool_param(key, default, name, description=""):
    """Create a `bool` `ParamInfo` which parses strings

    Args:
        key (str): store key
        default (object): constant default (may be None)
        name (str): displayable name
        description (str): documentation

    Returns:
        ParamInfo: param
    """
    return ParamInfo(
        key,
        bool,
        default=lambda params: default,
        converter=_parse_bool,
        name=name,
        description=description,
    )


def list_param(key, name, description=""):
    """Create a `list` `ParamInfo` which defaults to empty

    Strings are split on `pkconfig.TUPLE_SEP`.

    Args:
        key (str): store key
        name (str): displayable name
        description (str): documentation

    Returns:
        ParamInfo: param
    """
    return ParamInfo(
        key,
        (list, tuple),
        default=lambda params: [],
        converter=_parse_list,
        name=name,
        description=description,
    )


def path_param(key, default, name, description=""):
    """Create a path `ParamInfo` (`py.path.local`)

    Args:
        key (str): store key
        default (callable): computes default or None
        name (str): displayable name
        description (str): documentation

    Returns:
        ParamInfo: param
    """
    return ParamInfo(
        key,
        PATH_TYPES,
        default=default,
        converter=_parse_path,
        name=name,
        description=description,
    )


def str_param(key, default, name, description=""):
    """Create a `str` `ParamInfo`

    Args:
        key (str): store key
        default (object): str, callable, or None
        name (str): displayable name
        description (str): documentation

    Returns:
        ParamInfo: param
    """
    return ParamInfo(
        key,
        str,
        default=default if default is None or callable(default) else lambda p: default,
        name=name,
        description=description,
    )


def _default_app_name(params):
    r = APP_RESOURCES.fetch_from(params)
    return r.basename if r else None


def _default_identifier(params):
    n = APP_FS_NAME.fetch_from(params)
    return n.lower() if n else None


def _derived(param):
    return lambda params: param.fetch_from(params)


def _fs_name(params):
    n = APP_NAME.fetch_from(params)
    return _FS_NAME_RE.sub("", n) if n else None


def _optional_path(value):
    return pkio.py_path(value) if value else None


def _parse_bool(raw, params):
    return pkconfig.parse_bool(raw)


def _parse_list(raw, params):
    return list(pkconfig.parse_tuple(raw))


def _parse_path(raw, params):
    return pkio.py_path(raw)


cfg = pkconfig.init(
    build_root=(
        os.path.join(tempfile.gettempdir(), "rsbundler"),
        str,
        "where working directories are created",
    ),
    resources_root=(None, str, "directory containing template overrides"),
    retain_work_dir=(False, bool, "keep working directories for debugging"),
    verbose=(False, bool, "log native tool output and save config files"),
)

APP_RESOURCES = path_param(
    "app_resources",
    None,
    "Application resources",
    "Directory containing the application files to bundle",
)

APP_NAME = str_param(
    "app_name",
    _default_app_name,
    "Application name",
    "Name of the application, defaults to the basename of app_resources",
)

APP_FS_NAME = str_param(
    "app_fs_name",
    _fs_name,
    "Application file system name",
    "Application name with characters not allowed in file names removed",
)

ARGUMENTS = list_param(
    "arguments",
    "Arguments",
    "Arguments passed by the launcher to the main executable",
)

BUILD_ROOT = path_param(
    "build_root",
    lambda params: pkio.py_path(cfg.build_root),
    "Build root",
    "Directory in which working directories are created",
)

CATEGORY = str_param(
    "category",
    "Unknown",
    "Category",
    "Application category, value is platform specific",
)

CONFIG_ROOT = path_param(
    "config_root",
    lambda params: BUILD_ROOT.fetch_from(params).join("config"),
    "Config root",
    "Where rendered config files are saved when verbose",
)

COPYRIGHT = str_param("copyright", "Unknown", "Copyright", "Copyright notice")

DESCRIPTION = str_param(
    "description",
    _derived(APP_NAME),
    "Description",
    "Longer description of the application, defaults to app_name",
)

EMAIL = str_param("email", "Unknown", "Email", "Vendor contact email")

FA_CONTENT_TYPE = list_param(
    "fa_content_type",
    "File association content types",
    "MIME types of a file association",
)

FA_DESCRIPTION = str_param(
    "fa_description",
    None,
    "File association description",
    "Describes the associated file type",
)

FA_EXTENSIONS = list_param(
    "fa_extensions",
    "File association extensions",
    "File extensions (without dot) of a file association",
)

FA_ICON = path_param(
    "fa_icon",
    None,
    "File association icon",
    "Square PNG icon for the associated file type",
)

FILE_ASSOCIATIONS = list_param(
    "file_associations",
    "File associations",
    "List of dicts with fa_extensions, fa_content_type, fa_description, fa_icon",
)

ICON = path_param("icon", None, "Icon", "PNG icon for menu and desktop entries")

IDENTIFIER = str_param(
    "identifier",
    _default_identifier,
    "Identifier",
    "Unique id (bundle id, package id), defaults to lower case app_fs_name",
)

IMAGES_ROOT = path_param(
    "images_root",
    lambda params: BUILD_ROOT.fetch_from(params).join("images"),
    "Images root",
    "Where bundlers stage application images",
)

LICENSE_FILE = list_param(
    "license_file",
    "License files",
    "License files relative to app_resources",
)

LICENSE_TYPE = str_param(
    "license_type",
    "Unknown",
    "License type",
    "Short license name, e.g. GPL or Apache-2.0",
)

MAIN_EXECUTABLE = str_param(
    "main_executable",
    _derived(APP_FS_NAME),
    "Main executable",
    "Program relative to app_resources which the launcher runs",
)

MENU_HINT = bool_param(
    "menu_hint",
    True,
    "Menu hint",
    "Add the application to the system menu",
)

RESOURCES_ROOT = path_param(
    "resources_root",
    lambda params: _optional_path(cfg.resources_root),
    "Resources root",
    "Directory with overrides for the built-in templates",
)

RETAIN_WORK_DIR = bool_param(
    "retain_work_dir",
    cfg.retain_work_dir,
    "Retain working directory",
    "Do not delete the working directory after bundling",
)

RUN_AT_STARTUP = bool_param(
    "run_at_startup",
    False,
    "Run at startup",
    "Start the service when the system boots",
)

RUNTIME = path_param(
    "runtime",
    None,
    "Runtime",
    "Runtime directory to bundle, None means use the system runtime",
)

SECONDARY_LAUNCHERS = list_param(
    "secondary_launchers",
    "Secondary launchers",
    "List of dicts, each a parameter store for an additional entry point",
)

SERVICE_HINT = bool_param(
    "service_hint",
    False,
    "Service hint",
    "Install the application as a service or daemon",
)

SHORTCUT_HINT = bool_param(
    "shortcut_hint",
    False,
    "Shortcut hint",
    "Create a desktop shortcut",
)

START_ON_INSTALL = bool_param(
    "start_on_install",
    True,
    "Start on install",
    "Start the service after installation",
)

STOP_ON_UNINSTALL = bool_param(
    "stop_on_uninstall",
    True,
    "Stop on uninstall",
    "Stop the service before it is removed",
)

SYSTEM_WIDE = bool_param(
    "system_wide",
    None,
    "System wide",
    "Install for all users, None means the bundler's default",
)

TITLE = str_param(
    "title",
    _derived(APP_NAME),
    "Title",
    "Short summary of the application, defaults to app_name",
)

VENDOR = str_param("vendor", "Unknown", "Vendor", "Who distributes the application")

VERBOSE = bool_param(
    "verbose",
    cfg.verbose,
    "Verbose",
    "Log native tool output and save rendered config files",
)

VERSION = str_param("app_version", "1.0", "Version", "Application version")


def common_params():
    """Params every bundler reads

    Returns:
        tuple: `ParamInfo` instances
    """
    return (
        APP_NAME,
        APP_FS_NAME,
        APP_RESOURCES,
        ARGUMENTS,
        BUILD_ROOT,
        CONFIG_ROOT,
        ICON,
        IDENTIFIER,
        IMAGES_ROOT,
        MAIN_EXECUTABLE,
        RESOURCES_ROOT,
        RETAIN_WORK_DIR,
        RUNTIME,
        SECONDARY_LAUNCHERS,
        VENDOR,
        VERBOSE,
        VERSION,
    )
