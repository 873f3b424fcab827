"""Builder for the parameter store passed to bundlers

Callers (e.g. `rsbundler.pkcli.bundle`) populate a store through
`BundleParams`. Setters only write non-empty values so defaults
computed by `rsbundler.param.ParamInfo` apply otherwise.

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkio
from pykern.pkcollections import PKDict
from pykern.pkdebug import pkdlog
from rsbundler import error
from rsbundler import standard


class BundleParams:
    """Wraps a store (`PKDict`) with typed setters and getters

    Args:
        params (dict): initial values, copied [None]

    Attributes:
        params (PKDict): the store
    """

    def __init__(self, params=None):
        self.params = PKDict(params or {})

    def add_file_association(
        self, extensions, content_type, description=None, icon=None
    ):
        self._append(
            standard.FILE_ASSOCIATIONS,
            self._without_none(
                PKDict(
                    fa_extensions=list(extensions) if extensions else None,
                    fa_content_type=[content_type] if content_type else None,
                    fa_description=description,
                    fa_icon=pkio.py_path(icon) if icon else None,
                ),
            ),
        )

    def add_license_file(self, path):
        """Add license file relative to app_resources

        Args:
            path (str): relative path
        """
        self._append(standard.LICENSE_FILE, path)

    def add_secondary_launcher(self, name, **kwargs):
        """Add an entry point bundled with the primary application

        Args:
            name (str): launcher name
            kwargs (dict): other params which override the primary's
        """
        self._append(
            standard.SECONDARY_LAUNCHERS,
            PKDict(kwargs).pkupdate({standard.APP_NAME.key: name}),
        )

    def as_dict(self):
        """Copy of the store

        Returns:
            PKDict: shallow copy
        """
        return PKDict(self.params)

    def get(self, param):
        """Resolve `param` against the store

        Args:
            param (ParamInfo): what to get

        Returns:
            object: value or default
        """
        return param.fetch_from(self.params)

    def put_unless_empty(self, key, value):
        """Set `key` if `value` is a non-empty collection

        Args:
            key (str): store key
            value (object): list, tuple, dict, or None
        """
        if value:
            self.params[key] = value

    def put_unless_none(self, key, value):
        """Set `key` if `value` is not None

        Args:
            key (str): store key
            value (object): anything
        """
        if value is not None:
            self.params[key] = value

    def set_app_resources(self, path):
        self.put_unless_none(
            standard.APP_RESOURCES.key,
            pkio.py_path(path) if path is not None else None,
        )

    def set_arguments(self, arguments):
        self.put_unless_empty(standard.ARGUMENTS.key, arguments)

    def set_category(self, value):
        self.put_unless_none(standard.CATEGORY.key, value)

    def set_copyright(self, value):
        self.put_unless_none(standard.COPYRIGHT.key, value)

    def set_description(self, value):
        self.put_unless_none(standard.DESCRIPTION.key, value)

    def set_email(self, value):
        self.put_unless_none(standard.EMAIL.key, value)

    def set_identifier(self, value):
        self.put_unless_none(standard.IDENTIFIER.key, value)

    def set_license_type(self, value):
        self.put_unless_none(standard.LICENSE_TYPE.key, value)

    def set_menu_hint(self, value):
        self.put_unless_none(standard.MENU_HINT.key, value)

    def set_name(self, value):
        self.put_unless_none(standard.APP_NAME.key, value)

    def set_runtime(self, path):
        """Runtime directory to bundle

        None is stored explicitly, which means the package relies
        on the system's runtime.

        Args:
            path (str): directory or None
        """
        if path is None:
            pkdlog("No runtime to embed. Package will need a system runtime.")
            self.params[standard.RUNTIME.key] = None
            return
        p = pkio.py_path(path)
        if not p.check(dir=True):
            raise error.ConfigError(
                f"Runtime directory={p} does not exist.",
                "Pass an existing runtime directory or None to use the system runtime.",
            )
        self.params[standard.RUNTIME.key] = p

    def set_service_hint(self, value):
        self.put_unless_none(standard.SERVICE_HINT.key, value)

    def set_shortcut_hint(self, value):
        self.put_unless_none(standard.SHORTCUT_HINT.key, value)

    def set_system_wide(self, value):
        self.put_unless_none(standard.SYSTEM_WIDE.key, value)

    def set_title(self, value):
        self.put_unless_none(standard.TITLE.key, value)

    def set_vendor(self, value):
        self.put_unless_none(standard.VENDOR.key, value)

    def set_verbose(self, value):
        self.put_unless_none(standard.VERBOSE.key, value)

    def set_version(self, value):
        self.put_unless_none(standard.VERSION.key, value)

    def _append(self, param, value):
        # A new list so defaults and callers' lists are not modified
        self.params[param.key] = list(param.fetch_from(self.params) or []) + [value]

    def _without_none(self, values):
        return PKDict((k, v) for k, v in values.items() if v is not None)
