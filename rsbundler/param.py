"""Typed, self-defaulting bundler parameters

A bundler is configured by a flat, untyped store (a `dict`, usually a
`PKDict`) which maps keys to values. The store is shared by every
bundler in a batch, so values are only interpreted at the boundary by
a `ParamInfo`, which knows the key, the expected type, how to compute a
default and how to convert a raw string::

    APP_FS_NAME = ParamInfo(
        "app_fs_name",
        str,
        default=lambda params: _fs_name(APP_NAME.fetch_from(params)),
        name="Application file system name",
    )

Defaults are computed on demand against the same store and never
written back so they may read any other parameter in any order. They
must be pure functions of the store.

A key that is present with a value of None is an explicit "no value"
and suppresses the default, e.g. ``runtime=None`` means "do not bundle
a runtime".

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern.pkdebug import pkdc
from rsbundler import error


class ParamInfo:
    """Describes one key in the parameter store

    Instances are immutable and shared across invocations.

    Args:
        key (str): unique key into the store
        value_type (type or tuple): what `isinstance` accepts as already parsed
        default (callable): ``default(params)`` returns the default [None]
        converter (callable): ``converter(raw, params)`` parses a str [None]
        name (str): displayable name
        description (str): documentation for the param
    """

    def __init__(
        self, key, value_type, default=None, converter=None, name="", description=""
    ):
        assert key, "key must not be empty"
        assert default is None or callable(
            default
        ), f"key={key} default={default} must be callable"
        assert converter is None or callable(
            converter
        ), f"key={key} converter={converter} must be callable"
        self.__dict__.update(
            key=key,
            value_type=value_type,
            default=default,
            converter=converter,
            name=name,
            description=description,
        )

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable name={name}")

    def __repr__(self):
        return f"{type(self).__name__}({self.key})"

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable name={name}")

    def convert(self, raw, params):
        """Parse `raw` into `value_type`

        Args:
            raw (str): unparsed text, e.g. from the command line
            params (dict): store for converters which depend on other values

        Returns:
            object: parsed value
        """
        if self.converter is None:
            if self.value_type is str:
                return raw
            raise error.ConfigError(
                f"Param {self.key} cannot be parsed from text value={raw}.",
                f"Supply {self.key} as {self.value_type}.",
            )
        try:
            return self.converter(raw, params)
        except error.Error:
            raise
        except Exception as e:
            raise error.ConfigError(
                f'Invalid value "{raw}" for param {self.key}: {e}',
                f'Correct the "{self.key}" param.',
            ) from e

    def default_value(self, params):
        """Compute the default for `params` without modifying them

        Args:
            params (dict): store

        Returns:
            object: default or None
        """
        if self.default is None:
            return None
        return self.default(params)

    def fetch_from(self, params):
        """Resolve this param against `params`

        Args:
            params (dict): store

        Returns:
            object: stored value, converted value, or default
        """
        if self.key in params:
            v = params[self.key]
            if v is None:
                return None
            # text is raw even when value_type is str
            if isinstance(v, str) and self.converter is not None:
                return self.convert(v, params)
            if isinstance(v, self.value_type):
                return v
            pkdc(
                "key={} value={} is not type={}; using default",
                self.key,
                v,
                self.value_type,
            )
        return self.default_value(params)


class EnumeratedParam(ParamInfo):
    """A param whose values come from a closed set

    Choices are displayed to users as labels, which map to the
    identifiers the native tool accepts.

    Args:
        elements (dict): displayable label to identifier
        kwargs (dict): passed to `ParamInfo`
    """

    def __init__(self, key, value_type, elements, **kwargs):
        super().__init__(key, value_type, **kwargs)
        self.__dict__["elements"] = dict(elements)

    def displayable_keys(self):
        """Labels for the choices

        Returns:
            frozenset: labels
        """
        return frozenset(self.elements.keys())

    def value_for(self, label):
        """Identifier for a label

        Args:
            label (str): one of `displayable_keys`

        Returns:
            object: identifier or None if `label` is unknown
        """
        return self.elements.get(label)

    def values(self):
        """All identifiers

        Returns:
            frozenset: identifiers
        """
        return frozenset(self.elements.values())


def fetch_typed_or_default(params, key, value_type, fallback=None):
    """Read `key` if it has the right type

    The store is shared so a value of the wrong type is ignored
    rather than raising.

    Args:
        params (dict): store
        key (str): what to read
        value_type (type or tuple): what to accept
        fallback (object): returned when missing or mistyped [None]

    Returns:
        object: value, None (explicitly set), or `fallback`
    """
    if key not in params:
        return fallback
    v = params[key]
    if v is None:
        return None
    if isinstance(v, value_type):
        return v
    pkdc("key={} value={} is not type={}; using fallback", key, v, value_type)
    return fallback
