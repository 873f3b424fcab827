"""Find bundlers and run them in batches

Bundlers are classes named ``Bundler`` in the modules listed in
``$RSBUNDLER_REGISTRY_BUNDLER_MODULES`` (colon separated).

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkconfig
from pykern.pkcollections import PKDict
from pykern.pkdebug import pkdc, pkdexc, pkdlog
from rsbundler import error
import importlib

#: `Result.state` when the artifact was produced
COMPLETED = "completed"

#: `Result.state` when validation or bundling raised
FAILED = "failed"

_bundlers = None

_cfg = pkconfig.init(
    bundler_modules=(
        (
            "rsbundler.app_image",
            "rsbundler.linux_deb",
            "rsbundler.linux_rpm",
            "rsbundler.mac_daemon",
        ),
        tuple,
        "modules which define a Bundler class",
    ),
)


def bundlers():
    """All registered bundlers

    Returns:
        tuple: `BundlerBase` instances in registration order
    """
    global _bundlers

    if _bundlers is None:
        r = []
        for m in _cfg.bundler_modules:
            r.append(importlib.import_module(m).Bundler())
            pkdc("registered format_id={} module={}", r[-1].format_id, m)
        _bundlers = tuple(r)
    return _bundlers


def find(format_id):
    """Bundler for `format_id`

    Args:
        format_id (str): e.g. ``rpm``

    Returns:
        BundlerBase: bundler
    """
    for b in bundlers():
        if b.format_id == format_id:
            return b
    raise error.ConfigError(
        f"Unknown format={format_id}.",
        f"Use one of: {', '.join(b.format_id for b in bundlers())}",
    )


def for_platform():
    """Bundlers which can run on this host

    Returns:
        tuple: supported `BundlerBase` instances
    """
    return tuple(b for b in bundlers() if b.is_supported())


def run(params, outdir, format_ids=None):
    """Validate and bundle each requested format

    All bundlers are validated before any are bundled. A failure only
    affects its own format. Each bundler gets its own (shallow) copy of
    `params` so writes by one are not seen by another.

    Args:
        params (dict): store
        outdir (str or py.path): where artifacts are written
        format_ids (iterable): formats to build [all supported]

    Returns:
        PKDict: format_id to `PKDict` with ``format_id``, ``state``
        (`COMPLETED` or `FAILED`), ``artifact``, and ``error``
    """
    if params is None:
        raise error.ConfigError(
            "Parameters map is None.",
            "Pass in a parameters map.",
        )
    b = (
        for_platform()
        if format_ids is None
        else tuple(find(f) for f in dict.fromkeys(format_ids))
    )
    if not b:
        raise error.UnsupportedPlatform(
            "No bundlers are supported on this platform.",
            "Request a format explicitly.",
        )
    r = PKDict()
    v = []
    for x in b:
        p = PKDict(params)
        try:
            x.validate(p)
            v.append((x, p))
        except Exception as e:
            r[x.format_id] = _failed(x, e)
    for x, p in v:
        try:
            r[x.format_id] = PKDict(
                format_id=x.format_id,
                state=COMPLETED,
                artifact=x.bundle(p, outdir),
                error=None,
            )
        except Exception as e:
            r[x.format_id] = _failed(x, e)
    return PKDict((x.format_id, r[x.format_id]) for x in b)


def _failed(bundler, exc):
    if isinstance(exc, error.Error):
        pkdlog("{}: {}", bundler.format_id, exc)
    else:
        pkdlog("{}: {} {}", bundler.format_id, exc, pkdexc())
    return PKDict(
        format_id=bundler.format_id,
        state=FAILED,
        artifact=None,
        error=exc,
    )
