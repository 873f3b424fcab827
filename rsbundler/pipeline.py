"""Lifecycle shared by all bundlers

A bundling operation is validated by the caller (see `execute`) before
`run` creates any files. `run` then:

1. creates the output directory and the bundler's working directory,
2. calls the bundler's `stage`, `render`, and `invoke` hooks in order,
3. returns the newest file in the output directory with the bundler's
   extension.

The working directory is always removed, even when a stage fails,
unless the ``retain_work_dir`` param is set, in which case its location
is logged and the caller owns it.

A `Run` is passed to every hook. It holds the store, the directories,
and the logging methods for the operation. One store must only be used
by one operation at a time.

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkio
from pykern import pkjinja
from pykern import pkresource
from pykern import pksubprocess
from pykern.pkcollections import PKDict
from pykern.pkdebug import pkdc, pkdexc, pkdlog
from rsbundler import error
from rsbundler import standard
import contextlib
import errno
import jinja2
import os
import packaging.version
import re
import shutil
import subprocess

#: How to find a version in the output of ``<tool> --version``
_VERSION_RE = re.compile(r" (\d+\.\d+)")

_ROOT_PACKAGE = __name__.split(".")[0]


class Run(PKDict):
    """State of one bundling operation

    Hooks may add attributes (e.g. ``root_dir``) for later stages.

    Attributes:
        bundler (BundlerBase): which format is being built
        config_files (list): rendered files, saved when verbose
        is_verbose (bool): value of the verbose param
        outdir (py.path): where the artifact is written
        params (dict): store
        retain_work_dir (bool): keep `work_dir` after the operation
        work_dir (py.path): owned by this operation
    """

    def log(self, fmt, *args, **kwargs):
        """Permanent message prefixed by the format id"""
        pkdlog("{}: " + fmt, self.bundler.format_id, *args, **kwargs)

    def verbose(self, fmt, *args, **kwargs):
        """Message output only when verbose (or pkdc is on)"""
        (pkdlog if self.is_verbose else pkdc)(
            "{}: " + fmt, self.bundler.format_id, *args, **kwargs
        )


def execute(bundler, params, outdir):
    """Validate `params` and then `run`

    Args:
        bundler (BundlerBase): format to build
        params (dict): store
        outdir (str or py.path): where the artifact is written

    Returns:
        py.path: artifact
    """
    bundler.validate(params)
    return run(bundler, params, outdir)


def newest_artifact(outdir, ext):
    """Most recently modified file in `outdir` ending in `ext`

    Files from previous runs may share the directory. With coarse
    file system clocks an older file could still be selected.

    Args:
        outdir (py.path): directory to search
        ext (str): suffix including dot, e.g. ``.rpm``

    Returns:
        py.path: artifact
    """
    r = [
        p
        for p in pkio.sorted_glob(outdir.join("*" + ext), key="mtime")
        if p.check(file=True)
    ]
    if not r:
        raise IOError(errno.ENOENT, f"no artifact with ext={ext} found", str(outdir))
    return r[-1]


def render_template(run, target, resource, description, data, prefix=None):
    """Render a template to `target`

    A file named ``basename(target)`` in ``<resources_root>/<prefix>`` overrides
    the built-in ``package_data/<prefix>/<resource>.jinja``. Every token used
    by the template must be in `data`.

    Args:
        run (Run): operation
        target (py.path): output file
        resource (str): built-in template name without `pkjinja.RESOURCE_SUFFIX`
        description (str): for messages
        data (dict): token values
        prefix (str): subdirectory of templates [bundler.resource_prefix]

    Returns:
        py.path: target
    """
    if prefix is None:
        prefix = run.bundler.resource_prefix
    t = _override(run, prefix, target.basename)
    if t:
        run.verbose("Using custom package resource {} (loaded from {})", description, t)
    else:
        run.verbose(
            "Using default package resource {} (add {} to the resources root to customize)",
            description,
            target.basename,
        )
        t = pkresource.filename(
            _join(prefix, resource + pkjinja.RESOURCE_SUFFIX),
            packages=[_ROOT_PACKAGE],
        )
    try:
        pkjinja.render_file(t, data, output=target, strict_undefined=True)
    except jinja2.UndefinedError as e:
        raise error.ConfigError(
            f"Template={t} for {description} uses an unknown token: {e}",
            f"Only use these tokens: {', '.join(sorted(data.keys()))}",
        ) from e
    run.config_files.append(target)
    return target


def run(bundler, params, outdir):
    """Stage, render and invoke the native tool

    `params` must have been validated.

    Args:
        bundler (BundlerBase): format to build
        params (dict): store
        outdir (str or py.path): where the artifact is written

    Returns:
        py.path: artifact
    """
    r = Run(
        bundler=bundler,
        config_files=[],
        is_verbose=standard.VERBOSE.fetch_from(params),
        params=params,
        retain_work_dir=standard.RETAIN_WORK_DIR.fetch_from(params),
    )
    # params are resolved before any directory is created
    r.pkupdate(
        outdir=_outdir(outdir),
        work_dir=bundler.work_dir(params),
    )
    with _work_dir(r):
        bundler.stage(r)
        bundler.render(r)
        bundler.invoke(r)
        res = newest_artifact(r.outdir, bundler.artifact_ext)
    r.log("Package ({}) saved to: {}", bundler.artifact_ext, res)
    return res


def run_tool(run, cmd):
    """Run a native packaging tool

    Output is captured in the working directory and logged when
    verbose. There is no timeout.

    Args:
        run (Run): operation
        cmd (list): command and args, may contain paths
    """
    c = [str(x) for x in cmd]
    o = run.work_dir.join(os.path.basename(c[0]) + ".log")
    try:
        pksubprocess.check_call_with_signals(c, output=str(o), msg=run.verbose)
    except RuntimeError as e:
        raise error.NativeToolError(c, _read_output(o), str(e)) from e
    finally:
        if run.is_verbose:
            run.log("{} output:\n{}", c[0], _read_output(o))


def save_config_files(run):
    """Copy rendered files to ``config_root`` for customization

    Args:
        run (Run): operation
    """
    if not run.config_files:
        return
    d = standard.CONFIG_ROOT.fetch_from(run.params)
    if run.bundler.resource_prefix:
        d = d.join(run.bundler.resource_prefix)
    pkio.mkdir_parent(d)
    for f in run.config_files:
        if f.check(file=True):
            f.copy(d.join(f.basename))
    run.log("Config files are saved to {}. Use them to customize package.", d)


def template_str(value, sep="\n"):
    """Convert a resolved value to template text

    Args:
        value (object): None, bool, list, tuple, or anything with `str`
        sep (str): joins sequences

    Returns:
        str: text (empty for None)
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return sep.join(template_str(v, sep) for v in value)
    return str(value)


def test_tool(tool, min_version):
    """Is `tool` installed at `min_version` or newer?

    The version is the first ``major.minor`` in ``<tool> --version``.

    Args:
        tool (str): program name
        min_version (str): minimum version or None if only presence matters

    Returns:
        bool: True if usable
    """
    try:
        if min_version is None:
            return shutil.which(tool) is not None
        p = subprocess.run(
            [tool, "--version"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
        m = _VERSION_RE.search(p.stdout)
        if not m:
            pkdc("tool={} no version in output={}", tool, p.stdout)
            return False
        return packaging.version.Version(m.group(1)) >= packaging.version.Version(
            str(min_version)
        )
    except Exception as e:
        pkdlog("Test for tool={} failed: {}", tool, e)
        return False


def validate_tools(bundler):
    """Verify each of `bundler.tools` is usable

    Args:
        bundler (BundlerBase): declares ``tools``
    """
    for t, v in bundler.tools:
        if not test_tool(t, v):
            raise error.UnsupportedPlatform(
                f"Can not find {t}{'' if v is None else ' ' + str(v) + ' or newer'}.",
                f"Install packages needed to build {bundler.format_id} packages.",
            )


def _join(*parts):
    return "/".join(p for p in parts if p)


def _outdir(outdir):
    d = pkio.mkdir_parent(outdir)
    if not os.access(str(d), os.W_OK):
        raise IOError(errno.EACCES, "Output directory is not writable", str(d))
    return d


def _override(run, prefix, basename):
    r = standard.RESOURCES_ROOT.fetch_from(run.params)
    if not r:
        return None
    p = r.join(prefix, basename) if prefix else r.join(basename)
    return p if p.check(file=True) else None


def _read_output(path):
    try:
        return pkio.read_text(path)
    except Exception as e:
        if pkio.exception_is_not_found(e):
            return ""
        raise


@contextlib.contextmanager
def _work_dir(run):
    d = run.work_dir
    # leftovers from a retained run
    pkio.unchecked_remove(d)
    pkio.mkdir_parent(d)
    try:
        yield d
    finally:
        if run.is_verbose:
            try:
                save_config_files(run)
            except OSError:
                pkdlog("unable to save config files: {}", pkdexc())
        if run.retain_work_dir:
            run.log("Kept working directory for debug: {}", d)
        else:
            pkio.unchecked_remove(d)
