"""Build packages from the command line

To build every format supported on this host::

    $ rsbundler bundle build ~/src/myapp dist --name 'My App' --app-version 2.1

Options are passed as text and parsed by each param's converter, e.g.
``--system-wide false``.

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from pykern import pkcli
from rsbundler import error
from rsbundler import param
from rsbundler import registry
from rsbundler import standard
from rsbundler.bundle_params import BundleParams


def build(
    app_resources,
    outdir,
    app_version=None,
    build_root=None,
    category=None,
    description=None,
    formats=None,
    identifier=None,
    license_files=None,
    license_type=None,
    main_executable=None,
    name=None,
    resources_root=None,
    retain_work_dir=None,
    runtime=None,
    service=None,
    system_wide=None,
    title=None,
    vendor=None,
    verbose=None,
):
    """Create packages for `app_resources` in `outdir`

    Args:
        app_resources (str): directory containing the application
        outdir (str): where packages are written
        app_version (str): version of the application [1.0]
        build_root (str): where working directories are created
        category (str): application category
        description (str): longer description [name]
        formats (str): colon separated format ids [all supported]
        identifier (str): unique id [lower case name]
        license_files (str): colon separated files relative to `app_resources`
        license_type (str): e.g. Apache-2.0
        main_executable (str): program run by the launcher
        name (str): application name [basename of `app_resources`]
        resources_root (str): directory with template overrides
        retain_work_dir (str): keep working directories (bool)
        runtime (str): runtime directory to bundle
        service (str): install as a service (bool)
        system_wide (str): install for all users (bool)
        title (str): short summary [name]
        vendor (str): who distributes the application
        verbose (str): log tool output and save config files (bool)

    Returns:
        str: artifact or error for each format
    """
    b = BundleParams()
    b.set_app_resources(app_resources)
    b.set_category(category)
    b.set_description(description)
    b.set_identifier(identifier)
    b.set_license_type(license_type)
    b.set_name(name)
    b.set_title(title)
    b.set_vendor(vendor)
    b.set_version(app_version)
    for k, v in (
        (standard.BUILD_ROOT.key, build_root),
        (standard.LICENSE_FILE.key, license_files),
        (standard.MAIN_EXECUTABLE.key, main_executable),
        (standard.RESOURCES_ROOT.key, resources_root),
        (standard.RETAIN_WORK_DIR.key, retain_work_dir),
        (standard.SERVICE_HINT.key, service),
        (standard.SYSTEM_WIDE.key, system_wide),
        (standard.VERBOSE.key, verbose),
    ):
        b.put_unless_none(k, v)
    try:
        if runtime is not None:
            b.set_runtime(runtime)
        r = registry.run(
            b.params,
            outdir,
            format_ids=formats.split(":") if formats else None,
        )
    except error.Error as e:
        pkcli.command_error("{}", e)
    res = "\n".join(
        f"{k}: {v.artifact if v.state == registry.COMPLETED else v.error}"
        for k, v in r.items()
    )
    if any(v.state == registry.FAILED for v in r.values()):
        pkcli.command_error("{}", res)
    return res


def formats():
    """List formats which may be passed to `build`

    Returns:
        str: one line per format
    """
    return "\n".join(
        "{}: {} ({}){}".format(
            b.format_id,
            b.name,
            b.bundle_type,
            "" if b.is_supported() else " not supported on this platform",
        )
        for b in registry.bundlers()
    )


def params(format_id):
    """Describe the params of a format

    Args:
        format_id (str): see `formats`

    Returns:
        str: one line per param
    """
    try:
        b = registry.find(format_id)
    except error.Error as e:
        pkcli.command_error("{}", e)
    res = []
    for p in sorted(b.params(), key=lambda x: x.key):
        res.append(f"{p.key}: {p.name}. {p.description}")
        if isinstance(p, param.EnumeratedParam):
            c = sorted(p.displayable_keys())
            res.append(
                "    choices: " + ", ".join(f"{k}={p.value_for(k)}" for k in c),
            )
    return "\n".join(res)
