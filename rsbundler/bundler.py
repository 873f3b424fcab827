"""Base class for bundlers

A bundler converts an application directory into one package format.
Subclasses set the class attributes and implement `invoke` (and usually
`stage` and `render`). See `rsbundler.pipeline` for the order in which
the hooks are called.

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from rsbundler import error
from rsbundler import pipeline
from rsbundler import stage
from rsbundler import standard

#: `BundlerBase.bundle_type` for a self-contained application tree
IMAGE = "IMAGE"

#: `BundlerBase.bundle_type` for a platform installer
INSTALLER = "INSTALLER"


class BundlerBase:
    """Contract between the registry, the pipeline and a format

    Bundlers hold no per-run state so one instance may be reused
    for many operations.

    Attributes:
        artifact_ext (str): suffix of the artifact, e.g. ``.rpm``
        bundle_type (str): `IMAGE` or `INSTALLER`
        description (str): displayable description
        format_id (str): unique id, e.g. ``rpm``
        name (str): displayable name
        resource_prefix (str): subdirectory of ``package_data`` with templates
        tools (tuple): pairs of (program, minimum version or None)
    """

    artifact_ext = None
    bundle_type = INSTALLER
    description = None
    format_id = None
    name = None
    resource_prefix = ""
    tools = ()

    def bundle(self, params, outdir):
        """Build the artifact from validated `params`

        Args:
            params (dict): store
            outdir (str or py.path): where to write the artifact

        Returns:
            py.path: artifact
        """
        return pipeline.run(self, params, outdir)

    def execute(self, params, outdir):
        """`validate` then `bundle`

        Args:
            params (dict): store
            outdir (str or py.path): where to write the artifact

        Returns:
            py.path: artifact
        """
        return pipeline.execute(self, params, outdir)

    def invoke(self, run):
        """Run the native tool which writes the artifact to ``run.outdir``

        Args:
            run (pipeline.Run): operation
        """
        raise NotImplementedError(f"{type(self).__name__}.invoke")

    def is_supported(self):
        """Can this format be built on this host?

        Returns:
            bool: True if supported
        """
        return True

    def params(self):
        """Params this bundler reads

        Returns:
            tuple: `ParamInfo` instances
        """
        return standard.common_params()

    def render(self, run):
        """Render templates into the working directory

        Args:
            run (pipeline.Run): operation
        """
        pass

    def stage(self, run):
        """Copy the application image into the working directory

        Sets ``run.root_dir``.

        Args:
            run (pipeline.Run): operation
        """
        run.root_dir = stage.app_image(run, run.work_dir)

    def validate(self, params):
        """Check `params` and the host without side effects

        Parameter checks precede platform and tool checks. Every param
        returned by `params` is resolved so text that does not convert
        fails before any side effect.

        Args:
            params (dict): store

        Returns:
            bool: True (raises on failure)
        """
        if params is None:
            raise error.ConfigError(
                "Parameters map is None.",
                "Pass in a parameters map.",
            )
        stage.validate(params)
        self.validate_params(params)
        for x in self.params():
            x.fetch_from(params)
        if not self.is_supported():
            raise error.UnsupportedPlatform(
                f"{self.name} is not supported on this platform.",
                "Choose a format from rsbundler formats.",
            )
        pipeline.validate_tools(self)
        return True

    def validate_params(self, params):
        """Format specific parameter checks

        Args:
            params (dict): store
        """
        pass

    def work_dir(self, params):
        """Where this bundler stages and renders

        The directory is deterministic so concurrent operations
        need distinct build roots.

        Args:
            params (dict): store

        Returns:
            py.path: working directory (not created)
        """
        return standard.IMAGES_ROOT.fetch_from(params).join(f"{self.format_id}.image")


def validate_system_wide(params, is_service=False):
    """Services must be installed for all users

    ``system_wide=None`` counts as system wide.

    Args:
        params (dict): store
        is_service (bool): format only builds services [False]
    """
    if not (is_service or standard.SERVICE_HINT.fetch_from(params)):
        return
    if standard.SYSTEM_WIDE.fetch_from(params) is False:
        raise error.ConfigError(
            "Bundler doesn't support per-user daemons.",
            "Make sure that the system wide hint is set to true.",
        )
