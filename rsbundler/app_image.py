"""Standalone application image archived with tar

:copyright: Copyright (c) 2026 RadiaSoft LLC.  All Rights Reserved.
:license: http://www.apache.org/licenses/LICENSE-2.0.html
"""

from rsbundler import bundler
from rsbundler import pipeline
from rsbundler import standard


class Bundler(bundler.BundlerBase):
    artifact_ext = ".tar.gz"
    bundle_type = bundler.IMAGE
    description = "Application image with launcher in a compressed tar archive."
    format_id = "tgz"
    name = "Application Image"
    tools = (("tar", "1.0"),)

    def invoke(self, run):
        p = run.params
        pipeline.run_tool(
            run,
            [
                "tar",
                "-czf",
                run.outdir.join(
                    "{}-{}{}".format(
                        standard.APP_FS_NAME.fetch_from(p),
                        standard.VERSION.fetch_from(p),
                        self.artifact_ext,
                    ),
                ),
                "-C",
                run.work_dir,
                run.root_dir.basename,
            ],
        )
