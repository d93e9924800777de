"""Convert an Xcode project to the apple-generic versioning system.

After preparation the marketing version lives in the target's
Info.plist, where ``agvtool`` and the apple-generic versioning system
read and write it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from semver_py.project import info_plist, xcodeproj

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def prepare_versioning(
    path: Path | None = None,
    target: str | None = None,
    main_group: str | None = None,
) -> Path:
    """Prepare an Xcode project for apple-generic versioning.

    Args:
        path: Xcode project, or directory containing it
        target: Target to prepare; defaults to the first native target
        main_group: Folder holding the target's sources; defaults to the
            target name

    Returns:
        Path of the target's Info.plist
    """
    project = xcodeproj.find_xcodeproj(path)
    name = xcodeproj.target_name(project, target)
    current_version = xcodeproj.get_marketing_version(project, target)

    plist_file = xcodeproj.get_build_setting(project, "INFOPLIST_FILE", target)
    if not plist_file:
        plist_file = f"{main_group or name}/Info.plist"
    plist = xcodeproj.source_root(project) / plist_file.removeprefix("$(SRCROOT)/")

    info_plist.ensure_info_plist(plist)
    values = info_plist.read_info_plist(plist)
    for key in (info_plist.BUNDLE_VERSION_KEY, info_plist.SHORT_VERSION_KEY):
        value = values.get(key)
        # Values like $(MARKETING_VERSION) would dangle once the setting is removed
        if not value or str(value).startswith("$("):
            values[key] = current_version
    info_plist.write_info_plist(plist, values)

    xcodeproj.update_build_settings(
        project,
        target,
        values={"VERSIONING_SYSTEM": "apple-generic", "INFOPLIST_FILE": plist_file},
        remove=["MARKETING_VERSION", "GENERATE_INFOPLIST_FILE"],
    )
    logger.info("Prepared target %s for apple-generic versioning", name)
    return plist
