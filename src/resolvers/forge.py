"""Forge metadata resolver: promotions + build lists -> DerivedForgeIndex.

The index is built in one sequential pass. A build's position in the upstream
array is meaningful: the last build listed for a Minecraft version is its
latest, whatever its build number.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Optional, Set, Tuple

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from errors import DataIntegrityFault, UnparseableMetadata
from models.forge import DerivedForgeIndex, ForgeEntry, ForgeFile, ForgeMcVersionInfo

logger = logging.getLogger(__name__)

PROMOTION_KEY_RE = re.compile(r"(?P<mc>[^-]+)-(?P<promotion>[A-Za-z]+)(-(?P<branch>[a-zA-Z0-9.]+))?")
LONG_VERSION_RE = re.compile(
    r"(?P<mc>[0-9a-zA-Z_.]+)-(?P<ver>[0-9.]+\.(?P<build>[0-9]+))(-(?P<branch>[a-zA-Z0-9.]+))?"
)
_NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]")

PROMOTION_RECOMMENDED = "recommended"
PROMOTION_LATEST = "latest"

# long_version -> files manifest ({"classifiers": {classifier: {extension: hash}}})
FilesProvider = Callable[[str], Dict[str, Any]]


def parse_promotions(promos: Dict[str, Any]) -> Set[str]:
    """Collect the short versions promoted as ``recommended``.

    Keys that do not match ``{mc}-{kind}[-{branch}]``, carry a branch, or are
    ``latest`` promotions are skipped; latest is always recomputed locally.

    Raises:
        UnparseableMetadata: A key uses a promotion kind we do not know.
    """
    if not isinstance(promos, dict):
        raise UnparseableMetadata("promotions 'promos' must be a JSON object")
    recommended: Set[str] = set()
    for key, short_version in promos.items():
        match = PROMOTION_KEY_RE.fullmatch(key)
        if match is None:
            logger.info("Skipping promo key %s, key was not in the right format", key)
            continue
        if match.group("branch"):
            logger.info("Skipping promo key %s, it has a branch", key)
            continue
        kind = match.group("promotion")
        if kind == PROMOTION_LATEST:
            continue
        if kind != PROMOTION_RECOMMENDED:
            raise UnparseableMetadata(f"Unknown promotion type: {key}")
        if not isinstance(short_version, str):
            logger.info("Skipping promo key %s, value is not a version string", key)
            continue
        logger.info("Adding recommendation for version %s", short_version)
        recommended.add(short_version)
    return recommended


def parse_long_version(long_version: str) -> Tuple[str, str, int, Optional[str]]:
    """Split ``{mc}-{version}[-{branch}]`` into (mc, version, build, branch).

    Raises:
        UnparseableMetadata: The string does not follow the build grammar.
    """
    match = LONG_VERSION_RE.fullmatch(long_version) if isinstance(long_version, str) else None
    if match is None:
        raise UnparseableMetadata(f"Version {long_version!r} doesn't match the Forge version format")
    return match.group("mc"), match.group("ver"), int(match.group("build")), match.group("branch")


def normalize_hash(raw: str) -> str:
    return _NON_ALNUM_RE.sub("", raw).lower()


def select_files(long_version: str, manifest: Dict[str, Any]) -> Dict[str, ForgeFile]:
    """Pick one file per classifier from a build's files manifest.

    For each classifier the extensions are scanned newest-first (reverse
    insertion order) and the first one with a string hash is taken. Hashes
    are stripped of punctuation; a classifier whose hash is not 32 characters
    long afterwards is dropped with a warning.

    Raises:
        DataIntegrityFault: Two classifiers normalize to the same name.
        UnparseableMetadata: The manifest is not shaped as expected.
    """
    if not isinstance(manifest, dict) or not isinstance(manifest.get("classifiers"), dict):
        raise UnparseableMetadata(f"{long_version}: files manifest has no 'classifiers' object")

    files: Dict[str, ForgeFile] = {}
    seen: Set[str] = set()
    for raw_classifier, extensions in manifest["classifiers"].items():
        if not isinstance(extensions, dict):
            raise UnparseableMetadata(f"{long_version}: classifier {raw_classifier} is not an object")
        classifier = raw_classifier.strip().lower()
        if classifier in seen:
            raise DataIntegrityFault(f"{long_version}: Duplicate classifier {classifier}")
        seen.add(classifier)

        chosen = None
        for extension, raw_hash in reversed(list(extensions.items())):
            if isinstance(raw_hash, str):
                chosen = (extension, raw_hash)
                break
            logger.warning("%s: Skipping missing hash for %s", long_version, extension)
        if chosen is None:
            continue

        extension, raw_hash = chosen
        file_hash = normalize_hash(raw_hash)
        if len(file_hash) != Constants.FORGE_HASH_LENGTH:
            logger.warning("%s: Skipping invalid hash for %s", long_version, extension)
            continue
        files[classifier] = ForgeFile(classifier=classifier, hash=file_hash, extension=extension)
    return files


class ForgeResolver:
    """Builds the derived Forge index from promotions and per-mc build lists.

    Args:
        files_provider: Returns the files manifest for a long version; may
            fetch, and may raise FetchError, which aborts the run.
    """

    def __init__(self, files_provider: FilesProvider):
        self.files_provider = files_provider

    def resolve(self, promotions: Dict[str, Any], builds: Dict[str, Any]) -> DerivedForgeIndex:
        """Resolve a full derived index.

        Args:
            promotions: The promotions document (``{"promos": {...}}``).
            builds: Minecraft version -> ordered list of long versions.

        Raises:
            UnparseableMetadata: Unknown promotion kind or malformed build list.
            DataIntegrityFault: A build's mc token disagrees with its list, or a
                build has duplicate classifiers.
        """
        if not isinstance(promotions, dict):
            raise UnparseableMetadata("promotions document must be a JSON object")
        logger.info("Processing promotions...")
        recommended = parse_promotions(promotions.get("promos", {}))

        if not isinstance(builds, dict):
            raise UnparseableMetadata("Forge maven metadata must be a JSON object")
        index = DerivedForgeIndex()
        for mc_version, long_versions in builds.items():
            if not isinstance(long_versions, list):
                raise UnparseableMetadata(
                    f"Invalid metadata format while processing version {mc_version} "
                    "(MC version value was not an array)"
                )
            for long_version in long_versions:
                self._add_build(index, recommended, mc_version, long_version)

        logger.info("Post-processing promotions...")
        self._mark_latest(index)
        return index

    def _add_build(self, index: DerivedForgeIndex, recommended: Set[str], mc_version: str, long_version: Any) -> None:
        if not isinstance(long_version, str):
            raise UnparseableMetadata(
                f"Invalid metadata format while processing version {mc_version} (Forge version is not a string)"
            )
        mc, version, build, branch = parse_long_version(long_version)
        if mc != mc_version:
            raise DataIntegrityFault(
                f"Invalid metadata while processing version {mc_version} "
                f"(MC version doesn't match in {long_version})"
            )

        logger.info("Loading file manifest for MC version %s, Forge version %s", mc_version, long_version)
        files = select_files(long_version, self.files_provider(long_version))

        entry = ForgeEntry(
            long_version=long_version,
            mc_version=mc_version,
            version=version,
            build=build,
            branch=branch,
            latest=False,
            recommended=version in recommended,
            files=files,
        )
        index.versions[long_version] = entry
        info = index.mc_versions.setdefault(mc_version, ForgeMcVersionInfo())
        info.versions.append(long_version)
        if entry.recommended:
            info.recommended = long_version

        if is_debug_enabled(logger):
            logger.debug(
                "Forge build indexed",
                extra=extra_context(
                    event="decision",
                    component="forge_resolver",
                    action="add_build",
                    target=long_version,
                    recommended=entry.recommended,
                    file_count=len(files),
                )
            )

    @staticmethod
    def _mark_latest(index: DerivedForgeIndex) -> None:
        for mc_version, info in index.mc_versions.items():
            if not info.versions:
                continue
            latest = info.versions[-1]
            info.latest = latest
            index.versions[latest].latest = True
            logger.info("Added %s as latest version for MC version %s", latest, mc_version)
