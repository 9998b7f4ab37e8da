"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    METADATA_ERROR = 3


class Sources(Enum):
    """Upstream metadata sources the updater knows how to mirror.

    Args:
        Enum (string): Source names accepted on the command line.
    """

    MOJANG = "mojang"
    FORGE = "forge"
    FABRIC = "fabric"
    LITELOADER = "liteloader"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    MOJANG_MANIFEST_URL = "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
    FORGE_MAVEN_METADATA_URL = "https://files.minecraftforge.net/net/minecraftforge/forge/maven-metadata.json"
    FORGE_PROMOTIONS_URL = "https://files.minecraftforge.net/net/minecraftforge/forge/promotions_slim.json"
    FORGE_FILE_MANIFEST_URL = "https://files.minecraftforge.net/net/minecraftforge/forge/{long_version}/meta.json"
    FORGE_MAVEN_BASE = "https://maven.minecraftforge.net/net/minecraftforge/forge"
    FABRIC_META_URL = "https://meta.fabricmc.net/v2/versions"
    FABRIC_LISTS = ["game", "loader", "intermediary"]
    FABRIC_JAR_COMPONENTS = ["intermediary", "loader"]
    FABRIC_MAVEN_BASE = "https://maven.fabricmc.net"
    LITELOADER_URL = "https://dl.liteloader.com/versions/versions.json"

    SUPPORTED_SOURCES = [
        Sources.MOJANG.value,
        Sources.FORGE.value,
        Sources.FABRIC.value,
        Sources.LITELOADER.value,
    ]
    GENERATE_TARGETS = ["minecraft"]

    MINECRAFT_UID = "net.minecraft"
    MINECRAFT_NAME = "Minecraft"

    # Newest launcher schema this tool writes; older files stay readable.
    MAX_MOJANG_SUPPORTED_VERSION = 21
    CURRENT_LAUNCHER_FORMAT_VERSION = 1
    MAX_SUPPORTED_COMPLIANCE_LEVEL = 1
    COMPLIANCE_TRAIT = "XR:Initial"

    # Minecraft versions whose Forge builds never shipped a usable installer.
    NON_INSTALLER_MC_VERSIONS = ["1.5.2"]
    FORGE_HASH_LENGTH = 32

    DEFAULT_UPSTREAM_DIR = "upstream"
    DEFAULT_LAUNCHER_DIR = "launcher"
    DEFAULT_STATIC_DIR = "static"
    LEGACY_OVERRIDES_FILE = "minecraft-legacy.json"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVEL_ENV = "LOADERMETA_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
    USER_AGENT = "loadermeta/0.1"
