"""Configuration schemas for gvt.

Defines dataclasses for all configuration structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field


DEFAULT_CONTROL_DIR = ".gvt"
DEFAULT_INIT_MESSAGE = "GVT initialized."


@dataclass
class HistoryConfig:
    """Settings for the `history` listing."""
    default_limit: int | None = None  # None lists everything

    @classmethod
    def from_dict(cls, data: dict) -> HistoryConfig:
        """Create HistoryConfig from dictionary."""
        limit = data.get("defaultLimit")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            limit = None
        return cls(default_limit=limit)


@dataclass
class CopyConfig:
    """How files are copied into and out of version trees."""
    preserve_metadata: bool = True  # shutil.copy2 vs shutil.copyfile

    @classmethod
    def from_dict(cls, data: dict) -> CopyConfig:
        """Create CopyConfig from dictionary."""
        return cls(preserve_metadata=bool(data.get("preserveMetadata", True)))


@dataclass
class GvtConfig:
    """Main gvt configuration."""
    control_dir: str = DEFAULT_CONTROL_DIR
    init_message: str = DEFAULT_INIT_MESSAGE
    history: HistoryConfig = field(default_factory=HistoryConfig)
    copy: CopyConfig = field(default_factory=CopyConfig)

    @classmethod
    def from_dict(cls, data: dict) -> GvtConfig:
        """Create GvtConfig from dictionary.

        Unknown keys are ignored; malformed values fall back to defaults.
        """
        control_dir = data.get("controlDir", DEFAULT_CONTROL_DIR)
        if not _is_plain_name(control_dir):
            control_dir = DEFAULT_CONTROL_DIR

        init_message = data.get("initMessage", DEFAULT_INIT_MESSAGE)
        if not isinstance(init_message, str) or not init_message.strip():
            init_message = DEFAULT_INIT_MESSAGE

        history_data = data.get("history", {})
        copy_data = data.get("copy", {})

        return cls(
            control_dir=control_dir,
            init_message=init_message.strip(),
            history=HistoryConfig.from_dict(history_data if isinstance(history_data, dict) else {}),
            copy=CopyConfig.from_dict(copy_data if isinstance(copy_data, dict) else {}),
        )


def _is_plain_name(value: object) -> bool:
    # The control directory must be a single path component under the root
    if not isinstance(value, str) or not value.strip():
        return False
    return value not in (".", "..") and "/" not in value and "\\" not in value
