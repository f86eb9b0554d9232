"""Checkpoint configuration files and run input/output payloads."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, cast

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from extractpoints import logger
from extractpoints.exceptions import CheckpointStoreError
from extractpoints.typing.models import CheckpointConfig, Content, Image, OcrOutput

if TYPE_CHECKING:
    from collections.abc import Sequence

_CHECKPOINT_FILE_VERSION = 1
_CHECKPOINT_SUFFIX = ".checkpoint.json"

_IMAGES_ADAPTER = TypeAdapter(list[Image])
_OCR_OUTPUTS_ADAPTER = TypeAdapter(list[OcrOutput])
_CONTENTS_ADAPTER = TypeAdapter(list[Content])


class CheckpointStore(BaseModel):
    """Filesystem store of checkpoint configurations, one file per form type."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    root: Path = Field(description="Configuration directory root.")

    def model_post_init(self, __context: object, /) -> None:
        """Ensure the configuration directory exists after model initialization.

        Args:
            __context (object): Pydantic model context.
        """
        self.root.mkdir(parents=True, exist_ok=True)

    def checkpoint_path(self, form_type_id: str) -> Path:
        """Build the configuration path of a form type.

        Args:
            form_type_id (str): Form type identifier.

        Returns:
            Path: Configuration file path.
        """
        safe_id = re.sub(r"[^A-Za-z0-9._-]+", "-", form_type_id).strip("-")
        if not safe_id:
            safe_id = "checkpoint"
        return self.root / f"{safe_id}{_CHECKPOINT_SUFFIX}"

    @staticmethod
    def load(path: Path) -> CheckpointConfig:
        """Load a checkpoint configuration file.

        Args:
            path (Path): Configuration file path.

        Raises:
            CheckpointStoreError: If the file is missing or its payload is invalid.

        Returns:
            CheckpointConfig: Loaded configuration.
        """
        _validate_checkpoint_file_path(path)
        payload = _read_json(path)
        try:
            return CheckpointConfig.model_validate(_unwrap_checkpoint_payload(payload))
        except ValidationError as exc:
            raise CheckpointStoreError(message=f"Invalid checkpoint configuration {path}: {exc}") from exc

    def save(self, checkpoint: CheckpointConfig) -> Path:
        """Persist a checkpoint configuration.

        Args:
            checkpoint (CheckpointConfig): Configuration to store.

        Returns:
            Path: Written file path.
        """
        path = self.checkpoint_path(checkpoint.form_type_id)
        envelope = {
            "checkpoint_file_version": _CHECKPOINT_FILE_VERSION,
            "checkpoint": checkpoint.model_dump(mode="json", by_alias=True),
        }
        path.write_text(json.dumps(envelope, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Checkpoint saved", extra={"checkpoint_path": str(path)})
        return path

    def list_checkpoints(self) -> list[Path]:
        """List stored configuration files.

        Returns:
            list[Path]: Configuration files, sorted by name.
        """
        return sorted(self.root.glob(f"*{_CHECKPOINT_SUFFIX}"))

    def find(self, form_type_id: str) -> CheckpointConfig | None:
        """Find the configuration of a form type.

        Args:
            form_type_id (str): Form type identifier.

        Returns:
            CheckpointConfig | None: Matching configuration, or None.
        """
        for path in self.list_checkpoints():
            checkpoint = self.load(path)
            if checkpoint.form_type_id == form_type_id:
                return checkpoint
        return None


def load_images(path: Path) -> list[Image]:
    """Load classified images from a JSON array file.

    Args:
        path (Path): JSON file path.

    Raises:
        CheckpointStoreError: If the payload is not a valid image list.

    Returns:
        list[Image]: Images in file order.
    """
    try:
        return _IMAGES_ADAPTER.validate_python(_read_json(path))
    except ValidationError as exc:
        raise CheckpointStoreError(message=f"Invalid image list {path}: {exc}") from exc


def load_ocr_outputs(path: Path) -> list[OcrOutput]:
    """Load OCR results from a JSON array file.

    Args:
        path (Path): JSON file path.

    Raises:
        CheckpointStoreError: If the payload is not a valid OCR result list.

    Returns:
        list[OcrOutput]: OCR results in file order.
    """
    try:
        return _OCR_OUTPUTS_ADAPTER.validate_python(_read_json(path))
    except ValidationError as exc:
        raise CheckpointStoreError(message=f"Invalid OCR result list {path}: {exc}") from exc


def persist_contents(contents: Sequence[Content], path: Path) -> None:
    """Persist extraction contents as JSON.

    Args:
        contents (Sequence[Content]): Contents in configuration order.
        path (Path): Output path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = _CONTENTS_ADAPTER.dump_json(list(contents), indent=2, by_alias=True)
    path.write_bytes(payload)


def _read_json(path: Path) -> object:
    """Read a JSON file.

    Args:
        path (Path): JSON file path.

    Raises:
        CheckpointStoreError: If the file cannot be read or decoded.

    Returns:
        object: Decoded payload.
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CheckpointStoreError(message=f"Cannot read JSON file {path}: {exc}") from exc


def _unwrap_checkpoint_payload(payload: object) -> dict[str, object]:
    """Return the configuration object, with or without its file envelope.

    Args:
        payload (object): Raw JSON payload.

    Raises:
        CheckpointStoreError: If payload is not a JSON object.

    Returns:
        dict[str, object]: Configuration object payload.
    """
    if not isinstance(payload, dict):
        raise CheckpointStoreError(message="Checkpoint payload must be a JSON object")

    payload_obj = cast("dict[str, object]", payload)
    embedded = payload_obj.get("checkpoint")
    if isinstance(embedded, dict):
        return cast("dict[str, object]", embedded)
    return payload_obj


def _validate_checkpoint_file_path(path: Path) -> None:
    """Validate checkpoint file path before loading.

    Args:
        path (Path): Configuration file path.

    Raises:
        CheckpointStoreError: If path is not a `pathlib.Path` or not an existing JSON file.
    """
    if not isinstance(path, Path):
        raise CheckpointStoreError(message=f"Checkpoint path must be a pathlib.Path instance, got: {type(path)!r}")
    if not path.is_file():
        raise CheckpointStoreError(message=f"Checkpoint path is not a file: {path}")
    if path.suffix != ".json":
        raise CheckpointStoreError(message=f"Checkpoint path must be a JSON file: {path}")
