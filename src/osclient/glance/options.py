from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from osclient.glance.models import ContainerFormat, DiskFormat, ImageStatus
from osclient.options import PaginationOptions


JSON_PATCH_MEDIA_TYPE = "application/openstack-images-v2.0-json-patch"


@dataclass(frozen=True)
class ListImageOptions(PaginationOptions):
    name: str | None = None
    visibility: str | None = None
    member_status: str | None = None
    owner: str | None = None
    status: ImageStatus | None = None
    size_min: int | None = None
    size_max: int | None = None
    container_format: ContainerFormat | None = None
    disk_format: DiskFormat | None = None
    sort_key: str | None = None
    sort_dir: str | None = None
    tag: str | None = None


@dataclass(frozen=True)
class CreateImageOptions:
    name: str | None = None
    visibility: str | None = None
    tags: tuple[str, ...] | None = None
    disk_format: DiskFormat | None = None
    container_format: ContainerFormat | None = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.name is not None:
            body["name"] = self.name
        if self.visibility is not None:
            body["visibility"] = self.visibility
        if self.tags is not None:
            body["tags"] = list(self.tags)
        if self.disk_format is not None:
            body["disk_format"] = self.disk_format.value
        if self.container_format is not None:
            body["container_format"] = self.container_format.value
        return body


class Operation(enum.Enum):
    ADD = "add"
    REPLACE = "replace"
    REMOVE = "remove"


@dataclass(frozen=True)
class PatchOperation:
    op: Operation
    path: str
    value: str | None = None

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {"op": self.op.value, "path": self.path}
        if self.op is not Operation.REMOVE or self.value is not None:
            body["value"] = self.value
        return body


@dataclass(frozen=True)
class UpdateImageOptions:
    """An ordered list of JSON-patch operations against one image.

    Each method returns a new options object with the operation appended:

        UpdateImageOptions().name(Operation.REPLACE, "new-name").property(Operation.ADD, "os_distro", "ubuntu")
    """

    operations: tuple[PatchOperation, ...] = field(default=())

    def _with(self, op: Operation, path: str, value: str | None) -> "UpdateImageOptions":
        return UpdateImageOptions(operations=self.operations + (PatchOperation(op, path, value),))

    def name(self, op: Operation, name: str | None) -> "UpdateImageOptions":
        return self._with(op, "/name", name)

    def visibility(self, op: Operation, visibility: str | None) -> "UpdateImageOptions":
        return self._with(op, "/visibility", visibility)

    def property(self, op: Operation, path: str, value: str | None) -> "UpdateImageOptions":
        return self._with(op, "/" + path.lstrip("/"), value)

    def to_json(self) -> list[dict[str, Any]]:
        return [o.to_json() for o in self.operations]
