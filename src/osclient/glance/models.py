from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass, field
from typing import Any

from osclient.errors import MalformedResponseError
from osclient.models import Link, links_from_json, parse_timestamp, string_map, string_tuple


class _Lenient(enum.Enum):
    """Enum whose unknown wire values decode to UNRECOGNIZED instead of failing."""

    @classmethod
    def from_value(cls, value: Any):
        if value is None:
            return None
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls["UNRECOGNIZED"]


class ImageStatus(_Lenient):
    UNRECOGNIZED = "unrecognized"
    ACTIVE = "active"
    SAVING = "saving"
    QUEUED = "queued"
    KILLED = "killed"
    PENDING_DELETE = "pending_delete"
    DELETED = "deleted"


class ContainerFormat(_Lenient):
    UNRECOGNIZED = "unrecognized"
    AMI = "ami"
    ARI = "ari"
    AKI = "aki"
    BARE = "bare"
    OVF = "ovf"


class DiskFormat(_Lenient):
    UNRECOGNIZED = "unrecognized"
    AMI = "ami"
    ARI = "ari"
    AKI = "aki"
    VHD = "vhd"
    VMDK = "vmdk"
    RAW = "raw"
    QCOW2 = "qcow2"
    VDI = "vdi"
    ISO = "iso"


@dataclass(frozen=True)
class Image:
    id: str
    status: ImageStatus
    created_at: dt.datetime
    updated_at: dt.datetime
    name: str | None = None
    links: tuple[Link, ...] = ()
    visibility: str | None = None
    size: int | None = None
    checksum: str | None = None
    self_href: str | None = None
    file: str | None = None
    schema: str | None = None
    tags: tuple[str, ...] = ()
    deleted: bool = False
    container_format: ContainerFormat | None = None
    disk_format: DiskFormat | None = None
    min_disk: int = 0
    min_ram: int = 0
    owner: str | None = None
    deleted_at: dt.datetime | None = None
    is_public: bool = False
    protected: bool = False
    properties: dict[str, str] = field(default_factory=dict, hash=False)


def image_from_json(data: Any) -> Image:
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected an image object, got {type(data).__name__}")
    for key in ("id", "status", "created_at", "updated_at"):
        if data.get(key) is None:
            raise MalformedResponseError(f"Image is missing {key!r}: {data.get('id')}")

    size = data.get("size")
    try:
        return Image(
            id=str(data["id"]),
            name=data.get("name"),
            links=links_from_json(data.get("links")),
            status=ImageStatus.from_value(data["status"]),
            visibility=data.get("visibility"),
            size=int(size) if size is not None else None,
            checksum=data.get("checksum"),
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
            self_href=data.get("self"),
            file=data.get("file"),
            schema=data.get("schema"),
            tags=string_tuple(data.get("tags"), field="tags"),
            deleted=bool(data.get("deleted", False)),
            container_format=ContainerFormat.from_value(data.get("container_format")),
            disk_format=DiskFormat.from_value(data.get("disk_format")),
            min_disk=int(data.get("min_disk") or 0),
            min_ram=int(data.get("min_ram") or 0),
            owner=data.get("owner"),
            deleted_at=parse_timestamp(data.get("deleted_at")),
            is_public=bool(data.get("is_public", False)),
            protected=bool(data.get("protected", False)),
            properties=string_map(data.get("properties"), field="properties"),
        )
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Bad field in image {data.get('id')}: {e}") from e
