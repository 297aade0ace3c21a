# osclient.glance - Glance v2 image service

from osclient.glance.api import GlanceApi, ImageApi
from osclient.glance.models import ContainerFormat, DiskFormat, Image, ImageStatus
from osclient.glance.options import CreateImageOptions, ListImageOptions, Operation, UpdateImageOptions

__all__ = [
    "ContainerFormat",
    "CreateImageOptions",
    "DiskFormat",
    "GlanceApi",
    "Image",
    "ImageApi",
    "ImageStatus",
    "ListImageOptions",
    "Operation",
    "UpdateImageOptions",
]
