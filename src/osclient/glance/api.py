from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from osclient.errors import ResourceNotFoundError
from osclient.glance.models import Image, image_from_json
from osclient.glance.options import (
    JSON_PATCH_MEDIA_TYPE,
    CreateImageOptions,
    ListImageOptions,
    UpdateImageOptions,
)
from osclient.http import ApiClient, Request
from osclient.pagination import Page, PagedSequence, decode_page, fetch_or_empty, paged
from osclient.zones import ZonedApi


log = logging.getLogger(__name__)

IMAGES_PATH = "/v2/images"


# -------- Request builders --------

def list_images_request(options: ListImageOptions) -> Request:
    return Request("GET", IMAGES_PATH, params=options.to_params())


def get_image_request(image_id: str) -> Request:
    return Request("GET", f"{IMAGES_PATH}/{image_id}")


def create_image_request(options: CreateImageOptions) -> Request:
    return Request("POST", IMAGES_PATH, json=options.to_json())


def upload_image_request(image_id: str, data: bytes) -> Request:
    return Request(
        "PUT",
        f"{IMAGES_PATH}/{image_id}/file",
        content=data,
        headers={"Content-Type": "application/octet-stream"},
    )


def download_image_request(image_id: str) -> Request:
    return Request("GET", f"{IMAGES_PATH}/{image_id}/file", headers={"Accept": "application/octet-stream"})


def update_image_request(image_id: str, options: UpdateImageOptions) -> Request:
    return Request(
        "PATCH",
        f"{IMAGES_PATH}/{image_id}",
        json=options.to_json(),
        headers={"Content-Type": JSON_PATCH_MEDIA_TYPE},
    )


def delete_image_request(image_id: str) -> Request:
    return Request("DELETE", f"{IMAGES_PATH}/{image_id}")


# -------- Operations --------

@dataclass
class ImageApi:
    client: ApiClient

    def _fetch_page(self, options: ListImageOptions) -> Page[Image]:
        body = self.client.send_json(list_images_request(options))
        return decode_page(body, items_key="images", item_decoder=image_from_json)

    def list(self, options: ListImageOptions | None = None) -> PagedSequence[Image]:
        """All images matching `options`, fetched page by page as the result is iterated."""
        return paged(self._fetch_page, options or ListImageOptions())

    def list_page(self, options: ListImageOptions | None = None) -> Page[Image]:
        """Exactly one page; pass `options.with_marker(page.marker)` to get the next."""
        return fetch_or_empty(self._fetch_page, options or ListImageOptions())

    def get(self, image_id: str) -> Image | None:
        try:
            body = self.client.send_json(get_image_request(image_id))
        except ResourceNotFoundError:
            return None
        return image_from_json(body)

    def create(self, options: CreateImageOptions) -> Image:
        image = image_from_json(self.client.send_json(create_image_request(options)))
        log.info("IMAGE_CREATED id=%s name=%s", image.id, image.name)
        return image

    def upload(self, image_id: str, data: bytes | Iterable[bytes]) -> None:
        """Store binary data for an image record that already exists."""
        payload = data if isinstance(data, bytes) else b"".join(data)
        self.client.send(upload_image_request(image_id, payload))

    def download(self, image_id: str) -> bytes | None:
        try:
            resp = self.client.send(download_image_request(image_id))
        except ResourceNotFoundError:
            return None
        return resp.content

    def update(self, image_id: str, options: UpdateImageOptions) -> Image:
        # Unlike get/delete, a missing image here is an error for the caller.
        return image_from_json(self.client.send_json(update_image_request(image_id, options)))

    def delete(self, image_id: str) -> bool:
        try:
            self.client.send(delete_image_request(image_id))
        except ResourceNotFoundError:
            return False
        log.info("IMAGE_DELETED id=%s", image_id)
        return True


class GlanceApi(ZonedApi):
    service = "glance"

    def image_api(self, zone: str | None = None) -> ImageApi:
        return ImageApi(self.client_for_zone(zone))
