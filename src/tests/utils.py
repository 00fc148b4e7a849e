"""Shared helpers for tests (account creation, session clients, fake Redis, images)."""

from __future__ import annotations

import io
import struct
import zlib
from typing import Dict
from unittest import mock

from django.conf import settings
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from PIL import Image
from rest_framework.test import APIClient

from authentication.models import Role, User
from authentication.services import TokenService


class FakeRedis:
    """Minimal Redis stub supporting the commands used by TokenService."""

    def __init__(self):
        self._store: Dict[str, str] = {}

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)

    def keys(self):
        return list(self._store)


class BrokenRedis:
    """Redis stub whose every command fails like an unreachable server."""

    def setex(self, *args, **kwargs):
        raise ConnectionError("redis down")

    def get(self, *args, **kwargs):
        raise ConnectionError("redis down")


class CMSTestCase(TestCase):
    """TestCase with Redis patched to an in-memory fake and a clean throttle cache."""

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        cls.fake_redis = FakeRedis()
        cls.patchers = [
            mock.patch("core.redis_client.get_redis_client", return_value=cls.fake_redis),
            mock.patch("authentication.services.get_redis_client", return_value=cls.fake_redis),
        ]
        for patcher in cls.patchers:
            patcher.start()

    @classmethod
    def tearDownClass(cls):
        for patcher in cls.patchers:
            patcher.stop()
        super().tearDownClass()

    def setUp(self):
        cache.clear()
        self.api_client: APIClient = APIClient()


def create_user(email: str, password: str = "secret123", role: str = Role.USER, username: str | None = None):
    """Create an account with a bcrypt-hashed password for tests."""

    return User.objects.create_user(
        email=email,
        username=username or email.split("@")[0],
        password=password,
        role=role,
    )


def client_for(user) -> APIClient:
    """APIClient carrying a fresh session token for ``user`` in the session cookie."""

    client = APIClient()
    client.cookies[settings.CMS.cookie_name] = TokenService.generate_token(user)
    return client


def png_bytes(size: tuple[int, int] = (4, 4), color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


def oversized_png_bytes(width: int = 40000, height: int = 40000) -> bytes:
    """A tiny PNG whose header claims ``width`` x ``height`` pixels."""
    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", header) + _png_chunk(b"IEND", b"")


def image_upload(name: str = "photo.png") -> SimpleUploadedFile:
    return SimpleUploadedFile(name, png_bytes(), content_type="image/png")


def uploaded_files() -> set[str]:
    """Filenames currently present under the uploads root."""
    return {path.name for path in settings.UPLOADS_ROOT.iterdir() if path.is_file()}


def put_upload(name: str, content: bytes = b"data") -> str:
    """Place a file directly under the uploads root and return its public path."""
    (settings.UPLOADS_ROOT / name).write_bytes(content)
    return f"uploads/{name}"
