"""Tests for article CRUD, uploads, listing, and like toggling."""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import timedelta
from unittest import mock

from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.test import override_settings
from django.utils import timezone

from articles.models import Article
from authentication.models import Role
from comments.models import Comment
from tests.utils import (
    CMSTestCase,
    client_for,
    create_user,
    image_upload,
    oversized_png_bytes,
    put_upload,
    uploaded_files,
)

CONTENT = "A body long enough to pass validation."


def make_article(author, title="Sample title", content=CONTENT, age_minutes=0, **extra):
    article = Article.objects.create(author=author, title=title, content=content, **extra)
    if age_minutes:
        Article.objects.filter(pk=article.pk).update(
            created_at=timezone.now() - timedelta(minutes=age_minutes)
        )
        article.refresh_from_db()
    return article


class ArticleCreateTests(CMSTestCase):
    url = "/api/articles"

    @classmethod
    def setUpTestData(cls):
        cls.author = create_user("author@example.com", role=Role.AUTHOR)

    def setUp(self):
        super().setUp()
        self.client_author = client_for(self.author)

    def test_create_sanitizes_and_returns_article(self):
        response = self.client_author.post(
            self.url,
            {"title": "<b>Hello</b> world", "content": f"<p>{CONTENT}</p><script>x()</script>"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "Article created.")
        self.assertEqual(body["article"]["title"], "Hello world")
        self.assertNotIn("<script>", body["article"]["content"])
        self.assertEqual(body["article"]["author"]["id"], str(self.author.id))

    def test_create_with_image_stores_public_path(self):
        response = self.client_author.post(
            self.url,
            {"title": "With image", "content": CONTENT, "images": [image_upload()]},
            format="multipart",
        )

        self.assertEqual(response.status_code, 201)
        images = response.json()["article"]["images"]
        self.assertEqual(len(images), 1)
        self.assertTrue(images[0].startswith("uploads/"))
        self.assertTrue(images[0].endswith(".png"))
        self.assertIn(images[0].split("/", 1)[1], uploaded_files())

    def test_validation_failure_removes_stored_uploads(self):
        before = uploaded_files()

        response = self.client_author.post(
            self.url,
            {"title": "Hey", "content": "short", "images": [image_upload(), image_upload("b.png")]},
            format="multipart",
        )

        self.assertEqual(response.status_code, 400)
        message = response.json()["message"]
        self.assertIn("Title must be at least 5 characters long.", message)
        self.assertIn("Content must be at least 20 characters long.", message)
        self.assertEqual(uploaded_files(), before)
        self.assertFalse(Article.objects.exists())

    def test_missing_fields_are_reported_together(self):
        response = self.client_author.post(self.url, {}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("Title is required.", response.json()["message"])
        self.assertIn("Content is required.", response.json()["message"])

    def test_anonymous_create_is_401(self):
        response = self.api_client.post(
            self.url, {"title": "Valid title", "content": CONTENT}, format="json"
        )
        self.assertEqual(response.status_code, 401)

    def test_non_image_upload_is_rejected(self):
        fake = SimpleUploadedFile("evil.png", b"<?php echo 1; ?>", content_type="image/png")
        before = uploaded_files()

        response = self.client_author.post(
            self.url, {"title": "Valid title", "content": CONTENT, "images": [fake]}, format="multipart"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Only image files are allowed.")
        self.assertEqual(uploaded_files(), before)

    def test_too_many_images_is_400(self):
        files = [image_upload(f"{index}.png") for index in range(6)]
        response = self.client_author.post(
            self.url, {"title": "Valid title", "content": CONTENT, "images": files}, format="multipart"
        )
        self.assertEqual(response.status_code, 400)

    def test_oversized_image_is_413(self):
        with override_settings(CMS=replace(settings.CMS, max_image_bytes=10)):
            response = self.client_author.post(
                self.url,
                {"title": "Valid title", "content": CONTENT, "images": [image_upload()]},
                format="multipart",
            )
        self.assertEqual(response.status_code, 413)

    def test_decompression_bomb_is_400(self):
        bomb = SimpleUploadedFile("bomb.png", oversized_png_bytes(), content_type="image/png")
        before = uploaded_files()

        response = self.client_author.post(
            self.url, {"title": "Valid title", "content": CONTENT, "images": [bomb]}, format="multipart"
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Image resolution is too large.")
        self.assertEqual(uploaded_files(), before)
        self.assertFalse(Article.objects.exists())

    def test_resolution_over_configured_limit_is_400(self):
        with override_settings(CMS=replace(settings.CMS, max_image_pixels=10)):
            response = self.client_author.post(
                self.url,
                {"title": "Valid title", "content": CONTENT, "images": [image_upload()]},
                format="multipart",
            )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Image resolution is too large.")

    def test_overlong_title_is_400(self):
        response = self.client_author.post(self.url, {"title": "t" * 300, "content": CONTENT}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Title must be at most 255 characters long.")
        self.assertFalse(Article.objects.exists())

    def test_title_limit_applies_after_escaping(self):
        title = "Tom & Jerry " * 21
        self.assertLessEqual(len(title), 255)

        response = self.client_author.post(self.url, {"title": title, "content": CONTENT}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Title must be at most 255 characters long.")

    def test_failed_insert_removes_stored_uploads(self):
        before = uploaded_files()

        with mock.patch.object(Article.objects, "create", side_effect=DatabaseError("insert failed")):
            response = self.client_author.post(
                self.url,
                {"title": "Valid title", "content": CONTENT, "images": [image_upload()]},
                format="multipart",
            )

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"message": "Internal server error."})
        self.assertEqual(uploaded_files(), before)



class ArticleListTests(CMSTestCase):
    url = "/api/articles"

    @classmethod
    def setUpTestData(cls):
        cls.author = create_user("author@example.com", role=Role.AUTHOR)
        cls.reader = create_user("reader@example.com")
        cls.other = create_user("other@example.com")
        cls.alpha = make_article(cls.author, title="Alpha article", age_minutes=30,
                                 images=["C:\\srv\\uploads\\alpha.png"])
        cls.bravo = make_article(cls.author, title="Bravo article", age_minutes=20)
        cls.charlie = make_article(cls.author, title="Charlie piece", age_minutes=10,
                                   content="Something about gardening and soil.")
        cls.bravo.likes.add(cls.reader, cls.other)
        cls.charlie.likes.add(cls.reader)
        Comment.objects.create(article=cls.alpha, author=cls.reader, text="Nice one!")

    def _titles(self, **params):
        response = self.api_client.get(self.url, params)
        self.assertEqual(response.status_code, 200)
        return [item["title"] for item in response.json()["articles"]]

    def test_default_sort_is_newest_first(self):
        self.assertEqual(self._titles(), ["Charlie piece", "Bravo article", "Alpha article"])

    def test_unknown_sort_falls_back_to_newest(self):
        self.assertEqual(self._titles(sort="random")[0], "Charlie piece")

    def test_sort_modes(self):
        self.assertEqual(self._titles(sort="oldest")[0], "Alpha article")
        self.assertEqual(self._titles(sort="titleAZ"), ["Alpha article", "Bravo article", "Charlie piece"])
        self.assertEqual(self._titles(sort="titleZA")[0], "Charlie piece")
        self.assertEqual(self._titles(sort="mostLiked"), ["Bravo article", "Charlie piece", "Alpha article"])

    def test_search_filters_before_pagination(self):
        response = self.api_client.get(self.url, {"q": "  ARTICLE ", "limit": 1, "page": 2})

        body = response.json()
        self.assertEqual(body["total"], 2)
        self.assertEqual([item["title"] for item in body["articles"]], ["Alpha article"])

    def test_search_matches_content(self):
        self.assertEqual(self._titles(q="gardening"), ["Charlie piece"])

    def test_search_is_literal(self):
        self.assertEqual(self._titles(q=".*"), [])

    def test_default_limit_is_five(self):
        for index in range(4):
            make_article(self.author, title=f"Extra article {index}")
        response = self.api_client.get(self.url)

        self.assertEqual(response.json()["total"], 7)
        self.assertEqual(len(response.json()["articles"]), 5)

    def test_list_entry_shape(self):
        response = self.api_client.get(self.url, {"sort": "oldest", "limit": 1})
        entry = response.json()["articles"][0]

        self.assertEqual(entry["thumbnail"], "uploads/alpha.png")
        self.assertEqual(entry["comment_count"], 1)
        self.assertEqual(entry["likes_count"], 0)
        self.assertEqual(entry["author"], {"id": str(self.author.id), "email": self.author.email})


class ArticleDetailTests(CMSTestCase):
    @classmethod
    def setUpTestData(cls):
        cls.author = create_user("author@example.com", role=Role.AUTHOR)
        cls.stranger = create_user("stranger@example.com", role=Role.AUTHOR)
        cls.admin = create_user("admin@example.com", role=Role.ADMIN)

    def setUp(self):
        super().setUp()
        self.kept = put_upload(f"{uuid.uuid4().hex}.png")
        self.dropped = put_upload(f"{uuid.uuid4().hex}.png")
        self.article = make_article(self.author, images=[self.kept, self.dropped])
        self.url = f"/api/articles/{self.article.id}"

    def test_get_normalizes_legacy_paths(self):
        self.article.images = ["/var/app/Uploads/legacy.jpg", "bare.png", "uploads/ok.gif"]
        self.article.save()

        response = self.api_client.get(self.url)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["images"], ["uploads/legacy.jpg", "uploads/bare.png", "uploads/ok.gif"])
        self.assertEqual(body["author"]["username"], self.author.username)

    def test_get_unknown_article_is_404(self):
        response = self.api_client.get(f"/api/articles/{uuid.uuid4()}")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Article not found.")

    def test_owner_updates_and_removes_image(self):
        response = client_for(self.author).put(
            self.url,
            {"title": "Updated title", "remove_images": self.dropped},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.article.refresh_from_db()
        self.assertEqual(self.article.title, "Updated title")
        self.assertEqual(self.article.content, CONTENT)
        self.assertEqual(self.article.images, [self.kept])
        self.assertNotIn(self.dropped.split("/", 1)[1], uploaded_files())
        self.assertIn(self.kept.split("/", 1)[1], uploaded_files())

    def test_update_appends_new_uploads(self):
        response = client_for(self.author).put(
            self.url, {"images": [image_upload()]}, format="multipart"
        )

        self.assertEqual(response.status_code, 200)
        self.article.refresh_from_db()
        self.assertEqual(len(self.article.images), 3)
        self.assertEqual(self.article.images[:2], [self.kept, self.dropped])

    def test_remove_images_ignores_paths_the_article_does_not_reference(self):
        foreign = put_upload(f"{uuid.uuid4().hex}.png")

        client_for(self.author).put(self.url, {"remove_images": [foreign]}, format="json")

        self.assertIn(foreign.split("/", 1)[1], uploaded_files())

    def test_invalid_update_changes_nothing(self):
        response = client_for(self.author).put(
            self.url, {"title": "Hey", "remove_images": [self.dropped]}, format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.article.refresh_from_db()
        self.assertEqual(self.article.title, "Sample title")
        self.assertIn(self.dropped.split("/", 1)[1], uploaded_files())

    def test_stranger_cannot_update_or_delete(self):
        client = client_for(self.stranger)

        self.assertEqual(client.put(self.url, {"title": "Hijacked"}, format="json").status_code, 403)
        self.assertEqual(client.delete(self.url).status_code, 403)
        self.assertTrue(Article.objects.filter(pk=self.article.pk).exists())

    def test_anonymous_update_is_401(self):
        response = self.api_client.put(self.url, {"title": "Hijacked"}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_admin_can_update(self):
        response = client_for(self.admin).put(self.url, {"content": "Admin rewrote the body here."}, format="json")
        self.assertEqual(response.status_code, 200)

    def test_delete_cascades_comments_and_files(self):
        Comment.objects.create(article=self.article, author=self.stranger, text="Hello there")

        response = client_for(self.author).delete(self.url)

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Article.objects.filter(pk=self.article.pk).exists())
        self.assertFalse(Comment.objects.exists())
        self.assertNotIn(self.kept.split("/", 1)[1], uploaded_files())
        self.assertNotIn(self.dropped.split("/", 1)[1], uploaded_files())

    def test_admin_can_delete(self):
        response = client_for(self.admin).delete(self.url)
        self.assertEqual(response.status_code, 204)

    def test_delete_unknown_article_is_404(self):
        response = client_for(self.admin).delete(f"/api/articles/{uuid.uuid4()}")
        self.assertEqual(response.status_code, 404)


    def test_failed_save_removes_new_uploads_and_keeps_old_ones(self):
        before = uploaded_files()

        with mock.patch.object(Article, "save", side_effect=DatabaseError("update failed")):
            response = client_for(self.author).put(
                self.url,
                {"title": "Updated title", "images": [image_upload()], "remove_images": self.dropped},
                format="multipart",
            )

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"message": "Internal server error."})
        self.assertEqual(uploaded_files(), before)
        self.article.refresh_from_db()
        self.assertEqual(self.article.images, [self.kept, self.dropped])


class ArticleLikeTests(CMSTestCase):
    @classmethod
    def setUpTestData(cls):
        cls.author = create_user("author@example.com", role=Role.AUTHOR)
        cls.reader = create_user("reader@example.com")
        cls.article = make_article(cls.author)

    def setUp(self):
        super().setUp()
        self.url = f"/api/articles/{self.article.id}/like"

    def test_like_toggles(self):
        client = client_for(self.reader)

        first = client.post(self.url)
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), {"liked": True, "total_likes": 1})

        second = client.post(self.url)
        self.assertEqual(second.json(), {"liked": False, "total_likes": 0})

    def test_author_cannot_like_own_article(self):
        response = client_for(self.author).post(self.url)

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["liked"])
        self.assertEqual(response.json()["total_likes"], 0)

    def test_like_requires_login(self):
        self.assertEqual(self.api_client.post(self.url).status_code, 401)

    def test_like_unknown_article_is_404(self):
        response = client_for(self.reader).post(f"/api/articles/{uuid.uuid4()}/like")
        self.assertEqual(response.status_code, 404)


class UploadServingTests(CMSTestCase):
    def test_uploads_are_served_cross_origin(self):
        name = f"{uuid.uuid4().hex}.png"
        put_upload(name, b"png")

        response = self.api_client.get(f"/uploads/{name}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Cross-Origin-Resource-Policy"], "cross-origin")

    def test_missing_upload_is_404(self):
        self.assertEqual(self.api_client.get("/uploads/missing.png").status_code, 404)
