"""Tests for shared helpers: sanitizers, pagination, deployment config, background tasks, seeding."""

from __future__ import annotations

import os
from io import StringIO
from unittest import mock

from django.core import mail
from django.core.management import call_command
from django.http import QueryDict
from django.test import SimpleTestCase, TestCase
from kombu.exceptions import OperationalError

from articles.models import Article
from articles.storage import remove_uploads
from authentication.models import Role, User
from authentication.notifications import send_approval_email, send_rejection_email
from core.celery import enqueue
from core.config import DeploymentConfig
from core.pagination import PageParams
from core.sanitize import plain_text, sanitize_body, sanitize_comment, sanitize_title
from core.validation import validate_fields
from scripts.management.commands.seed_cms import create_seed_articles, create_seed_users


class SanitizeTests(SimpleTestCase):
    def test_title_loses_all_markup(self):
        self.assertEqual(sanitize_title("  <h1>Big <em>news</em></h1> "), "Big news")

    def test_body_keeps_formatting_and_drops_scripts(self):
        cleaned = sanitize_body('<p onclick="x()">Hi <strong>there</strong></p><script>alert(1)</script>')

        self.assertIn("<strong>there</strong>", cleaned)
        self.assertNotIn("onclick", cleaned)
        self.assertNotIn("alert", cleaned)

    def test_body_drops_javascript_links(self):
        self.assertNotIn("javascript:", sanitize_body('<a href="javascript:alert(1)">x</a>'))

    def test_comment_disallows_block_markup(self):
        self.assertEqual(sanitize_comment("<h2>Loud</h2> text"), "Loud text")

    def test_plain_text(self):
        self.assertEqual(plain_text("  <b>bold</b> "), "bold")


class ValidateFieldsTests(SimpleTestCase):
    def test_blank_and_missing_values_are_reported_in_order(self):
        errors = validate_fields(
            {
                "a": (None, "A missing."),
                "b": ("   ", "B missing."),
                "c": ("ok", "C missing."),
            }
        )
        self.assertEqual(errors, ["A missing.", "B missing."])


class PageParamsTests(SimpleTestCase):
    def test_defaults(self):
        params = PageParams.from_query(QueryDict(""), default_limit=5)
        self.assertEqual((params.page, params.limit, params.offset), (1, 5, 0))

    def test_invalid_values_fall_back(self):
        params = PageParams.from_query(QueryDict("page=-2&limit=abc"), default_limit=10)
        self.assertEqual((params.page, params.limit), (1, 10))

    def test_offset_and_cap(self):
        params = PageParams.from_query(QueryDict("page=3&limit=1000"), default_limit=5)
        self.assertEqual(params.limit, 100)
        self.assertEqual(params.offset, 200)
        self.assertEqual(list(params.slice(list(range(250)))), list(range(200, 250)))


class DeploymentConfigTests(SimpleTestCase):
    def _from_env(self, **env):
        with mock.patch.dict(os.environ, env, clear=True):
            return DeploymentConfig.from_env()

    def test_development_defaults(self):
        config = self._from_env()

        self.assertFalse(config.production)
        self.assertEqual(config.cookie_samesite, "Lax")
        self.assertFalse(config.cookie_secure)
        self.assertEqual((config.auth_rate_limit, config.auth_rate_window_seconds), (1000, 60))
        self.assertEqual(config.allowed_origins, ("http://localhost:3000",))
        self.assertEqual(config.trusted_proxies, 0)
        self.assertEqual(config.max_image_pixels, 20_000_000)

    def test_production_policy(self):
        config = self._from_env(
            CMS_ENV="production",
            FRONTEND_URL="https://cms.example.com",
            CORS_ORIGINS="https://admin.example.com, http://localhost:3000",
        )

        self.assertTrue(config.production)
        self.assertEqual(config.cookie_samesite, "None")
        self.assertTrue(config.cookie_secure)
        self.assertEqual((config.auth_rate_limit, config.auth_rate_window_seconds), (100, 900))
        self.assertEqual(config.trusted_proxies, 1)
        self.assertEqual(
            config.allowed_origins,
            ("https://cms.example.com", "http://localhost:3000", "https://admin.example.com"),
        )

    def test_overrides_and_bad_numbers(self):
        config = self._from_env(AUTH_RATE_LIMIT="5", MAX_IMAGE_BYTES="lots", COOKIE_SECURE="yes")

        self.assertEqual(config.auth_rate_limit, 5)
        self.assertEqual(config.max_image_bytes, 5 * 1024 * 1024)
        self.assertTrue(config.cookie_secure)


class BackgroundTaskTests(SimpleTestCase):
    def test_approval_email_is_sent_through_the_queue(self):
        send_approval_email.delay("reader", "reader@example.com")

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["reader@example.com"])
        self.assertIn("approved", mail.outbox[0].subject)

    def test_mail_failure_is_logged_not_raised(self):
        with mock.patch("authentication.notifications.send_mail", side_effect=OSError("smtp down")):
            with self.assertLogs("authentication.notifications", level="ERROR") as logs:
                send_rejection_email.delay("reader", "reader@example.com")

        self.assertIn("Rejection email to reader@example.com failed", logs.output[0])

    def test_remove_uploads_continues_after_a_failure(self):
        with mock.patch("articles.storage.remove_upload", side_effect=[ValueError("bad path"), True]) as remove:
            with self.assertLogs("articles.storage", level="ERROR"):
                remove_uploads.delay(["uploads/bad.png", "uploads/good.png"])

        self.assertEqual(remove.call_count, 2)
        remove.assert_called_with("uploads/good.png")

    def test_enqueue_logs_unreachable_broker(self):
        task = mock.Mock()
        task.name = "articles.storage.remove_uploads"
        task.delay.side_effect = OperationalError("broker down")

        with self.assertLogs("core.celery", level="ERROR"):
            enqueue(task, ["uploads/a.png"])

        task.delay.assert_called_once_with(["uploads/a.png"])


class SeedCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_cms", stdout=StringIO())
        call_command("seed_cms", stdout=StringIO())

        self.assertEqual(User.objects.count(), 3)
        self.assertEqual(Article.objects.count(), 2)
        admin = User.objects.get(email="admin@example.com")
        self.assertEqual(admin.role, Role.ADMIN)
        self.assertTrue(admin.check_password("changeme123"))

    def test_seed_helpers_key_accounts_by_role(self):
        users = create_seed_users(password="helper-pass")
        articles = create_seed_articles(users)

        self.assertEqual(set(users), {"admin", "author", "user"})
        self.assertTrue(users["author"].check_password("helper-pass"))
        self.assertEqual({article.author_id for article in articles}, {users["admin"].pk, users["author"].pk})

    def test_reset_recreates_accounts(self):
        call_command("seed_cms", stdout=StringIO())
        first_admin = User.objects.get(email="admin@example.com").pk

        call_command("seed_cms", "--reset", stdout=StringIO())

        self.assertNotEqual(User.objects.get(email="admin@example.com").pk, first_admin)
        self.assertEqual(Article.objects.count(), 2)
