"""Seed demo accounts (one per role) and a few sample articles."""

from django.core.management.base import BaseCommand
from django.db import transaction

from articles.models import Article
from authentication.models import Role, User

SEED_PASSWORD = "changeme123"
SEED_ACCOUNTS = (
    ("admin", "admin@example.com", Role.ADMIN),
    ("author", "author@example.com", Role.AUTHOR),
    ("reader", "user@example.com", Role.USER),
)
SEED_ARTICLES = (
    (
        "admin@example.com",
        "Welcome to the CMS",
        "<p>This article was created by the seed command. Edit or delete it freely.</p>",
    ),
    (
        "author@example.com",
        "Writing your first article",
        "<p>Authors can attach up to five images and use <strong>basic</strong> formatting.</p>",
    ),
)


def create_seed_users(password: str = SEED_PASSWORD) -> dict[str, User]:
    """Create the demo accounts if missing and return them keyed by role."""
    users = {}
    for username, email, role in SEED_ACCOUNTS:
        user = User.objects.filter(email=email).first()
        if user is None:
            user = User.objects.create_user(email, username, password, role=role)
        users[role.value] = user
    return users


def create_seed_articles(users: dict[str, User]) -> list[Article]:
    by_email = {user.email: user for user in users.values()}
    articles = []
    for email, title, content in SEED_ARTICLES:
        article, _ = Article.objects.get_or_create(
            title=title, author=by_email[email], defaults={"content": content}
        )
        articles.append(article)
    return articles


def reset_seed_data() -> int:
    """Delete the demo accounts; their articles and comments cascade."""
    emails = [email for _, email, _ in SEED_ACCOUNTS]
    deleted, _ = User.objects.filter(email__in=emails).delete()
    return deleted


class Command(BaseCommand):
    help = (
        "Create demo admin/author/user accounts and sample articles. "
        "Use --reset to remove previously seeded accounts first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete the demo accounts (and everything they own) before seeding.",
        )
        parser.add_argument(
            "--password",
            default=SEED_PASSWORD,
            help="Password given to newly created demo accounts.",
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            if options.get("reset"):
                removed = reset_seed_data()
                self.stdout.write(self.style.WARNING(f"Removed {removed} seeded rows."))

            users = create_seed_users(options["password"])
            articles = create_seed_articles(users)

        self.stdout.write(
            self.style.SUCCESS(f"Seeded {len(users)} accounts and {len(articles)} articles.")
        )
