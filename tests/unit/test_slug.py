"""Unit tests for SlugService and the slug checkers."""

import mongomock
import pytest
from pymongo.errors import PyMongoError

from errors import StorageError, ValidationError
from infrastructure.slug.memory_checker import InMemorySlugChecker
from infrastructure.slug.mongo_checker import MongoSlugChecker
from services.slug_service import SlugService


@pytest.fixture
def checker():
    return InMemorySlugChecker()


@pytest.fixture
def service(checker):
    return SlugService({"post": checker, "term": checker, "user": checker})


class TestSlugService:
    def test_free_slug_unchanged(self, service):
        assert service.unique_slug("Hello World") == "hello-world"

    def test_post_collision_appends_hyphen_counter(self, service, checker):
        checker.add("hello-world", "post")
        checker.add("hello-world-1", "post")
        assert service.unique_slug("Hello World") == "hello-world-2"

    def test_post_collision_scoped_to_type(self, service, checker):
        checker.add("hello-world", "page")
        assert service.unique_slug("Hello World", "post", "post") == "hello-world"
        assert service.unique_slug("Hello World", "post", "page") == "hello-world-1"

    def test_term_collision(self, service, checker):
        checker.add("news", "category")
        assert service.unique_slug("News", "term", "category") == "news-1"

    def test_user_collision_appends_bare_counter(self, service, checker):
        checker.add("jdoe", "user")
        checker.add("jdoe1", "user")
        assert service.unique_slug("jdoe", "user", "user") == "jdoe2"

    def test_custom_context_not_checked(self, mocker):
        checker = mocker.Mock()
        checker.exists.return_value = True
        service = SlugService({"custom": checker})
        assert service.unique_slug("Some Title", "custom") == "some-title"
        checker.exists.assert_not_called()

    def test_missing_checker_returns_base(self):
        assert SlugService({}).unique_slug("Some Title") == "some-title"

    def test_sanitises_unicode(self, service):
        assert service.unique_slug("Crème Brûlée!") == "creme-brulee"

    @pytest.mark.parametrize("title", ["", "!!!", "   "])
    def test_empty_slug_raises(self, service, title):
        with pytest.raises(ValidationError):
            service.unique_slug(title)

    def test_storage_error_propagates(self, mocker):
        checker = mocker.Mock()
        checker.exists.side_effect = StorageError("down")
        with pytest.raises(StorageError):
            SlugService({"post": checker}).unique_slug("title")


class TestMongoSlugChecker:
    @pytest.fixture
    def collection(self):
        c = mongomock.MongoClient().db["posts"]
        c.insert_many(
            [
                {"slug": "hello", "type": "post"},
                {"slug": "about", "type": "page"},
            ]
        )
        return c

    def test_exists(self, collection):
        checker = MongoSlugChecker(collection)
        assert checker.exists("hello", "post") is True
        assert checker.exists("hello", "page") is False
        assert checker.exists("missing", "post") is False

    def test_untyped_lookup(self, collection):
        checker = MongoSlugChecker(collection, type_field=None)
        assert checker.exists("about", "post") is True

    def test_with_service(self, collection):
        service = SlugService({"post": MongoSlugChecker(collection)})
        assert service.unique_slug("Hello") == "hello-1"

    def test_error_wrapped(self, mocker):
        collection = mocker.Mock()
        collection.find_one.side_effect = PyMongoError("timeout")
        with pytest.raises(StorageError):
            MongoSlugChecker(collection).exists("a", "post")
