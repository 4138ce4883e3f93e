"""Unit tests for PostValidator: schema rules, publish-date gating and slug uniqueness."""

from datetime import date

import pytest

from src.apps.blog.schemas.post import prepare_post_input
from src.apps.blog.validators.post_validator import CREATE_MESSAGES, UPDATE_MESSAGES
from src.core.exceptions import ValidationException


async def assert_invalid(coro):
    with pytest.raises(ValidationException) as exc_info:
        await coro
    return exc_info.value.errors


class TestPreparePostInput:
    def test_slug_is_derived_from_title(self):
        assert prepare_post_input({"title": "Hello World"})["slug"] == "hello-world"

    def test_given_slug_is_trimmed_and_lowercased(self):
        data = prepare_post_input({"title": "Hello", "slug": "  My-Slug "})
        assert data["slug"] == "my-slug"

    def test_empty_strings_become_null(self):
        data = prepare_post_input(
            {"publish_date": "", "meta_description": "", "tags": "", "keywords": ""}
        )
        assert data == {
            "publish_date": None,
            "meta_description": None,
            "tags": None,
            "keywords": None,
        }

    def test_unknown_keys_are_dropped(self):
        assert prepare_post_input({"id": 7, "author": "x"}) == {}


class TestValidateForCreate:
    @pytest.mark.asyncio
    async def test_published_post(self, validator):
        post = await validator.validate_for_create(
            {
                "title": "Hello World",
                "body": "x",
                "is_published": True,
                "publish_date": "2099-01-01",
            }
        )
        assert post.slug == "hello-world"
        assert post.is_published is True
        assert post.publish_date == date(2099, 1, 1)

    @pytest.mark.asyncio
    async def test_published_without_date_fails(self, validator):
        errors = await assert_invalid(
            validator.validate_for_create({"title": "Hi", "body": "x", "is_published": True})
        )
        assert errors == {"publish_date": [CREATE_MESSAGES["publish_date.required_if"]]}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("publish_date", ["2099-01-01", "", None])
    async def test_unpublished_post_drops_publish_date(self, validator, publish_date):
        post = await validator.validate_for_create(
            {"title": "Draft", "body": "x", "is_published": False, "publish_date": publish_date}
        )
        assert post.is_published is False
        assert post.publish_date is None

    @pytest.mark.asyncio
    async def test_is_published_accepts_form_values(self, validator):
        post = await validator.validate_for_create(
            {"title": "On", "body": "x", "is_published": "on", "publish_date": "2099-01-01"}
        )
        assert post.is_published is True

        post = await validator.validate_for_create({"title": "Off", "body": "x", "is_published": "0"})
        assert post.is_published is False

    @pytest.mark.asyncio
    async def test_missing_required_fields_are_all_reported(self, validator):
        errors = await assert_invalid(validator.validate_for_create({}))
        assert errors == {
            "title": [CREATE_MESSAGES["title.required"]],
            "body": [CREATE_MESSAGES["body.required"]],
        }

    @pytest.mark.asyncio
    async def test_errors_are_collected_across_fields(self, validator):
        errors = await assert_invalid(
            validator.validate_for_create(
                {
                    "title": "t" * 256,
                    "slug": "long-title",
                    "body": "x",
                    "meta_description": "m" * 161,
                    "keywords": " ".join(["kw"] * 16),
                    "publish_date": "yesterday",
                }
            )
        )
        assert set(errors) == {"title", "meta_description", "keywords", "publish_date"}
        assert all(len(messages) == 1 for messages in errors.values())
        assert "Current count: 16 words" in errors["keywords"][0]
        assert errors["publish_date"] == ["The Publish Date format is invalid."]

    @pytest.mark.asyncio
    async def test_past_publish_date(self, validator):
        errors = await assert_invalid(
            validator.validate_for_create(
                {"title": "Old", "body": "x", "is_published": True, "publish_date": "2000-01-01"}
            )
        )
        assert errors == {"publish_date": ["The Publish Date must be a date in the future."]}

    @pytest.mark.asyncio
    async def test_invalid_explicit_slug(self, validator):
        errors = await assert_invalid(
            validator.validate_for_create({"title": "Fine", "slug": "bad slug!", "body": "x"})
        )
        assert list(errors) == ["slug"]
        assert "lowercase letters, numbers, and hyphens" in errors["slug"][0]

    @pytest.mark.asyncio
    async def test_title_without_usable_slug(self, validator):
        errors = await assert_invalid(validator.validate_for_create({"title": "!!!", "body": "x"}))
        assert errors == {"slug": [CREATE_MESSAGES["slug.unresolved"]]}

    @pytest.mark.asyncio
    async def test_tags_are_normalized(self, validator):
        post = await validator.validate_for_create(
            {"title": "Tags", "body": "x", "tags": "a,, b ,,c"}
        )
        assert post.tags == "a,b,c"

        post = await validator.validate_for_create({"title": "No tags", "body": "x", "tags": " , "})
        assert post.tags is None

    @pytest.mark.asyncio
    async def test_duplicate_slug_is_rejected(self, validator, make_post):
        await make_post(title="Hello World", slug="hello-world")

        errors = await assert_invalid(
            validator.validate_for_create({"title": "Hello World", "body": "x"})
        )
        assert errors == {"slug": [CREATE_MESSAGES["slug.unique"].format(slug="hello-world")]}

    @pytest.mark.asyncio
    async def test_trashed_posts_still_own_their_slug(self, validator, make_post, repository):
        post = await make_post(slug="taken")
        await repository.soft_delete(post.id)

        errors = await assert_invalid(
            validator.validate_for_create({"title": "Other", "slug": "taken", "body": "x"})
        )
        assert "slug" in errors


class TestValidateForUpdate:
    @pytest.mark.asyncio
    async def test_only_present_fields_are_returned(self, validator, make_post):
        post = await make_post()
        update = await validator.validate_for_update({"tags": "a,, b ,,c"}, post)
        assert update.model_dump(exclude_unset=True) == {"tags": "a,b,c"}

    @pytest.mark.asyncio
    async def test_own_slug_does_not_conflict(self, validator, make_post):
        post = await make_post(slug="mine")
        update = await validator.validate_for_update({"slug": "mine"}, post)
        assert update.slug == "mine"

    @pytest.mark.asyncio
    async def test_other_posts_slug_conflicts(self, validator, make_post):
        await make_post(slug="theirs")
        post = await make_post(slug="mine")
        errors = await assert_invalid(validator.validate_for_update({"slug": "theirs"}, post))
        assert errors == {"slug": [UPDATE_MESSAGES["slug.unique"].format(slug="theirs")]}

    @pytest.mark.asyncio
    async def test_new_title_derives_slug(self, validator, make_post):
        post = await make_post()
        update = await validator.validate_for_update({"title": "Brand New Title"}, post)
        assert update.model_dump(exclude_unset=True) == {
            "title": "Brand New Title",
            "slug": "brand-new-title",
        }

    @pytest.mark.asyncio
    async def test_blank_required_fields_are_rejected(self, validator, make_post):
        post = await make_post()
        errors = await assert_invalid(
            validator.validate_for_update({"title": "", "slug": "", "body": None}, post)
        )
        assert errors == {
            "title": [UPDATE_MESSAGES["title.required"]],
            "slug": [UPDATE_MESSAGES["slug.required"]],
            "body": [UPDATE_MESSAGES["body.required"]],
        }

    @pytest.mark.asyncio
    async def test_unpublishing_clears_publish_date(self, validator, make_post):
        post = await make_post(is_published=True, publish_date=date(2099, 1, 1))
        update = await validator.validate_for_update(
            {"is_published": False, "publish_date": "2099-02-02"}, post
        )
        assert update.model_dump(exclude_unset=True) == {
            "is_published": False,
            "publish_date": None,
        }

    @pytest.mark.asyncio
    async def test_publishing_requires_date(self, validator, make_post):
        post = await make_post()
        errors = await assert_invalid(validator.validate_for_update({"is_published": "1"}, post))
        assert errors == {"publish_date": [UPDATE_MESSAGES["publish_date.required_if"]]}

    @pytest.mark.asyncio
    async def test_publish_date_on_a_draft_is_dropped(self, validator, make_post):
        post = await make_post()
        update = await validator.validate_for_update({"publish_date": "2099-03-03"}, post)
        assert update.model_dump(exclude_unset=True) == {"publish_date": None}

    @pytest.mark.asyncio
    async def test_publish_date_change_on_a_published_post(self, validator, make_post):
        post = await make_post(is_published=True, publish_date=date(2099, 1, 1))
        update = await validator.validate_for_update({"publish_date": "2099-03-03"}, post)
        assert update.model_dump(exclude_unset=True) == {"publish_date": date(2099, 3, 3)}

    @pytest.mark.asyncio
    async def test_published_post_cannot_lose_its_date(self, validator, make_post):
        post = await make_post(is_published=True, publish_date=date(2099, 1, 1))
        errors = await assert_invalid(validator.validate_for_update({"publish_date": None}, post))
        assert errors == {"publish_date": [UPDATE_MESSAGES["publish_date.required_if"]]}

    @pytest.mark.asyncio
    async def test_unrelated_fields_skip_publish_gating(self, validator, make_post):
        post = await make_post(is_published=True, publish_date=date(2099, 1, 1))
        update = await validator.validate_for_update({"title": "Renamed"}, post)
        assert "publish_date" not in update.model_fields_set


class TestSlugAndFieldErrorsTogether:
    @pytest.mark.asyncio
    async def test_duplicate_slug_is_reported_with_other_errors(self, validator, make_post):
        await make_post(slug="hello-world")
        errors = await assert_invalid(
            validator.validate_for_create(
                {"title": "Hello World", "body": "x", "meta_description": "m" * 161}
            )
        )
        assert set(errors) == {"slug", "meta_description"}
        assert errors["slug"] == [CREATE_MESSAGES["slug.unique"].format(slug="hello-world")]

    @pytest.mark.asyncio
    async def test_non_string_body(self, validator):
        errors = await assert_invalid(validator.validate_for_create({"title": "T", "body": 42}))
        assert errors == {"body": ["The article content must be a string."]}
