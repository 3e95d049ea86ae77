"""Tests for form submission."""

import json

import pytest

from url_shortener_client.lib.common.validators import EMPTY_URL_MESSAGE, INVALID_SHORTCODE_MESSAGE
from url_shortener_client.lib.models import NoticeLevel, UrlEntry
from url_shortener_client.lib.storage.base import KeyValueStore, StorageError
from url_shortener_client.lib.result_store import ResultStore
from url_shortener_client.lib.submission import (
    SubmissionCoordinator,
    is_blank_entry,
    request_validity,
)

from .conftest import LINK_BASE_URL


def fill(form, *rows):
    """Put rows of (long_url, validity, shortcode) into the form, adding entries as needed."""
    for index, (long_url, validity, shortcode) in enumerate(rows):
        entry = form.entries[index] if index < len(form.entries) else form.add_entry()
        form.update_field(entry.id, "long_url", long_url)
        form.update_field(entry.id, "validity_minutes", validity)
        form.update_field(entry.id, "custom_shortcode", shortcode)


class TestBlankEntries:

    def test_untouched_entry_is_blank(self):
        assert is_blank_entry(UrlEntry(id=1), default_validity=30)
        assert is_blank_entry(UrlEntry(id=1, validity_minutes=""), default_validity=30)
        assert is_blank_entry(UrlEntry(id=1, validity_minutes=" 30 "), default_validity=30)

    def test_any_user_input_makes_entry_non_blank(self):
        assert not is_blank_entry(UrlEntry(id=1, long_url="https://a.com"), default_validity=30)
        assert not is_blank_entry(UrlEntry(id=1, custom_shortcode="abcd"), default_validity=30)
        assert not is_blank_entry(UrlEntry(id=1, validity_minutes="45"), default_validity=30)
        assert not is_blank_entry(UrlEntry(id=1, validity_minutes="abc"), default_validity=30)

    def test_request_validity(self):
        assert request_validity(UrlEntry(id=1, validity_minutes="45"), 30) == 45
        assert isinstance(request_validity(UrlEntry(id=1, validity_minutes="45"), 30), int)
        assert request_validity(UrlEntry(id=1, validity_minutes="1.5"), 30) == 1.5
        assert request_validity(UrlEntry(id=1, validity_minutes=""), 30) == 30


class TestSubmissionCoordinator:
    """Test the submit flow against the fake API."""

    @pytest.mark.asyncio
    async def test_submit_single_url(self, coordinator, form, result_store, fake_api):
        fill(form, ("https://example.com/long", "30", ""))

        outcome = await coordinator.submit(form)

        assert outcome.succeeded
        assert len(outcome.results) == 1
        result = outcome.results[0]
        assert result.original_url == "https://example.com/long"
        assert result.shortcode == "gen001"
        assert result.shortened_url == f"{LINK_BASE_URL}/gen001"
        assert result.expiry_time == "2026-10-18T12:30:00Z"

        assert fake_api.shorten_requests == [{"longUrl": "https://example.com/long", "validityInMinutes": 30}]

    @pytest.mark.asyncio
    async def test_success_persists_and_resets_form(self, coordinator, form, result_store):
        before = await result_store.count()
        fill(form, ("https://example.com/long", "30", ""))
        old_id = form.entries[0].id

        await coordinator.submit(form)

        assert await result_store.count() == before + 1
        assert len(form.entries) == 1
        assert form.entries[0].id != old_id
        assert form.entries[0].long_url == ""
        assert form.errors == {}
        assert form.notice.level == NoticeLevel.SUCCESS
        assert form.notice.text == "URLs shortened successfully!"

    @pytest.mark.asyncio
    async def test_blank_rows_are_ignored(self, coordinator, form, fake_api):
        fill(form, ("https://a.com", "30", ""), ("", "30", ""))

        outcome = await coordinator.submit(form)

        assert outcome.succeeded
        assert [r["longUrl"] for r in fake_api.shorten_requests] == ["https://a.com"]

    @pytest.mark.asyncio
    async def test_nothing_to_submit(self, coordinator, form, fake_api, result_store):
        form.add_entry()

        outcome = await coordinator.submit(form)

        assert not outcome.results
        assert form.notice.level == NoticeLevel.ERROR
        assert form.notice.text == "Please enter at least one URL to shorten."
        assert fake_api.requests == []
        assert await result_store.count() == 0

    @pytest.mark.asyncio
    async def test_validation_failure_blocks_every_request(self, coordinator, form, fake_api):
        fill(
            form,
            ("https://a.com", "30", ""),
            ("https://b.com", "30", "ab"),
            ("", "30", "lonelycode"),
        )
        bad_code_id = form.entries[1].id
        no_url_id = form.entries[2].id

        outcome = await coordinator.submit(form)

        assert outcome.validation_failed
        assert fake_api.requests == []
        assert form.errors == {
            (bad_code_id, "custom_shortcode"): INVALID_SHORTCODE_MESSAGE,
            (no_url_id, "long_url"): EMPTY_URL_MESSAGE,
        }
        assert form.notice.text == "Please correct the errors in the form."
        assert len(form.entries) == 3

    @pytest.mark.asyncio
    async def test_requests_are_sent_in_form_order(self, coordinator, form, fake_api):
        fill(
            form,
            ("https://a.com", "30", ""),
            ("https://b.com", "10", "custom_b"),
            ("https://c.com", "", ""),
        )

        outcome = await coordinator.submit(form)

        assert outcome.succeeded
        assert fake_api.shorten_requests == [
            {"longUrl": "https://a.com", "validityInMinutes": 30},
            {"longUrl": "https://b.com", "validityInMinutes": 10, "customShortcode": "custom_b"},
            {"longUrl": "https://c.com", "validityInMinutes": 30},
        ]
        assert [r.shortcode for r in outcome.results] == ["gen001", "custom_b", "gen002"]

    @pytest.mark.asyncio
    async def test_failure_is_isolated_by_default(self, coordinator, form, fake_api, result_store):
        fake_api.fail_url("https://b.com", 409, "Shortcode already in use")
        fill(
            form,
            ("https://a.com", "30", ""),
            ("https://b.com", "30", "taken"),
            ("https://c.com", "30", ""),
        )
        failed_id = form.entries[1].id

        outcome = await coordinator.submit(form)

        assert not outcome.succeeded
        assert [r.original_url for r in outcome.results] == ["https://a.com", "https://c.com"]
        assert outcome.failures == {failed_id: "Shortcode already in use"}
        assert outcome.skipped == []

        # successes are persisted, the failed entry stays for correction
        assert [r.original_url for r in await result_store.load()] == ["https://a.com", "https://c.com"]
        assert [e.id for e in form.entries] == [failed_id]
        assert form.error_for(failed_id, "long_url") == "Shortcode already in use"
        assert form.notice.level == NoticeLevel.ERROR
        assert form.notice.text == "Error shortening URLs: Shortcode already in use"

    @pytest.mark.asyncio
    async def test_stop_on_first_error(self, api_client, result_store, form, fake_api, logger):
        coordinator = SubmissionCoordinator(
            api_client=api_client,
            result_store=result_store,
            short_link_base_url=LINK_BASE_URL,
            stop_on_first_error=True,
            logger=logger,
        )
        fake_api.fail_url("https://b.com", 500, None)
        fill(
            form,
            ("https://a.com", "30", ""),
            ("https://b.com", "30", ""),
            ("https://c.com", "30", ""),
        )
        failed_id, unsent_id = form.entries[1].id, form.entries[2].id

        outcome = await coordinator.submit(form)

        assert [r["longUrl"] for r in fake_api.shorten_requests] == ["https://a.com", "https://b.com"]
        assert outcome.failures == {failed_id: "API call failed with status 500"}
        assert outcome.skipped == [unsent_id]
        assert await result_store.count() == 1
        assert [e.id for e in form.entries] == [failed_id, unsent_id]

    @pytest.mark.asyncio
    async def test_all_failures_persist_nothing(self, coordinator, form, fake_api, memory_store):
        fake_api.fail_url("https://a.com", 400, "Invalid URL")
        fill(form, ("https://a.com", "30", ""))

        outcome = await coordinator.submit(form)

        assert outcome.results == []
        assert memory_store.data == {}
        assert form.notice.text == "Error shortening URLs: Invalid URL"

    @pytest.mark.asyncio
    async def test_results_append_to_existing_list(self, coordinator, form, memory_store):
        memory_store.data["shortenedUrls"] = json.dumps([
            {"originalUrl": "https://old.com", "shortenedUrl": f"{LINK_BASE_URL}/old1", "shortcode": "old1", "expiryTime": None},
        ])
        fill(form, ("https://new.com", "30", ""))

        await coordinator.submit(form)

        stored = json.loads(memory_store.data["shortenedUrls"])
        assert [r["shortcode"] for r in stored] == ["old1", "gen001"]

    @pytest.mark.asyncio
    async def test_store_failure_is_reported(self, api_client, form, logger):
        class BrokenStore(KeyValueStore):
            async def get(self, key):
                return None

            async def set(self, key, value):
                raise StorageError("disk full")

            async def delete(self, key):
                return False

        coordinator = SubmissionCoordinator(
            api_client=api_client,
            result_store=ResultStore(BrokenStore(), logger=logger),
            short_link_base_url=LINK_BASE_URL,
            logger=logger,
        )
        fill(form, ("https://a.com", "30", ""))

        outcome = await coordinator.submit(form)

        assert len(outcome.results) == 1
        assert form.notice.level == NoticeLevel.ERROR
        assert "disk full" in form.notice.text
        assert len(form.entries) == 1

    @pytest.mark.asyncio
    async def test_numeric_expiry_is_stored_as_text(self, coordinator, form, fake_api, memory_store):
        fake_api.expiry_time = 1760000000000
        fill(form, ("https://a.com", "30", ""))

        outcome = await coordinator.submit(form)

        assert outcome.succeeded
        assert outcome.results[0].expiry_time == "1760000000000"
        stored = json.loads(memory_store.data["shortenedUrls"])
        assert stored[0]["expiryTime"] == "1760000000000"
