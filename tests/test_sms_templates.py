from __future__ import annotations

import pytest

from core.services.sms_templates import (
    MAX_CONTENT_LENGTH,
    PLACEHOLDER_CATEGORIES,
    SMS_PLACEHOLDERS,
    TEMPLATE_EXAMPLES,
    extract_placeholders,
    render_preview,
    segment_count,
    validate_template,
)


def test_extract_placeholders_unique_in_order():
    content = "Hi {CLIENT_NAME}, parcel {TRACKING_NUMBER} for {CLIENT_NAME}"

    assert extract_placeholders(content) == ["{CLIENT_NAME}", "{TRACKING_NUMBER}"]
    assert extract_placeholders("") == []


def test_render_preview_uses_sample_values_and_keeps_unknown():
    rendered = render_preview("{DRIVER_NAME} brings {TRACKING_NUMBER} ({MYSTERY})")

    assert rendered == "Alex Driver brings PKG123456789 ({MYSTERY})"


def test_render_preview_with_custom_values():
    assert render_preview("Hello {CLIENT_NAME}", {"{CLIENT_NAME}": "Nadia"}) == "Hello Nadia"


@pytest.mark.parametrize(("length", "segments"), [(0, 0), (1, 1), (160, 1), (161, 2), (480, 3)])
def test_segment_count(length, segments):
    assert segment_count("x" * length) == segments


def test_valid_template_has_no_problems():
    assert validate_template("Welcome", "Hello {CLIENT_NAME}") == []


def test_validate_template_reports_every_problem():
    problems = validate_template("", "Hi {NICKNAME}")

    assert problems == ["Template name is required", "Unknown placeholders: {NICKNAME}"]


def test_validate_template_limits():
    problems = validate_template("n" * 101, "x" * (MAX_CONTENT_LENGTH + 1))

    assert problems == ["Name too long", "Content too long"]
    assert validate_template("ok", "   ") == ["Template content is required"]


def test_catalogues_are_consistent():
    categorised = {p for group in PLACEHOLDER_CATEGORIES.values() for p in group}

    assert categorised == set(SMS_PLACEHOLDERS)
    for example in TEMPLATE_EXAMPLES:
        assert validate_template(example.name, example.content) == []
        assert example.placeholders
