"""Tests for core webhook models."""

import pytest
from pydantic import ValidationError

from webhooks.models.core import (
    BodyType,
    ReceiverDescriptor,
    UnsupportedBodyType,
    WebhookAction,
    receiver_name_from_route,
)


# -----------------------------------------------------------------------------
# BodyType Tests
# -----------------------------------------------------------------------------


class TestBodyType:
    """Tests for BodyType set operations."""

    def test_all_is_union_of_members(self) -> None:
        """Verify ALL covers FORM, JSON and XML."""
        assert BodyType.ALL == BodyType.FORM | BodyType.JSON | BodyType.XML
        assert list(BodyType.ALL) == [BodyType.FORM, BodyType.JSON, BodyType.XML]

    @pytest.mark.parametrize(
        ("subset", "superset", "expected"),
        [
            (BodyType.JSON, BodyType.JSON, True),
            (BodyType.JSON, BodyType.JSON | BodyType.XML, True),
            (BodyType.JSON | BodyType.XML, BodyType.ALL, True),
            (BodyType.XML, BodyType.JSON, False),
            (BodyType.ALL, BodyType.JSON, False),
            (BodyType.FORM | BodyType.JSON, BodyType.JSON | BodyType.XML, False),
        ],
    )
    def test_is_subset_of(self, subset: BodyType, superset: BodyType, expected: bool) -> None:
        """Verify subset checks consider every flag."""
        assert subset.is_subset_of(superset) is expected

    def test_empty_set_is_subset_of_everything(self) -> None:
        """Verify the empty set is a subset of any capability."""
        assert BodyType(0).is_subset_of(BodyType.FORM)

    @pytest.mark.parametrize(
        ("body_type", "expected"),
        [
            (BodyType.FORM, True),
            (BodyType.XML, True),
            (BodyType.JSON | BodyType.XML, False),
            (BodyType.ALL, False),
            (BodyType(0), False),
        ],
    )
    def test_is_single(self, body_type: BodyType, expected: bool) -> None:
        """Verify single-flag detection."""
        assert body_type.is_single is expected

    def test_describe(self) -> None:
        """Verify readable member listing."""
        assert BodyType.JSON.describe() == "JSON"
        assert (BodyType.JSON | BodyType.XML).describe() == "JSON, XML"
        assert BodyType(0).describe() == "NONE"


# -----------------------------------------------------------------------------
# ReceiverDescriptor Tests
# -----------------------------------------------------------------------------


class TestReceiverDescriptor:
    """Tests for ReceiverDescriptor model."""

    def test_name_is_normalized(self) -> None:
        """Verify names are stripped and lowercased."""
        descriptor = ReceiverDescriptor(name=" GitHub ", body_type=BodyType.JSON)
        assert descriptor.name == "github"

    def test_empty_name_rejected(self) -> None:
        """Verify blank names fail validation."""
        with pytest.raises(ValidationError):
            ReceiverDescriptor(name="  ", body_type=BodyType.JSON)

    def test_descriptor_is_frozen(self) -> None:
        """Verify descriptors are immutable."""
        descriptor = ReceiverDescriptor(name="github", body_type=BodyType.JSON)
        with pytest.raises(ValidationError):
            descriptor.body_type = BodyType.XML


# -----------------------------------------------------------------------------
# Receiver name resolution Tests
# -----------------------------------------------------------------------------


class TestReceiverNameResolution:
    """Tests for route and action receiver name resolution."""

    def test_route_param_lowercased(self, make_request) -> None:
        """Verify the receiver_name path parameter is read and lowercased."""
        assert receiver_name_from_route(make_request(receiver_name="Stripe")) == "stripe"

    def test_route_param_missing(self, make_request) -> None:
        """Verify None when the route has no receiver."""
        assert receiver_name_from_route(make_request()) is None

    def test_bound_action_ignores_route(self, make_request) -> None:
        """Verify bound actions always resolve their own receiver."""
        action = WebhookAction(receiver="github", body_type=BodyType.JSON, endpoints=("/github",))
        assert not action.is_generic
        assert action.resolve_receiver_name(make_request(receiver_name="slack")) == "github"

    def test_generic_action_uses_route(self, make_request) -> None:
        """Verify generic actions read the receiver from the route."""
        action = WebhookAction(receiver=None, body_type=BodyType.ALL, endpoints=("/:receiver_name",))
        assert action.is_generic
        assert action.resolve_receiver_name(make_request(receiver_name="slack")) == "slack"


# -----------------------------------------------------------------------------
# UnsupportedBodyType Tests
# -----------------------------------------------------------------------------


class TestUnsupportedBodyType:
    """Tests for the rejection outcome."""

    def test_status_code_is_415(self) -> None:
        """Verify rejections carry 415 Unsupported Media Type."""
        rejection = UnsupportedBodyType("github", BodyType.JSON, "text/plain")
        assert rejection.status_code == 415

    def test_single_type_message(self) -> None:
        """Verify the message names receiver, actual and expected type."""
        message = UnsupportedBodyType("salesforce", BodyType.XML, "application/json").message
        assert "'salesforce'" in message
        assert "'application/json'" in message
        assert "XML" in message

    def test_multi_type_message_lists_all(self) -> None:
        """Verify multi-type rejections list every acceptable type."""
        message = UnsupportedBodyType("flexible", BodyType.JSON | BodyType.XML, "text/plain").message
        assert "JSON, XML" in message

    def test_missing_content_type_rendered_empty(self) -> None:
        """Verify a missing header renders as an empty content type."""
        message = UnsupportedBodyType("github", BodyType.JSON, None).message
        assert "content type ''" in message

    def test_to_dict(self) -> None:
        """Verify the response payload shape."""
        payload = UnsupportedBodyType("flexible", BodyType.JSON | BodyType.XML, "text/plain").to_dict()
        assert payload["error"] == "unsupported_media_type"
        assert payload["receiver"] == "flexible"
        assert payload["expected"] == ["JSON", "XML"]
        assert payload["content_type"] == "text/plain"
