"""Tests for store address interpolation."""

import pytest

from firestore_directives.directives import DirectiveKind
from firestore_directives.exceptions import (
    ConfigurationError,
    InvalidPathError,
    UnresolvedReferenceError,
)
from firestore_directives.paths import (
    PLACEHOLDER_PATTERN,
    collection_path,
    extract_placeholders,
    is_document_template,
    resolve,
    resolve_child,
    select_template,
)
from firestore_directives.walker import FetchDirective, FieldRecord, TypeRecord


def _field(path_params=(), fetch_path=None) -> FieldRecord:
    return FieldRecord(
        field_name="orders",
        type_name="Order",
        is_list=True,
        directives=frozenset({DirectiveKind.FETCH_MANY}),
        path_params=tuple(path_params),
        fetch=FetchDirective(kind=DirectiveKind.FETCH_MANY, name="getDocs", path=fetch_path),
    )


ORDER_TYPE = TypeRecord(type_name="Order", path_template="users/{userId}/orders")


class TestExtractPlaceholders:
    def test_names_in_order(self):
        assert extract_placeholders("orgs/{orgId}/users/{userId}") == ["orgId", "userId"]

    def test_duplicates_reported_once(self):
        assert extract_placeholders("{a}/x/{a}/y/{b}") == ["a", "b"]

    def test_no_placeholders(self):
        assert extract_placeholders("users") == []


class TestIsDocumentTemplate:
    @pytest.mark.parametrize(
        "template,expected",
        [
            ("users", False),
            ("users/{id}", True),
            ("users/{userId}/orders", False),
            ("/settings/owner/", True),
        ],
    )
    def test_depth_decides(self, template, expected):
        assert is_document_template(template) is expected


class TestResolve:
    @pytest.mark.parametrize(
        "template,args,expected",
        [
            ("users", {}, "users"),
            ("users/{userId}/orders", {"userId": "u1"}, "users/u1/orders"),
            ("orgs/{org}/users/{user}", {"org": "o", "user": "u"}, "orgs/o/users/u"),
            ("{a}/x/{a}", {"a": "same"}, "same/x/same"),
            ("counters/{n}", {"n": 5}, "counters/5"),
        ],
    )
    def test_complete_arguments_leave_no_placeholders(self, template, args, expected):
        result = resolve(template, args)

        assert result == expected
        assert PLACEHOLDER_PATTERN.search(result) is None

    def test_extra_arguments_are_ignored(self):
        assert resolve("users/{userId}", {"userId": "u1", "other": "x"}) == "users/u1"

    def test_missing_argument_fails(self):
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            resolve("users/{userId}/orders/{orderId}", {"userId": "u1"})

        assert exc_info.value.missing == ["orderId"]
        assert exc_info.value.code == 400
        assert "orderId" in str(exc_info.value)

    def test_null_argument_counts_as_missing(self):
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            resolve("users/{userId}", {"userId": None})

        assert exc_info.value.missing == ["userId"]

    def test_all_missing_names_reported(self):
        with pytest.raises(UnresolvedReferenceError) as exc_info:
            resolve("{a}/{b}/{c}", {"b": "x"})

        assert exc_info.value.missing == ["a", "c"]

    def test_substituted_text_is_not_rescanned(self):
        """A value shaped like another placeholder stays literal."""
        result = resolve("a/{x}/b/{y}", {"x": "{y}", "y": "v"})

        assert result == "a/{y}/b/v"

    def test_value_with_separator_is_rejected(self):
        with pytest.raises(InvalidPathError):
            resolve("users/{userId}", {"userId": "u1/orders"})

    def test_empty_value_is_rejected(self):
        with pytest.raises(InvalidPathError):
            resolve("users/{userId}", {"userId": ""})


class TestResolveChild:
    def test_child_under_parent(self):
        assert resolve_child("users/u1/orders", "{id}", {"id": "o1"}) == "users/u1/orders/o1"

    def test_single_separator_when_joining(self):
        assert resolve_child("users/", "/{id}", {"id": "u1"}) == "users/u1"

    def test_parent_used_verbatim(self):
        """Only the child part is interpolated."""
        assert resolve_child("notes/{literal}", "{id}", {"id": "n1", "literal": "x"}) == (
            "notes/{literal}/n1"
        )

    def test_missing_child_argument_fails(self):
        with pytest.raises(UnresolvedReferenceError):
            resolve_child("users", "{id}", {})


class TestSelectTemplate:
    def test_path_params_fill_type_template(self):
        template, scope = select_template(
            ORDER_TYPE, _field(path_params=["userId"]), {"userId": "u1", "status": "open"}
        )

        assert template == "users/{userId}/orders"
        assert scope == {"userId": "u1"}

    def test_fetch_path_used_without_path_params(self):
        field = _field(fetch_path="archive/{year}/orders")
        template, scope = select_template(ORDER_TYPE, field, {"year": "2024"})

        assert template == "archive/{year}/orders"
        assert scope == {"year": "2024"}

    def test_type_template_by_default(self):
        template, _ = select_template(ORDER_TYPE, _field(), {"userId": "u1"})

        assert template == "users/{userId}/orders"

    def test_path_params_fall_back_to_fetch_path_without_collection(self):
        target = TypeRecord(type_name="Order")
        field = _field(path_params=["userId"], fetch_path="users/{userId}/orders")
        template, _ = select_template(target, field, {"userId": "u1"})

        assert template == "users/{userId}/orders"


class TestCollectionPath:
    def test_only_path_params_may_fill_type_template(self):
        """Arguments without @pathID do not leak into the type path."""
        target = TypeRecord(type_name="Order", path_template="users/{userId}/orders/{kind}")

        with pytest.raises(UnresolvedReferenceError) as exc_info:
            collection_path(target, _field(path_params=["userId"]), {"userId": "u1", "kind": "x"})

        assert exc_info.value.missing == ["kind"]

    def test_concrete_path(self):
        assert collection_path(ORDER_TYPE, _field(path_params=["userId"]), {"userId": "u1"}) == (
            "users/u1/orders"
        )

    def test_no_template_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            collection_path(TypeRecord(type_name="Order"), _field(), {})
